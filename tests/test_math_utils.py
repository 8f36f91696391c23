import math
from fractions import Fraction

import pytest

from mips_reduction.math_utils import (
    collision_probability,
    euclidean_distance,
    inner_product,
    is_finite_vector,
    normal_cdf,
    squared_distance,
    squared_norm,
    vector_magnitude,
)


def test_inner_product_and_norms():
    assert inner_product([3, 4], [1, 1]) == 7
    assert squared_norm([3, 4]) == 25
    assert vector_magnitude([3, 4]) == 5.0
    assert vector_magnitude([0.0, 0.0]) == 0.0


def test_distances():
    assert squared_distance([1, 0], [0, 1]) == 2
    assert euclidean_distance([0, 0, 0], [1, 2, 2]) == 3.0


@pytest.mark.parametrize(
    "vector,expected",
    [
        ([1.0, -2.5, 0], True),
        ([], True),
        ([1.0, float("nan")], False),
        ([float("inf"), 0.0], False),
        ([1.0, "2"], False),
        ([True, 0.0], False),
        ([Fraction(1, 3), 2], True),
        ([10 ** 400, 0.0], False),
        ([None], False),
    ],
)
def test_is_finite_vector(vector, expected):
    assert is_finite_vector(vector) is expected


def test_normal_cdf_and_collision_probability():
    assert normal_cdf(0.0) == pytest.approx(0.5)
    assert normal_cdf(1.96) == pytest.approx(0.975, abs=1e-3)
    assert collision_probability(0.0) == pytest.approx(0.0)
    assert collision_probability(1.0) == pytest.approx(math.erf(1.0 / math.sqrt(2.0)))
    assert collision_probability(2.0) > collision_probability(1.0)
