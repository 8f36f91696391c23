import math
import random

import pytest

from mips_reduction.embedder import Embedder
from mips_reduction.math_utils import squared_norm
from mips_reduction.normalizer import VectorNormalizer


def _embed(dataset):
    norms, max_norm = VectorNormalizer().compute_norms(dataset)
    return Embedder().build(dataset, norms, max_norm)


def test_augmented_vectors():
    augmented, max_norm = _embed([[1, 0], [0, 1], [3, 4]])
    assert max_norm == 5.0
    assert augmented[0] == pytest.approx((1.0, 0.0, math.sqrt(24.0)))
    assert augmented[1] == pytest.approx((0.0, 1.0, math.sqrt(24.0)))
    assert augmented[2] == (3.0, 4.0, 0.0)


def test_augmented_norms_equal_max_norm():
    rng = random.Random(11)
    dataset = [
        [rng.uniform(-3.0, 3.0) * rng.random() for _ in range(6)] for _ in range(50)
    ]
    augmented, max_norm = _embed(dataset)
    for vector in augmented:
        assert len(vector) == 7
        assert squared_norm(vector) == pytest.approx(max_norm * max_norm, rel=1e-4)


def test_all_zero_dataset():
    augmented, max_norm = _embed([[0.0, 0.0]] * 3)
    assert max_norm == 0.0
    assert augmented == ((0.0, 0.0, 0.0),) * 3


def test_empty_dataset():
    assert Embedder().build([], [], 0.0) == ((), 0.0)


def test_extra_coordinate_clamps_round_off():
    embedder = Embedder()
    assert embedder.extra_coordinate(1.0 + 1e-12, 1.0) == 0.0
    assert embedder.extra_coordinate(16.0, 25.0) == 3.0


def test_augmented_data_is_immutable():
    augmented, _ = _embed([[1.0, 2.0]])
    with pytest.raises(TypeError):
        augmented[0][0] = 5.0
