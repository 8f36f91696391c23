import math

import pytest

from mips_reduction.projector import QueryProjector


def test_plain_transform_appends_zero():
    projector = QueryProjector()
    assert projector.project([1.0, 1.0], 5.0, False) == [1.0, 1.0, 0.0]
    assert projector.scale_factor([1.0, 1.0], 5.0, False) == 1.0


def test_rescale_transform_scales_to_data_radius():
    projector = QueryProjector()
    lam = projector.scale_factor([1.0, 1.0], 5.0, True)
    assert lam == pytest.approx(5.0 / math.sqrt(2.0))
    projected = projector.project([1.0, 1.0], 5.0, True)
    assert projected[:2] == pytest.approx([lam, lam])
    assert projected[2] == 0.0
    assert math.sqrt(sum(x * x for x in projected)) == pytest.approx(5.0)


def test_zero_query_is_not_rescaled():
    projector = QueryProjector()
    assert projector.scale_factor([0.0, 0.0], 5.0, True) == 1.0
    assert projector.project([0.0, 0.0], 5.0, True) == [0.0, 0.0, 0.0]


def test_rescale_with_zero_data_radius():
    assert QueryProjector().project([2.0, 0.0], 0.0, True) == [0.0, 0.0, 0.0]


def test_query_is_not_modified():
    query = [1.0, 2.0]
    QueryProjector().project(query, 3.0, True)
    assert query == [1.0, 2.0]
