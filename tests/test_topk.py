import pytest

from mips_reduction.errors import InvalidInputError
from mips_reduction.topk import MaxKList, MinKList, TopKList


def test_max_list_keeps_largest_scores_best_first():
    top = MaxKList(3)
    for item_id, score in enumerate([0.5, 3.0, -1.0, 2.0, 1.0]):
        top.insert(score, item_id)
    assert top.items() == [(3.0, 1), (2.0, 3), (1.0, 4)]
    assert top.ids() == [1, 3, 4]
    assert top.worst_score() == 1.0
    assert len(top) == 3
    assert top.is_full()


def test_min_list_keeps_smallest_scores_best_first():
    nearest = MinKList(2)
    for item_id, dist in enumerate([4.0, 1.0, 3.0, 0.5]):
        nearest.insert(dist, item_id)
    assert nearest.ids() == [3, 1]
    assert nearest.ith_score(0) == 0.5
    assert nearest.ith_id(1) == 1


def test_equal_scores_keep_insertion_order():
    top = MaxKList(3)
    top.insert(1.0, "a")
    top.insert(2.0, "b")
    top.insert(1.0, "c")
    assert top.ids() == ["b", "a", "c"]


def test_full_list_rejects_tie_with_worst():
    top = MaxKList(2)
    assert top.insert(1.0, 1)
    assert top.insert(1.0, 2)
    assert not top.insert(1.0, 3)
    assert top.ids() == [1, 2]
    assert top.insert(1.5, 4)
    assert top.ids() == [4, 1]


def test_partial_list():
    top = TopKList(5, largest=True)
    assert top.worst_score() is None
    top.insert(2.0, 7)
    assert top.size() == 1
    assert not top.is_full()


@pytest.mark.parametrize("k", [0, -3])
def test_invalid_k(k):
    with pytest.raises(InvalidInputError):
        MaxKList(k)
