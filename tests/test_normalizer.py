import pytest

from mips_reduction.errors import InvalidInputError
from mips_reduction.normalizer import VectorNormalizer, validate_vector


def test_compute_norms():
    norms, max_norm = VectorNormalizer().compute_norms([[1, 0], [0, 1], [3, 4]], 2)
    assert norms == [1, 1, 25]
    assert max_norm == 25


def test_dimension_taken_from_first_vector():
    norms, max_norm = VectorNormalizer().compute_norms([[1.0, 2.0, 2.0]])
    assert norms == [9.0]
    assert max_norm == 9.0


def test_empty_dataset():
    assert VectorNormalizer().compute_norms([], 4) == ([], 0.0)
    assert VectorNormalizer().compute_norms([]) == ([], 0.0)


def test_all_zero_dataset():
    norms, max_norm = VectorNormalizer().compute_norms([[0.0, 0.0]] * 3, 2)
    assert norms == [0.0, 0.0, 0.0]
    assert max_norm == 0.0


def test_rejects_dimension_mismatch():
    with pytest.raises(InvalidInputError, match="data vector 1"):
        VectorNormalizer().compute_norms([[1.0, 2.0], [1.0]], 2)


def test_rejects_non_finite():
    with pytest.raises(InvalidInputError, match="non-finite"):
        VectorNormalizer().compute_norms([[1.0, float("nan")]], 2)


def test_rejects_bad_dimension():
    with pytest.raises(InvalidInputError):
        VectorNormalizer().compute_norms([], 0)


def test_validate_vector_label():
    with pytest.raises(InvalidInputError, match="query has dimension 1, expected 2"):
        validate_vector([1.0], 2, "query")
