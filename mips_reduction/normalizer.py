"""Per-vector squared norms and the dataset's maximum norm."""

from mips_reduction.errors import InvalidInputError
from mips_reduction.math_utils import is_finite_vector, squared_norm


def validate_vector(vector, dimension, label="vector"):
    """Reject vectors of the wrong length or with non-finite coordinates."""
    if len(vector) != dimension:
        raise InvalidInputError(
            "%s has dimension %d, expected %d" % (label, len(vector), dimension)
        )
    if not is_finite_vector(vector):
        raise InvalidInputError(
            "%s contains non-finite or non-numeric coordinates" % label
        )


class VectorNormalizer:
    """Computes the norm statistics the embedding is built from.

    An empty dataset is valid and yields no norms and a maximum of 0.0.
    """

    def compute_norms(self, dataset, dimension=None):
        """Return (squared_norms, max_squared_norm) for the dataset.

        ||o_i||^2 = <o_i, o_i>, max_sq = max_i ||o_i||^2.
        When dimension is omitted it is taken from the first vector.
        """
        if dimension is None and len(dataset) > 0:
            dimension = len(dataset[0])
        if dimension is not None and dimension < 1:
            raise InvalidInputError("dimension must be >= 1, got %r" % (dimension,))

        squared_norms = []
        max_squared_norm = 0.0
        for i, vector in enumerate(dataset):
            validate_vector(vector, dimension, "data vector %d" % i)
            norm_sqr = squared_norm(vector)
            squared_norms.append(norm_sqr)
            if norm_sqr > max_squared_norm:
                max_squared_norm = norm_sqr
        return squared_norms, max_squared_norm
