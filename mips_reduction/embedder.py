"""Augments stored vectors with one extra coordinate onto a common sphere."""

import math


class Embedder:
    """Builds the (d+1)-dimensional dataset the NN index is built over.

    Every augmented vector has squared norm equal to the dataset's maximum
    squared norm M^2, which turns "largest inner product with q" into
    "smallest Euclidean distance to (q, 0)".
    """

    def extra_coordinate(self, squared_norm, max_squared_norm):
        """Augmentation value sqrt(M^2 - ||o||^2).

        The argument is clamped at zero: round-off can make it slightly
        negative for the vector that attains the maximum norm.
        """
        return math.sqrt(max(max_squared_norm - squared_norm, 0.0))

    def build(self, dataset, squared_norms, max_squared_norm):
        """Return (augmented_dataset, M) with M = sqrt(max_squared_norm).

        An all-zero dataset gives M = 0 and every extra coordinate 0.
        """
        if max_squared_norm <= 0.0:
            max_norm = 0.0
        else:
            max_norm = math.sqrt(max_squared_norm)

        augmented = []
        for vector, norm_sqr in zip(dataset, squared_norms):
            extra = self.extra_coordinate(norm_sqr, max_squared_norm)
            augmented.append(tuple(float(x) for x in vector) + (extra,))
        return tuple(augmented), max_norm
