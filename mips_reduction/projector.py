"""Asymmetric query transform for the MIP-to-NN reduction."""

from mips_reduction.math_utils import vector_magnitude


class QueryProjector:
    """Maps a query to the (d+1)-dimensional space of the augmented data.

    Two reductions are supported and selected per query:

    * ``use_rescale=False``: q' = (q, 0). The plain reduction.
    * ``use_rescale=True``: q' = (M / ||q|| * q, 0). The query is scaled to
      the radius of the data sphere before searching, which changes how the
      approximation ratio of the NN index translates into inner products.

    Both produce the same exact ranking; they differ only in how an
    approximate index behaves on them.
    """

    def scale_factor(self, query, max_norm, use_rescale):
        """lambda = M / ||q|| when rescaling, 1.0 otherwise.

        A zero query has no direction to rescale, so lambda is 1.0.
        """
        if not use_rescale:
            return 1.0
        norm_q = vector_magnitude(query)
        if norm_q == 0.0:
            return 1.0
        return max_norm / norm_q

    def project(self, query, max_norm, use_rescale):
        """Return (lambda * q_1, ..., lambda * q_d, 0.0)."""
        lam = self.scale_factor(query, max_norm, use_rescale)
        projected = [lam * x for x in query]
        projected.append(0.0)
        return projected
