"""Re-ranks NN candidates by their exact inner product with the query."""

import numbers

from mips_reduction.errors import InternalInconsistencyError
from mips_reduction.math_utils import inner_product
from mips_reduction.topk import MaxKList


class ResultReranker:
    """Turns NN candidate ids into ranked inner-product results.

    Scores are computed against the original vectors, never the augmented
    ones, and ids are reported 1-based.
    """

    def check_candidate(self, candidate_id, count):
        """Ensure a candidate id is an integer in [0, count)."""
        integral = isinstance(candidate_id, numbers.Integral)
        if isinstance(candidate_id, bool) or not integral:
            raise InternalInconsistencyError(
                "NN index returned a non-integer candidate id %r" % (candidate_id,),
                candidate_id=candidate_id,
                count=count,
            )
        if candidate_id < 0 or candidate_id >= count:
            raise InternalInconsistencyError(
                "NN index returned candidate id %d outside [0, %d)"
                % (candidate_id, count),
                candidate_id=candidate_id,
                count=count,
            )

    def rerank(self, candidate_ids, dataset, query, k, sink=None):
        """Insert (<o_id, q>, id + 1) for every candidate into a top-k sink.

        Returns the sink; a MaxKList(k) is created when none is given.
        """
        if sink is None:
            sink = MaxKList(k)
        count = len(dataset)
        for candidate_id in candidate_ids:
            self.check_candidate(candidate_id, count)
            score = inner_product(dataset[candidate_id], query)
            sink.insert(score, int(candidate_id) + 1)
        return sink
