"""Ten experiments validating the MIP-to-NN reduction."""

import math

from mips_reduction.embedder import Embedder
from mips_reduction.errors import MipsError
from mips_reduction.math_utils import (
    EPSILON,
    inner_product,
    squared_distance,
    squared_norm,
)
from mips_reduction.mip_index import MipIndex
from mips_reduction.nn_index import LinearScanIndex, QALSHIndex
from mips_reduction.normalizer import VectorNormalizer
from mips_reduction.projector import QueryProjector
from mips_reduction.topk import MaxKList, MinKList


def brute_force_scores(dataset, query, k):
    """Exact top-k inner products, best first."""
    scores = sorted((inner_product(v, query) for v in dataset), reverse=True)
    return scores[:k]


class ExperimentRunner:
    """Runs 10 experiments on the embedding, the query transform and ranking."""

    def __init__(self, dataset, queries, ratio=2.0, top_k=5, min_recall=0.5):
        self.dataset = dataset
        self.queries = queries
        self.ratio = ratio
        self.min_recall = min_recall
        self.top_k = min(top_k, len(dataset))
        self.dimension = len(dataset[0])
        self.normalizer = VectorNormalizer()
        self.embedder = Embedder()
        self.projector = QueryProjector()
        self.squared_norms, self.max_squared_norm = self.normalizer.compute_norms(
            dataset, self.dimension
        )
        self.augmented, self.max_norm = self.embedder.build(
            dataset, self.squared_norms, self.max_squared_norm
        )

    def run_all(self):
        """Run all 10 experiments and return (name, passed, details) tuples."""
        experiments = [
            ("1. Augmented Norms on the Sphere", self.exp1_augmented_norms),
            ("2. Zero-norm Query Rescale", self.exp2_zero_query_rescale),
            ("3. Inner Product Preservation", self.exp3_inner_products),
            ("4. MIP Order Equals NN Order", self.exp4_order_equivalence),
            ("5. Exact Top-k via Linear Scan", self.exp5_exact_topk),
            ("6. QALSH Top-k Recall", self.exp6_qalsh_recall),
            ("7. Query Idempotence", self.exp7_idempotence),
            ("8. All-zero Dataset", self.exp8_zero_dataset),
            ("9. Empty Dataset", self.exp9_empty_dataset),
            ("10. Top-k Tie Breaking", self.exp10_topk_ties),
        ]
        results = []
        for name, func in experiments:
            try:
                passed, details = func()
            except MipsError as exc:
                passed, details = False, "%s: %s" % (type(exc).__name__, exc)
            results.append((name, passed, details))
        return results

    def exp1_augmented_norms(self):
        """||o'||^2 == M^2 for every augmented vector."""
        target = self.max_squared_norm
        max_rel = 0.0
        for vector in self.augmented:
            diff = abs(squared_norm(vector) - target)
            max_rel = max(max_rel, diff / max(target, EPSILON))
        passed = max_rel < 1e-4
        return passed, "M=%.6f, max_rel_diff=%.2e over %d vectors" % (
            self.max_norm, max_rel, len(self.augmented)
        )

    def exp2_zero_query_rescale(self):
        """lambda is 1.0, not NaN or inf, for a zero query."""
        zero = [0.0] * self.dimension
        lam = self.projector.scale_factor(zero, self.max_norm, True)
        projected = self.projector.project(zero, self.max_norm, True)
        finite = all(math.isfinite(x) for x in projected)
        passed = lam == 1.0 and finite and projected[-1] == 0.0
        return passed, "lambda=%r, finite=%s" % (lam, finite)

    def exp3_inner_products(self):
        """<o', q'> == lambda <o, q> because the query's extra coordinate is 0."""
        max_diff = 0.0
        comparisons = 0
        for query in self.queries:
            for use_rescale in (False, True):
                lam = self.projector.scale_factor(
                    query["vector"], self.max_norm, use_rescale
                )
                projected = self.projector.project(
                    query["vector"], self.max_norm, use_rescale
                )
                for vector, aug in zip(self.dataset, self.augmented):
                    expected = lam * inner_product(vector, query["vector"])
                    max_diff = max(max_diff, abs(inner_product(aug, projected) - expected))
                    comparisons += 1
        passed = max_diff < 1e-9
        return passed, "max_diff=%.2e across %d comparisons" % (max_diff, comparisons)

    def exp4_order_equivalence(self):
        """Ranking by distance to q' reproduces ranking by <o, q>."""
        passed = True
        violations = []
        for query in self.queries:
            for use_rescale in (False, True):
                projected = self.projector.project(
                    query["vector"], self.max_norm, use_rescale
                )
                by_dist = sorted(
                    range(len(self.dataset)),
                    key=lambda i: squared_distance(self.augmented[i], projected),
                )
                ip_in_dist_order = [
                    inner_product(self.dataset[i], query["vector"]) for i in by_dist
                ]
                for i in range(len(ip_in_dist_order) - 1):
                    if ip_in_dist_order[i] < ip_in_dist_order[i + 1] - 1e-9:
                        passed = False
                        violations.append(
                            "query=%s rescale=%s at rank %d"
                            % (query["name"], use_rescale, i + 1)
                        )
                        break
        detail = "queries=%d" % len(self.queries)
        if violations:
            detail += ", violations: " + "; ".join(violations[:3])
        return passed, detail

    def _build(self, index_factory, ratio, dataset=None, dimension=None):
        dataset = self.dataset if dataset is None else dataset
        dimension = self.dimension if dimension is None else dimension
        return MipIndex(ratio=ratio, index_factory=index_factory).build(
            dataset, dimension
        )

    def exp5_exact_topk(self):
        """With an exact NN index the reduction returns brute-force top-k."""
        index = self._build(LinearScanIndex, 1.0)
        passed = True
        checks = 0
        for query in self.queries:
            expected = brute_force_scores(self.dataset, query["vector"], self.top_k)
            for use_rescale in (False, True):
                results = index.query(self.top_k, use_rescale, query["vector"])
                got = [r.score for r in results]
                checks += 1
                if len(got) != len(expected) or any(
                    abs(a - b) > 1e-9 for a, b in zip(got, expected)
                ):
                    passed = False
        return passed, "checks=%d, k=%d" % (checks, self.top_k)

    def exp6_qalsh_recall(self):
        """Recall of QALSH-backed top-k against brute force.

        Passes when results are well formed and the mean recall with the
        rescaled query reaches min_recall. A reduction with the wrong sign
        or scale returns far vectors and falls below it.
        """
        index = self._build(QALSHIndex, self.ratio)
        well_formed = True
        recall = {False: 0.0, True: 0.0}
        for query in self.queries:
            expected = set(
                i + 1 for i in sorted(
                    range(len(self.dataset)),
                    key=lambda i: -inner_product(self.dataset[i], query["vector"]),
                )[:self.top_k]
            )
            for use_rescale in (False, True):
                results = index.query(self.top_k, use_rescale, query["vector"])
                scores = [r.score for r in results]
                if len(results) != self.top_k or scores != sorted(scores, reverse=True):
                    well_formed = False
                hits = len(expected & set(r.id for r in results))
                recall[use_rescale] += hits / float(self.top_k)
        n = float(len(self.queries))
        rescale_recall = recall[True] / n
        passed = well_formed and rescale_recall >= self.min_recall
        detail = "c=%.2f, recall@%d plain=%.3f rescale=%.3f (min %.2f)" % (
            self.ratio, self.top_k, recall[False] / n, rescale_recall,
            self.min_recall,
        )
        return passed, detail

    def exp7_idempotence(self):
        """Repeated queries against the same index return identical results."""
        index = self._build(QALSHIndex, self.ratio)
        passed = True
        for query in self.queries:
            for use_rescale in (False, True):
                first = index.query(self.top_k, use_rescale, query["vector"])
                second = index.query(self.top_k, use_rescale, query["vector"])
                if first != second:
                    passed = False
        return passed, "queries=%d" % len(self.queries)

    def exp8_zero_dataset(self):
        """An all-zero dataset builds with M = 0 and scores every result 0."""
        zeros = [[0.0] * self.dimension for _ in range(3)]
        index = self._build(QALSHIndex, self.ratio, dataset=zeros)
        results = index.query(3, True, self.queries[0]["vector"])
        passed = (
            index.max_norm == 0.0
            and len(results) == 3
            and all(r.score == 0.0 for r in results)
        )
        return passed, "M=%r, results=%d" % (index.max_norm, len(results))

    def exp9_empty_dataset(self):
        """An empty dataset builds and answers every query with no results."""
        index = self._build(QALSHIndex, self.ratio, dataset=[], dimension=self.dimension)
        results = index.query(1, False, self.queries[0]["vector"])
        return results == [], "results=%r" % (results,)

    def exp10_topk_ties(self):
        """Equal scores keep insertion order; a full list rejects ties."""
        max_list = MaxKList(2)
        for score, item_id in [(1.0, 1), (1.0, 2), (1.0, 3), (0.5, 4)]:
            max_list.insert(score, item_id)
        min_list = MinKList(2)
        for score, item_id in [(2.0, 1), (1.0, 2), (1.0, 3), (3.0, 4)]:
            min_list.insert(score, item_id)
        passed = max_list.ids() == [1, 2] and min_list.ids() == [2, 3]
        return passed, "max=%s, min=%s" % (max_list.items(), min_list.items())
