"""Euclidean nearest-neighbour indexes consumed by the MIP reduction.

Both indexes implement the same narrow contract: they are constructed from
``(count, dimension, ratio, data)`` and answer ``knn(k, max_radius, query)``
with candidate ids ordered by increasing Euclidean distance.
"""

import bisect
import logging
import math
import random
import statistics

from mips_reduction.errors import InvalidInputError
from mips_reduction.math_utils import (
    EPSILON,
    collision_probability,
    euclidean_distance,
    inner_product,
)
from mips_reduction.normalizer import validate_vector
from mips_reduction.topk import MinKList

logger = logging.getLogger(__name__)

UNBOUNDED = math.inf
DEFAULT_SEED = 666


class NNIndex:
    """Base class for c-approximate k-NN indexes over a fixed point set."""

    def __init__(self, count, dimension, ratio, data):
        if count != len(data):
            raise InvalidInputError(
                "count=%d does not match %d data vectors" % (count, len(data))
            )
        if dimension < 1:
            raise InvalidInputError("dimension must be >= 1, got %r" % (dimension,))
        if not ratio >= 1.0:
            raise InvalidInputError("approximation ratio must be >= 1, got %r" % (ratio,))
        for i, vector in enumerate(data):
            validate_vector(vector, dimension, "indexed vector %d" % i)
        self.count = count
        self.dimension = dimension
        self.ratio = ratio
        self.data = data

    def _check_query(self, k, query):
        if k < 1:
            raise InvalidInputError("k must be >= 1, got %r" % (k,))
        validate_vector(query, self.dimension, "query")

    def knn(self, k, max_radius, query):
        """Return up to k ids of points near query, nearest first."""
        raise NotImplementedError


class LinearScanIndex(NNIndex):
    """Exact k-NN by scanning every point. Satisfies any ratio >= 1."""

    def knn(self, k, max_radius, query):
        self._check_query(k, query)
        nn_list = MinKList(k)
        for i, vector in enumerate(self.data):
            dist = euclidean_distance(vector, query)
            if dist <= max_radius:
                nn_list.insert(dist, i)
        return nn_list.ids()


class QALSHIndex(NNIndex):
    """Query-aware LSH for c-approximate k-NN in Euclidean space.

    Each of the m hash functions is a Gaussian random projection. Unlike
    classic E2LSH the buckets are not fixed at build time: at query time a
    window of half-width w*R/2 is centred on the projected query in every
    table, and objects that fall in at least l windows are verified by
    their exact distance. R grows by a factor c per round until the k-th
    verified distance is within c*R, the candidate budget beta*n + k is
    spent, or every table is exhausted.

    Parameters are derived from the approximation ratio c:

        w  = sqrt(8 c^2 ln c / (c^2 - 1))
        p1 = P(w / 2), p2 = P(w / (2c))
        m  = ceil((sqrt(ln(2/beta)) + sqrt(ln(1/delta)))^2 / (2 (p1 - p2)^2))
        l  = ceil(alpha * m), alpha = (eta p1 + p2) / (1 + eta)

    where P is ``collision_probability`` and
    eta = sqrt(ln(2/beta)) / sqrt(ln(1/delta)).

    m grows quickly as c approaches 1, and every hash function costs one
    projection per point at build time.
    """

    def __init__(self, count, dimension, ratio, data, beta=None, delta=0.49,
                 seed=DEFAULT_SEED):
        if not ratio > 1.0:
            raise InvalidInputError(
                "QALSH needs an approximation ratio > 1, got %r" % (ratio,)
            )
        super().__init__(count, dimension, ratio, data)
        if beta is None:
            beta = min(1.0, 100.0 / count) if count > 0 else 1.0
        if not 0.0 < beta <= 1.0:
            raise InvalidInputError("beta must be in (0, 1], got %r" % (beta,))
        if not 0.0 < delta < 1.0:
            raise InvalidInputError("delta must be in (0, 1), got %r" % (delta,))
        self.beta = beta
        self.delta = delta
        self.seed = seed
        self._init_parameters()
        self._build_tables()

    def _init_parameters(self):
        c = self.ratio
        c_sqr = c * c
        self.w = math.sqrt((8.0 * c_sqr * math.log(c)) / (c_sqr - 1.0))
        self.p1 = collision_probability(self.w / 2.0)
        self.p2 = collision_probability(self.w / (2.0 * c))

        para1 = math.sqrt(math.log(2.0 / self.beta))
        para2 = math.sqrt(math.log(1.0 / self.delta))
        para3 = 2.0 * (self.p1 - self.p2) * (self.p1 - self.p2)
        eta = para1 / para2
        self.alpha = (eta * self.p1 + self.p2) / (1.0 + eta)
        self.m = int(math.ceil((para1 + para2) * (para1 + para2) / para3))
        self.l = int(math.ceil(self.alpha * self.m))

        logger.debug(
            "QALSH parameters: n=%d d=%d c=%.2f w=%.4f p1=%.4f p2=%.4f "
            "alpha=%.4f beta=%.4f delta=%.4f m=%d l=%d",
            self.count, self.dimension, c, self.w, self.p1, self.p2,
            self.alpha, self.beta, self.delta, self.m, self.l,
        )

    def _build_tables(self):
        rng = random.Random(self.seed)
        self._projections = []
        self._keys = []
        self._ids = []
        for _ in range(self.m):
            a = [rng.gauss(0.0, 1.0) for _ in range(self.dimension)]
            table = sorted(
                (inner_product(a, vector), i) for i, vector in enumerate(self.data)
            )
            self._projections.append(a)
            self._keys.append([key for key, _ in table])
            self._ids.append([i for _, i in table])

    def _initial_radius(self, q_keys, lefts, rights):
        """Radius at which the nearest projected neighbour falls in half the windows."""
        gaps = []
        for j in range(self.m):
            keys = self._keys[j]
            best = math.inf
            if lefts[j] >= 0:
                best = q_keys[j] - keys[lefts[j]]
            if rights[j] < self.count:
                best = min(best, keys[rights[j]] - q_keys[j])
            gaps.append(best)
        gap = statistics.median(gaps)
        if gap <= 0.0:
            positive = [g for g in gaps if g > 0.0]
            gap = min(positive) if positive else EPSILON
        return max(2.0 * gap / self.w, EPSILON)

    def knn(self, k, max_radius, query):
        self._check_query(k, query)
        if self.count == 0:
            return []

        q_keys = [inner_product(a, query) for a in self._projections]
        rights = [bisect.bisect_left(self._keys[j], q_keys[j]) for j in range(self.m)]
        lefts = [pos - 1 for pos in rights]

        freq = [0] * self.count
        checked = [False] * self.count
        nn_list = MinKList(k)
        budget = int(math.ceil(self.beta * self.count)) + k
        candidates = 0
        radius = self._initial_radius(q_keys, lefts, rights)
        rounds = 0

        while True:
            rounds += 1
            half_width = self.w * radius / 2.0
            done = False
            for j in range(self.m):
                keys = self._keys[j]
                ids = self._ids[j]
                q_key = q_keys[j]
                while (not done and lefts[j] >= 0
                       and q_key - keys[lefts[j]] <= half_width):
                    oid = ids[lefts[j]]
                    lefts[j] -= 1
                    freq[oid] += 1
                    if freq[oid] >= self.l and not checked[oid]:
                        checked[oid] = True
                        nn_list.insert(euclidean_distance(self.data[oid], query), oid)
                        candidates += 1
                        done = candidates >= budget
                while (not done and rights[j] < self.count
                       and keys[rights[j]] - q_key <= half_width):
                    oid = ids[rights[j]]
                    rights[j] += 1
                    freq[oid] += 1
                    if freq[oid] >= self.l and not checked[oid]:
                        checked[oid] = True
                        nn_list.insert(euclidean_distance(self.data[oid], query), oid)
                        candidates += 1
                        done = candidates >= budget
                if done:
                    break

            if done:
                break
            if nn_list.is_full() and nn_list.worst_score() <= self.ratio * radius:
                break
            exhausted = all(
                lefts[j] < 0 and rights[j] >= self.count for j in range(self.m)
            )
            if exhausted or radius > max_radius:
                break
            radius *= self.ratio

        logger.debug(
            "QALSH knn: k=%d rounds=%d radius=%.4f candidates=%d",
            k, rounds, radius, candidates,
        )
        return [oid for dist, oid in nn_list.items() if dist <= max_radius]
