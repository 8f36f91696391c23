"""MIP search through a Euclidean nearest-neighbour index.

Stored vectors o are embedded as (o, sqrt(M^2 - ||o||^2)) so they all lie on
the sphere of radius M = max ||o||. For a query q' = (lambda * q, 0):

    ||o' - q'||^2 = M^2 + lambda^2 ||q||^2 - 2 lambda <o, q>

so the nearest augmented point is the stored vector with the largest inner
product. The NN index returns candidates; their exact inner products with
the original query decide the final ranking.
"""

import collections
import logging
import numbers
import time

from mips_reduction.embedder import Embedder
from mips_reduction.errors import (
    AlreadyBuiltError,
    BuildError,
    InvalidInputError,
    MipsError,
    NotBuiltError,
)
from mips_reduction.nn_index import UNBOUNDED, QALSHIndex
from mips_reduction.normalizer import VectorNormalizer, validate_vector
from mips_reduction.projector import QueryProjector
from mips_reduction.reranker import ResultReranker

logger = logging.getLogger(__name__)

RankedResult = collections.namedtuple("RankedResult", ["score", "id"])


class MipIndex:
    """c-k-AMIP search over a fixed dataset.

    The index starts Unbuilt; ``build`` moves it to Built exactly once.
    The dataset is borrowed, not copied: the caller must keep it alive and
    unmodified while the index is queried.

    Args:
        ratio: approximation ratio handed to the NN index at build time.
        index_factory: callable ``(count, dimension, ratio, data, **options)``
            returning an object with ``knn(k, max_radius, query)``.
        **index_options: extra keyword arguments for ``index_factory``
            (for QALSHIndex: ``seed``, ``beta``, ``delta``).

    Build failures: a MipsError raised by ``index_factory`` (BuildError
    included) propagates as is. Any other exception is re-raised as
    BuildError with the original exception as ``__cause__``, so callers
    catch BuildError rather than the index's own exception types.
    """

    def __init__(self, ratio=2.0, index_factory=QALSHIndex, **index_options):
        self.ratio = ratio
        self.index_factory = index_factory
        self.index_options = index_options
        self.normalizer = VectorNormalizer()
        self.embedder = Embedder()
        self.projector = QueryProjector()
        self.reranker = ResultReranker()

        self._built = False
        self._dataset = None
        self._augmented = None
        self._nn_index = None
        self._count = 0
        self._dimension = None
        self._max_norm = None

    @property
    def is_built(self):
        return self._built

    def _require_built(self):
        if not self._built:
            raise NotBuiltError("MipIndex.build() must complete before use")

    @property
    def count(self):
        self._require_built()
        return self._count

    @property
    def dimension(self):
        self._require_built()
        return self._dimension

    @property
    def max_norm(self):
        """Global scale M = sqrt(max_i ||o_i||^2)."""
        self._require_built()
        return self._max_norm

    @property
    def augmented_data(self):
        """The (d+1)-dimensional vectors the NN index was built over."""
        self._require_built()
        return self._augmented

    def build(self, dataset, dimension=None, count=None):
        """Embed the dataset and build the NN index over it. Returns self.

        Raises BuildError when the NN index cannot be constructed.
        """
        if self._built:
            raise AlreadyBuiltError("MipIndex is already built")
        if count is None:
            count = len(dataset)
        elif count != len(dataset):
            raise InvalidInputError(
                "count=%d does not match %d data vectors" % (count, len(dataset))
            )
        if dimension is None:
            if count == 0:
                raise InvalidInputError("dimension is required for an empty dataset")
            dimension = len(dataset[0])
        if not self.ratio >= 1.0:
            raise InvalidInputError(
                "approximation ratio must be >= 1, got %r" % (self.ratio,)
            )

        start = time.perf_counter()
        squared_norms, max_squared_norm = self.normalizer.compute_norms(
            dataset, dimension
        )
        augmented, max_norm = self.embedder.build(
            dataset, squared_norms, max_squared_norm
        )
        try:
            nn_index = self.index_factory(
                count, dimension + 1, self.ratio, augmented, **self.index_options
            )
        except MipsError:
            raise
        except Exception as exc:
            raise BuildError("nearest-neighbour index build failed: %s" % exc) from exc
        elapsed = time.perf_counter() - start

        self._dataset = dataset
        self._augmented = augmented
        self._nn_index = nn_index
        self._count = count
        self._dimension = dimension
        self._max_norm = max_norm
        self._built = True

        logger.info(
            "MipIndex built: n=%d d=%d c0=%.1f M=%f index_time=%.6fs",
            count, dimension, self.ratio, max_norm, elapsed,
        )
        return self

    def query(self, top_k, use_rescale, query_vector):
        """Return up to top_k RankedResult(score, id), best first.

        Scores are exact inner products with the original vectors and ids
        are 1-based positions in the dataset. ``use_rescale`` picks the
        query transform, see QueryProjector.
        """
        self._require_built()
        if isinstance(top_k, bool) or not isinstance(top_k, numbers.Integral):
            raise InvalidInputError("top_k must be an integer, got %r" % (top_k,))
        if top_k < 1:
            raise InvalidInputError("top_k must be >= 1, got %d" % top_k)
        validate_vector(query_vector, self._dimension, "query")
        if self._count == 0:
            return []
        if top_k > self._count:
            raise InvalidInputError(
                "top_k=%d exceeds the %d indexed vectors" % (top_k, self._count)
            )

        projected = self.projector.project(query_vector, self._max_norm, use_rescale)
        candidate_ids = self._nn_index.knn(top_k, UNBOUNDED, projected)
        sink = self.reranker.rerank(
            candidate_ids, self._dataset, query_vector, top_k
        )
        logger.debug(
            "MipIndex query: top_k=%d rescale=%s candidates=%d",
            top_k, use_rescale, len(candidate_ids),
        )
        return [RankedResult(score, item_id) for score, item_id in sink.items()]


def build(dataset, dimension, count, ratio, **options):
    """Build a MipIndex over dataset. Options are passed to MipIndex."""
    return MipIndex(ratio=ratio, **options).build(dataset, dimension, count)


def query(index, top_k, use_rescale, query_vector):
    """Run a top-k MIP query against a built MipIndex."""
    return index.query(top_k, use_rescale, query_vector)
