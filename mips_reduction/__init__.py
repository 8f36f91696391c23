"""MIP-to-NN reduction - maximum inner product search on a Euclidean NN index."""

from mips_reduction.math_utils import (
    inner_product,
    squared_norm,
    vector_magnitude,
    squared_distance,
    euclidean_distance,
    is_finite_vector,
)
from mips_reduction.errors import (
    MipsError,
    InvalidInputError,
    BuildError,
    NotBuiltError,
    AlreadyBuiltError,
    InternalInconsistencyError,
)
from mips_reduction.topk import TopKList, MinKList, MaxKList
from mips_reduction.normalizer import VectorNormalizer
from mips_reduction.embedder import Embedder
from mips_reduction.projector import QueryProjector
from mips_reduction.reranker import ResultReranker
from mips_reduction.nn_index import UNBOUNDED, NNIndex, LinearScanIndex, QALSHIndex
from mips_reduction.mip_index import MipIndex, RankedResult, build, query
from mips_reduction.experiments import ExperimentRunner

__all__ = [
    "inner_product",
    "squared_norm",
    "vector_magnitude",
    "squared_distance",
    "euclidean_distance",
    "is_finite_vector",
    "MipsError",
    "InvalidInputError",
    "BuildError",
    "NotBuiltError",
    "AlreadyBuiltError",
    "InternalInconsistencyError",
    "TopKList",
    "MinKList",
    "MaxKList",
    "VectorNormalizer",
    "Embedder",
    "QueryProjector",
    "ResultReranker",
    "UNBOUNDED",
    "NNIndex",
    "LinearScanIndex",
    "QALSHIndex",
    "MipIndex",
    "RankedResult",
    "build",
    "query",
    "ExperimentRunner",
]
