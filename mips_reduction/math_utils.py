"""Standalone vector math helpers for the MIP-to-NN reduction."""

import math
import numbers

EPSILON = 1e-10


def inner_product(a, b):
    """Inner (dot) product of two vectors."""
    return sum(ai * bi for ai, bi in zip(a, b))


def squared_norm(v):
    """Squared Euclidean norm, i.e. the self inner product."""
    return inner_product(v, v)


def vector_magnitude(v):
    """Euclidean magnitude of a vector."""
    return math.sqrt(squared_norm(v))


def squared_distance(a, b):
    """Squared Euclidean distance between two vectors."""
    return sum((ai - bi) * (ai - bi) for ai, bi in zip(a, b))


def euclidean_distance(a, b):
    """Euclidean distance between two vectors."""
    return math.sqrt(squared_distance(a, b))


def is_finite_vector(v):
    """True when every coordinate is a finite real number.

    Any numbers.Real is accepted except bool. Values too large to convert
    to a float count as non-finite.
    """
    for x in v:
        if isinstance(x, bool) or not isinstance(x, numbers.Real):
            return False
        try:
            if not math.isfinite(x):
                return False
        except OverflowError:
            return False
    return True


def normal_cdf(x):
    """Standard normal cumulative distribution function."""
    return 0.5 * (1.0 + math.erf(x / math.sqrt(2.0)))


def collision_probability(x):
    """Probability that a Gaussian projection lands within x of zero.

    P(x) = 1 - 2 * Phi(-x). For two points at distance 1 and a bucket of
    half-width x this is the chance that one hash function collides them.
    """
    return 1.0 - 2.0 * normal_cdf(-x)
