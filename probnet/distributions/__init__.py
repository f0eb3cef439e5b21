"""Distribution implementations for ProbNet.

This module contains the discrete distribution over opaque values and
the conditional probability table built from it.
"""

from .discrete import DiscreteDistribution
from .conditional import ConditionalProbabilityTable

__all__ = [
    "DiscreteDistribution",
    "ConditionalProbabilityTable",
]
