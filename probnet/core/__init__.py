"""Core module for ProbNet.

This module contains the observation type and the exception hierarchy
shared by every other part of the package.
"""

from .errors import (
    InconsistentOrderingError,
    LearningError,
    MissingDistributionError,
    ProbNetError,
    SamplingError,
    UnsupportedOperationError,
)
from .types import MISSING, Observation

__all__ = [
    "MISSING",
    "Observation",
    "ProbNetError",
    "UnsupportedOperationError",
    "LearningError",
    "MissingDistributionError",
    "SamplingError",
    "InconsistentOrderingError",
]
