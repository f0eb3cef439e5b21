"""ProbNet: discrete Bayesian networks with Gibbs-sampling inference.

This package provides a DAG container for discrete random variables,
topological ordering, CPT learning from observation streams, and
approximate posterior inference by Markov-chain Monte Carlo.
"""

import logging

try:
    from probnet._version import version as __version__
except ImportError:
    __version__ = "0.1.0"

from .config import DEFAULT_CONFIG, EngineConfig, load_config
from .core.errors import (
    InconsistentOrderingError,
    LearningError,
    MissingDistributionError,
    ProbNetError,
    SamplingError,
    UnsupportedOperationError,
)
from .core.types import MISSING, Observation
from .data.observations import CsvObservationSet, InMemoryObservationSet, ObservationSet
from .distributions.conditional import ConditionalProbabilityTable
from .distributions.discrete import DiscreteDistribution
from .inference.query import InferenceQuery, QueryState
from .networks.dag import BayesianNetwork, StructureMode
from .networks.variable import RandomVariable

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BayesianNetwork",
    "StructureMode",
    "RandomVariable",
    "DiscreteDistribution",
    "ConditionalProbabilityTable",
    "Observation",
    "MISSING",
    "ObservationSet",
    "InMemoryObservationSet",
    "CsvObservationSet",
    "InferenceQuery",
    "QueryState",
    "EngineConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "ProbNetError",
    "UnsupportedOperationError",
    "LearningError",
    "MissingDistributionError",
    "SamplingError",
    "InconsistentOrderingError",
]
