"""Network structure: variables, DAG container and orderings."""

from probnet.networks.dag import BayesianNetwork, StructureMode
from probnet.networks.ordering import topological_ordering, verify_ordering
from probnet.networks.variable import RandomVariable

__all__ = [
    "BayesianNetwork",
    "StructureMode",
    "RandomVariable",
    "topological_ordering",
    "verify_ordering",
]
