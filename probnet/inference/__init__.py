"""Inference algorithms for ProbNet."""

from probnet.inference.query import InferenceQuery, QueryState
from probnet.inference.sampling import (
    forward_sample,
    gibbs_sample,
    initial_particle,
    likelihood_weighted_sample,
)

__all__ = [
    "InferenceQuery",
    "QueryState",
    "forward_sample",
    "gibbs_sample",
    "initial_particle",
    "likelihood_weighted_sample",
]
