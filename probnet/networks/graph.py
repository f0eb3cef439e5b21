"""Network construction utilities for ProbNet."""

from __future__ import annotations

import itertools
from typing import List, Optional

import numpy as np

from probnet.distributions.conditional import ConditionalProbabilityTable
from probnet.distributions.discrete import DiscreteDistribution
from probnet.networks.dag import BayesianNetwork
from probnet.networks.variable import RandomVariable


def attach_random_cpts(
    network: BayesianNetwork,
    rng: np.random.Generator,
    concentration: float = 1.0,
) -> None:
    """Give every variable a random CPT.

    Each parent instantiation (the product of the parents' domains) gets
    a distribution drawn from a symmetric Dirichlet with the given
    *concentration*.  Every variable must have a non-empty domain.
    """
    if concentration <= 0:
        raise ValueError(f"concentration must be > 0, got {concentration}")
    for variable in network.variables:
        if not variable.values:
            raise ValueError(f"Variable '{variable.name}' has an empty domain")
        parents = network.parents_of(variable)
        cpt = ConditionalProbabilityTable()
        alpha = np.full(variable.num_values, concentration)
        for instantiation in itertools.product(*(p.values for p in parents)):
            probs = rng.dirichlet(alpha)
            cpt.set_conditional_distribution(
                instantiation,
                DiscreteDistribution(dict(zip(variable.values, probs))),
            )
        variable.cpt = cpt


def _make_variables(num_nodes: int, num_states: int) -> List[RandomVariable]:
    if num_nodes < 1:
        raise ValueError(f"num_nodes must be positive, got {num_nodes}")
    if num_states < 1:
        raise ValueError(f"num_states must be positive, got {num_states}")
    states = [f"s{i}" for i in range(num_states)]
    return [RandomVariable(f"X{i}", states) for i in range(num_nodes)]


def build_tree(
    num_nodes: int,
    num_states: int = 2,
    seed: Optional[int] = None,
) -> BayesianNetwork:
    """Build a tree-structured Bayesian network with random CPTs.

    Node i's children are 2i+1 and 2i+2.
    """
    rng = np.random.default_rng(seed)
    network = BayesianNetwork(name=f"tree{num_nodes}")
    variables = _make_variables(num_nodes, num_states)
    for var in variables:
        network.add_variable(var)

    for i in range(num_nodes):
        for child_idx in [2 * i + 1, 2 * i + 2]:
            if child_idx < num_nodes:
                network.add_edge(variables[i], variables[child_idx])

    attach_random_cpts(network, rng)
    return network


def build_chain(
    num_nodes: int,
    num_states: int = 2,
    seed: Optional[int] = None,
) -> BayesianNetwork:
    """Build a chain-structured Bayesian network (Markov chain)."""
    rng = np.random.default_rng(seed)
    network = BayesianNetwork(name=f"chain{num_nodes}")
    variables = _make_variables(num_nodes, num_states)
    for var in variables:
        network.add_variable(var)

    for i in range(num_nodes - 1):
        network.add_edge(variables[i], variables[i + 1])

    attach_random_cpts(network, rng)
    return network
