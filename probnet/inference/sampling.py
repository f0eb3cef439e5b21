"""Particle samplers for discrete Bayesian networks.

Provides ancestral sampling for synthetic data and the samplers behind
:class:`~probnet.inference.query.InferenceQuery`:

- :func:`forward_sample`: ancestral sampling, one unweighted particle
- :func:`gibbs_sample`: one Gibbs transition from a previous particle
- :func:`likelihood_weighted_sample`: one (particle, weight) pair
- :func:`initial_particle`: a positive-probability particle to start a chain

Every sampler takes a topological order (see
:func:`~probnet.networks.ordering.topological_ordering`) and an explicit
:class:`numpy.random.Generator`; none of them touch global random state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Hashable, List, Mapping, Sequence, Tuple

import numpy as np

from probnet.core.errors import MissingDistributionError, SamplingError
from probnet.core.types import MISSING, Observation
from probnet.distributions.conditional import ConditionalProbabilityTable
from probnet.networks.variable import RandomVariable

if TYPE_CHECKING:
    from probnet.networks.dag import BayesianNetwork


def _cpt_of(variable: RandomVariable) -> ConditionalProbabilityTable:
    if variable.cpt is None:
        raise MissingDistributionError(
            f"Variable '{variable.name}' has no conditional probability table"
        )
    return variable.cpt


def _instantiation(
    parents: Sequence[RandomVariable],
    assignment: Mapping[str, Any],
) -> Tuple[Hashable, ...]:
    return tuple(assignment[p.name] for p in parents)


def forward_sample(
    network: BayesianNetwork,
    order: Sequence[RandomVariable],
    rng: np.random.Generator,
) -> Observation:
    """Ancestral (forward) sampling of one complete particle.

    Each variable is drawn from its CPT given the values already drawn
    for its parents.

    Raises
    ------
    MissingDistributionError
        If a variable has no CPT or no entry for the sampled parents.
    """
    assignment: Dict[str, Any] = {}
    for variable in order:
        parents = network.parents_of(variable)
        dist = _cpt_of(variable).distribution_for(_instantiation(parents, assignment))
        assignment[variable.name] = dist.sample(rng)
    return Observation(assignment)


def _candidate_values(variable: RandomVariable) -> List[Hashable]:
    values = variable.values
    if values:
        return values
    # No declared domain: fall back to every value the CPT mentions.
    seen: List[Hashable] = []
    for _, dist in _cpt_of(variable).items():
        for value in dist.values:
            if value not in seen:
                seen.append(value)
    return seen


def gibbs_sample(
    network: BayesianNetwork,
    order: Sequence[RandomVariable],
    previous: Mapping[str, Any],
    evidence: Mapping[str, Any],
    rng: np.random.Generator,
) -> Observation:
    """One systematic-scan Gibbs transition.

    Evidence values are laid over *previous*; then every variable not
    fixed by evidence is resampled, in *order*, from its full
    conditional

        P(x | parents(x)) * prod over children c of P(c | parents(c))

    using the current values of all other variables.  Updated values are
    used immediately by later variables in the same sweep.

    Raises
    ------
    SamplingError
        If every candidate value of a variable has zero weight, which
        means the evidence is impossible under the current CPTs.
    """
    state: Dict[str, Any] = dict(previous)
    state.update(evidence)

    for variable in order:
        if variable.name in evidence:
            continue
        cpt = _cpt_of(variable)
        parents = network.parents_of(variable)
        own_key = _instantiation(parents, state)
        children = [
            (child, _cpt_of(child), network.parents_of(child))
            for child in network.children_of(variable)
        ]

        candidates = _candidate_values(variable)
        weights = np.empty(len(candidates), dtype=np.float64)
        for i, value in enumerate(candidates):
            weight = cpt.mass(own_key, value)
            if weight > 0:
                state[variable.name] = value
                for child, child_cpt, child_parents in children:
                    weight *= child_cpt.mass(
                        _instantiation(child_parents, state), state[child.name]
                    )
                    if weight == 0:
                        break
            weights[i] = weight

        total = weights.sum()
        if total <= 0:
            raise SamplingError(
                f"No value of '{variable.name}' has non-zero probability "
                f"given its Markov blanket"
            )
        choice = int(rng.choice(len(candidates), p=weights / total))
        state[variable.name] = candidates[choice]

    return Observation(state)


def likelihood_weighted_sample(
    network: BayesianNetwork,
    order: Sequence[RandomVariable],
    evidence: Mapping[str, Any],
    rng: np.random.Generator,
) -> Tuple[Observation, float]:
    """Draw one likelihood-weighted particle.

    Non-evidence variables are drawn from their CPT given the sampled
    parents.  Evidence variables keep their evidence value and multiply
    the importance weight by its CPT mass.  A sampled parent
    instantiation with no CPT entry has probability 0, so sampling stops
    there with weight 0 and the particle is left incomplete.

    Returns
    -------
    tuple of (Observation, float)
        The particle and its importance weight (possibly 0).
    """
    assignment: Dict[str, Any] = {}
    weight = 1.0
    for variable in order:
        cpt = _cpt_of(variable)
        key = _instantiation(network.parents_of(variable), assignment)
        observed = evidence.get(variable.name, MISSING)
        if observed is not MISSING:
            assignment[variable.name] = observed
            weight *= cpt.mass(key, observed)
        elif key in cpt:
            assignment[variable.name] = cpt.distribution_for(key).sample(rng)
        else:
            weight = 0.0
        if weight == 0:
            return Observation(assignment), 0.0
    return Observation(assignment), weight


def initial_particle(
    network: BayesianNetwork,
    order: Sequence[RandomVariable],
    evidence: Mapping[str, Any],
    rng: np.random.Generator,
    max_attempts: int = 1000,
) -> Observation:
    """Draw a complete particle with non-zero probability under *evidence*.

    Likelihood-weighted particles are drawn until one has positive
    weight, so every CPT lookup the particle implies exists and the
    evidence is respected.  Used to start a Gibbs chain.

    Raises
    ------
    SamplingError
        If no particle with positive weight turns up in *max_attempts*
        draws.
    """
    for _ in range(max_attempts):
        particle, weight = likelihood_weighted_sample(network, order, evidence, rng)
        if weight > 0:
            return particle
    raise SamplingError(
        f"No particle with non-zero probability after {max_attempts} attempts; "
        f"the evidence may be impossible"
    )
