"""Posterior inference by Gibbs sampling.

An :class:`InferenceQuery` ties a
:class:`~probnet.networks.dag.BayesianNetwork` to an evidence
:class:`~probnet.core.types.Observation` and refines per-variable
posterior estimates in fixed-size batches.  The chain is seeded with
one particle drawn to be consistent with the CPTs and the evidence; the first ``warmup_size`` particles are the
warm-up period, after which :attr:`InferenceQuery.refinement_count`
becomes positive and the posteriors are meaningful.

Example
-------
>>> from probnet.networks.graph import build_chain
>>> from probnet.inference.query import InferenceQuery
>>>
>>> network = build_chain(3, seed=0)
>>> query = InferenceQuery(network, {"X2": "s1"}, seed=1)
>>> query.refine_results(500)
>>> query.posterior("X0")
DiscreteDistribution({...})

Calls are synchronous and not thread-safe.  A host that refines on a
worker thread should check its own cancellation flag between
:meth:`InferenceQuery.refine_results` calls; *steps* bounds how long
each call takes.
"""

from __future__ import annotations

import enum
import logging
from collections import Counter, defaultdict
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

import numpy as np

from probnet.config import DEFAULT_CONFIG, EngineConfig
from probnet.core.types import Observation
from probnet.distributions.discrete import DiscreteDistribution
from probnet.inference.sampling import (
    gibbs_sample,
    initial_particle,
    likelihood_weighted_sample,
)

if TYPE_CHECKING:
    from probnet.networks.dag import BayesianNetwork

logger = logging.getLogger(__name__)


class QueryState(enum.Enum):
    """Lifecycle of an :class:`InferenceQuery`.

    Members
    -------
    EMPTY
        No particles generated yet.
    WARMING
        At most ``warmup_size`` particles; estimates are not trusted.
    CONVERGING
        Past the warm-up period; refinement improves the estimates.
    """

    EMPTY = "empty"
    WARMING = "warming"
    CONVERGING = "converging"


class InferenceQuery:
    """A posterior query against a Bayesian network, and its results.

    Parameters
    ----------
    network : BayesianNetwork
        Target network.  Every variable must have a CPT.  Editing the
        network structure invalidates the query.
    evidence : mapping, optional
        Observed variable values to condition on.
    warmup_size : int
        Number of particles treated as warm-up (burn-in).
    seed : int, optional
        Seed for the query's :class:`numpy.random.Generator`.
    refine_steps : int, optional
        Batch size used by :meth:`refine_results` when called without
        *steps*.  Defaults to ``DEFAULT_CONFIG.refine_steps``.
    """

    def __init__(
        self,
        network: BayesianNetwork,
        evidence: Optional[Mapping[str, Any]] = None,
        warmup_size: int = 100,
        seed: Optional[int] = None,
        refine_steps: Optional[int] = None,
    ) -> None:
        self._network = network
        if isinstance(evidence, Observation):
            self._evidence = evidence
        else:
            self._evidence = Observation(evidence or {})
        for name in self._evidence:
            if name not in network:
                raise ValueError(f"Evidence variable '{name}' not in network")
        self.warmup_size = warmup_size
        if refine_steps is None:
            refine_steps = DEFAULT_CONFIG.refine_steps
        if isinstance(refine_steps, bool) or not isinstance(refine_steps, int) or refine_steps < 1:
            raise ValueError(f"refine_steps must be a positive integer, got {refine_steps!r}")
        self._refine_steps = refine_steps
        self._rng = np.random.default_rng(seed)
        # Oldest first; exposed newest first through ``particles``.
        self._history: List[Observation] = []
        self._posteriors: Dict[str, DiscreteDistribution] = {}

    @classmethod
    def from_config(
        cls,
        network: BayesianNetwork,
        evidence: Optional[Mapping[str, Any]],
        config: EngineConfig,
    ) -> InferenceQuery:
        """Build a query using the warm-up size, seed and batch size of *config*."""
        return cls(
            network,
            evidence,
            warmup_size=config.warmup_size,
            seed=config.seed,
            refine_steps=config.refine_steps,
        )

    # ------------------------------------------------------------------ #
    #  Accessors
    # ------------------------------------------------------------------ #

    @property
    def network(self) -> BayesianNetwork:
        return self._network

    @property
    def evidence(self) -> Observation:
        return self._evidence

    @property
    def warmup_size(self) -> int:
        return self._warmup_size

    @warmup_size.setter
    def warmup_size(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 0:
            raise ValueError(f"warmup_size must be a non-negative integer, got {value!r}")
        self._warmup_size = int(value)

    @property
    def refine_steps(self) -> int:
        return self._refine_steps

    @property
    def particle_count(self) -> int:
        return len(self._history)

    @property
    def particles(self) -> List[Observation]:
        """Particle history, newest first."""
        return self._history[::-1]

    @property
    def refinement_count(self) -> int:
        """Particles past the warm-up period; zero while warming up."""
        n = len(self._history)
        if n <= self._warmup_size:
            return 0
        return n - self._warmup_size

    @property
    def state(self) -> QueryState:
        if not self._history:
            return QueryState.EMPTY
        if len(self._history) <= self._warmup_size:
            return QueryState.WARMING
        return QueryState.CONVERGING

    @property
    def results(self) -> Mapping[str, DiscreteDistribution]:
        """Read-only view of the posterior map (variable name -> distribution)."""
        return MappingProxyType(self._posteriors)

    posteriors = results

    def posterior(self, name: str) -> DiscreteDistribution:
        """Return the current posterior estimate for variable *name*.

        Raises
        ------
        KeyError
            If no estimate exists yet for *name*.
        """
        return self._posteriors[name]

    # ------------------------------------------------------------------ #
    #  Refinement
    # ------------------------------------------------------------------ #

    def window_size(self) -> int:
        """Number of trailing particles used for the posterior estimates."""
        n = len(self._history)
        warmup = self._warmup_size
        if n <= warmup:
            return n
        if n <= 2 * warmup:
            return min(warmup, n - warmup)
        return n - warmup

    def refine_results(self, steps: Optional[int] = None) -> None:
        """Generate *steps* more particles and recompute the posteriors.

        *steps* defaults to :attr:`refine_steps`.  The first call also
        seeds the chain with one positive-probability particle (see
        :func:`~probnet.inference.sampling.initial_particle`), so the
        history grows by ``steps + 1`` on that call.

        Raises
        ------
        ValueError
            If *steps* is negative.
        SamplingError
            If no particle consistent with the evidence can be found.
        """
        if steps is None:
            steps = self._refine_steps
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}")

        order = self._network.get_topological_ordering()

        if not self._history:
            self._history.append(
                initial_particle(self._network, order, self._evidence, self._rng)
            )

        for _ in range(steps):
            particle = gibbs_sample(
                self._network, order, self._history[-1], self._evidence, self._rng,
            )
            self._history.append(particle)

        self._recompute_posteriors(order)
        logger.debug(
            "Refined query: %d particles, window %d, refinement count %d",
            len(self._history), self.window_size(), self.refinement_count,
        )

    def _recompute_posteriors(self, order) -> None:
        window = self.window_size()
        recent = self._history[len(self._history) - window:]
        counts: Dict[str, Counter] = defaultdict(Counter)
        for particle in recent:
            for variable in order:
                counts[variable.name][particle[variable.name]] += 1

        posteriors: Dict[str, DiscreteDistribution] = {}
        for variable in order:
            posterior = DiscreteDistribution()
            for value, count in counts[variable.name].items():
                posterior.set_mass(value, count / window)
            posteriors[variable.name] = posterior
        self._posteriors = posteriors

    # ------------------------------------------------------------------ #
    #  One-shot estimation
    # ------------------------------------------------------------------ #

    def likelihood_weighting(self, num_samples: int) -> Dict[str, DiscreteDistribution]:
        """Estimate posteriors by likelihood weighting, outside the chain.

        Does not touch the particle history or :attr:`results`.

        Raises
        ------
        ValueError
            If *num_samples* is not positive or every particle had zero
            weight.
        """
        if num_samples <= 0:
            raise ValueError(f"num_samples must be positive, got {num_samples}")

        order = self._network.get_topological_ordering()
        weighted: Dict[str, Counter] = defaultdict(Counter)
        total_weight = 0.0
        for _ in range(num_samples):
            particle, weight = likelihood_weighted_sample(
                self._network, order, self._evidence, self._rng,
            )
            if weight == 0:
                continue
            total_weight += weight
            for name, value in particle.items():
                weighted[name][value] += weight

        if total_weight <= 0:
            raise ValueError(
                "Every likelihood-weighted particle had zero weight; "
                "the evidence may be impossible"
            )
        return {
            variable.name: DiscreteDistribution.from_counts(weighted[variable.name])
            for variable in order
        }

    def __repr__(self) -> str:
        return (
            f"InferenceQuery(evidence={dict(self._evidence)!r}, "
            f"particles={len(self._history)}, state={self.state.value})"
        )
