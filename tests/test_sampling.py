"""Tests for probnet/inference/sampling.py.

Covers:
- forward_sample: complete particles, frequencies, reproducibility
- gibbs_sample: evidence clamping, full-conditional correctness
- likelihood_weighted_sample: weights and evidence handling
- initial_particle: chain starts on networks with sparse CPTs
- Errors for missing CPTs and impossible evidence
"""

from __future__ import annotations

import numpy as np
import pytest

from probnet.core.errors import MissingDistributionError, SamplingError
from probnet.core.types import Observation
from probnet.distributions.conditional import ConditionalProbabilityTable
from probnet.distributions.discrete import DiscreteDistribution
from probnet.inference.sampling import (
    forward_sample,
    gibbs_sample,
    initial_particle,
    likelihood_weighted_sample,
)
from probnet.networks.dag import BayesianNetwork
from probnet.networks.variable import RandomVariable


# ------------------------------------------------------------------ #
#  Helpers
# ------------------------------------------------------------------ #

def _two_node() -> BayesianNetwork:
    """A -> B.

    P(A) = [0.4, 0.6]
    P(B|A) = [[0.9, 0.1],   # A=a0
              [0.3, 0.7]]   # A=a1
    """
    a = RandomVariable("A", ["a0", "a1"])
    b = RandomVariable("B", ["b0", "b1"])
    a.cpt = ConditionalProbabilityTable()
    a.cpt.set_conditional_distribution((), DiscreteDistribution({"a0": 0.4, "a1": 0.6}))
    b.cpt = ConditionalProbabilityTable()
    b.cpt.set_conditional_distribution(("a0",), DiscreteDistribution({"b0": 0.9, "b1": 0.1}))
    b.cpt.set_conditional_distribution(("a1",), DiscreteDistribution({"b0": 0.3, "b1": 0.7}))
    bn = BayesianNetwork()
    bn.add_variable(b)
    bn.add_variable(a)
    bn.add_edge(a, b)
    return bn


def _sparse_collider() -> BayesianNetwork:
    """A -> C <- B where C only has entries for (a0, b0) and (a1, b1)."""
    a = RandomVariable("A", ["a0", "a1"])
    b = RandomVariable("B", ["b0", "b1"])
    c = RandomVariable("C", ["c0", "c1"])
    a.cpt = ConditionalProbabilityTable()
    a.cpt.set_conditional_distribution((), DiscreteDistribution({"a0": 0.5, "a1": 0.5}))
    b.cpt = ConditionalProbabilityTable()
    b.cpt.set_conditional_distribution((), DiscreteDistribution({"b0": 0.5, "b1": 0.5}))
    c.cpt = ConditionalProbabilityTable()
    c.cpt.set_conditional_distribution(("a0", "b0"), DiscreteDistribution({"c0": 1.0}))
    c.cpt.set_conditional_distribution(("a1", "b1"), DiscreteDistribution({"c1": 1.0}))
    bn = BayesianNetwork()
    for var in (a, b, c):
        bn.add_variable(var)
    bn.add_edge(a, c)
    bn.add_edge(b, c)
    return bn


def _frequency(particles, name, value) -> float:
    return sum(1 for p in particles if p[name] == value) / len(particles)


# ------------------------------------------------------------------ #
#  Forward sampling
# ------------------------------------------------------------------ #

class TestForwardSample:
    """Tests for ancestral sampling."""

    def test_particle_is_complete(self) -> None:
        bn = _two_node()
        order = bn.get_topological_ordering()
        particle = forward_sample(bn, order, np.random.default_rng(0))
        assert set(particle) == {"A", "B"}
        assert isinstance(particle, Observation)

    def test_frequencies_match_marginals(self) -> None:
        bn = _two_node()
        order = bn.get_topological_ordering()
        rng = np.random.default_rng(1)
        particles = [forward_sample(bn, order, rng) for _ in range(5000)]
        assert _frequency(particles, "A", "a0") == pytest.approx(0.4, abs=0.03)
        assert _frequency(particles, "B", "b0") == pytest.approx(0.54, abs=0.03)

    def test_reproducible(self) -> None:
        bn = _two_node()
        order = bn.get_topological_ordering()
        first = [forward_sample(bn, order, np.random.default_rng(5)) for _ in range(3)]
        second = [forward_sample(bn, order, np.random.default_rng(5)) for _ in range(3)]
        assert first == second

    def test_missing_cpt_raises(self) -> None:
        bn = _two_node()
        bn.variable("A").cpt = None
        with pytest.raises(MissingDistributionError, match="'A'"):
            forward_sample(bn, bn.get_topological_ordering(), np.random.default_rng(0))


# ------------------------------------------------------------------ #
#  Gibbs sampling
# ------------------------------------------------------------------ #

class TestGibbsSample:
    """Tests for one Gibbs transition."""

    def test_evidence_is_clamped(self) -> None:
        bn = _two_node()
        order = bn.get_topological_ordering()
        rng = np.random.default_rng(2)
        particle = Observation(A="a0", B="b0")
        for _ in range(50):
            particle = gibbs_sample(bn, order, particle, {"B": "b1"}, rng)
            assert particle["B"] == "b1"

    def test_posterior_given_child_evidence(self) -> None:
        """P(A=a0 | B=b1) = 0.04 / (0.04 + 0.42)."""
        bn = _two_node()
        order = bn.get_topological_ordering()
        rng = np.random.default_rng(3)
        particle = Observation(A="a1", B="b1")
        particles = []
        for _ in range(5000):
            particle = gibbs_sample(bn, order, particle, {"B": "b1"}, rng)
            particles.append(particle)
        expected = 0.04 / (0.04 + 0.42)
        assert _frequency(particles, "A", "a0") == pytest.approx(expected, abs=0.02)

    def test_deterministic_child_forces_parent(self) -> None:
        bn = _two_node()
        bn.variable("B").cpt.set_conditional_distribution(
            ("a0",), DiscreteDistribution({"b0": 1.0})
        )
        order = bn.get_topological_ordering()
        rng = np.random.default_rng(4)
        particle = Observation(A="a1", B="b1")
        for _ in range(20):
            particle = gibbs_sample(bn, order, particle, {"B": "b1"}, rng)
            assert particle["A"] == "a1"

    def test_previous_particle_is_not_mutated(self) -> None:
        bn = _two_node()
        previous = Observation(A="a0", B="b0")
        gibbs_sample(
            bn, bn.get_topological_ordering(), previous, {}, np.random.default_rng(0),
        )
        assert dict(previous) == {"A": "a0", "B": "b0"}

    def test_impossible_evidence_raises(self) -> None:
        bn = _two_node()
        bn.variable("A").cpt.set_conditional_distribution(
            (), DiscreteDistribution({"a0": 1.0, "a1": 0.0})
        )
        bn.variable("B").cpt.set_conditional_distribution(
            ("a0",), DiscreteDistribution({"b0": 1.0, "b1": 0.0})
        )
        with pytest.raises(SamplingError, match="'A'"):
            gibbs_sample(
                bn,
                bn.get_topological_ordering(),
                Observation(A="a0", B="b0"),
                {"B": "b1"},
                np.random.default_rng(0),
            )


# ------------------------------------------------------------------ #
#  Likelihood weighting
# ------------------------------------------------------------------ #

class TestLikelihoodWeightedSample:
    """Tests for likelihood-weighted sampling."""

    def test_no_evidence_has_unit_weight(self) -> None:
        bn = _two_node()
        _, weight = likelihood_weighted_sample(
            bn, bn.get_topological_ordering(), {}, np.random.default_rng(0),
        )
        assert weight == 1.0

    def test_evidence_weight_is_cpt_mass(self) -> None:
        bn = _two_node()
        order = bn.get_topological_ordering()
        rng = np.random.default_rng(6)
        for _ in range(20):
            particle, weight = likelihood_weighted_sample(bn, order, {"B": "b1"}, rng)
            assert particle["B"] == "b1"
            expected = 0.1 if particle["A"] == "a0" else 0.7
            assert weight == pytest.approx(expected)

    def test_root_evidence(self) -> None:
        bn = _two_node()
        particle, weight = likelihood_weighted_sample(
            bn, bn.get_topological_ordering(), {"A": "a1"}, np.random.default_rng(0),
        )
        assert particle["A"] == "a1"
        assert weight == pytest.approx(0.6)

    def test_unseen_parent_instantiation_has_zero_weight(self) -> None:
        bn = _sparse_collider()
        order = bn.get_topological_ordering()
        rng = np.random.default_rng(0)
        weights = [likelihood_weighted_sample(bn, order, {}, rng)[1] for _ in range(50)]
        assert 0.0 in weights
        assert 1.0 in weights
        assert set(weights) == {0.0, 1.0}


# ------------------------------------------------------------------ #
#  Chain start
# ------------------------------------------------------------------ #

class TestInitialParticle:
    """Tests for the particle that starts a Gibbs chain."""

    @pytest.mark.parametrize("seed", range(20))
    def test_sparse_cpt_gives_consistent_particle(self, seed) -> None:
        bn = _sparse_collider()
        particle = initial_particle(
            bn, bn.get_topological_ordering(), {}, np.random.default_rng(seed),
        )
        assert set(particle) == {"A", "B", "C"}
        key = (particle["A"], particle["B"])
        assert key in bn.variable("C").cpt

    def test_evidence_is_respected(self) -> None:
        bn = _sparse_collider()
        particle = initial_particle(
            bn, bn.get_topological_ordering(), {"C": "c1"}, np.random.default_rng(1),
        )
        assert dict(particle) == {"A": "a1", "B": "b1", "C": "c1"}

    def test_impossible_evidence_raises(self) -> None:
        bn = _sparse_collider()
        with pytest.raises(SamplingError, match="non-zero probability"):
            initial_particle(
                bn,
                bn.get_topological_ordering(),
                {"A": "a0", "C": "c1"},
                np.random.default_rng(0),
                max_attempts=25,
            )
