"""Tests for probnet/networks/graph.py."""

from __future__ import annotations

import numpy as np
import pytest

from probnet.networks.dag import BayesianNetwork, StructureMode
from probnet.networks.graph import attach_random_cpts, build_chain, build_tree
from probnet.networks.variable import RandomVariable


class TestBuilders:
    """Tests for the synthetic network builders."""

    def test_chain_structure(self) -> None:
        bn = build_chain(4, seed=0)
        assert bn.edges == [("X0", "X1"), ("X1", "X2"), ("X2", "X3")]
        assert bn.variable("X0").values == ["s0", "s1"]

    def test_tree_structure(self) -> None:
        bn = build_tree(5, num_states=3, seed=0)
        assert set(bn.edges) == {("X0", "X1"), ("X0", "X2"), ("X1", "X3"), ("X1", "X4")}
        assert bn.variable("X4").num_values == 3

    def test_builders_attach_normalized_cpts(self) -> None:
        bn = build_tree(7, num_states=3, seed=1)
        for variable in bn:
            expected = 3 ** len(bn.parents_of(variable))
            assert len(variable.cpt) == expected
            for _, dist in variable.cpt.items():
                assert dist.is_normalized()

    def test_seed_reproducible(self) -> None:
        first = build_chain(3, seed=9)
        second = build_chain(3, seed=9)
        for name in ("X0", "X1", "X2"):
            for inst, dist in first.variable(name).cpt.items():
                assert second.variable(name).cpt.distribution_for(inst) == dist

    @pytest.mark.parametrize("nodes, states", [(0, 2), (3, 0)])
    def test_invalid_sizes(self, nodes: int, states: int) -> None:
        with pytest.raises(ValueError):
            build_chain(nodes, num_states=states)


class TestAttachRandomCpts:
    """Tests for attach_random_cpts on generated structures."""

    def test_generated_structure(self) -> None:
        bn = BayesianNetwork()
        for i in range(8):
            bn.add_variable(RandomVariable(f"V{i}", ["lo", "mid", "hi"]))
        bn.generate_structure(StructureMode.RANDOM, seed=11, parent_limit=2)
        attach_random_cpts(bn, np.random.default_rng(0))
        for variable in bn:
            assert len(variable.cpt) == 3 ** len(bn.parents_of(variable))

    def test_empty_domain_raises(self) -> None:
        bn = BayesianNetwork()
        bn.add_variable(RandomVariable("A"))
        with pytest.raises(ValueError, match="empty domain"):
            attach_random_cpts(bn, np.random.default_rng(0))

    def test_invalid_concentration(self) -> None:
        with pytest.raises(ValueError, match="concentration"):
            attach_random_cpts(BayesianNetwork(), np.random.default_rng(0), 0.0)
