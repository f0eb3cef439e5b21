"""Tests for probnet.distributions.conditional."""

import pytest

from probnet.core.errors import MissingDistributionError
from probnet.distributions.conditional import ConditionalProbabilityTable
from probnet.distributions.discrete import DiscreteDistribution


def _cpt():
    cpt = ConditionalProbabilityTable()
    cpt.set_conditional_distribution(("a0",), DiscreteDistribution({"b0": 0.9, "b1": 0.1}))
    cpt.set_conditional_distribution(("a1",), DiscreteDistribution({"b0": 0.3, "b1": 0.7}))
    return cpt


class TestConditionalProbabilityTable:
    def test_distribution_for(self):
        cpt = _cpt()
        assert cpt.distribution_for(("a1",)).mass("b1") == pytest.approx(0.7)

    def test_list_instantiation_is_accepted(self):
        cpt = _cpt()
        assert cpt.distribution_for(["a0"]).mass("b0") == pytest.approx(0.9)

    def test_missing_instantiation_raises(self):
        cpt = _cpt()
        with pytest.raises(MissingDistributionError, match="a2"):
            cpt.distribution_for(("a2",))

    def test_missing_is_also_key_error(self):
        with pytest.raises(KeyError):
            _cpt().distribution_for(("a2",))

    def test_mass_defaults_to_zero(self):
        cpt = _cpt()
        assert cpt.mass(("a2",), "b0") == 0.0
        assert cpt.mass(("a0",), "b9") == 0.0

    def test_root_uses_empty_tuple(self):
        cpt = ConditionalProbabilityTable()
        cpt.set_conditional_distribution((), DiscreteDistribution({"x": 1.0}))
        assert () in cpt
        assert cpt.mass((), "x") == 1.0

    def test_replace_entry(self):
        cpt = _cpt()
        cpt.set_conditional_distribution(("a0",), DiscreteDistribution({"b0": 1.0}))
        assert len(cpt) == 2
        assert cpt.mass(("a0",), "b1") == 0.0

    def test_set_non_distribution_raises(self):
        with pytest.raises(TypeError):
            ConditionalProbabilityTable().set_conditional_distribution((), {"x": 1.0})

    def test_instantiations(self):
        assert _cpt().instantiations == [("a0",), ("a1",)]

    def test_contains_non_tuple(self):
        assert "a0" not in _cpt()
