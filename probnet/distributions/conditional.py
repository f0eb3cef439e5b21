"""Conditional probability tables.

A :class:`ConditionalProbabilityTable` maps a *parent instantiation*
(the tuple of parent values, in the variable's parent order) to a
:class:`~probnet.distributions.discrete.DiscreteDistribution` over the
variable's own values.  Root variables use the empty tuple.

Example
-------
>>> from probnet.distributions.discrete import DiscreteDistribution
>>> from probnet.distributions.conditional import ConditionalProbabilityTable
>>>
>>> cpt = ConditionalProbabilityTable()
>>> cpt.set_conditional_distribution(("a0",), DiscreteDistribution({"b0": 0.9, "b1": 0.1}))
>>> cpt.mass(("a0",), "b1")
0.1
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterator, List, Sequence, Tuple

from probnet.core.errors import MissingDistributionError
from probnet.distributions.discrete import DiscreteDistribution

Instantiation = Tuple[Hashable, ...]


class ConditionalProbabilityTable:
    """Parent instantiation -> distribution mapping for one variable."""

    def __init__(self) -> None:
        self._table: Dict[Instantiation, DiscreteDistribution] = {}

    def set_conditional_distribution(
        self,
        instantiation: Sequence[Hashable],
        distribution: DiscreteDistribution,
    ) -> None:
        """Associate *distribution* with *instantiation*, replacing any entry."""
        if not isinstance(distribution, DiscreteDistribution):
            raise TypeError(
                f"distribution must be a DiscreteDistribution, got "
                f"{type(distribution).__name__}"
            )
        self._table[tuple(instantiation)] = distribution

    def distribution_for(self, instantiation: Sequence[Hashable]) -> DiscreteDistribution:
        """Return the distribution for *instantiation*.

        Raises
        ------
        MissingDistributionError
            If no distribution was set for *instantiation*.
        """
        key = tuple(instantiation)
        try:
            return self._table[key]
        except KeyError:
            raise MissingDistributionError(
                f"No distribution for parent instantiation {key!r}"
            ) from None

    def mass(self, instantiation: Sequence[Hashable], value: Any) -> float:
        """Return P(value | instantiation), 0.0 when either is unknown."""
        dist = self._table.get(tuple(instantiation))
        if dist is None:
            return 0.0
        return dist.mass(value)

    @property
    def instantiations(self) -> List[Instantiation]:
        return list(self._table)

    def items(self) -> Iterator[Tuple[Instantiation, DiscreteDistribution]]:
        return iter(self._table.items())

    def __contains__(self, instantiation: object) -> bool:
        if not isinstance(instantiation, (tuple, list)):
            return False
        return tuple(instantiation) in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"ConditionalProbabilityTable(instantiations={len(self._table)})"
