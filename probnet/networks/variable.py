"""Discrete random variables."""

from __future__ import annotations

from typing import Hashable, Iterable, List, Optional

from probnet.distributions.conditional import ConditionalProbabilityTable


class RandomVariable:
    """A discrete random variable with a finite value domain.

    Identity is the variable's *name*: two variables with the same name
    compare equal and hash alike regardless of their domain or CPT.
    Parent edges are owned by the :class:`~probnet.networks.dag.BayesianNetwork`
    the variable belongs to.

    Parameters
    ----------
    name : str
        Unique identifier of the variable.
    values : iterable, optional
        The finite value domain.  Values seen during learning that are
        not yet declared are appended.  ``None`` cannot be a value,
        because an :class:`~probnet.core.types.Observation` reads
        ``None`` as "not observed".
    cpt : ConditionalProbabilityTable, optional
        Conditional probability table, usually attached by learning.
    """

    def __init__(
        self,
        name: str,
        values: Optional[Iterable[Hashable]] = None,
        cpt: Optional[ConditionalProbabilityTable] = None,
    ) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("Variable name must be a non-empty string")
        self._name = name
        self._values: List[Hashable] = []
        for value in values or []:
            self.add_value(value)
        self.cpt = cpt

    @property
    def name(self) -> str:
        return self._name

    @property
    def values(self) -> List[Hashable]:
        """The value domain, in declaration order."""
        return list(self._values)

    @property
    def num_values(self) -> int:
        return len(self._values)

    def add_value(self, value: Hashable) -> None:
        """Append *value* to the domain unless already present."""
        if value is None:
            raise ValueError(
                f"None cannot be a value of '{self._name}'; it marks a missing observation"
            )
        if value not in self._values:
            self._values.append(value)

    @property
    def has_cpt(self) -> bool:
        return self.cpt is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RandomVariable):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"RandomVariable(name={self._name!r}, values={self._values!r})"
