"""Core value types for ProbNet."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional


class _Missing:
    """Sentinel for "no value present" in an :class:`Observation`."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


class Observation(Mapping):
    """Immutable mapping from variable name to an observed value.

    An observation may be partial (evidence, a training row with gaps)
    or total (a particle covering every variable of a network).

    Parameters
    ----------
    values : mapping, optional
        Variable name to value.  Entries whose value is ``None`` or
        :data:`MISSING` are treated as not present.

    Examples
    --------
    >>> obs = Observation({"A": "a1"})
    >>> obs.value_for("A")
    'a1'
    >>> obs.value_for("B")
    MISSING
    """

    __slots__ = ("_values", "_hash")

    def __init__(self, values: Optional[Mapping] = None, **kwargs: Any) -> None:
        merged: Dict[str, Any] = {}
        for source in (values or {}, kwargs):
            for name, value in source.items():
                if value is None or value is MISSING:
                    continue
                merged[name] = value
        self._values = merged
        self._hash: Optional[int] = None

    def value_for(self, name: str) -> Any:
        """Return the value observed for *name*, or :data:`MISSING`."""
        return self._values.get(name, MISSING)

    def has_value(self, name: str) -> bool:
        """Return True if *name* has an observed value."""
        return name in self._values

    def with_values(self, values: Optional[Mapping] = None, **kwargs: Any) -> Observation:
        """Return a copy with *values* added or overwritten."""
        merged = dict(self._values)
        merged.update(values or {})
        merged.update(kwargs)
        return Observation(merged)

    def merged(self, other: Mapping) -> Observation:
        """Return a copy where the entries of *other* take precedence."""
        return self.with_values(other)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._values.items()))
        return self._hash

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Observation):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Observation({self._values!r})"
