"""Discrete probability distributions over opaque values."""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np
from scipy import stats


class DiscreteDistribution:
    """Mapping from discrete values to probability mass.

    Values are arbitrary hashable tokens compared by equality.  Masses
    are non-negative floats; once a distribution is finalized (for
    instance with :meth:`normalize`) they sum to 1 within floating
    tolerance.

    Parameters
    ----------
    masses : mapping, optional
        Initial value -> mass entries.

    Examples
    --------
    >>> d = DiscreteDistribution({"rain": 0.2, "dry": 0.8})
    >>> d.mass("rain")
    0.2
    >>> d.mass("snow")
    0.0
    """

    def __init__(self, masses: Optional[Mapping[Hashable, float]] = None) -> None:
        self._masses: Dict[Hashable, float] = {}
        for value, mass in (masses or {}).items():
            self.set_mass(value, mass)

    # ------------------------------------------------------------------ #
    #  Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_counts(cls, counts: Mapping[Hashable, float]) -> DiscreteDistribution:
        """Build a normalized distribution from occurrence counts.

        Raises
        ------
        ValueError
            If the counts are empty or sum to zero.
        """
        total = float(sum(counts.values()))
        if total <= 0:
            raise ValueError("Cannot build a distribution from zero counts")
        return cls({value: count / total for value, count in counts.items()})

    @classmethod
    def uniform(cls, values: Iterable[Hashable]) -> DiscreteDistribution:
        """Return the uniform distribution over *values*."""
        values = list(values)
        if not values:
            raise ValueError("Cannot build a uniform distribution over no values")
        return cls({v: 1.0 / len(values) for v in values})

    # ------------------------------------------------------------------ #
    #  Mass access
    # ------------------------------------------------------------------ #

    def set_mass(self, value: Hashable, mass: float) -> None:
        """Set (overwrite) the mass of *value*."""
        mass = float(mass)
        if mass < 0 or not np.isfinite(mass):
            raise ValueError(f"Mass must be a non-negative finite number, got {mass}")
        self._masses[value] = mass

    def mass(self, value: Hashable) -> float:
        """Return the mass of *value*, or 0.0 if it is absent."""
        return self._masses.get(value, 0.0)

    @property
    def values(self) -> List[Hashable]:
        """Values carrying an entry, in insertion order."""
        return list(self._masses)

    @property
    def total(self) -> float:
        """Sum of all masses."""
        return float(sum(self._masses.values()))

    def items(self) -> Iterator[Tuple[Hashable, float]]:
        return iter(self._masses.items())

    def as_dict(self) -> Dict[Hashable, float]:
        return dict(self._masses)

    def is_normalized(self, tol: float = 1e-6) -> bool:
        """Return True if the masses sum to 1 within *tol*."""
        return abs(self.total - 1.0) <= tol

    def normalize(self) -> DiscreteDistribution:
        """Rescale masses in place so they sum to 1 and return self."""
        total = self.total
        if total <= 0:
            raise ValueError("Cannot normalize a distribution with zero total mass")
        for value in self._masses:
            self._masses[value] /= total
        return self

    # ------------------------------------------------------------------ #
    #  Statistics
    # ------------------------------------------------------------------ #

    def sample(self, rng: np.random.Generator) -> Any:
        """Draw one value with probability proportional to its mass.

        Parameters
        ----------
        rng : numpy.random.Generator
            Source of randomness.

        Raises
        ------
        ValueError
            If the distribution has no positive mass.
        """
        values = list(self._masses)
        weights = np.fromiter(self._masses.values(), dtype=np.float64, count=len(values))
        total = weights.sum()
        if total <= 0:
            raise ValueError("Cannot sample from a distribution with zero total mass")
        idx = rng.choice(len(values), p=weights / total)
        return values[int(idx)]

    def mode(self) -> Any:
        """Return the value with the largest mass (first one on ties)."""
        if not self._masses:
            raise ValueError("Empty distribution has no mode")
        return max(self._masses, key=self._masses.__getitem__)

    def entropy(self, base: Optional[float] = None) -> float:
        """Shannon entropy of the (normalized) distribution."""
        if not self._masses:
            return 0.0
        return float(stats.entropy(list(self._masses.values()), base=base))

    # ------------------------------------------------------------------ #
    #  Dunder helpers
    # ------------------------------------------------------------------ #

    def __contains__(self, value: object) -> bool:
        return value in self._masses

    def __len__(self) -> int:
        return len(self._masses)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscreteDistribution):
            return NotImplemented
        return self._masses == other._masses

    def __repr__(self) -> str:
        body = ", ".join(f"{v!r}: {m:.4g}" for v, m in self._masses.items())
        return f"DiscreteDistribution({{{body}}})"
