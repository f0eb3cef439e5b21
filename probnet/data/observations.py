"""Observation streams.

An :class:`ObservationSet` is a single forward cursor over
:class:`~probnet.core.types.Observation` rows with an explicit
:meth:`~ObservationSet.reset`.  Learning rewinds the stream once per
variable, so implementations must support any number of
reset-then-drain cycles.  End of stream is signalled by ``next()``
returning ``None``.
"""

from __future__ import annotations

import csv
import os
from abc import ABC, abstractmethod
from typing import IO, Iterable, Iterator, List, Mapping, Optional, Sequence

from probnet.core.types import Observation


class ObservationSet(ABC):
    """Abstract forward-only stream of observations."""

    @property
    def size(self) -> Optional[int]:
        """Number of observations, or None if unknown."""
        return None

    @abstractmethod
    def next(self) -> Optional[Observation]:
        """Return the next observation and advance, or None at the end."""

    @abstractmethod
    def reset(self) -> None:
        """Rewind to the first observation."""

    def __iter__(self) -> Iterator[Observation]:
        """Rewind, then yield every observation."""
        self.reset()
        while True:
            obs = self.next()
            if obs is None:
                return
            yield obs


class InMemoryObservationSet(ObservationSet):
    """Observation stream over an in-memory sequence of rows.

    Parameters
    ----------
    rows : iterable of mapping
        Each row maps variable names to values; ``None`` marks a gap.
    """

    def __init__(self, rows: Iterable[Mapping]) -> None:
        self._rows: List[Observation] = [
            row if isinstance(row, Observation) else Observation(row)
            for row in rows
        ]
        self._position = 0

    @property
    def size(self) -> int:
        return len(self._rows)

    def next(self) -> Optional[Observation]:
        if self._position >= len(self._rows):
            return None
        obs = self._rows[self._position]
        self._position += 1
        return obs

    def reset(self) -> None:
        self._position = 0

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"InMemoryObservationSet(size={len(self._rows)})"


class CsvObservationSet(ObservationSet):
    """Observation stream read lazily from a CSV file.

    The header row names the variables; every later row is one
    observation with string values.  Cells listed in *missing* are
    treated as not observed.

    The file stays open between resets.  Use the set as a context
    manager, or call :meth:`close`; it is also closed when the object is
    garbage collected.

    Parameters
    ----------
    path : str or os.PathLike
        Path to the CSV file.
    missing : sequence of str
        Cell contents that mark a missing value.
    delimiter : str
        Field delimiter.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file has no header row.
    """

    def __init__(
        self,
        path: "str | os.PathLike[str]",
        missing: Sequence[str] = ("", "?"),
        delimiter: str = ",",
    ) -> None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Observation file not found: {path}")
        self._path = path
        self._missing = frozenset(missing)
        self._delimiter = delimiter
        self._size: Optional[int] = None
        self._file: Optional[IO[str]] = None
        self._reader: Optional[Iterator[List[str]]] = None
        self._header: List[str] = []
        self.reset()

    @property
    def columns(self) -> List[str]:
        return list(self._header)

    @property
    def size(self) -> Optional[int]:
        """Row count, known once the file has been read to the end."""
        return self._size

    def reset(self) -> None:
        if self._file is None:
            self._file = open(self._path, newline="", encoding="utf-8")
        self._file.seek(0)
        self._reader = csv.reader(self._file, delimiter=self._delimiter)
        header = next(self._reader, None)
        if header is None:
            self.close()
            raise ValueError(f"Observation file has no header row: {self._path}")
        self._header = [h.strip() for h in header]
        self._count = 0

    def next(self) -> Optional[Observation]:
        if self._reader is None:
            raise ValueError("Observation set is closed; call reset() to reopen it")
        for row in self._reader:
            if not any(cell.strip() for cell in row):
                continue
            self._count += 1
            values = {
                name: cell.strip()
                for name, cell in zip(self._header, row)
                if cell.strip() not in self._missing
            }
            return Observation(values)
        self._size = self._count
        return None

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._reader = None

    def __enter__(self) -> CsvObservationSet:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __del__(self) -> None:
        # __init__ may have failed before the handle attribute existed.
        if getattr(self, "_file", None) is not None:
            self.close()

    def __repr__(self) -> str:
        return f"CsvObservationSet(path={str(self._path)!r}, columns={self._header})"
