"""Observation streams."""

from probnet.data.observations import (
    CsvObservationSet,
    InMemoryObservationSet,
    ObservationSet,
)

__all__ = ["ObservationSet", "InMemoryObservationSet", "CsvObservationSet"]
