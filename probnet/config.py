"""Engine configuration.

Defaults for warm-up, refinement batch size, structure generation and
learning, optionally loaded from a YAML file::

    probnet:
      warmup_size: 200
      refine_steps: 50
      seed: 7
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

import yaml


@dataclass(frozen=True)
class EngineConfig:
    """Tunable defaults for learning and inference.

    Parameters
    ----------
    warmup_size : int
        Particles treated as burn-in by an inference query.
    refine_steps : int
        Particles generated per refinement batch.  Smaller batches let
        a host cancel sooner.
    parent_limit : int
        Upper bound of the parent count drawn by random structure
        generation.
    seed : int, optional
        Seed for structure generation and sampling.
    min_count : int
        Minimum rows behind a learned conditional distribution.
    """

    warmup_size: int = 100
    refine_steps: int = 100
    parent_limit: int = 3
    seed: Optional[int] = 0
    min_count: int = 1

    def __post_init__(self) -> None:
        for name in ("warmup_size", "parent_limit"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        for name in ("refine_steps", "min_count"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError(f"seed must be an integer or None, got {self.seed!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**dict(data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_CONFIG = EngineConfig()


def load_config(path: "str | os.PathLike[str]") -> EngineConfig:
    """Load an :class:`EngineConfig` from a YAML file.

    The settings may sit at the top level or under a ``probnet`` key.
    An empty file yields the defaults.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file is not a mapping or holds invalid settings.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Corrupted config file: {exc}") from exc

    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping")
    if "probnet" in data:
        data = data["probnet"] or {}
        if not isinstance(data, dict):
            raise ValueError("'probnet' section must be a mapping")
    return EngineConfig.from_dict(data)
