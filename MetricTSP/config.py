from __future__ import annotations

import json
import numbers
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from MetricTSP.solvers.exact import DEFAULT_MAX_VERTICES
from MetricTSP.utils.taxonomy import Strategy


@dataclass(frozen=True)
class EngineConfig:
    """Settings the engine reads on every ``solve`` call.

    ``exact_threshold`` bounds the Held-Karp solver and is also the cut-off
    used by the ``auto`` strategy (exact strictly below it).
    """

    strategy: Strategy = Strategy.AUTO
    exact_threshold: int = DEFAULT_MAX_VERTICES
    verify_metric: bool = False
    metric_tolerance: float = 1e-9
    time_limit: float | None = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "strategy", Strategy.parse(self.strategy))
        except KeyError as exc:
            raise ValueError(str(exc.args[0])) from None
        if isinstance(self.exact_threshold, bool) or not isinstance(self.exact_threshold, numbers.Integral):
            raise ValueError(f"exact_threshold must be an integer, got {self.exact_threshold!r}")
        if self.exact_threshold < 1:
            raise ValueError("exact_threshold must be at least 1")
        object.__setattr__(self, "exact_threshold", int(self.exact_threshold))
        if not isinstance(self.verify_metric, bool):
            raise ValueError(f"verify_metric must be a boolean, got {self.verify_metric!r}")
        if float(self.metric_tolerance) < 0:
            raise ValueError("metric_tolerance must be nonnegative")
        if self.time_limit is not None and float(self.time_limit) <= 0:
            raise ValueError("time_limit must be positive when given")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(values))

    @classmethod
    def from_json(cls, path: str | Path) -> "EngineConfig":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {path} must hold a JSON object")
        return cls.from_mapping(data)


__all__ = ["EngineConfig"]
