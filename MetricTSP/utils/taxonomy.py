from __future__ import annotations

from enum import Enum


class AlgorithmFamily(str, Enum):
    EXACT = "exact"
    APPROXIMATION = "approximation"


class Strategy(str, Enum):
    EXACT = "exact"
    CHRISTOFIDES = "christofides"
    DOUBLE_TREE = "double_tree"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: "Strategy | str") -> "Strategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise KeyError(f"Unknown strategy: {value}") from None


__all__ = ["AlgorithmFamily", "Strategy"]
