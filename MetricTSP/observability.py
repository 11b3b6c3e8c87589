from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from MetricTSP.logs import logger as package_logger


@dataclass(frozen=True)
class Event:
    name: str
    fields: Dict[str, Any] = field(default_factory=dict)


class EventSink:
    """Receiver for structured trace events emitted while solving.

    A sink is handed to ``TSPEngine.solve`` (and from there to the solver) so
    that nothing in the engine writes to process-wide state on its own.
    """

    def emit(self, event: str, **fields: Any) -> None:
        raise NotImplementedError


class NullSink(EventSink):
    def emit(self, event: str, **fields: Any) -> None:
        return None


class LoggingSink(EventSink):
    """Forward events to a stdlib logger, one line per event."""

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.DEBUG):
        self.logger = logger if logger is not None else package_logger
        self.level = level

    def emit(self, event: str, **fields: Any) -> None:
        if not self.logger.isEnabledFor(self.level):
            return
        details = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        self.logger.log(self.level, "%s %s", event, details)


class RecordingSink(EventSink):
    """Keep every event in memory; handy for tests and notebooks."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def emit(self, event: str, **fields: Any) -> None:
        self.events.append(Event(name=event, fields=dict(fields)))

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def find(self, name: str) -> List[Event]:
        return [event for event in self.events if event.name == name]


def resolve_sink(sink: EventSink | None) -> EventSink:
    return sink if sink is not None else LoggingSink()


__all__ = ["Event", "EventSink", "LoggingSink", "NullSink", "RecordingSink", "resolve_sink"]
