from dataclasses import dataclass, field
import logging
from typing import Protocol


@dataclass(frozen=True)
class DiagnosticEvent:
    level: int
    message: str
    row_number: int | None = None
    raw_row: tuple[str, ...] | None = None
    context: dict[str, object] = field(default_factory=dict)


class DiagnosticSink(Protocol):
    def emit(self, event: DiagnosticEvent) -> None: ...


class LoggingSink:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def emit(self, event: DiagnosticEvent) -> None:
        extra: dict[str, object] = dict(event.context)
        if event.row_number is not None:
            extra["row_number"] = event.row_number
        if event.raw_row is not None:
            extra["raw_row"] = event.raw_row
        self.logger.log(event.level, event.message, extra=extra)


class CollectingSink:
    def __init__(self) -> None:
        self.events: list[DiagnosticEvent] = []

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def at_level(self, level: int) -> list[DiagnosticEvent]:
        return [event for event in self.events if event.level == level]
