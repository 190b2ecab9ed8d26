from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from loguru import logger


class DiagnosticKind(str, Enum):
    TIMEOUT = "timeout"
    TRANSPORT_FAILURE = "transport_failure"
    API_ERROR = "api_error"
    FALLBACK = "fallback"
    REPORT_FAILED = "report_failed"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: DiagnosticKind
    operation: str
    message: str
    status_code: int | None = None
    error: BaseException | None = None


DiagnosticSubscriber = Callable[[DiagnosticEvent], None]

_LEVELS = {
    DiagnosticKind.TIMEOUT: "WARNING",
    DiagnosticKind.TRANSPORT_FAILURE: "WARNING",
    DiagnosticKind.API_ERROR: "WARNING",
    DiagnosticKind.FALLBACK: "DEBUG",
    DiagnosticKind.REPORT_FAILED: "ERROR",
}


class DiagnosticChannel:
    """Fan-out of failure-path events to host subscribers.

    Every event is also written to the log. Subscribers run synchronously in
    registration order; one that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._subscribers: list[DiagnosticSubscriber] = []

    def subscribe(self, callback: DiagnosticSubscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def emit(self, event: DiagnosticEvent) -> None:
        logger.log(_LEVELS[event.kind], f"CrowdHandler {event.operation} {event.kind.value}: {event.message}")
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as ex:
                logger.error(f"Diagnostic subscriber failed: {ex}")
