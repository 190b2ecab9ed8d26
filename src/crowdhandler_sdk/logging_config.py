"""Opt-in log output for the SDK.

The package logger is disabled on import. A host that already configures
loguru only needs ``enable_logging()``; its own sinks then receive the SDK's
records. ``setup_logging`` additionally attaches sinks that carry nothing but
``crowdhandler_sdk`` records, and only ever removes sinks it attached itself.
"""

import sys
from typing import Any, Protocol, TextIO, runtime_checkable

from loguru import logger

PACKAGE_LOGGER = "crowdhandler_sdk"

_CONSOLE_FORMAT = "<level>{level:<8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"

_attached_sink_ids: list[int] = []


@runtime_checkable
class LogSink(Protocol):
    def attach(self, level: str) -> int:
        """Add the sink to loguru and return its handler id."""
        ...

    def describe(self, level: str) -> str: ...


class ConsoleLogSink:
    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    def attach(self, level: str) -> int:
        return logger.add(
            self._stream or sys.stderr,
            level=level,
            filter=PACKAGE_LOGGER,
            format=_CONSOLE_FORMAT,
        )

    def describe(self, level: str) -> str:
        return f"console (stderr, {level})"


class FileLogSink:
    def __init__(self, path: str = "crowdhandler.log", rotation: str = "5 MB", retention: int = 3):
        self._path = path
        self._rotation = rotation
        self._retention = retention

    def attach(self, level: str) -> int:
        # loguru creates missing parent directories for file sinks
        return logger.add(
            self._path,
            level=level,
            filter=PACKAGE_LOGGER,
            format=_FILE_FORMAT,
            rotation=self._rotation,
            retention=self._retention,
        )

    def describe(self, level: str) -> str:
        return f"file ({self._path}, {level})"


_SINK_TYPES: dict[str, type] = {
    "console": ConsoleLogSink,
    "file": FileLogSink,
}


def enable_logging() -> None:
    logger.enable(PACKAGE_LOGGER)


def disable_logging() -> None:
    logger.disable(PACKAGE_LOGGER)


def detach_sinks() -> None:
    while _attached_sink_ids:
        logger.remove(_attached_sink_ids.pop())


def setup_logging(
    level: str = "INFO",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Enable SDK logging and attach the configured sinks.

    ``consumers`` entries look like ``{"type": "file", "path": "...", "level": "DEBUG"}``.
    Sinks from an earlier call are replaced. Returns a description per sink.
    """
    detach_sinks()
    enable_logging()

    if consumers is None:
        consumers = [{"type": "console"}]

    descriptions: list[str] = []
    for config in consumers:
        sink_type = config.get("type", "")
        cls = _SINK_TYPES.get(sink_type)
        if cls is None:
            logger.warning(f"Unknown log consumer type: {sink_type!r}")
            continue

        kwargs = {k: v for k, v in config.items() if k not in ("type", "level")}
        sink_level = config.get("level", level)

        sink = cls(**kwargs)
        _attached_sink_ids.append(sink.attach(sink_level))
        descriptions.append(sink.describe(sink_level))

    return descriptions
