from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def stdlib_level(self) -> int:
        return {
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARNING: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
            LogLevel.CRITICAL: logging.CRITICAL,
        }[self]


class TrackerLogger(Protocol):
    def log(self, level: LogLevel, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        ...


class NullLogger:
    """Leveled logger that discards everything; the tracker default."""

    def log(self, level: LogLevel, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        return None

    def debug(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, message, context)

    def error(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, message, context)

    def critical(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.log(LogLevel.CRITICAL, message, context)


class RecordingLogger(NullLogger):
    """Keeps every entry in memory so dispatch outcomes can be inspected."""

    def __init__(self) -> None:
        self._entries: List[Tuple[LogLevel, str, Dict[str, Any]]] = []

    def log(self, level: LogLevel, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self._entries.append((LogLevel(level), message, dict(context or {})))

    @property
    def entries(self) -> List[Tuple[LogLevel, str, Dict[str, Any]]]:
        return list(self._entries)

    def levels(self) -> List[LogLevel]:
        return [level for level, _, _ in self._entries]


class StdlibLogger(NullLogger):
    """Forwards entries to a :mod:`logging` logger, context under ``extra``."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("amplitude_tracker")

    def log(self, level: LogLevel, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.logger.log(
            LogLevel(level).stdlib_level,
            message,
            extra={"context": dict(context or {})},
        )
