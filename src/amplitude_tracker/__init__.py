"""Event tracking client for the Amplitude HTTP API with pre-init queueing."""

from .config import TrackerSettings
from .errors import (
    ConfigurationError,
    ConfigurationIssue,
    RequestConstructionError,
    TransportError,
)
from .logger import LogLevel, NullLogger, RecordingLogger, StdlibLogger, TrackerLogger
from .models import DispatchResult, Event
from .registry import TrackerRegistry, default_registry, get_instance, reset_instances
from .tracker import Tracker
from .transport import AMPLITUDE_API_URL, HttpTransport, TransportResponse

__all__ = [
    "AMPLITUDE_API_URL",
    "ConfigurationError",
    "ConfigurationIssue",
    "DispatchResult",
    "Event",
    "HttpTransport",
    "LogLevel",
    "NullLogger",
    "RecordingLogger",
    "RequestConstructionError",
    "StdlibLogger",
    "Tracker",
    "TrackerLogger",
    "TrackerRegistry",
    "TrackerSettings",
    "TransportError",
    "TransportResponse",
    "default_registry",
    "get_instance",
    "reset_instances",
]
