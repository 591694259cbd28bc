from enum import Enum


class ConfigurationIssue(str, Enum):
    NO_API_KEY = "no_api_key"
    NO_EVENT_TYPE = "no_event_type"
    NO_IDENTITY = "no_identity"

    @property
    def message(self) -> str:
        return {
            ConfigurationIssue.NO_API_KEY: "API Key is required to log an event",
            ConfigurationIssue.NO_EVENT_TYPE: "Event Type is required to log or queue an event",
            ConfigurationIssue.NO_IDENTITY: "Either user_id or device_id required to log an event",
        }[self]


class ConfigurationError(ValueError):
    """Raised when a tracker is asked to send before it has what it needs."""

    def __init__(self, issue: ConfigurationIssue) -> None:
        super().__init__(issue.message)
        self.issue = issue


class TransportError(RuntimeError):
    """Raised by a transport when the POST could not be completed."""


class RequestConstructionError(TransportError):
    """Raised when the HTTP request could not even be built."""
