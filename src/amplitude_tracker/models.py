from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationIssue

IDENTITY_FIELDS = ("event_type", "user_id", "device_id")

# Top-level fields accepted by the HTTP API besides identity and property maps.
CONTEXT_FIELDS = frozenset(
    {
        "time",
        "insert_id",
        "session_id",
        "app_version",
        "platform",
        "os_name",
        "os_version",
        "device_brand",
        "device_manufacturer",
        "device_model",
        "carrier",
        "country",
        "region",
        "city",
        "dma",
        "language",
        "price",
        "quantity",
        "revenue",
        "product_id",
        "revenue_type",
        "location_lat",
        "location_lng",
        "ip",
        "idfa",
        "adid",
    }
)

_LOWER_CAMEL_RE = re.compile(r"^[a-z][a-z0-9]*(?:[A-Z][a-z0-9]*)+$")
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _normalize_key(key: str) -> str:
    # Only lowerCamelCase spellings are aliases; "Time" stays a plain property.
    if _LOWER_CAMEL_RE.match(key):
        return _CAMEL_RE.sub("_", key).lower()
    return key


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == {} or value == []


@dataclass
class Event:
    """One analytics event being built up before it is sent or queued."""

    event_type: str = ""
    user_id: Optional[str] = None
    device_id: Optional[str] = None
    event_properties: Dict[str, Any] = field(default_factory=dict)
    user_properties: Dict[str, Any] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)

    def set(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "Event":
        """Assign recognized fields and fold everything else into event properties.

        Keys may be given snake_case (``user_id``) or camelCase (``userId``).
        ``event_properties`` and ``user_properties`` keys are merged into the
        respective maps instead of replacing them.
        """
        merged: Dict[str, Any] = dict(values or {})
        merged.update(kwargs)
        for key, value in merged.items():
            name = _normalize_key(key)
            if name == "event_type":
                self.event_type = value or ""
            elif name in IDENTITY_FIELDS:
                setattr(self, name, value)
            elif name in CONTEXT_FIELDS:
                self.context[name] = value
            elif name == "event_properties":
                self.event_properties.update(value or {})
            elif name == "user_properties":
                self.set_user_properties(value or {})
            else:
                self.event_properties[key] = value
        return self

    def set_user_properties(self, properties: Mapping[str, Any]) -> "Event":
        self.user_properties.update(properties)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        name = _normalize_key(key)
        if name in IDENTITY_FIELDS:
            value = getattr(self, name)
            return default if value is None else value
        if name in CONTEXT_FIELDS:
            return self.context.get(name, default)
        return self.event_properties.get(key, default)

    def unset(self, key: str) -> "Event":
        name = _normalize_key(key)
        if name == "event_type":
            self.event_type = ""
        elif name in IDENTITY_FIELDS:
            setattr(self, name, None)
        elif name in CONTEXT_FIELDS:
            self.context.pop(name, None)
        else:
            self.event_properties.pop(key, None)
        return self

    def missing_requirement(self) -> Optional[ConfigurationIssue]:
        if not self.event_type:
            return ConfigurationIssue.NO_EVENT_TYPE
        if not self.user_id and not self.device_id:
            return ConfigurationIssue.NO_IDENTITY
        return None

    def to_wire(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"event_type": self.event_type}
        if self.user_id:
            payload["user_id"] = self.user_id
        if self.device_id:
            payload["device_id"] = self.device_id
        for name, value in self.context.items():
            if not _is_empty(value):
                payload[name] = value
        if self.event_properties:
            payload["event_properties"] = dict(self.event_properties)
        if self.user_properties:
            payload["user_properties"] = dict(self.user_properties)
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), default=str)


@dataclass
class DispatchResult:
    """Outcome of the last dispatch, kept for debugging only."""

    post_fields: Dict[str, str]
    status_code: Optional[int] = None
    body: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200
