from __future__ import annotations

import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import TrackerSettings
from .errors import (
    ConfigurationError,
    ConfigurationIssue,
    RequestConstructionError,
    TransportError,
)
from .logger import LogLevel, NullLogger, TrackerLogger
from .models import DispatchResult, Event
from .transport import AMPLITUDE_API_URL, HttpTransport, Transport


class Tracker:
    """Stateful client that builds, queues and sends events for one API key.

    Events can be recorded before the tracker knows its API key or who the
    user is: :meth:`queue_track` keeps them in an in-memory queue until
    :meth:`log_queued_events` is called. Once the tracker is configured and the
    queue has been drained, :meth:`queue_track` sends straight away.

    Every public method holds the tracker lock for its whole duration, so the
    queue-or-send decision and the in-flight event are never observed half
    updated by another thread.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        logger: Optional[TrackerLogger] = None,
        api_url: str = AMPLITUDE_API_URL,
        debug_response: bool = False,
    ) -> None:
        self._api_key: Optional[str] = str(api_key) if api_key else None
        self._user_id: Optional[str] = None
        self._device_id: Optional[str] = None
        self._user_properties: Dict[str, Any] = {}
        self._event: Optional[Event] = None
        self._queue: List[Event] = []
        self._opt_out = False
        self._last_response: Optional[DispatchResult] = None
        self.api_url = api_url
        self.debug_response = debug_response
        self.transport = transport or HttpTransport()
        self.logger: TrackerLogger = logger or NullLogger()
        self._lock = threading.RLock()

    @classmethod
    def from_settings(
        cls,
        settings: TrackerSettings,
        *,
        logger: Optional[TrackerLogger] = None,
    ) -> "Tracker":
        return cls(
            settings.api_key,
            transport=HttpTransport(timeout=settings.timeout),
            logger=logger,
            api_url=settings.api_url,
            debug_response=settings.debug_response,
        )

    # Configuration

    def init(self, api_key: str, user_id: Optional[str] = None) -> "Tracker":
        with self._lock:
            self._api_key = str(api_key)
            if user_id is not None:
                self._user_id = str(user_id)
        return self

    def set_user_id(self, user_id: Optional[str]) -> "Tracker":
        """Set the user ID for future events; it overrides any set on the event."""
        with self._lock:
            self._user_id = None if user_id is None else str(user_id)
        return self

    def set_device_id(self, device_id: Optional[str]) -> "Tracker":
        """Set the device ID for future events; it overrides any set on the event."""
        with self._lock:
            self._device_id = None if device_id is None else str(device_id)
        return self

    def set_user_properties(self, properties: Mapping[str, Any]) -> "Tracker":
        """Merge user properties to be sent with the next logged event only."""
        with self._lock:
            self._user_properties.update(properties)
        return self

    def reset_user_properties(self) -> "Tracker":
        with self._lock:
            self._user_properties = {}
        return self

    def reset_user(self) -> "Tracker":
        """Forget user ID, device ID and unsent user properties.

        Identity set directly on events already in the queue is left alone.
        """
        with self._lock:
            self._user_id = None
            self._device_id = None
            self._user_properties = {}
        return self

    def set_opt_out(self, opt_out: bool) -> "Tracker":
        with self._lock:
            self._opt_out = bool(opt_out)
        return self

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def device_id(self) -> Optional[str]:
        return self._device_id

    @property
    def user_properties(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._user_properties)

    @property
    def opt_out(self) -> bool:
        return self._opt_out

    @property
    def queue(self) -> List[Event]:
        with self._lock:
            return list(self._queue)

    @property
    def last_response(self) -> Optional[DispatchResult]:
        return self._last_response

    def has_queued_events(self) -> bool:
        with self._lock:
            return bool(self._queue)

    # Event building

    def event(self, value: Union[Event, Mapping[str, Any], None] = None) -> Event:
        """Return the event used by the next track call, creating it if needed.

        Passing an :class:`Event` replaces the in-flight event; passing a
        mapping sets those fields on it.
        """
        with self._lock:
            if isinstance(value, Event):
                self._event = value
            elif self._event is None:
                self._event = Event()
            if value is not None and not isinstance(value, Event):
                self._event.set(value)
            return self._event

    def reset_event(self) -> "Tracker":
        with self._lock:
            self._event = None
        return self

    def reset_queue(self) -> "Tracker":
        """Drop queued events without sending them."""
        with self._lock:
            self._queue = []
        return self

    # Sending

    def track(
        self,
        event_type: str = "",
        event_properties: Optional[Mapping[str, Any]] = None,
    ) -> "Tracker":
        """Send an event now.

        Raises :class:`ConfigurationError` if the API key, the event type or
        both user and device ID are missing. Transport problems are logged and
        never raised.
        """
        with self._lock:
            if self._opt_out:
                return self
            if not self._api_key:
                raise ConfigurationError(ConfigurationIssue.NO_API_KEY)
            self._build(event_type, event_properties)
            self._send_current()
        return self

    def queue_track(
        self,
        event_type: str = "",
        event_properties: Optional[Mapping[str, Any]] = None,
    ) -> "Tracker":
        """Send the event if the tracker is ready, otherwise queue it.

        Only the identity set on the tracker counts towards being ready; an
        event carrying its own user ID is still queued. Events are also queued
        while older ones are waiting, to keep them in order.
        """
        with self._lock:
            if self._opt_out:
                return self
            event = self._build(event_type, event_properties)
            if not event.event_type:
                raise ConfigurationError(ConfigurationIssue.NO_EVENT_TYPE)
            if not self._queue and self._api_key and (self._user_id or self._device_id):
                self._send_current()
                return self
            self._queue.append(event)
            self._event = None
        return self

    def log_queued_events(self) -> "Tracker":
        """Send every queued event in order, then empty the queue.

        Tracker identity and pending user properties are applied as they are
        now; pending user properties go out with the first event only. A
        :class:`ConfigurationError` stops the flush, leaving the failing event
        and those after it in the queue.
        """
        with self._lock:
            if not self._queue:
                return self
            try:
                while self._queue:
                    self._event = self._queue[0]
                    if not self._opt_out:
                        if not self._api_key:
                            raise ConfigurationError(ConfigurationIssue.NO_API_KEY)
                        self._send_current()
                    self._queue.pop(0)
            finally:
                self._event = None
        return self

    def _build(self, event_type: str, event_properties: Optional[Mapping[str, Any]]) -> Event:
        event = self.event()
        event.set(event_properties or {})
        if event_type:
            event.event_type = event_type
        return event

    def _apply_persistent_data(self, event: Event) -> None:
        if self._user_id:
            event.user_id = self._user_id
        if self._device_id:
            event.device_id = self._device_id
        if self._user_properties:
            event.set_user_properties(self._user_properties)
            self._user_properties = {}

    def _send_current(self) -> None:
        event = self.event()
        self._apply_persistent_data(event)
        issue = event.missing_requirement()
        if issue is not None:
            raise ConfigurationError(issue)
        try:
            self._dispatch(event)
        finally:
            self._event = None

    def _dispatch(self, event: Event) -> None:
        post_fields = {"api_key": self._api_key or "", "event": event.to_json()}
        result = DispatchResult(post_fields=post_fields)
        try:
            response = self.transport.send(self.api_url, post_fields)
        except RequestConstructionError as exc:
            result.error = str(exc)
            self.logger.log(
                LogLevel.CRITICAL,
                f"Could not build request to {self.api_url}, unable to send Amplitude event",
                {"error": str(exc)},
            )
        except TransportError as exc:
            result.error = str(exc)
            self.logger.log(
                LogLevel.CRITICAL,
                f"Transport error: {exc}",
                {"error": str(exc), "post_fields": post_fields},
            )
        else:
            result.status_code = response.status_code
            result.body = response.body
            self.logger.log(
                LogLevel.INFO if response.status_code == 200 else LogLevel.ERROR,
                f"Amplitude HTTP API response: {response.body}",
                {
                    "status_code": response.status_code,
                    "response": response.body,
                    "post_fields": post_fields,
                },
            )
        if self.debug_response:
            self._last_response = result
