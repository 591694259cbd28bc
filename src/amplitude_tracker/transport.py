from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

import requests

from .errors import RequestConstructionError, TransportError

AMPLITUDE_API_URL = "https://api2.amplitude.com/httpapi"

_CONSTRUCTION_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)


@dataclass
class TransportResponse:
    status_code: int
    body: str


class Transport(Protocol):
    def send(self, url: str, form_fields: Mapping[str, str]) -> TransportResponse:
        ...


class HttpTransport:
    """Blocking form-encoded POST to the ingestion endpoint."""

    def __init__(
        self,
        *,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, url: str, form_fields: Mapping[str, str]) -> TransportResponse:
        try:
            response = self.session.post(url, data=dict(form_fields), timeout=self.timeout)
        except _CONSTRUCTION_ERRORS as exc:
            raise RequestConstructionError(str(exc)) from exc
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        return TransportResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self.session.close()
