"""
HTTP transport shared by the vote flow, the facilitator client and read-only queries.

send() never raises for HTTP statuses and never interprets them: the same
code (402, 409, ...) means different things depending on which step sent
the request, so the caller decides. Connection errors and timeouts come
back as a network failure instead of an exception.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests

from futarchy402.config import get_http_timeout

logger = logging.getLogger(__name__)


@dataclass
class TransportResult:
    """Either a response (status_code set) or a network failure (error set)."""

    status_code: Optional[int] = None
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    error: Optional[BaseException] = None

    @property
    def network_failure(self) -> bool:
        return self.error is not None

    @property
    def is_success(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        value = self.headers.get(name)
        if value is not None:
            return value
        lowered = name.lower()
        for key, val in self.headers.items():
            if str(key).lower() == lowered:
                return val
        return None


def _parse_body(response: requests.Response) -> Any:
    text = response.text
    if not text:
        return None
    try:
        return response.json()
    except ValueError:
        return text


def send(
    method: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    json: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[int] = None,
) -> TransportResult:
    """Issue one HTTP request. Returns a TransportResult; never raises for transport problems."""
    timeout = timeout or get_http_timeout()
    try:
        r = requests.request(
            method,
            url,
            params=params,
            json=json,
            headers=headers or {},
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.warning("%s %s failed: %s", method, url, e)
        return TransportResult(error=e)
    logger.debug("%s %s -> %s", method, url, r.status_code)
    return TransportResult(status_code=r.status_code, body=_parse_body(r), headers=r.headers)
