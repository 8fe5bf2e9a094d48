"""
HTTP transport for the pay402 SDK.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import TransportError


@dataclass
class HttpResponse:
    """
    Status and parsed body of an HTTP response.

    ``body`` holds the decoded JSON document, or the raw text when the
    response is not JSON.
    """
    status_code: int
    body: Any = None
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def payment_required(self) -> bool:
        return self.status_code == 402


class HttpTransport:
    """
    Thin wrapper around a :class:`requests.Session`.

    Connection-level failures raise :class:`TransportError`. HTTP error
    statuses are returned, not raised, so callers can branch on them.
    """

    def __init__(
        self,
        timeout: float = 30,
        retry_count: int = 0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            timeout: Timeout for HTTP requests in seconds
            retry_count: Connection retries for GET requests (off by default)
            session: Optional pre-configured session
            logger: Optional logger instance
        """
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        if session is None:
            session = requests.Session()
            retries = Retry(
                total=retry_count,
                connect=retry_count,
                read=0,
                backoff_factor=0.5,
                allowed_methods=["GET"],
                raise_on_status=False,
            )
            session.mount("http://", HTTPAdapter(max_retries=retries))
            session.mount("https://", HTTPAdapter(max_retries=retries))
        self.session = session

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None
    ) -> HttpResponse:
        """
        Issue an HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Extra request headers
            json: JSON-serialisable request body

        Returns:
            HttpResponse with the parsed body

        Raises:
            TransportError: If the request could not be completed
        """
        self.logger.debug(f"{method} {url}")
        try:
            response = self.session.request(
                method,
                url,
                headers=headers or {},
                json=json,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            self.logger.error(f"HTTP {method} {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

        self.logger.debug(f"{method} {url} -> {response.status_code}")
        return HttpResponse(
            status_code=response.status_code,
            body=self._parse_body(response),
            text=response.text,
            headers=dict(response.headers)
        )

    def close(self) -> None:
        self.session.close()

    def _parse_body(self, response: requests.Response) -> Any:
        if not response.content:
            return None

        content_type = response.headers.get('Content-Type', '')
        try:
            return response.json()
        except ValueError:
            if 'application/json' in content_type:
                self.logger.warning(f"Invalid JSON body with Content-Type: {content_type}")
            return response.text
