from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEBUG_MODES = ("request", "response", "all", "none")

# Never written to debug logs
REDACTED_KEYS = frozenset({"client_secret", "access_token", "refresh_token", "password"})


class APIClientError(RuntimeError):
    """Base error for API client failures."""


class APIClientTimeout(APIClientError):
    """Raised when request times out."""


class APIClientHTTPError(APIClientError):
    """Raised for statuses the transport does not pass through to the caller."""

    def __init__(self, message: str, status_code: int, body: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class BaseAPIClient:
    """
    Reusable base HTTP client for external APIs.

    Features:
    - Persistent session
    - Default headers
    - Optional transport timeout
    - Status pass-through: everything below ``pass_through_below`` is handed
      back to the caller for interpretation, anything above raises
    - Request/response debug logging
    - Safe JSON parsing
    """

    DEFAULT_PASS_THROUGH_BELOW = 450

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        debug: str = "none",
        pass_through_below: Optional[int] = None,
    ) -> None:

        if debug not in DEBUG_MODES:
            raise ValueError(
                f"debug must be one of {', '.join(DEBUG_MODES)}, got '{debug}'"
            )

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self.pass_through_below = (
            pass_through_below
            if pass_through_below is not None
            else self.DEFAULT_PASS_THROUGH_BELOW
        )

        self.session = requests.Session()

        # Default headers
        headers = {
            "User-Agent": "perx-sdk-python/0.1",
            "Accept": "application/json",
        }

        if default_headers:
            headers.update(default_headers)

        self.session.headers.update(headers)

    @property
    def logs_requests(self) -> bool:
        return self.debug in ("request", "all")

    @property
    def logs_responses(self) -> bool:
        return self.debug in ("response", "all")

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Any]:
        """
        Send a request and return ``(status_code, payload)``.

        The payload is the decoded JSON body, or the raw text when the body
        is not JSON. Raises clean, structured errors for transport failures.
        """

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        if self.logs_requests:
            logger.info(f"REQ> {method} {url} params={params} body={_redact(json)}")

        try:
            response = self.session.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise APIClientTimeout(
                f"Request timed out calling {url}"
            ) from e
        except requests.RequestException as e:
            raise APIClientError(
                f"Request failed calling {url}"
            ) from e

        payload = self._decode(response)

        if self.logs_responses:
            logger.info(f"RESP< {url} status={response.status_code} data={_redact(payload)}")

        if response.status_code >= self.pass_through_below:
            raise APIClientHTTPError(
                f"HTTP {response.status_code} returned from {url}",
                status_code=response.status_code,
                body=payload,
            )

        return response.status_code, payload

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


def _redact(body: Any) -> Any:
    if isinstance(body, dict):
        return {k: ("***" if k in REDACTED_KEYS else v) for k, v in body.items()}
    return body
