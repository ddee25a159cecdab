"""HTTP client for the VarOmeter API.

One request primitive with a client-side timeout per attempt and bounded
retry on transient statuses (429, 500, 502, 503, 504, 524). Backoff doubles
from 1 second and is capped at 60 seconds. Other error statuses fail at once.

Example:
    settings = Settings.from_env()
    with VarOmeterClient(settings) as client:
        project = client.request("POST", "/api/projects", body={"title": "demo"})
"""

import logging
import time
from typing import Any, Callable, Mapping, Optional

import requests

from varometer.config import (
    BACKOFF_BASE_SECONDS,
    BACKOFF_CAP_SECONDS,
    DEFAULT_POLICY,
    TRANSIENT_STATUSES,
    RequestPolicy,
    Settings,
)
from varometer.exceptions import RequestError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def build_headers(api_key: str, header_name: str = "enios-api-key") -> dict[str, str]:
    """Default headers for VarOmeter API calls.

    Args:
        api_key: API key string
        header_name: Header carrying the key

    Returns:
        Dict with the JSON content type and the credential header
    """
    return {
        "Content-Type": JSON_CONTENT_TYPE,
        header_name: api_key,
    }


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt number ``attempt`` (1-based).

    Example:
        >>> [backoff_delay(n) for n in (1, 2, 3, 7, 8)]
        [1, 2, 4, 60, 60]
    """
    return min(BACKOFF_CAP_SECONDS, BACKOFF_BASE_SECONDS * 2 ** (attempt - 1))


def is_transient(status: int) -> bool:
    return status in TRANSIENT_STATUSES


class VarOmeterClient:
    """Authenticated client for the VarOmeter REST API.

    Args:
        settings: Resolved connection settings; must carry an API key
        session: Optional requests session (a new one is created if omitted)
        sleep: Function used to wait between retries

    Raises:
        ConfigurationError: If settings carry no API key
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings
        self.api_key = settings.require_api_key()
        self.session = session or requests.Session()
        self.session.headers.update({settings.api_key_header: self.api_key})
        self._sleep = sleep

    def __enter__(self) -> "VarOmeterClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        policy: RequestPolicy = DEFAULT_POLICY,
    ) -> Any:
        """Perform a VarOmeter API request with retry on transient errors.

        The service documents JSON bodies on GET (``/api/rungwas``,
        ``/api/resultsGwas``) and a bare JSON string body on DELETE, so any
        non-None ``body`` is JSON-encoded regardless of method.

        Args:
            method: HTTP method ('GET', 'POST', 'DELETE')
            path: API path starting with /api/...
            query: Query parameters
            body: Mapping encoded as a JSON object, or a scalar (delete-by-id)
            policy: Timeout and retry ceiling for this call

        Returns:
            Parsed JSON when the response is JSON, otherwise the raw text

        Raises:
            RequestError: On a non-transient error status, on a transient
                status after ``policy.max_tries`` attempts, or on a
                transport failure
        """
        method = method.upper()
        url = self.settings.url_for(path)

        kwargs: dict[str, Any] = {"timeout": policy.timeout_seconds}
        if query is not None:
            kwargs["params"] = dict(query)
        if body is not None:
            kwargs["json"] = body
            kwargs["headers"] = {"Content-Type": JSON_CONTENT_TYPE}

        max_tries = max(1, policy.max_tries)
        attempt = 0
        while True:
            attempt += 1
            logger.debug("%s %s (attempt %d/%d)", method, path, attempt, max_tries)

            try:
                response = self.session.request(method, url, **kwargs)
            except requests.RequestException as e:
                raise RequestError(method, path, reason=str(e)) from e

            status = response.status_code
            if status < 400:
                return self._parse(method, path, response)

            if is_transient(status) and attempt < max_tries:
                delay = backoff_delay(attempt)
                logger.warning(
                    "%s %s returned HTTP %d; retrying in %ss (attempt %d/%d)",
                    method, path, status, delay, attempt, max_tries,
                )
                self._sleep(delay)
                continue

            raise RequestError(method, path, status=status, body=_safe_text(response))

    def _parse(self, method: str, path: str, response: requests.Response) -> Any:
        content_type = response.headers.get("Content-Type", "")
        if JSON_CONTENT_TYPE in content_type.lower():
            try:
                return response.json()
            except ValueError as e:
                raise RequestError(
                    method,
                    path,
                    body=_safe_text(response),
                    reason="invalid JSON body",
                ) from e
        return response.text


def _safe_text(response: requests.Response) -> str:
    try:
        return response.text
    except (ValueError, requests.RequestException):
        return ""
