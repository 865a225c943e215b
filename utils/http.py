"""HTTP utilities for fetching record JSON.

Provides reusable pieces for:
- HTTP requests with retry logic (the data source's own retry policy)
- Connection pooling and session management
- Fetching and decoding one JSON resource
"""

import json
import logging
from typing import Any, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry as URLRetry

from engine.errors import LoadFailure

logger = logging.getLogger(__name__)


class RetryStrategy:
    """Defines retry behavior for HTTP requests."""

    def __init__(self, max_retries: int = 3, backoff_factor: float = 0.5,
                 status_forcelist: Optional[List[int]] = None):
        """Initialize retry strategy.

        Args:
            max_retries: Maximum number of retry attempts (default: 3)
            backoff_factor: Exponential backoff multiplier (default: 0.5)
            status_forcelist: HTTP status codes to retry on
                            (default: [429, 500, 502, 503, 504])
        """
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist or [429, 500, 502, 503, 504]

    def get_retry_object(self) -> URLRetry:
        """Get urllib3 Retry object configured with this strategy.

        ``raise_on_status`` is off so an exhausted retry hands back the last
        response and the caller decides what the status code means.
        """
        return URLRetry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False,
        )


class SessionManager:
    """Manages an HTTP session with connection pooling and retries."""

    def __init__(self, retry_strategy: Optional[RetryStrategy] = None,
                 pool_maxsize: int = 10):
        """Initialize session manager.

        Args:
            retry_strategy: RetryStrategy to use (default: standard strategy)
            pool_maxsize: Maximum number of connections per pool; should be
                at least the number of concurrent fetch workers
        """
        self.retry_strategy = retry_strategy or RetryStrategy()
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=self.retry_strategy.get_retry_object(),
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)
            self._session.headers.update({"Accept": "application/json"})

        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def fetch_json(session: requests.Session, url: str, timeout: float = 30) -> Optional[Any]:
    """GET *url* and decode the body as JSON.

    Args:
        session: Session to issue the request on
        url: Resource URL
        timeout: Per-request timeout in seconds

    Returns:
        The decoded JSON value, or None if the server answered 404.

    Raises:
        LoadFailure: On transport errors, any other non-2xx status, or a
            body that is not valid JSON.
    """
    try:
        resp = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise LoadFailure(f"Request failed: {e}", resource=url) from e

    if resp.status_code == 404:
        return None
    if not resp.ok:
        raise LoadFailure(f"HTTP {resp.status_code} fetching record", resource=url)

    try:
        return json.loads(resp.text)
    except ValueError as e:
        raise LoadFailure(f"Malformed JSON: {e}", resource=url) from e
    except RecursionError as e:
        raise LoadFailure("Malformed JSON: nesting too deep", resource=url) from e
