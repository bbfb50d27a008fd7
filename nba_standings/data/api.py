"""Remote client for the standings and team-stats feeds.

Fetches a dataset's raw bytes over HTTPS. Responses are requested gzip
compressed and decompressed transparently when the server declares
``Content-Encoding: gzip``. HTTP 200 and 304 are successes; any other
status, any network-level error and any decompression error surface as a
single FetchError so callers never see partial results.

Example:
    >>> from nba_standings.data.api import XmlStatsClient
    >>> client = XmlStatsClient()
    >>> raw = client.fetch("nba/standings.json")
"""
from __future__ import annotations

import logging
from typing import Protocol

import requests
from requests.exceptions import RequestException

from nba_standings.config import get_settings
from nba_standings.types import FetchError

logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODES = {200, 304}


class RemoteFetcher(Protocol):
    """Anything that can fetch a dataset's raw bytes."""

    def fetch(self, dataset_path: str) -> bytes:
        """Fetch raw bytes for a dataset path.

        Raises:
            FetchError: On any failure.
        """
        ...


class XmlStatsClient:
    """HTTPS client for the feeds.

    Attributes:
        base_url: URL that dataset paths are appended to.
        token: Bearer token for the Authorization header.
        user_agent: User-Agent header value.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL (default from settings).
            token: Bearer token (default from settings).
            user_agent: User-Agent header (default from settings).
            timeout: Request timeout in seconds (default from settings).
            session: Optional requests session to reuse.
        """
        settings = get_settings()
        self.base_url = base_url if base_url is not None else settings.api_base_url
        self.token = token if token is not None else settings.api_token
        self.user_agent = user_agent if user_agent is not None else settings.user_agent
        self.timeout = timeout if timeout is not None else settings.api_timeout
        self._session = session or requests.Session()

        logger.debug(
            f"XmlStatsClient initialized: base_url={self.base_url}, "
            f"timeout={self.timeout}s"
        )

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Accept-Encoding": "gzip",
            "Authorization": f"Bearer {self.token}",
            "User-Agent": self.user_agent,
        }

    def url_for(self, dataset_path: str) -> str:
        """Build the request URL for a dataset path."""
        return self.base_url.rstrip("/") + "/" + dataset_path.lstrip("/")

    def fetch(self, dataset_path: str) -> bytes:
        """Fetch a dataset's raw (decompressed) bytes.

        Args:
            dataset_path: Path relative to the base URL, e.g. "nba/standings.json".

        Returns:
            Response body, gunzipped if the server sent it compressed.

        Raises:
            FetchError: On network errors, timeouts, bad status codes or
                undecodable bodies.
        """
        url = self.url_for(dataset_path)
        logger.debug(f"GET {url}")

        try:
            response = self._session.get(url, headers=self.headers, timeout=self.timeout)
            # Reading content triggers gzip decoding
            body = response.content
        except RequestException as e:
            logger.warning(f"Error trying to contact server for {dataset_path}: {e}")
            raise FetchError(f"Request for {dataset_path} failed: {e}") from e

        if response.status_code not in SUCCESS_STATUS_CODES:
            logger.warning(
                f"Server did not return a 200 or 304 response for {dataset_path}: "
                f"HTTP {response.status_code}"
            )
            raise FetchError(
                f"Request for {dataset_path} returned HTTP {response.status_code}"
            )

        logger.debug(
            f"Fetched {dataset_path}: HTTP {response.status_code}, "
            f"{len(body)} bytes, encoding={response.headers.get('Content-Encoding')}"
        )
        return body
