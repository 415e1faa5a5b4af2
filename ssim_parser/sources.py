"""Resolve an SSIM source (file path, URL or raw text) into text.

Remote sources are fetched with a small ``requests`` wrapper; retries and
``Retry-After`` handling live here so the parser itself stays pure.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from ssim_parser.errors import EmptySourceError, SourceError
from ssim_parser.logging_utils import perf

LOGGER = logging.getLogger(__name__)

HEADERS = {"accept": "text/plain, */*;q=0.1", "user-agent": "ssim-parser/1.0"}
REMOTE_SCHEMES = ("http", "https")


def is_remote(source: str) -> bool:
    return urlparse(source.strip()).scheme in REMOTE_SCHEMES and "\n" not in source


class SourceClient:
    """Thin wrapper around a Requests session for downloading SSIM files."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0) -> None:
        """Initialize the client.

        Args:
            session: Optional pre-configured Requests session.
            timeout: Per-request timeout in seconds.
        """
        self._session = session or requests.Session()
        self._timeout = timeout

    @perf("sources.fetch_text", tags={"component": "sources"})
    def fetch_text(self, url: str) -> str:
        """Download ``url`` and return its body decoded as text."""
        if not url or not is_remote(url):
            raise ValueError(f"Expected an http(s) URL, got {url!r}")

        response = self._session.get(url, headers=HEADERS, timeout=self._timeout)
        if response.status_code == 429:
            LOGGER.debug(
                "sources.fetch_text got 429 url=%s retry_after=%s",
                url,
                response.headers.get("Retry-After"),
            )
        response.raise_for_status()
        return response.text

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "SourceClient":
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


def _retry_after_seconds(exc: Exception, default: float) -> float:
    """Seconds to wait before the next attempt, honouring ``Retry-After`` on 429."""
    response = getattr(exc, "response", None)
    if not isinstance(exc, requests.HTTPError) or response is None:
        return default
    if getattr(response, "status_code", None) != 429:
        return default
    retry_after = response.headers.get("Retry-After")
    try:
        # Retry-After may also be an HTTP date; only the seconds form is honoured.
        return float(retry_after) if retry_after is not None else max(default * 2, 30.0)
    except ValueError:
        return max(default * 2, 30.0)


def fetch_with_retries(
    client: SourceClient,
    url: str,
    attempts: int = 3,
    delay_seconds: float = 2.0,
) -> str:
    """Fetch ``url`` up to ``attempts`` times; raise ``SourceError`` when all fail."""
    if attempts < 1:
        raise ValueError("attempts must be a positive integer")

    for attempt in range(1, attempts + 1):
        try:
            return client.fetch_text(url)
        except requests.RequestException as exc:
            LOGGER.warning(
                "Source fetch failed for %s (attempt %s/%s): %s",
                url,
                attempt,
                attempts,
                exc,
            )
            if attempt == attempts:
                LOGGER.error("Giving up on %s after %s attempts", url, attempts)
                raise SourceError(f"Could not fetch {url} after {attempts} attempts") from exc
            time.sleep(_retry_after_seconds(exc, delay_seconds))


def load_source(
    source: str,
    *,
    client: Optional[SourceClient] = None,
    attempts: int = 3,
    delay_seconds: float = 2.0,
) -> str:
    """Return SSIM text from a URL, an existing file path, or the raw string itself."""
    if not source:
        raise EmptySourceError("Data source cannot be empty.")

    if is_remote(source):
        if client is not None:
            text = fetch_with_retries(client, source.strip(), attempts, delay_seconds)
        else:
            with SourceClient() as owned_client:
                text = fetch_with_retries(owned_client, source.strip(), attempts, delay_seconds)
        origin = "url"
    elif os.path.isfile(source):
        text = Path(source).read_text(encoding="utf-8", errors="replace")
        origin = "file"
    else:
        text = source
        origin = "raw"

    if not text:
        raise EmptySourceError(f"Data source is empty ({origin}).")
    LOGGER.debug("Loaded SSIM source origin=%s characters=%s", origin, len(text))
    return text


__all__ = ["SourceClient", "fetch_with_retries", "load_source", "is_remote"]
