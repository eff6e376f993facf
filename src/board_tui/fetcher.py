from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from .config import HTTP_TIMEOUT, REQUEST_HEADERS

logger = logging.getLogger("board")


class FetchError(Exception):
    """Raised when a board page could not be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class FetchGateway:
    """Blocking HTTP boundary: one request in, the raw body or a FetchError out.

    There is no retry and no cancellation. A slow server stalls the caller
    for up to ``timeout`` seconds.
    """

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.timeout = timeout
        self.session = self._create_session(headers or REQUEST_HEADERS)

    def _create_session(self, headers: Dict[str, str]) -> requests.Session:
        s = requests.Session()
        s.headers.update(headers)
        return s

    def request(self, method: str, url: str) -> str:
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.Timeout as e:
            logger.warning("Timed out fetching %s: %s", url, e)
            raise FetchError(url, "Request timed out") from e
        except requests.HTTPError as e:
            logger.warning("Bad status fetching %s: %s", url, e)
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except requests.RequestException as e:
            logger.warning("Failed to fetch %s: %s", url, e)
            raise FetchError(url, "Network error") from e
        logger.debug("Fetched %s OK (%d bytes)", url, len(resp.content))
        return resp.text

    def get(self, url: str) -> str:
        return self.request("GET", url)

    def close(self) -> None:
        self.session.close()
