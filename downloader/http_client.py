"""
HTTP client for stylesheets and font files.
Blocking requests calls are pushed to the default executor by the async helpers.
"""

import asyncio
from typing import Optional

import requests

from config import DOWNLOADER, VERSION
from logging_config import get_logger
from .errors import NetworkError, ParseError

logger = get_logger(__name__)


class HttpClient:
    """Thin wrapper around a requests.Session with a fixed timeout."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout if timeout is not None else DOWNLOADER["timeout"]
        self.user_agent = user_agent or DOWNLOADER["user_agent"]
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "text/css,*/*;q=0.1",
        })
        logger.debug(f"HTTP client ready (timeout: {self.timeout}s, google-fonts-downloader {VERSION})")

    def _get(self, url: str) -> requests.Response:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            raise NetworkError(url, f"timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise NetworkError(url, e) from e

        if not 200 <= response.status_code < 300:
            raise NetworkError(url, f"HTTP {response.status_code}", status=response.status_code)
        return response

    def get_text(self, url: str) -> str:
        """
        Download a stylesheet and decode it as UTF-8.

        Raises:
            NetworkError: Connection failure, timeout or non-2xx status
            ParseError: The body is not valid UTF-8
        """
        response = self._get(url)
        try:
            text = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(url, e) from e
        logger.debug(f"Downloaded CSS content from {url} ({len(text)} bytes)")
        return text

    def get_bytes(self, url: str) -> bytes:
        """Download a font file. Raises NetworkError on failure."""
        response = self._get(url)
        content = response.content
        logger.debug(f"Downloaded {url} ({len(content)} bytes)")
        return content

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} timeout={self.timeout}>"


async def fetch_css(client: HttpClient, url: str) -> str:
    """CSS Fetcher: get_text() off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, client.get_text, url)


async def fetch_font(client: HttpClient, url: str, semaphore: Optional[asyncio.Semaphore] = None) -> bytes:
    """Font Fetcher: get_bytes() off the event loop, bounded by the run's semaphore."""
    loop = asyncio.get_running_loop()
    if semaphore is None:
        return await loop.run_in_executor(None, client.get_bytes, url)
    async with semaphore:
        return await loop.run_in_executor(None, client.get_bytes, url)
