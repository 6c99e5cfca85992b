"""Pytest configuration and shared fixtures"""
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from downloader.errors import NetworkError
from downloader.http_client import HttpClient
from downloader.models import DownloadOptions

ROBOTO_CSS_URL = "https://fonts.googleapis.com/css2?family=Roboto"
ROBOTO_FONT_URL = "https://fonts.gstatic.com/s/roboto/v30/abc.woff2"

ROBOTO_CSS = """/* latin */
@font-face {
  font-family: 'Roboto';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/roboto/v30/abc.woff2) format('woff2');
  unicode-range: U+0000-00FF, U+0131, U+0152-0153;
}
"""

CREEPSTER_CSS = """/* latin-ext */
@font-face {
  font-family: 'Creepster';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/creepster/v13/ext.woff2) format('woff2');
  unicode-range: U+0100-02AF;
}
/* latin */
@font-face {
  font-family: 'Creepster';
  font-style: normal;
  font-weight: 400;
  font-display: swap;
  src: url(https://fonts.gstatic.com/s/creepster/v13/AlZy.woff2) format('woff2');
  unicode-range: U+0000-00FF;
}
"""


def make_client(pages: dict) -> Mock:
    """
    Build a fake HttpClient from a {url: body} dict.

    str bodies are served by get_text, bytes by get_bytes. A body that is an
    exception instance is raised instead. Unknown URLs fail with HTTP 404.
    """
    client = Mock(spec=HttpClient)

    def lookup(url):
        if url not in pages:
            raise NetworkError(url, "HTTP 404", status=404)
        body = pages[url]
        if isinstance(body, Exception):
            raise body
        return body

    client.get_text.side_effect = lookup
    client.get_bytes.side_effect = lookup
    return client


@pytest.fixture
def roboto_pages():
    return {
        ROBOTO_CSS_URL: ROBOTO_CSS,
        ROBOTO_FONT_URL: b"roboto-bytes",
    }


@pytest.fixture
def options(tmp_path):
    """Default options writing into a temp output directory"""
    return DownloadOptions(output_dir=tmp_path / "fonts", quiet=True)


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging() so streams from one test never leak into the next"""
    yield
    import logging
    import logging.handlers
    import logging_config
    root_logger = logging.getLogger()
    ours = (logging.StreamHandler, logging.NullHandler, logging.handlers.RotatingFileHandler)
    for handler in root_logger.handlers[:]:
        # exact type check leaves pytest's own capture handlers alone
        if type(handler) in ours:
            root_logger.removeHandler(handler)
            handler.close()
    logging_config._logging_initialized = False
