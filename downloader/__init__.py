"""
Google Fonts download pipeline.
This package fetches Google Fonts stylesheets, downloads the fonts they
reference and rewrites the stylesheets to use the local copies.
"""

from .errors import DownloaderError, NetworkError, ParseError, IoError
from .extractor import extract_font_urls, iter_url_tokens
from .fontface import FontFace, split_font_faces
from .http_client import HttpClient
from .models import DownloadOptions, FontSource, FontAsset, CssDocument, Naming, SourceState, WriteOutcome
from .orchestrator import Orchestrator, download, download_async
from .report import RunReport, EXIT_OK, EXIT_FAILED
from .rewriter import rewrite_css
from .writer import FileWriter

__all__ = [
    'DownloaderError',
    'NetworkError',
    'ParseError',
    'IoError',
    'extract_font_urls',
    'iter_url_tokens',
    'FontFace',
    'split_font_faces',
    'HttpClient',
    'DownloadOptions',
    'FontSource',
    'FontAsset',
    'CssDocument',
    'Naming',
    'SourceState',
    'WriteOutcome',
    'Orchestrator',
    'download',
    'download_async',
    'RunReport',
    'EXIT_OK',
    'EXIT_FAILED',
    'rewrite_css',
    'FileWriter',
]
