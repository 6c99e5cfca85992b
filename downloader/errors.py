"""
Error types for the download pipeline.

Already-existing files are not an error: the writer reports them as
WriteOutcome.SKIPPED instead of raising.
"""
from pathlib import Path
from typing import Optional, Union


class DownloaderError(Exception):
    """Base class for every failure the pipeline records in the run report."""


class NetworkError(DownloaderError):
    """A fetch failed: DNS, refused connection, timeout or a non-2xx status."""

    def __init__(self, url: str, cause: Union[str, BaseException], status: Optional[int] = None):
        self.url = url
        self.cause = cause
        self.status = status
        super().__init__(f"Failed to download '{url}': {cause}")


class ParseError(DownloaderError):
    """CSS text could not be decoded or scanned for url(...) references."""

    def __init__(self, url: str, cause: Union[str, BaseException]):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to parse CSS from '{url}': {cause}")


class IoError(DownloaderError):
    """A file could not be written (permissions, full disk, ...)."""

    def __init__(self, path: Union[str, Path], cause: Union[str, BaseException]):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Error writing '{path}': {cause}")
