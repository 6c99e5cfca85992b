"""Data types shared by the download pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from config import DOWNLOADER
from .fontface import FontFace


class SourceState(Enum):
    """Progress of one input CSS URL through the pipeline."""
    PENDING = "pending"
    CSS_FETCHED = "css_fetched"
    URLS_EXTRACTED = "urls_extracted"
    FONTS_FETCHED = "fonts_fetched"
    REWRITTEN = "rewritten"
    WRITTEN = "written"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self in (SourceState.WRITTEN, SourceState.ERRORED)


class AssetStatus(Enum):
    PENDING = "pending"
    FETCHED = "fetched"
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


class WriteOutcome(Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"


class Naming(Enum):
    """How local font filenames are derived."""
    URL = "url"                  # final segment of the font URL
    DESCRIPTIVE = "descriptive"  # <family>-<weight>-<style>-<subset>.<ext>


@dataclass(frozen=True)
class DownloadOptions:
    """Everything a run needs to know, passed explicitly to each component."""
    output_dir: Path = Path(DOWNLOADER["output_dir"])
    overwrite: bool = False
    quiet: bool = False
    verbose: bool = False
    fonts_prefix: str = DOWNLOADER["fonts_prefix"]
    naming: Naming = Naming.URL
    timeout: float = DOWNLOADER["timeout"]
    max_concurrency: int = DOWNLOADER["max_concurrency"]
    user_agent: str = DOWNLOADER["user_agent"]

    @property
    def show_info(self) -> bool:
        return not self.quiet

    @property
    def show_detail(self) -> bool:
        # --quiet wins over --verbose
        return self.verbose and not self.quiet


@dataclass(frozen=True)
class FontSource:
    """One CSS URL from the command line. index is 1-based."""
    url: str
    index: int = 1


@dataclass
class FontAsset:
    """A font file referenced by a CSS document."""
    url: str
    filename: str
    path: Path
    face: Optional[FontFace] = None
    content: Optional[bytes] = None
    status: AssetStatus = AssetStatus.PENDING
    error: Optional[Exception] = None

    def fill(self, content: bytes) -> None:
        """Store the fetched bytes. Only allowed once."""
        if self.content is not None:
            raise RuntimeError(f"Font asset {self.url} already has content")
        self.content = content
        self.status = AssetStatus.FETCHED

    def fail(self, error: Exception) -> None:
        self.error = error
        self.status = AssetStatus.FAILED

    @property
    def ok(self) -> bool:
        return self.status in (AssetStatus.WRITTEN, AssetStatus.SKIPPED)


@dataclass
class CssDocument:
    """Fetched CSS text for one source and the fonts discovered in it."""
    source: FontSource
    css: str
    filename: str
    assets: List[FontAsset] = field(default_factory=list)

    def url_to_filename(self) -> dict:
        return {asset.url: asset.filename for asset in self.assets}
