"""
Orchestrator
Runs every input CSS URL through fetch -> extract -> fetch fonts -> rewrite -> write.

Per source the states are

    PENDING -> CSS_FETCHED -> URLS_EXTRACTED -> FONTS_FETCHED -> REWRITTEN -> WRITTEN

with ERRORED reachable from every step. Failures are recorded in the RunReport
and never cancel sibling work.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from logging_config import get_logger
from .errors import DownloaderError, IoError
from .extractor import extract_font_urls
from .fontface import faces_by_url
from .http_client import HttpClient, fetch_css, fetch_font
from .models import (
    AssetStatus,
    CssDocument,
    DownloadOptions,
    FontAsset,
    FontSource,
    SourceState,
    WriteOutcome,
)
from .naming import css_filename, font_filename
from .report import Progress, RunReport
from .rewriter import rewrite_css
from .writer import FileWriter

logger = get_logger(__name__)

SKIP_MESSAGE = "Skipped writing to '{path}' (file already exists, use --overwrite to overwrite)."


class Orchestrator:
    """
    One instance per run. Holds the shared pieces every task needs: the HTTP
    client, the writer, the fan-out semaphore and the report.
    """

    def __init__(self, options: DownloadOptions, client: Optional[HttpClient] = None,
                 report: Optional[RunReport] = None):
        self.options = options
        self.client = client or HttpClient(timeout=options.timeout, user_agent=options.user_agent)
        self.report = report or RunReport()
        self.progress = Progress(options)
        self.writer = FileWriter(overwrite=options.overwrite)
        self._semaphore: Optional[asyncio.Semaphore] = None
        # Destination path -> the asset that owns it (first claim in argument order)
        self._owners: Dict[Path, FontAsset] = {}
        # Destination path -> the single download of that path
        self._downloads: Dict[Path, asyncio.Task] = {}
        # Font URL -> fetch started right after its stylesheet was parsed
        self._prefetches: Dict[str, asyncio.Task] = {}
        # Source index -> set once that source has claimed its paths
        self._claimed: Dict[int, asyncio.Event] = {}

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self, urls: Sequence[str]) -> RunReport:
        """
        Process every URL and return the filled-in report.

        Each source runs its own pipeline, so font downloads of one stylesheet
        start as soon as that stylesheet is parsed. Only the claiming of
        destination paths waits for the sources before it, which keeps
        filename collisions resolving the same way on every run.

        Raises:
            IoError: The output directory cannot be created
        """
        output_dir = self.options.output_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(output_dir, e) from e

        self._semaphore = asyncio.Semaphore(self.options.max_concurrency)

        sources = [FontSource(url, index) for index, url in enumerate(urls, 1)]
        for source in sources:
            self.report.add_source(source)
            self._claimed[source.index] = asyncio.Event()
        css_names = self._assign_css_filenames(sources)

        results = await asyncio.gather(*(self._process(source, css_names[source.index]) for source in sources),
                                       return_exceptions=True)
        for source, result in zip(sources, results):
            if isinstance(result, Exception):
                logger.error(f"Unexpected error processing {source.url}: {result}", exc_info=result)
                if not self.report.state_of(source).is_terminal:
                    self.report.set_state(source, SourceState.ERRORED, result)

        # Prefetches nobody claimed belong to assets that lost a filename collision
        leftovers = list(self._prefetches.values())
        self._prefetches.clear()
        for task in leftovers:
            task.cancel()
        await asyncio.gather(*leftovers, return_exceptions=True)

        return self.report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _assign_css_filenames(self, sources: List[FontSource]) -> Dict[int, str]:
        names = {}
        taken = set()
        for source in sources:
            name = css_filename(source.url, source.index)
            stem = name[:-len(".css")]
            suffix = 1
            while name in taken:
                name = f"{stem}-{source.index}.css" if suffix == 1 else f"{stem}-{source.index}-{suffix}.css"
                suffix += 1
            taken.add(name)
            names[source.index] = name
        return names

    async def _process(self, source: FontSource, css_name: str) -> None:
        """Run one source from fetch to write."""
        document = None
        try:
            css = await self._fetch_css(source)
            if css is not None:
                document = self._build_document(source, css, css_name)
            if document is not None:
                self._prefetch(document)
                previous = self._claimed.get(source.index - 1)
                if previous is not None:
                    await previous.wait()
                self._claim(document)
        finally:
            self._claimed[source.index].set()

        if document is not None:
            await self._complete(document)

    def _advance(self, source: FontSource, state: SourceState, error: Optional[Exception] = None) -> None:
        self.report.set_state(source, state, error)
        logger.debug(f"[{source.index}] {source.url} -> {state.value}")

    def _fail_source(self, source: FontSource, error: DownloaderError) -> None:
        self.report.record_failure()
        self.progress.error(str(error))
        self._advance(source, SourceState.ERRORED, error)

    async def _fetch_css(self, source: FontSource) -> Optional[str]:
        self.progress.info(f"Downloading CSS: '{source.url}'.")
        try:
            css = await fetch_css(self.client, source.url)
        except DownloaderError as e:
            self._fail_source(source, e)
            return None
        self._advance(source, SourceState.CSS_FETCHED)
        self.progress.detail(f"Downloaded CSS content ({len(css)} bytes)")
        return css

    def _build_document(self, source: FontSource, css: str, filename: str) -> Optional[CssDocument]:
        try:
            urls = extract_font_urls(css, source.url)
        except DownloaderError as e:
            self._fail_source(source, e)
            return None

        faces = faces_by_url(css)
        document = CssDocument(source=source, css=css, filename=filename)
        for url in urls:
            face = faces.get(url)
            name = font_filename(url, face, self.options.naming)
            document.assets.append(FontAsset(url=url, filename=name, path=self.options.output_dir / name, face=face))

        self._advance(source, SourceState.URLS_EXTRACTED)
        self.progress.detail(f"Found {len(document.assets)} font file(s) in the CSS")
        return document

    def _prefetch(self, document: CssDocument) -> None:
        """Start fetching the fonts of a document before its paths are claimed."""
        for asset in document.assets:
            if asset.url in self._prefetches or asset.path in self._owners:
                continue
            if asset.path.exists() and not self.options.overwrite:
                continue
            task = asyncio.ensure_future(fetch_font(self.client, asset.url, self._semaphore))
            # The owner's download re-raises the error; unclaimed results are dropped
            task.add_done_callback(lambda t: t.cancelled() or t.exception())
            self._prefetches[asset.url] = task

    def _claim(self, document: CssDocument) -> None:
        """Register destination paths. Called in argument order."""
        for asset in document.assets:
            owner = self._owners.setdefault(asset.path, asset)
            if owner is not asset and owner.url != asset.url:
                self.progress.warning(
                    f"'{asset.url}' and '{owner.url}' both map to '{asset.filename}'; keeping the first one"
                )

    async def _complete(self, document: CssDocument) -> None:
        source = document.source

        await asyncio.gather(*(self._resolve(asset) for asset in document.assets))

        failed = [asset for asset in document.assets if not asset.ok]
        if failed:
            error = failed[0].error
            self.progress.error(
                f"Not writing CSS for '{source.url}': {len(failed)} of {len(document.assets)} font file(s) failed"
            )
            self._advance(source, SourceState.ERRORED, error)
            return
        self._advance(source, SourceState.FONTS_FETCHED)

        try:
            new_css = rewrite_css(document.css, document.url_to_filename(),
                                  self.options.fonts_prefix, source.url)
        except DownloaderError as e:
            self._fail_source(source, e)
            return
        self._advance(source, SourceState.REWRITTEN)

        css_path = self.options.output_dir / document.filename
        self.progress.detail(f"Writing CSS file with updated font paths: {document.filename}")
        try:
            outcome = await self.writer.write(css_path, new_css)
        except DownloaderError as e:
            self._fail_source(source, e)
            return
        self.report.record_write(outcome)
        if outcome is WriteOutcome.SKIPPED:
            self.progress.info(SKIP_MESSAGE.format(path=css_path))
        else:
            self.progress.info(f"Wrote CSS file to '{css_path}'.")
        self._advance(source, SourceState.WRITTEN)

    async def _resolve(self, asset: FontAsset) -> None:
        """Settle one asset, sharing the download with every asset of the same path."""
        owner = self._owners[asset.path]
        task = self._downloads.get(asset.path)
        if task is None:
            task = self._downloads[asset.path] = asyncio.ensure_future(self._download(owner))
        try:
            asset.status = await task
        except DownloaderError as e:
            asset.fail(e)

    async def _fetch(self, asset: FontAsset) -> bytes:
        task = self._prefetches.pop(asset.url, None)
        if task is None:
            return await fetch_font(self.client, asset.url, self._semaphore)
        return await task

    async def _download(self, asset: FontAsset) -> AssetStatus:
        """Fetch and write one font file. Runs once per destination path."""
        if asset.path.exists() and not self.options.overwrite:
            self.report.record_write(WriteOutcome.SKIPPED)
            self.progress.info(SKIP_MESSAGE.format(path=asset.path))
            return AssetStatus.SKIPPED

        self.progress.info(f"Downloading font file: '{asset.url}'.")
        if asset.face is not None:
            for line in asset.face.describe():
                self.progress.detail(line)
        try:
            asset.fill(await self._fetch(asset))
            self.progress.detail(f"Downloaded font file ({len(asset.content)} bytes)")
            outcome = await self.writer.write(asset.path, asset.content)
            asset.content = None
        except DownloaderError as e:
            self.report.record_failure()
            self.progress.error(str(e))
            raise

        self.report.record_write(outcome)
        if outcome is WriteOutcome.SKIPPED:
            self.progress.info(SKIP_MESSAGE.format(path=asset.path))
            return AssetStatus.SKIPPED
        self.progress.info(f"Wrote font file to '{asset.path}'.")
        return AssetStatus.WRITTEN


async def download_async(urls: Sequence[str], options: DownloadOptions,
                         client: Optional[HttpClient] = None) -> RunReport:
    """Run the pipeline on an already running event loop."""
    own_client = client is None
    client = client or HttpClient(timeout=options.timeout, user_agent=options.user_agent)
    try:
        return await Orchestrator(options, client).run(urls)
    finally:
        if own_client:
            client.close()


def download(urls: Sequence[str], options: DownloadOptions, client: Optional[HttpClient] = None) -> RunReport:
    """Blocking entry point: download every stylesheet in urls and its fonts."""
    return asyncio.run(download_async(urls, options, client))
