"""
Run report and user-facing progress output.
"""

import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

import click

from logging_config import get_logger
from .models import DownloadOptions, FontSource, SourceState, WriteOutcome

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1


@dataclass
class SourceResult:
    source: FontSource
    state: SourceState = SourceState.PENDING
    error: Optional[Exception] = None


class RunReport:
    """
    Aggregate counters for one invocation.

    Shared by every task of the run; all mutation goes through one lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.downloaded = 0
        self.skipped = 0
        self.failed = 0
        self._sources: Dict[int, SourceResult] = {}

    def add_source(self, source: FontSource) -> None:
        with self._lock:
            self._sources[source.index] = SourceResult(source)

    def record_write(self, outcome: WriteOutcome) -> None:
        with self._lock:
            if outcome is WriteOutcome.SKIPPED:
                self.skipped += 1
            else:
                self.downloaded += 1

    def record_failure(self) -> None:
        with self._lock:
            self.failed += 1

    def set_state(self, source: FontSource, state: SourceState, error: Optional[Exception] = None) -> None:
        with self._lock:
            result = self._sources.setdefault(source.index, SourceResult(source))
            if result.state.is_terminal:
                raise RuntimeError(f"{source.url} already finished as {result.state.value}")
            result.state = state
            if error is not None:
                result.error = error

    def state_of(self, source: FontSource) -> SourceState:
        with self._lock:
            return self._sources[source.index].state

    @property
    def sources(self) -> List[SourceResult]:
        with self._lock:
            return [self._sources[i] for i in sorted(self._sources)]

    @property
    def errored(self) -> List[SourceResult]:
        return [r for r in self.sources if r.state is not SourceState.WRITTEN]

    @property
    def succeeded(self) -> bool:
        return not self.errored

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.succeeded else EXIT_FAILED

    def summary(self) -> str:
        total = len(self.sources)
        done = total - len(self.errored)
        return (f"Processed {done}/{total} stylesheet(s): "
                f"{self.downloaded} written, {self.skipped} skipped, {self.failed} failed.")

    def __repr__(self) -> str:
        return (f"<RunReport downloaded={self.downloaded} skipped={self.skipped} "
                f"failed={self.failed} sources={len(self._sources)}>")


class Progress:
    """Prints progress at the verbosity carried by DownloadOptions."""

    def __init__(self, options: DownloadOptions):
        self.options = options

    def info(self, message: str) -> None:
        if self.options.show_info:
            click.echo(message)

    def detail(self, message: str) -> None:
        if self.options.show_detail:
            click.echo(f"  {message}")

    def error(self, message: str) -> None:
        logger.debug(message)
        if self.options.show_info:
            click.echo(f"Error: {message}", err=True)

    def warning(self, message: str) -> None:
        logger.warning(message)
