"""Tests for the run report"""
import threading

import pytest

from downloader.models import DownloadOptions, FontSource, SourceState, WriteOutcome
from downloader.report import EXIT_FAILED, EXIT_OK, Progress, RunReport


def test_counts_survive_concurrent_updates():
    report = RunReport()

    def worker():
        for _ in range(1000):
            report.record_write(WriteOutcome.WRITTEN)
            report.record_write(WriteOutcome.SKIPPED)
            report.record_failure()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert (report.downloaded, report.skipped, report.failed) == (8000, 8000, 8000)


def test_exit_code_reflects_every_source():
    report = RunReport()
    good, bad = FontSource("https://a", 1), FontSource("https://b", 2)
    report.add_source(good)
    report.add_source(bad)

    report.set_state(good, SourceState.WRITTEN)
    assert report.exit_code == EXIT_FAILED  # bad is still pending

    report.set_state(bad, SourceState.ERRORED, RuntimeError("boom"))
    assert report.exit_code == EXIT_FAILED
    assert [r.source for r in report.errored] == [bad]
    assert "1/2" in report.summary()


def test_all_written_is_success():
    report = RunReport()
    source = FontSource("https://a", 1)
    report.add_source(source)
    for state in (SourceState.CSS_FETCHED, SourceState.URLS_EXTRACTED, SourceState.FONTS_FETCHED,
                  SourceState.REWRITTEN, SourceState.WRITTEN):
        report.set_state(source, state)
    assert report.succeeded
    assert report.exit_code == EXIT_OK


def test_terminal_state_is_final():
    report = RunReport()
    source = FontSource("https://a", 1)
    report.add_source(source)
    report.set_state(source, SourceState.ERRORED)
    with pytest.raises(RuntimeError):
        report.set_state(source, SourceState.WRITTEN)


def test_progress_respects_verbosity(capsys):
    Progress(DownloadOptions(verbose=True)).detail("detail line")
    Progress(DownloadOptions()).detail("hidden detail")
    Progress(DownloadOptions(quiet=True, verbose=True)).detail("quiet wins")
    Progress(DownloadOptions(quiet=True)).info("hidden info")
    Progress(DownloadOptions(quiet=True)).error("hidden error")
    Progress(DownloadOptions()).error("shown error")

    captured = capsys.readouterr()
    assert captured.out == "  detail line\n"
    assert captured.err == "Error: shown error\n"
