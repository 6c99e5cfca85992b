"""Tests for the command line interface"""
from unittest.mock import patch

import pytest
from click.testing import CliRunner

import google_fonts_downloader
from downloader.models import Naming
from downloader.orchestrator import download

from conftest import ROBOTO_CSS_URL, ROBOTO_FONT_URL, make_client


@pytest.fixture
def run_cli(roboto_pages):
    """Invoke the CLI with the network replaced by the fake client"""
    calls = []

    def fake_download(urls, options):
        calls.append(options)
        return download(urls, options, make_client(roboto_pages))

    def invoke(*args):
        with patch.object(google_fonts_downloader, "download", side_effect=fake_download):
            result = CliRunner().invoke(google_fonts_downloader.cli, list(args))
        return result, calls[-1] if calls else None

    return invoke


def test_downloads_into_output_dir(run_cli, tmp_path):
    out = tmp_path / "fonts"
    result, options = run_cli("-o", str(out), ROBOTO_CSS_URL)

    assert result.exit_code == 0, result.output
    assert (out / "abc.woff2").read_bytes() == b"roboto-bytes"
    assert "url(./abc.woff2)" in (out / "roboto.css").read_text()
    assert f"Downloading CSS: '{ROBOTO_CSS_URL}'." in result.output
    assert "Processed 1/1 stylesheet(s): 2 written, 0 skipped, 0 failed." in result.output


def test_options_are_passed_through(run_cli, tmp_path):
    _, options = run_cli("-w", "-v", "-o", str(tmp_path), "--fonts-prefix", "/static/",
                         "--naming", "descriptive", ROBOTO_CSS_URL)

    assert options.overwrite is True
    assert options.verbose is True
    assert options.quiet is False
    assert options.output_dir == tmp_path
    assert options.fonts_prefix == "/static/"
    assert options.naming is Naming.DESCRIPTIVE


def test_defaults(run_cli, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result, options = run_cli(ROBOTO_CSS_URL)

    assert result.exit_code == 0, result.output
    assert options.fonts_prefix == "./"
    assert options.naming is Naming.URL
    assert options.overwrite is False
    assert (tmp_path / "fonts" / "roboto.css").exists()


def test_second_run_reports_skips(run_cli, tmp_path):
    run_cli("-o", str(tmp_path), ROBOTO_CSS_URL)
    result, _ = run_cli("-o", str(tmp_path), ROBOTO_CSS_URL)

    assert result.exit_code == 0
    assert "file already exists, use --overwrite to overwrite" in result.output
    assert "0 written, 2 skipped" in result.output


def test_partial_failure_exit_code(run_cli, tmp_path):
    result, _ = run_cli("-o", str(tmp_path), "https://fonts.googleapis.com/css2?family=Missing", ROBOTO_CSS_URL)

    assert result.exit_code == 1
    assert (tmp_path / "roboto.css").exists()
    assert "HTTP 404" in result.output


def test_quiet_still_sets_exit_code(run_cli, tmp_path):
    result, _ = run_cli("-q", "-o", str(tmp_path), "https://fonts.googleapis.com/css2?family=Missing")

    assert result.exit_code == 1
    assert result.output == ""


def test_verbose_shows_font_details(run_cli, tmp_path):
    result, _ = run_cli("-v", "-o", str(tmp_path), ROBOTO_CSS_URL)

    assert "Font family: Roboto" in result.output
    assert f"Downloading font file: '{ROBOTO_FONT_URL}'." in result.output


def test_unwritable_output_dir(run_cli, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file")
    result, _ = run_cli("-o", str(blocker / "fonts"), ROBOTO_CSS_URL)

    assert result.exit_code == 1
    assert "Failed to create output directory" in result.output


def test_url_is_required():
    result = CliRunner().invoke(google_fonts_downloader.cli, [])
    assert result.exit_code == 2


def test_version():
    result = CliRunner().invoke(google_fonts_downloader.cli, ["--version"])
    assert result.exit_code == 0
    assert "google-fonts-downloader" in result.output
