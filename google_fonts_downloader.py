"""
google-fonts-downloader
Downloads Google Fonts stylesheets and their font files for self-hosting.

Usage:
  google-fonts-downloader 'https://fonts.googleapis.com/css2?family=Roboto'

Exit status: 0 when every stylesheet was written (or skipped as already
present), 1 when any URL could not be fully processed, 2 on usage errors.
"""
import sys
from pathlib import Path
from typing import NoReturn, Tuple

import click

from config import DEBUG, DOWNLOADER, VERSION
from downloader import DownloadOptions, Naming, download
from downloader.errors import IoError
from downloader.report import EXIT_FAILED
from logging_config import setup_logging, get_logger

logger = get_logger(__name__)


def _setup_logging(quiet: bool, verbose: bool) -> None:
    # Progress goes to stdout via click; the console log only shows problems
    # unless --verbose is given. --quiet turns it off entirely.
    setup_logging(
        console_level="DEBUG" if verbose else "WARNING",
        file_level=DEBUG["log_level"],
        console=not quiet,
        log_file=DEBUG["log_file"],
        force=True,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("urls", nargs=-1, required=True, metavar="URL...")
@click.option("-w", "--overwrite", is_flag=True, help="Whether to overwrite existing files.")
@click.option("-q", "--quiet", is_flag=True,
              help="Suppress informational output, including verbose output.")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.option("-o", "--output", "output_dir", type=click.Path(file_okay=False, path_type=Path),
              default=DOWNLOADER["output_dir"], show_default=True,
              help="The name of the output directory, will be created if it doesn't exist.")
@click.option("--fonts-prefix", default=DOWNLOADER["fonts_prefix"], show_default=True,
              help="Prefix for font files in CSS output.")
@click.option("--naming", type=click.Choice([n.value for n in Naming]), default=Naming.URL.value,
              show_default=True,
              help="Font filenames: last URL segment, or <family>-<weight>-<style>-<subset>.<ext>.")
@click.version_option(VERSION, prog_name="google-fonts-downloader")
def cli(urls: Tuple[str, ...], overwrite: bool, quiet: bool, verbose: bool,
        output_dir: Path, fonts_prefix: str, naming: str) -> NoReturn:
    """Download the Google Fonts CSS at each URL and every font it references."""
    _setup_logging(quiet, verbose)

    options = DownloadOptions(
        output_dir=output_dir,
        overwrite=overwrite,
        quiet=quiet,
        verbose=verbose,
        fonts_prefix=fonts_prefix,
        naming=Naming(naming),
    )
    logger.debug(f"Options: {options}")

    try:
        report = download(list(urls), options)
    except IoError as e:
        click.echo(f"Failed to create output directory: '{e.path}' ({e.cause}).", err=True)
        sys.exit(EXIT_FAILED)

    if not quiet:
        click.echo(report.summary())
    for result in report.errored:
        logger.debug(f"{result.source.url} ended as {result.state.value}: {result.error}")
    sys.exit(report.exit_code)


if __name__ == "__main__":
    cli()
