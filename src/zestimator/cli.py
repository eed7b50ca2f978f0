"""Command-line interface for Zestimator."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

import aiohttp
import click
import structlog
from rich.console import Console
from rich.table import Table

from zestimator import __version__
from zestimator.config.config import Config, load_config
from zestimator.exceptions import FailureKind, ZestimatorError
from zestimator.extractor.engine import extract_listing, extract_valuation
from zestimator.lookup import get_zestimate, scrape_listing
from zestimator.observability.logging import configure_logging

console = Console()
err_console = Console(stderr=True)
logger = structlog.get_logger(__name__)

# Each failure kind needs a different remedy, so each gets its own exit code
EXIT_CODES = {
    FailureKind.ADDRESS_RESOLUTION_FAILED: 3,
    FailureKind.EMPTY_RESPONSE: 4,
    FailureKind.BOT_BLOCK_DETECTED: 5,
    FailureKind.HTTP_STATUS_ERROR: 6,
    FailureKind.TIMEOUT: 7,
    FailureKind.VALUATION_EXTRACTION_FAILED: 8,
    FailureKind.DECODE_FAILED: 9,
}
NETWORK_ERROR_EXIT_CODE = 10


def _fail(error: Exception) -> None:
    """Report a failure on stderr and exit with the matching code."""
    if isinstance(error, ZestimatorError):
        err_console.print(f"[red]Error ({error.kind.value}):[/red] {error}")
        sys.exit(EXIT_CODES[error.kind])
    err_console.print(f"[red]Network error:[/red] {error}")
    sys.exit(NETWORK_ERROR_EXIT_CODE)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the config file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """Zestimator - Zillow home-value estimates by address."""
    ctx.ensure_object(dict)
    loaded = load_config(Path(config) if config else None)
    if log_level:
        loaded = loaded.model_copy(
            update={"monitoring": loaded.monitoring.model_copy(update={"log_level": log_level})}
        )
    ctx.obj["config"] = loaded
    configure_logging(loaded.monitoring)


@cli.command()
@click.argument("address")
@click.option("--url", "home_details_url", help="Home details URL to use instead of resolving the address")
@click.pass_context
def lookup(ctx: click.Context, address: str, home_details_url: Optional[str]) -> None:
    """Look up the zestimate for ADDRESS."""
    config: Config = ctx.obj["config"]
    try:
        result = asyncio.run(get_zestimate(address.strip(), home_details_url=home_details_url, config=config))
    except (ZestimatorError, aiohttp.ClientError) as e:
        _fail(e)
        return

    table = Table(show_header=False, box=None)
    table.add_row("Address", result.address)
    table.add_row("Home Details URL", result.home_details_url)
    table.add_row("Zestimate", result.zestimate_formatted)
    console.print(table)


@cli.command()
@click.argument("url")
@click.pass_context
def scrape(ctx: click.Context, url: str) -> None:
    """Scrape the address and zestimate from a listing URL."""
    config: Config = ctx.obj["config"]
    try:
        result = asyncio.run(scrape_listing(url, config=config))
    except (ZestimatorError, aiohttp.ClientError) as e:
        _fail(e)
        return
    console.print(str(result), markup=False)


@cli.command()
@click.argument("html_file", type=click.File("r", encoding="utf-8"))
@click.option("--listing", is_flag=True, help="Also extract the address")
@click.pass_context
def extract(ctx: click.Context, html_file, listing: bool) -> None:
    """Extract the zestimate from a saved listing page."""
    config: Config = ctx.obj["config"]
    html = html_file.read()
    signatures = config.extraction.bot_signatures
    try:
        if listing:
            console.print(str(extract_listing(html, signatures=signatures)), markup=False)
            return
        valuation = extract_valuation(html, signatures=signatures)
    except ZestimatorError as e:
        _fail(e)
        return
    console.print(f"{valuation.value} (source: {valuation.source.value})", markup=False)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
