"""Main entry point for mcasset-tools CLI."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Any

import click
import structlog
from rich.console import Console
from rich.markup import escape

from mcasset_tools import __version__
from mcasset_tools.core.assembler import ArchiveAssembler
from mcasset_tools.core.client import MetaClient
from mcasset_tools.core.config import AppConfig
from mcasset_tools.core.errors import MCAssetError

# Configure structured logging
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

USAGE = """\
Usage: mcasset-tools [version, e.g. 1.16.3] [target zip path]
Note: Versions below 1.7.3 will not work due to a different asset format

https://github.com/natanalt/mcassetdownloader <3"""


def _configure_log_level(level: str) -> None:
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(level)


@click.command(context_settings={"help_option_names": ["--help"]})
@click.version_option(version=__version__, prog_name="mcasset-tools")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Configuration file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output")
@click.argument("args", nargs=-1, metavar="VERSION OUTPUT")
def main(
    config: Path | None,
    verbose: bool,
    debug: bool,
    args: tuple[str, ...],
) -> None:
    """Download a game version's assets into a single zip archive."""
    console = Console(highlight=False)

    if args and args[0].lower() == "help":
        console.print(USAGE, markup=False)
        return

    if len(args) != 2:
        console.print(USAGE, markup=False)
        sys.exit(2)

    version_id, output = args
    output_path = Path(output)

    try:
        app_config = AppConfig.load(config)
    except Exception as e:
        logger.error("Failed to load configuration", error=str(e))
        console.print(f"[red]Error: Failed to load configuration: {escape(str(e))}[/red]")
        sys.exit(1)

    if verbose or debug:
        app_config.log_level = "DEBUG" if debug else "INFO"
    _configure_log_level(app_config.log_level)

    if output_path.exists():
        if not click.confirm(f"File {output_path} already exists. Overwrite it?", default=False):
            console.print("Aborting.")
            return

    logger.debug("CLI initialized", config=app_config.model_dump())

    try:
        with MetaClient(config=app_config.http) as client:
            console.print("Retrieving version data... Version manifest URI:")
            console.print(client.manifest_url)
            catalog = client.resolve_catalog()

            if version_id not in catalog:
                console.print(f"[red]Version {escape(version_id)} not found[/red]")
                sys.exit(1)

            assembler = ArchiveAssembler(client, config=app_config, console=console)
            started = time.monotonic()
            assembler.assemble(catalog, version_id, output_path)
            elapsed = time.monotonic() - started
    except MCAssetError as e:
        logger.error("download_failed", version=version_id, error=str(e))
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"[green]Done! Took {int(elapsed)} seconds[/green]")


def handle_exception(exc_type: type[BaseException], exc_value: BaseException, exc_traceback: Any) -> None:
    """Handle uncaught exceptions."""
    if issubclass(exc_type, KeyboardInterrupt):
        logger.info("Operation cancelled by user")
        sys.exit(1)

    logger.error(
        "Uncaught exception",
        exc_info=(exc_type, exc_value, exc_traceback),
    )
    sys.exit(1)


if __name__ == "__main__":
    sys.excepthook = handle_exception

    try:
        main()
    except Exception as e:
        logger.error("CLI execution failed", error=str(e))
        sys.exit(1)
