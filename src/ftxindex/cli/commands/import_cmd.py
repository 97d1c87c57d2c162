"""CLI command for importing an extraction file.

Implements 'ftxindex import', which reads a JSON or JSONL file of
extracted paragraphs and uploads paragraphs, defined terms and document
metadata to the search service.
"""

from __future__ import annotations

import asyncio
import sys

import click

from ftxindex.cli.options import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILED,
    EXIT_OK,
    EXIT_UNEXPECTED,
    connection_options,
)
from ftxindex.cli.output import format_ingest_report
from ftxindex.config.settings import ServiceConfig, load_service_config
from ftxindex.lib.errors import ConfigError
from ftxindex.lib.logging_config import get_logger, setup_logging
from ftxindex.lib.record_reader import read_records
from ftxindex.models.report import IngestReport
from ftxindex.services.ingest import BatchIngestor
from ftxindex.services.search_client import SearchServiceClient

logger = get_logger(__name__)


async def _run_import(config: ServiceConfig, file: str, jsonl: bool) -> IngestReport:
    raw = read_records(file, jsonl=jsonl)
    async with SearchServiceClient(config) as client:
        return await BatchIngestor(client).ingest_raw(raw)


@click.command(name="import")
@click.option(
    "--file",
    "file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Extraction file to import",
)
@click.option(
    "--jsonl",
    is_flag=True,
    help="Treat the file as newline-delimited JSON (one paragraph per line)",
)
@connection_options
def import_cmd(
    file: str, jsonl: bool, host: str, port: int, verbose: bool, quiet: bool
) -> None:
    """Import paragraphs, defined terms and documents from a file.

    The API key is read from the MEILISEARCH_KEY environment variable.

    \b
    EXAMPLES:

        Import a JSON array export:
            ftxindex import --file acme.json

        Import a JSONL export from a remote service:
            ftxindex import --file acme.jsonl --jsonl --host search.local
    """
    setup_logging(verbose=verbose, quiet=quiet)
    logger.info(f"Import command invoked: file={file}, jsonl={jsonl}")

    try:
        config = load_service_config(host=host, port=port)
        report = asyncio.run(_run_import(config, file, jsonl))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.echo(f"Configuration Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_UNEXPECTED)

    click.echo(format_ingest_report(report))
    if not report.success:
        logger.warning(
            f"Import of {report.source_file} finished with "
            f"{len(report.errors)} errors"
        )
        sys.exit(EXIT_FAILED)
    sys.exit(EXIT_OK)
