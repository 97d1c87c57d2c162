"""CLI commands for removing content from the search service.

Implements 'ftxindex delete-doc', which removes one document together
with its paragraphs and defined terms, and 'ftxindex delete-indexes',
which drops all three indexes ahead of a full re-index.
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
from ftxindex.cli.output import format_delete_report, format_reset_report
from ftxindex.config.settings import ServiceConfig, load_service_config
from ftxindex.lib.errors import ConfigError
from ftxindex.lib.identifiers import normalize_identifier
from ftxindex.lib.logging_config import get_logger, setup_logging
from ftxindex.models.report import DeleteReport, ResetReport
from ftxindex.services.cascade import CascadeDeleter
from ftxindex.services.reset import reset_indexes
from ftxindex.services.search_client import SearchServiceClient

logger = get_logger(__name__)


async def _run_delete(config: ServiceConfig, doc_id: str) -> DeleteReport:
    async with SearchServiceClient(config) as client:
        deleter = CascadeDeleter(client, discovery_limit=config.discovery_limit)
        return await deleter.delete_document(doc_id)


async def _run_reset(config: ServiceConfig) -> ResetReport:
    async with SearchServiceClient(config) as client:
        return await reset_indexes(client)


def resolve_doc_id(doc_id: str | None, doc_name: str | None) -> str:
    """Pick the document id from ``--doc-id`` or a normalized ``--doc-name``.

    Raises:
        ConfigError: If neither or both are given
    """
    if doc_id and doc_name:
        raise ConfigError("doc-id", "use either --doc-id or --doc-name, not both")
    if doc_name:
        return normalize_identifier(doc_name)
    if not doc_id:
        raise ConfigError("doc-id", "Document ID is required (--doc-id or --doc-name)")
    return doc_id


@click.command(name="delete-doc")
@click.option("--doc-id", default=None, help="Identifier of the document to delete")
@click.option(
    "--doc-name",
    default=None,
    help="Document name as imported; converted to its identifier",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Max paragraphs/definitions discovered per index (default: 1000)",
)
@connection_options
def delete_doc(
    doc_id: str | None,
    doc_name: str | None,
    limit: int | None,
    host: str,
    port: int,
    verbose: bool,
    quiet: bool,
) -> None:
    """Delete a document and its paragraphs and definitions.

    The three deletions run concurrently. A failure in one does not undo
    the others; re-running the command converges to a clean state.

    \b
    EXAMPLES:

        ftxindex delete-doc --doc-id acme_corp

        ftxindex delete-doc --doc-name "Acme Corp"
    """
    setup_logging(verbose=verbose, quiet=quiet)

    try:
        target = resolve_doc_id(doc_id, doc_name)
        overrides = {"discovery_limit": limit} if limit else {}
        config = load_service_config(host=host, port=port, **overrides)
        report = asyncio.run(_run_delete(config, target))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.echo(f"Configuration Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_UNEXPECTED)

    click.echo(format_delete_report(report))
    if not report.success:
        logger.warning(
            f"Cascading delete of '{report.doc_id}' was only partially applied"
        )
        sys.exit(EXIT_FAILED)
    sys.exit(EXIT_OK)


@click.command(name="delete-indexes")
@connection_options
def delete_indexes(host: str, port: int, verbose: bool, quiet: bool) -> None:
    """Delete the paragraphs, definitions and documents indexes.

    Missing indexes count as deleted.
    """
    setup_logging(verbose=verbose, quiet=quiet)

    try:
        config = load_service_config(host=host, port=port)
        report = asyncio.run(_run_reset(config))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.echo(f"Configuration Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_UNEXPECTED)

    click.echo(format_reset_report(report))
    if not report.success:
        logger.warning("Some indexes could not be deleted")
        sys.exit(EXIT_FAILED)
    sys.exit(EXIT_OK)
