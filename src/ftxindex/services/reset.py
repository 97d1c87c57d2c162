"""Drop every ftxindex index, used before a full re-index."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from ftxindex.config.defaults import INDEX_SPECS
from ftxindex.lib.errors import SearchServiceAPIError, SearchServiceError
from ftxindex.lib.logging_config import get_logger
from ftxindex.models.report import BranchOutcome, OutcomeStatus, ResetReport
from ftxindex.services.search_client import SearchServiceClient

logger = get_logger(__name__)


async def delete_index(client: SearchServiceClient, index: str) -> BranchOutcome:
    """Delete one index; a missing index counts as deleted."""
    logger.info(f"Deleting '{index}' index")
    try:
        data = await client.delete_index(index)
    except SearchServiceAPIError as e:
        if e.is_not_found:
            logger.info(f"Index '{index}' does not exist or was already deleted")
            return BranchOutcome(index=index, status=OutcomeStatus.NOT_FOUND)
        logger.error(f"Error deleting index '{index}': {e}")
        return BranchOutcome.failure(index, e)
    except SearchServiceError as e:
        logger.error(f"Error deleting index '{index}': {e}")
        return BranchOutcome.failure(index, e)

    task_uid = data.get("taskUid")
    logger.info(f"Index '{index}' deleted (task id: {task_uid})")
    return BranchOutcome(index=index, status=OutcomeStatus.SUCCEEDED, task_uid=task_uid)


async def reset_indexes(
    client: SearchServiceClient,
    indexes: Iterable[str] | None = None,
) -> ResetReport:
    """Delete all indexes concurrently.

    Args:
        client: Search service client
        indexes: Index names (defaults to the paragraphs, definitions and
            documents indexes)

    Returns:
        ResetReport; successful only when every index was deleted or absent
    """
    names = list(indexes) if indexes is not None else [s.name for s in INDEX_SPECS]
    outcomes = await asyncio.gather(*(delete_index(client, name) for name in names))
    return ResetReport(outcomes=list(outcomes))
