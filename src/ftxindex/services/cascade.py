"""Cascading delete of a document and everything that references it.

Deleting a document touches three indexes that share no transaction: the
document record itself, its paragraphs, and its merged defined terms. The
three branches run concurrently and never cancel each other; each yields a
``BranchOutcome`` and the caller decides what a partial failure means.

Paragraphs and definitions are discovered with one filtered search per
index, bounded by the configured discovery limit. A document with more
matches than the limit keeps the surplus records until the delete is run
again; such branches are flagged as truncated.
"""

from __future__ import annotations

import asyncio

from ftxindex.config.defaults import (
    DEFAULT_DISCOVERY_LIMIT,
    DEFS_INDEX_SPEC,
    DOCS_INDEX_SPEC,
    PARAS_INDEX_SPEC,
    IndexSpec,
)
from ftxindex.lib.errors import SearchServiceAPIError, SearchServiceError
from ftxindex.lib.logging_config import get_logger
from ftxindex.models.report import BranchOutcome, DeleteReport, OutcomeStatus
from ftxindex.services.search_client import SearchServiceClient, build_equality_filter

logger = get_logger(__name__)

DOC_ID_FIELD = "doc_id"


class CascadeDeleter:
    """Removes a document and its dependent records from all indexes."""

    def __init__(
        self,
        client: SearchServiceClient,
        discovery_limit: int = DEFAULT_DISCOVERY_LIMIT,
        paragraphs_index: IndexSpec = PARAS_INDEX_SPEC,
        definitions_index: IndexSpec = DEFS_INDEX_SPEC,
        documents_index: IndexSpec = DOCS_INDEX_SPEC,
    ) -> None:
        self.client = client
        self.discovery_limit = discovery_limit
        self.paragraphs_index = paragraphs_index
        self.definitions_index = definitions_index
        self.documents_index = documents_index

    async def delete_document(self, doc_id: str) -> DeleteReport:
        """Delete a document and cascade to its paragraphs and definitions.

        Args:
            doc_id: Normalized document identifier

        Returns:
            DeleteReport with one outcome per index
        """
        logger.info(f"Starting deletion of document '{doc_id}' and related content")
        results = await asyncio.gather(
            self._delete_document_record(doc_id),
            self._delete_dependents(self.paragraphs_index, doc_id),
            self._delete_dependents(self.definitions_index, doc_id),
            return_exceptions=True,
        )
        indexes = [self.documents_index, self.paragraphs_index, self.definitions_index]
        document, paragraphs, definitions = (
            _as_outcome(spec.name, result)
            for spec, result in zip(indexes, results, strict=True)
        )
        return DeleteReport(
            doc_id=doc_id,
            document=document,
            paragraphs=paragraphs,
            definitions=definitions,
        )

    async def _delete_document_record(self, doc_id: str) -> BranchOutcome:
        index = self.documents_index.name
        logger.info(f"Deleting document '{doc_id}' from {index}")
        try:
            data = await self.client.delete_document(index, doc_id)
        except SearchServiceAPIError as e:
            if e.is_not_found:
                logger.info(f"Document '{doc_id}' not found in {index}")
                return BranchOutcome(index=index, status=OutcomeStatus.NOT_FOUND)
            logger.error(f"Error deleting document from {index}: {e}")
            return BranchOutcome.failure(index, e)
        except SearchServiceError as e:
            logger.error(f"Error deleting document from {index}: {e}")
            return BranchOutcome.failure(index, e)

        logger.info(f"Document deleted from {index}")
        return BranchOutcome(
            index=index,
            status=OutcomeStatus.SUCCEEDED,
            count=1,
            task_uid=data.get("taskUid"),
        )

    async def _delete_dependents(self, spec: IndexSpec, doc_id: str) -> BranchOutcome:
        """Find records of one index that reference ``doc_id`` and delete them."""
        index = spec.name
        logger.info(f"Finding records for document '{doc_id}' in {index}")
        try:
            hits = await self.client.search(
                index,
                filter=build_equality_filter(DOC_ID_FIELD, doc_id),
                limit=self.discovery_limit,
            )
        except SearchServiceAPIError as e:
            if e.is_not_found:
                # No index means nothing can reference the document
                logger.info(f"Index {index} does not exist; nothing to delete")
                return BranchOutcome(index=index, status=OutcomeStatus.NO_MATCHES)
            logger.error(f"Error searching {index}: {e}")
            return BranchOutcome.failure(index, e)
        except SearchServiceError as e:
            logger.error(f"Error searching {index}: {e}")
            return BranchOutcome.failure(index, e)

        record_ids = [
            str(hit[spec.primary_key]) for hit in hits if spec.primary_key in hit
        ]
        if not record_ids:
            logger.info(f"No records found for document '{doc_id}' in {index}")
            return BranchOutcome(index=index, status=OutcomeStatus.NO_MATCHES)

        truncated = len(hits) >= self.discovery_limit
        if truncated:
            logger.warning(
                f"Discovery in {index} hit the limit of {self.discovery_limit}; "
                f"records beyond it remain until the delete is run again"
            )

        logger.info(f"Deleting {len(record_ids)} records from {index}")
        try:
            data = await self.client.delete_documents(index, record_ids)
        except SearchServiceError as e:
            logger.error(f"Error deleting records from {index}: {e}")
            return BranchOutcome.failure(index, e)

        logger.info(f"Records deleted from {index}")
        return BranchOutcome(
            index=index,
            status=OutcomeStatus.SUCCEEDED,
            count=len(record_ids),
            truncated=truncated,
            task_uid=data.get("taskUid"),
        )


def _as_outcome(index: str, result: BranchOutcome | BaseException) -> BranchOutcome:
    if isinstance(result, BranchOutcome):
        return result
    if not isinstance(result, Exception):
        raise result
    logger.error(f"Unexpected error processing {index}: {result}", exc_info=result)
    return BranchOutcome.failure(index, result)
