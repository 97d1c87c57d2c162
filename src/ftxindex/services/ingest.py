"""Batch ingest of one extraction file into the three indexes.

An ingest run turns a batch of raw paragraph records into three record
sets that share identifiers:

- paragraphs, each tagged with its ``doc_id``, ``File_Para_ID`` and
  ``Filename``;
- defined terms, merged from every paragraph that defines the same term;
- documents, one per distinct ``Doc_Name``.

Index preparation (existence check, creation, attribute settings) has to
finish before anything is uploaded; the three uploads are independent of
each other and run concurrently.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ftxindex.config.defaults import (
    DEFS_INDEX_SPEC,
    DOCS_INDEX_SPEC,
    PARAS_INDEX_SPEC,
    IndexSpec,
)
from ftxindex.lib.definitions import aggregate_definitions
from ftxindex.lib.errors import RecordParseError, SearchServiceError
from ftxindex.lib.identifiers import (
    build_composite_id,
    document_filename,
    normalize_identifier,
)
from ftxindex.lib.logging_config import get_logger
from ftxindex.lib.record_reader import RawBatch
from ftxindex.models.records import DefinedTermRecord, DocumentRecord, ParagraphRecord
from ftxindex.models.report import BranchOutcome, IngestReport, OutcomeStatus
from ftxindex.services.search_client import SearchServiceClient

logger = get_logger(__name__)


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class IngestBatch:
    """Records built from one input batch, ready for upload."""

    source_file: str
    paragraphs: list[ParagraphRecord] = field(default_factory=list)
    definitions: list[DefinedTermRecord] = field(default_factory=list)
    documents: list[DocumentRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.paragraphs or self.definitions or self.documents)


def adapt_records(
    raw_records: Sequence[Any],
) -> tuple[list[ParagraphRecord], list[RecordParseError]]:
    """Adapt raw JSON values into paragraph records.

    Every JSON object is kept whatever its field values are; values that
    are not objects are skipped and reported.

    Args:
        raw_records: Decoded JSON values in file order

    Returns:
        Tuple of valid paragraphs and per-record errors
    """
    paragraphs: list[ParagraphRecord] = []
    errors: list[RecordParseError] = []
    for position, raw in enumerate(raw_records):
        source = f"record {position}"
        if not isinstance(raw, dict):
            errors.append(
                RecordParseError(
                    source, f"expected a JSON object, got {type(raw).__name__}"
                )
            )
            continue
        paragraphs.append(ParagraphRecord.model_validate(raw))
    return paragraphs, errors


def build_batch(
    source_file: str,
    paragraphs: Iterable[ParagraphRecord],
    import_date: str | None = None,
) -> IngestBatch:
    """Derive paragraphs, documents and defined terms for one batch.

    Documents are keyed by the normalized ``Doc_Name``; the first record
    seen for a document supplies its metadata. Paragraphs keep every input
    field and gain ``doc_id`` (when they name a document), ``File_Para_ID``
    and ``Filename``.

    Args:
        source_file: Base name of the input file
        paragraphs: Validated records in file order
        import_date: Timestamp stamped on new documents (defaults to now)

    Returns:
        IngestBatch with the three record sets
    """
    stamp = import_date or utc_timestamp()
    filename = document_filename(source_file)

    documents: dict[str, DocumentRecord] = {}
    enriched: list[ParagraphRecord] = []
    for paragraph in paragraphs:
        update: dict[str, Any] = {
            "file_para_id": build_composite_id(source_file, paragraph.para_id),
            "filename": filename,
        }
        if paragraph.doc_name:
            doc_id = normalize_identifier(paragraph.doc_name)
            update["doc_id"] = doc_id
            if doc_id not in documents:
                documents[doc_id] = DocumentRecord(
                    doc_id=doc_id,
                    name=paragraph.doc_name,
                    filename=filename,
                    sector=paragraph.sector or "",
                    industry=paragraph.industry or "",
                    import_date=stamp,
                )
        enriched.append(paragraph.model_copy(update=update))

    definitions = aggregate_definitions(enriched, source_file)
    return IngestBatch(
        source_file=source_file,
        paragraphs=enriched,
        definitions=list(definitions.values()),
        documents=list(documents.values()),
    )


class BatchIngestor:
    """Uploads batches into the paragraphs, definitions and documents indexes.

    Example:
        >>> async with SearchServiceClient(config) as client:
        ...     report = await BatchIngestor(client).ingest_raw(read_records(path))
    """

    def __init__(
        self,
        client: SearchServiceClient,
        paragraphs_index: IndexSpec = PARAS_INDEX_SPEC,
        definitions_index: IndexSpec = DEFS_INDEX_SPEC,
        documents_index: IndexSpec = DOCS_INDEX_SPEC,
    ) -> None:
        self.client = client
        self.paragraphs_index = paragraphs_index
        self.definitions_index = definitions_index
        self.documents_index = documents_index

    @property
    def index_specs(self) -> list[IndexSpec]:
        return [self.paragraphs_index, self.definitions_index, self.documents_index]

    async def ingest_raw(self, raw: RawBatch) -> IngestReport:
        """Ingest a batch read from disk, keeping its decode errors.

        Args:
            raw: Output of ``read_records``

        Returns:
            IngestReport covering decode, validation and upload errors
        """
        report = await self.ingest(raw.source_file, raw.records)
        if raw.errors:
            report.errors[:0] = [str(e) for e in raw.errors]
            report.skipped_records += len(raw.errors)
            report.no_op = report.no_op and not raw.errors
        return report

    async def ingest(self, source_file: str, records: Sequence[Any]) -> IngestReport:
        """Ingest one batch of raw records.

        Args:
            source_file: Base name of the input file
            records: Decoded JSON values in file order

        Returns:
            IngestReport with counts, uploaded indexes and errors
        """
        report = IngestReport(source_file=source_file)
        if not records:
            logger.info(f"No records found in {source_file}; nothing to import")
            report.no_op = True
            return report

        paragraphs, parse_errors = adapt_records(records)
        for error in parse_errors:
            logger.warning(f"Skipping {error}")
        report.skipped_records = len(parse_errors)
        report.errors.extend(str(e) for e in parse_errors)

        batch = build_batch(source_file, paragraphs)
        report.paragraphs = len(batch.paragraphs)
        report.definitions = len(batch.definitions)
        report.documents = len(batch.documents)
        logger.info(
            f"Found {report.paragraphs} paragraphs, "
            f"{report.definitions} defined terms, "
            f"{report.documents} documents in {source_file}"
        )

        if batch.is_empty:
            logger.warning(f"No usable records in {source_file}; nothing uploaded")
            return report

        ready = await self.prepare_indexes(report)
        outcomes = await self.upload(batch, ready)
        for outcome in outcomes:
            if outcome.succeeded:
                report.uploaded.append(outcome.index)
            else:
                report.errors.append(
                    f"Upload to '{outcome.index}' failed: {outcome.error}"
                )
        return report

    async def prepare_indexes(self, report: IngestReport) -> set[str]:
        """Ensure every index exists and carries its attribute settings.

        Indexes are prepared concurrently. Failures are appended to the
        report's errors.

        Returns:
            Names of the indexes that exist and can receive uploads
        """
        results = await asyncio.gather(
            *(self._prepare_index(spec) for spec in self.index_specs)
        )
        ready: set[str] = set()
        for spec, (exists, errors) in zip(self.index_specs, results, strict=True):
            if exists:
                ready.add(spec.name)
            report.errors.extend(errors)
        return ready

    async def _prepare_index(self, spec: IndexSpec) -> tuple[bool, list[str]]:
        logger.info(f"Creating/validating index '{spec.name}'")
        try:
            if await self.client.index_exists(spec.name):
                logger.info(f"Index '{spec.name}' already exists")
            else:
                await self.client.create_index(spec.name, spec.primary_key)
                logger.info(f"Index '{spec.name}' created")
        except SearchServiceError as e:
            logger.error(f"Error creating index '{spec.name}': {e}")
            return False, [f"Cannot create index '{spec.name}': {e}"]

        errors: list[str] = []
        for setting, attributes in spec.settings().items():
            try:
                await self.client.update_setting(spec.name, setting, attributes)
            except SearchServiceError as e:
                logger.error(f"Error configuring {setting} on '{spec.name}': {e}")
                errors.append(f"Cannot configure {setting} on '{spec.name}': {e}")
        if not errors:
            logger.info(f"Index '{spec.name}' configured")
        return True, errors

    async def upload(self, batch: IngestBatch, ready: set[str]) -> list[BranchOutcome]:
        """Upload paragraphs, definitions and documents concurrently.

        Empty record sets are not uploaded. An index that could not be
        created is reported as a failed upload.

        Args:
            batch: Records to upload
            ready: Names of indexes that exist

        Returns:
            One outcome per attempted upload
        """
        uploads = [
            (self.paragraphs_index.name, [p.to_payload() for p in batch.paragraphs]),
            (self.definitions_index.name, [d.to_payload() for d in batch.definitions]),
            (self.documents_index.name, [d.to_payload() for d in batch.documents]),
        ]
        pending = []
        for index, payload in uploads:
            if not payload:
                continue
            if index not in ready:
                pending.append(_skipped(index))
            else:
                pending.append(self._upload(index, payload))
        return list(await asyncio.gather(*pending))

    async def _upload(self, index: str, payload: list[dict[str, Any]]) -> BranchOutcome:
        logger.info(f"Uploading {len(payload)} records to '{index}'")
        try:
            data = await self.client.add_documents(index, payload)
        except SearchServiceError as e:
            logger.error(f"Error uploading to '{index}': {e}")
            return BranchOutcome.failure(index, e)
        logger.info(f"Records uploaded to '{index}'")
        return BranchOutcome(
            index=index,
            status=OutcomeStatus.SUCCEEDED,
            count=len(payload),
            task_uid=data.get("taskUid"),
        )


async def _skipped(index: str) -> BranchOutcome:
    return BranchOutcome.failure(index, "index is not available")
