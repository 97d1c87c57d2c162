"""Result models for ingest, cascading delete and reset runs.

Every concurrent branch produces a ``BranchOutcome`` instead of raising, so
one failing branch never cancels its siblings; the reports combine the
outcomes after the join.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutcomeStatus(str, Enum):
    """Result of one branch of a fan-out operation."""

    SUCCEEDED = "succeeded"
    NOT_FOUND = "not_found"
    NO_MATCHES = "no_matches"
    FAILED = "failed"


class BranchOutcome(BaseModel):
    """Outcome of one independent operation against one index."""

    model_config = ConfigDict(extra="forbid")

    index: str = Field(..., description="Index the operation targeted")
    status: OutcomeStatus = Field(..., description="Branch result")
    count: int = Field(0, ge=0, description="Number of records affected")
    truncated: bool = Field(
        False, description="Discovery hit the result cap; more records may remain"
    )
    task_uid: int | None = Field(None, description="Service task id, when returned")
    error: str | None = Field(None, description="Error message if the branch failed")

    @property
    def succeeded(self) -> bool:
        """Not-found and no-match outcomes count as success."""
        return self.status != OutcomeStatus.FAILED

    @classmethod
    def failure(cls, index: str, error: Exception | str) -> "BranchOutcome":
        """Build a failed outcome from an exception or message."""
        return cls(index=index, status=OutcomeStatus.FAILED, error=str(error))


class IngestReport(BaseModel):
    """Summary of one ingest run over one batch."""

    model_config = ConfigDict(extra="forbid")

    source_file: str = Field(..., description="Base name of the input file")
    paragraphs: int = Field(0, ge=0, description="Paragraph records built")
    definitions: int = Field(0, ge=0, description="Merged defined terms built")
    documents: int = Field(0, ge=0, description="Distinct documents built")
    skipped_records: int = Field(0, ge=0, description="Records skipped as unparseable")
    uploaded: list[str] = Field(
        default_factory=list, description="Indexes that accepted an upload"
    )
    errors: list[str] = Field(default_factory=list, description="Error messages")
    no_op: bool = Field(False, description="Input held no records")

    @property
    def success(self) -> bool:
        """True when nothing failed, including skipped records."""
        return not self.errors


class DeleteReport(BaseModel):
    """Combined outcome of a cascading document delete."""

    model_config = ConfigDict(extra="forbid")

    doc_id: str
    document: BranchOutcome
    paragraphs: BranchOutcome
    definitions: BranchOutcome

    @property
    def outcomes(self) -> list[BranchOutcome]:
        return [self.document, self.paragraphs, self.definitions]

    @property
    def deleted_document(self) -> bool:
        return self.document.status == OutcomeStatus.SUCCEEDED

    @property
    def deleted_paragraphs(self) -> int:
        return self.paragraphs.count

    @property
    def deleted_definitions(self) -> int:
        return self.definitions.count

    @property
    def errors(self) -> list[str]:
        return [f"{o.index}: {o.error}" for o in self.outcomes if not o.succeeded]

    @property
    def success(self) -> bool:
        return all(o.succeeded for o in self.outcomes)


class ResetReport(BaseModel):
    """Combined outcome of dropping every index."""

    model_config = ConfigDict(extra="forbid")

    outcomes: list[BranchOutcome] = Field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        return [f"{o.index}: {o.error}" for o in self.outcomes if not o.succeeded]

    @property
    def success(self) -> bool:
        return all(o.succeeded for o in self.outcomes)
