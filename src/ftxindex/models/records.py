"""Entity models stored in the three search indexes.

Raw input records are loosely shaped JSON objects produced by the document
extraction pipeline. ``ParagraphRecord`` models the fields ftxindex reads
and keeps every other field untouched so the stored paragraph is the raw
record plus derived identifiers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ftxindex.lib.identifiers import to_text


class ParagraphRecord(BaseModel):
    """One extracted paragraph, as found in the input file.

    Modelled fields accept any JSON value and are stored as given; they are
    rendered with ``to_text`` only where an identifier or merged text is
    built from them. Fields are populated by their input names only, so a
    raw key such as ``filename`` stays an ordinary extra field.
    """

    model_config = ConfigDict(extra="allow")

    doc_name: Any = Field(None, alias="Doc_Name")
    para_id: Any = Field(None, alias="Para_ID")
    numbering: Any = Field(None, alias="Numbering")
    content: Any = Field(None, alias="Content")
    sector: Any = Field(None, alias="Sector")
    industry: Any = Field(None, alias="Industry")
    defined_term: Any = Field(None, alias="Defined_Term")
    definition_ref: Any = Field(None, alias="Definition_Ref")

    # Derived during ingest
    doc_id: Any = Field(None, description="Owning document identifier")
    file_para_id: Any = Field(None, alias="File_Para_ID")
    filename: Any = Field(None, alias="Filename")

    @property
    def term(self) -> str | None:
        """Defined term this paragraph contributes to, if any."""
        if self.defined_term is None or self.defined_term is False:
            return None
        if self.defined_term == "":
            return None
        return to_text(self.defined_term)

    @property
    def references(self) -> list[Any]:
        """``Definition_Ref`` entries, empty when missing or not a list.

        Nested arrays and objects cannot be set members and are dropped.
        """
        if not isinstance(self.definition_ref, list | tuple):
            return []
        return [ref for ref in self.definition_ref if not isinstance(ref, list | dict)]

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON object sent to the search service.

        Only fields present in the input or derived during ingest are
        emitted, under their original names, together with any unmodelled
        fields.
        """
        payload = self.model_dump(by_alias=True)
        for name, field in type(self).model_fields.items():
            if name not in self.model_fields_set:
                payload.pop(field.alias or name, None)
        return payload


class DefinedTermRecord(ParagraphRecord):
    """A defined term merged from every paragraph that defines it."""

    file_defined_term_id: str = Field(..., alias="File_Defined_Term_Id")


class DocumentRecord(BaseModel):
    """Document metadata, one per distinct ``Doc_Name``."""

    model_config = ConfigDict(extra="forbid")

    doc_id: str = Field(..., description="Normalized document identifier")
    name: Any = Field(..., description="Document name as found in the input")
    filename: str = Field(..., description="Original document file name")
    sector: Any = Field("", description="Industry sector")
    industry: Any = Field("", description="Industry")
    import_date: str = Field(..., description="ISO-8601 timestamp of the import")

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON object sent to the search service."""
        return self.model_dump(mode="json")
