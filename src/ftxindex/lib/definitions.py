"""Defined term aggregation.

A defined term is usually spread over several paragraphs (the term line
followed by its numbered limbs). Within one batch every paragraph that
carries the same ``Defined_Term`` is folded into a single
``DefinedTermRecord`` for the definitions index.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ftxindex.lib.identifiers import build_composite_id, document_filename, to_text
from ftxindex.models.records import DefinedTermRecord, ParagraphRecord


@dataclass
class TermGroup:
    """Paragraphs contributing to one defined term, in encounter order.

    Attributes:
        term: The defined term text
        members: Contributing paragraphs; the first one supplies every
            field that is not merged
    """

    term: str
    members: list[ParagraphRecord] = field(default_factory=list)

    def merged_content(self) -> str:
        """Concatenate ``Numbering + Content`` of each member, one per line."""
        return "".join(
            f"{to_text(p.numbering)}{to_text(p.content)}\n" for p in self.members
        )

    def merged_references(self) -> list[Any]:
        """Union of the members' ``Definition_Ref`` entries, first-seen order."""
        # keyed on bool-ness too: true and 1 are distinct references
        refs: dict[tuple[bool, Any], Any] = {}
        for paragraph in self.members:
            for ref in paragraph.references:
                refs.setdefault((isinstance(ref, bool), ref), ref)
        return list(refs.values())

    def to_record(self, source_file: str) -> DefinedTermRecord:
        """Finalize the group into the record stored in the definitions index.

        Args:
            source_file: Base name of the input file

        Returns:
            Merged defined term
        """
        payload = self.members[0].to_payload()
        payload.update(
            {
                "Content": self.merged_content(),
                "Definition_Ref": self.merged_references(),
                "File_Defined_Term_Id": build_composite_id(source_file, self.term),
                "Filename": document_filename(source_file),
            }
        )
        return DefinedTermRecord.model_validate(payload)


def group_by_term(paragraphs: Iterable[ParagraphRecord]) -> dict[str, TermGroup]:
    """Group paragraphs by their defined term, preserving encounter order."""
    groups: dict[str, TermGroup] = {}
    for paragraph in paragraphs:
        term = paragraph.term
        if term is None:
            continue
        groups.setdefault(term, TermGroup(term=term)).members.append(paragraph)
    return groups


def aggregate_definitions(
    paragraphs: Iterable[ParagraphRecord], source_file: str
) -> dict[str, DefinedTermRecord]:
    """Merge the paragraphs of one batch into one record per defined term.

    Args:
        paragraphs: Paragraphs of the batch, in source order
        source_file: Base name of the input file, used for the term id

    Returns:
        Mapping of term text to merged record; empty when no paragraph
        defines a term

    Example:
        >>> paras = [
        ...     ParagraphRecord(Numbering="1.", Content="Foo", Defined_Term="X"),
        ...     ParagraphRecord(Numbering="2.", Content="Bar", Defined_Term="X"),
        ... ]
        >>> aggregate_definitions(paras, "acme.json")["X"].content
        '1.Foo\\n2.Bar\\n'
    """
    return {
        term: group.to_record(source_file)
        for term, group in group_by_term(paragraphs).items()
    }
