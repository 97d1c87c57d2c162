"""Deterministic identifiers for documents, paragraphs and defined terms.

Import and delete runs are independent processes, so every identifier must
be reproducible from the human-readable value alone. The same rules are used
for document ids (from ``Doc_Name``) and for composite ids built from the
source file name plus a paragraph id or a defined term.
"""

from __future__ import annotations

import json
from typing import Any

_PASSTHROUGH = frozenset("abcdefghijklmnopqrstuvwxyz0123456789-_")


def _is_number(value: Any) -> bool:
    # bool is an int subclass but is not a numeric identifier
    return isinstance(value, int | float) and not isinstance(value, bool)


def to_text(value: Any) -> str:
    """Render a raw record value as text for identifier building.

    Numbers render in their shortest decimal form (``3.0`` becomes ``"3"``),
    booleans as ``"true"``/``"false"``, arrays and objects as compact JSON and
    a missing value as an empty string.

    Args:
        value: Raw JSON value

    Returns:
        Text form of the value
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list | dict):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def normalize_identifier(value: Any) -> str:
    """Map a human-readable name to an index-safe identifier.

    Numbers are returned as their decimal string. Anything else is
    lowercased, spaces become underscores, and every character that is not
    an ASCII lowercase letter, digit, ``-`` or ``_`` is replaced by
    ``-<codepoint>-`` using its decimal Unicode code point.

    Args:
        value: Document name, composite key or numeric id

    Returns:
        Deterministic identifier safe for use as a primary key

    Example:
        >>> normalize_identifier("Acme Corp")
        'acme_corp'
        >>> normalize_identifier("Café")
        'caf-233-'
        >>> normalize_identifier(42)
        '42'
    """
    if _is_number(value):
        return to_text(value)

    text = to_text(value).lower().replace(" ", "_")
    return "".join(ch if ch in _PASSTHROUGH else f"-{ord(ch)}-" for ch in text)


def build_composite_id(file_name: str, part: Any) -> str:
    """Build the identifier for a record scoped to one source file.

    The raw ``<file_name>_<part>`` string is assembled first and normalized
    as a whole.

    Args:
        file_name: Base name of the source file (e.g. ``"acme.json"``)
        part: Paragraph id or defined term

    Returns:
        Normalized composite identifier
    """
    return normalize_identifier(f"{file_name}_{to_text(part)}")


def document_filename(file_name: str) -> str:
    """Return the original document file name for a JSON export.

    Extracted content is shipped as ``<name>.json`` or ``<name>.jsonl``
    next to ``<name>.pdf``; records point back at the PDF.
    """
    for suffix in (".jsonl", ".json"):
        if file_name.endswith(suffix):
            return file_name[: -len(suffix)] + ".pdf"
    return file_name
