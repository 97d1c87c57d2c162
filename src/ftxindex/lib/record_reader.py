"""Input file reading for ingest.

Extraction output comes in three shapes: newline-delimited JSON (one object
per line), a JSON array of objects, or a single JSON object. All of them are
normalized to a flat list of raw records. Malformed lines are reported and
skipped rather than failing the whole file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ftxindex.lib.errors import ConfigError, RecordParseError

logger = logging.getLogger(__name__)


@dataclass
class RawBatch:
    """Raw records read from one input file.

    Attributes:
        source_file: Base name of the input file
        records: Decoded JSON values, in file order
        errors: Lines or documents that could not be decoded
    """

    source_file: str
    records: list[Any] = field(default_factory=list)
    errors: list[RecordParseError] = field(default_factory=list)


def parse_jsonl(text: str) -> tuple[list[Any], list[RecordParseError]]:
    """Decode newline-delimited JSON, skipping blank lines.

    Args:
        text: File content

    Returns:
        Tuple of decoded values and per-line errors
    """
    records: list[Any] = []
    errors: list[RecordParseError] = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            errors.append(RecordParseError(f"line {line_no}", e.msg))
    return records, errors


def parse_json_document(text: str) -> tuple[list[Any], list[RecordParseError]]:
    """Decode a whole JSON document into a list of records.

    An array yields its items; any other value yields a single record. A
    document that fails to decode yields no records and one error.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return [], [RecordParseError("document", f"{e.msg} (line {e.lineno})")]

    if isinstance(data, list):
        logger.debug(f"Decoded JSON array with {len(data)} items")
        return data, []
    return [data], []


def read_records(path: str | Path, jsonl: bool = False) -> RawBatch:
    """Read an input file into a raw batch.

    Args:
        path: Input file path
        jsonl: Treat the file as newline-delimited JSON

    Returns:
        RawBatch with decoded records and decode errors

    Raises:
        ConfigError: If the file does not exist or cannot be read
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigError("file", f"File '{file_path}' does not exist")

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError("file", f"Cannot read '{file_path}': {e}") from e

    if jsonl:
        records, errors = parse_jsonl(text)
    elif not text.strip():
        records, errors = [], []
    else:
        records, errors = parse_json_document(text)

    logger.info(
        f"Read {len(records)} records from {file_path.name} "
        f"({'JSONL' if jsonl else 'JSON'}, {len(errors)} unreadable)"
    )
    return RawBatch(source_file=file_path.name, records=records, errors=errors)
