"""ftxindex - keep document, paragraph and definition indexes consistent.

ftxindex imports extracted legal/financial documents into a
Meilisearch-compatible search service as three related indexes and removes
them again with a cascading delete.

Main features:
- Deterministic identifiers shared by independent import and delete runs
- Defined terms merged from the paragraphs that define them
- Concurrent, best-effort cascading delete across the three indexes
"""

from ftxindex.lib.errors import ConfigError, FtxIndexError
from ftxindex.lib.identifiers import normalize_identifier

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ConfigError",
    "FtxIndexError",
    "normalize_identifier",
]
