"""Default configuration for ftxindex.

Index names, primary keys and attribute settings are fixed: import and
delete runs must address the same three indexes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 7700
DEFAULT_TIMEOUT = 30.0  # seconds
API_KEY_ENV_VAR = "MEILISEARCH_KEY"

# Maximum hits a cascading delete discovers per index in one pass
DEFAULT_DISCOVERY_LIMIT = 1000

PARAS_INDEX = "ftx_paras"
DEFS_INDEX = "ftx_defs"
DOCS_INDEX = "ftx_docs"


@dataclass(frozen=True)
class IndexSpec:
    """Name, primary key and attribute settings of one index."""

    name: str
    primary_key: str
    searchable: list[str] = field(default_factory=list)
    filterable: list[str] = field(default_factory=list)
    sortable: list[str] = field(default_factory=list)

    def settings(self) -> dict[str, list[str]]:
        """Non-empty attribute settings keyed by their settings endpoint."""
        candidates = {
            "searchable-attributes": self.searchable,
            "filterable-attributes": self.filterable,
            "sortable-attributes": self.sortable,
        }
        return {name: attrs for name, attrs in candidates.items() if attrs}


PARAS_INDEX_SPEC = IndexSpec(
    name=PARAS_INDEX,
    primary_key="File_Para_ID",
    searchable=["Content", "Section_Name", "Category", "Tags"],
    filterable=["doc_id", "Category", "Tags", "Start_Page", "End_Page"],
    sortable=["Start_Page", "Para_ID"],
)

DEFS_INDEX_SPEC = IndexSpec(
    name=DEFS_INDEX,
    primary_key="File_Defined_Term_Id",
    searchable=["Defined_Term", "Content"],
    filterable=["doc_id", "Definition_Ref"],
)

DOCS_INDEX_SPEC = IndexSpec(
    name=DOCS_INDEX,
    primary_key="doc_id",
    searchable=["name", "sector", "industry"],
    filterable=["doc_id", "sector", "industry"],
    sortable=["import_date"],
)

INDEX_SPECS: tuple[IndexSpec, ...] = (
    PARAS_INDEX_SPEC,
    DEFS_INDEX_SPEC,
    DOCS_INDEX_SPEC,
)
