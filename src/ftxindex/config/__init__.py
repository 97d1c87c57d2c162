"""Configuration for ftxindex.

Provides the fixed index definitions and the search service connection
settings.
"""

from ftxindex.config.defaults import INDEX_SPECS, IndexSpec
from ftxindex.config.settings import ServiceConfig, load_service_config

__all__ = [
    "INDEX_SPECS",
    "IndexSpec",
    "ServiceConfig",
    "load_service_config",
]
