"""
Catalog providers for ptask.

- CatalogProvider: read-only interface the engine consumes
- MemoryCatalogProvider: in-process snapshot, for tests and embedding
- FileCatalogProvider: JSON/YAML snapshot on disk
- SQLiteCatalogProvider: local copy of the catalog tables
"""

from .base import CatalogProvider
from .file import FileCatalogProvider
from .memory import MemoryCatalogProvider
from .sqlite import SQLiteCatalogProvider

__all__ = ["CatalogProvider", "FileCatalogProvider", "MemoryCatalogProvider", "SQLiteCatalogProvider"]
