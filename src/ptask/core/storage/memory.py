"""
In-memory catalog provider, for tests and embedding.
"""

from typing import List

from ..catalog import ParameterCatalog
from ..types import DependencyEdge, DependencyOptionFilter, Parameter, ParameterOption
from .base import CatalogProvider


class MemoryCatalogProvider(CatalogProvider):
    """Serves whatever catalog it currently holds; `replace` swaps it."""

    def __init__(self, catalog: ParameterCatalog | None = None):
        self._catalog = catalog if catalog is not None else ParameterCatalog()
        self.fetch_count = 0

    def replace(self, catalog: ParameterCatalog) -> None:
        self._catalog = catalog

    def list_parameters(self) -> List[Parameter]:
        return self._catalog.list_parameters()

    def list_options(self) -> List[ParameterOption]:
        return self._catalog.list_options()

    def list_dependencies(self) -> List[DependencyEdge]:
        return self._catalog.list_dependencies()

    def list_dependency_option_filters(self) -> List[DependencyOptionFilter]:
        return self._catalog.list_dependency_option_filters()

    def fetch(self) -> ParameterCatalog:
        self.fetch_count += 1
        return self._catalog
