"""
Catalog provider interface.

A provider is the external data store's side of the engine: it hands out
full snapshots of the four catalog tables. The engine never writes through
it.
"""

from abc import ABC, abstractmethod
from typing import List

from ..catalog import ParameterCatalog
from ..types import DependencyEdge, DependencyOptionFilter, Parameter, ParameterOption


class CatalogProvider(ABC):
    """Read-only source of catalog snapshots."""

    @abstractmethod
    def list_parameters(self) -> List[Parameter]:
        """All parameters, in display order."""

    @abstractmethod
    def list_options(self) -> List[ParameterOption]:
        """All options, in display order."""

    @abstractmethod
    def list_dependencies(self) -> List[DependencyEdge]:
        """All dependency edges."""

    @abstractmethod
    def list_dependency_option_filters(self) -> List[DependencyOptionFilter]:
        """All option filters attached to dependency edges."""

    def fetch(self) -> ParameterCatalog:
        """Read every table and freeze the result into one snapshot."""
        return ParameterCatalog(
            parameters=self.list_parameters(),
            options=self.list_options(),
            dependencies=self.list_dependencies(),
            dependency_options=self.list_dependency_option_filters(),
        )
