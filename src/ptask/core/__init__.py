"""
Core modules for ptask.

This package contains the engine's building blocks:
- types: catalog rows and session value objects
- catalog: immutable catalog snapshot
- graph: indexed dependency graph
- selection / availability: choices and cascade pruning
- render: task name templating
- session: the façade tying them together
"""

from .availability import AvailabilityResolver
from .catalog import ParameterCatalog
from .exceptions import (
    CatalogError, CatalogNotFoundError, PtaskError, SelectionNotAllowedError,
    StaleCatalogWarning, UnknownOptionError, UnknownParameterError, ValidationError,
)
from .graph import DependencyGraph, find_catalog_problems
from .render import TemplateRenderer, render
from .selection import SelectionSet
from .session import TaskConfigurationSession
from .types import (
    DependencyEdge, DependencyOptionFilter, Parameter, ParameterOption, ParameterType,
    PersistedTask, PlaceholderPolicy, Selection, SelectionBadge, SessionState, SessionUpdate,
)

__all__ = [
    # Types
    "Parameter", "ParameterOption", "ParameterType", "DependencyEdge", "DependencyOptionFilter",
    "Selection", "SelectionBadge", "PersistedTask", "PlaceholderPolicy", "SessionState", "SessionUpdate",
    # Engine
    "ParameterCatalog", "DependencyGraph", "find_catalog_problems", "SelectionSet",
    "AvailabilityResolver", "TemplateRenderer", "render", "TaskConfigurationSession",
    # Errors
    "PtaskError", "CatalogError", "CatalogNotFoundError", "ValidationError",
    "SelectionNotAllowedError", "UnknownOptionError", "UnknownParameterError", "StaleCatalogWarning",
]
