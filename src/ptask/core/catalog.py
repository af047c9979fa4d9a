"""
Parameter catalog snapshot.

A ParameterCatalog is an immutable, read-only view over the four catalog
tables (parameters, options, dependencies, dependency option filters). It is
built once per fetch and swapped as a whole on refresh; nothing in the engine
mutates it.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from .exceptions import CatalogError
from .types import DependencyEdge, DependencyOptionFilter, Parameter, ParameterOption

logger = logging.getLogger(__name__)

# Accepted section names when loading a table-shaped mapping.
SECTION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "parameters": ("parameters", "task_parameters"),
    "options": ("options", "task_parameter_options"),
    "dependencies": ("dependencies", "task_parameter_dependencies"),
    "dependency_options": ("dependency_options", "task_parameter_dependency_options"),
}


class ParameterCatalog:
    """
    Immutable snapshot of parameters, options and dependency rules.

    Row order is preserved as supplied by the provider; option lists are
    returned in that order.
    """

    def __init__(
        self,
        parameters: Iterable[Parameter] = (),
        options: Iterable[ParameterOption] = (),
        dependencies: Iterable[DependencyEdge] = (),
        dependency_options: Iterable[DependencyOptionFilter] = (),
    ):
        self._parameters: Tuple[Parameter, ...] = tuple(parameters)
        self._options: Tuple[ParameterOption, ...] = tuple(options)
        self._dependencies: Tuple[DependencyEdge, ...] = tuple(dependencies)
        self._dependency_options: Tuple[DependencyOptionFilter, ...] = tuple(dependency_options)

        self._params_by_id: Dict[str, Parameter] = {}
        self._params_by_slug: Dict[str, Parameter] = {}
        self._param_positions: Dict[str, int] = {}
        for idx, param in enumerate(self._parameters):
            self._param_positions.setdefault(param.id, idx)
            self._params_by_id.setdefault(param.id, param)
            self._params_by_slug.setdefault(param.slug, param)

        self._options_by_id: Dict[str, ParameterOption] = {}
        options_by_param: Dict[str, List[ParameterOption]] = defaultdict(list)
        for option in self._options:
            self._options_by_id.setdefault(option.id, option)
            options_by_param[option.parameter_id].append(option)
        self._options_by_param: Dict[str, Tuple[ParameterOption, ...]] = {
            pid: tuple(opts) for pid, opts in options_by_param.items()
        }

    # --- provider-facing accessors ---

    def list_parameters(self) -> List[Parameter]:
        return list(self._parameters)

    def list_options(self) -> List[ParameterOption]:
        return list(self._options)

    def list_dependencies(self) -> List[DependencyEdge]:
        return list(self._dependencies)

    def list_dependency_option_filters(self) -> List[DependencyOptionFilter]:
        return list(self._dependency_options)

    # --- lookups ---

    def get_parameter(self, parameter_id: str) -> Optional[Parameter]:
        return self._params_by_id.get(parameter_id)

    def get_parameter_by_slug(self, slug: str) -> Optional[Parameter]:
        return self._params_by_slug.get(slug)

    def get_option(self, option_id: str) -> Optional[ParameterOption]:
        return self._options_by_id.get(option_id)

    def options_for(self, parameter_id: str) -> List[ParameterOption]:
        """All options of a parameter, in catalog order."""
        return list(self._options_by_param.get(parameter_id, ()))

    def root_candidates(self) -> List[str]:
        """Select parameter ids that no dependency names as a child, in catalog order."""
        named_as_child = {edge.child_parameter_id for edge in self._dependencies}
        return [
            param.id
            for param in self._parameters
            if param.is_selectable()
            and param.id not in named_as_child
            and self._params_by_id[param.id] is param
        ]

    def parameter_index(self, parameter_id: str) -> int:
        """Position of a parameter in catalog order (len() if unknown)."""
        return self._param_positions.get(parameter_id, len(self._parameters))

    def __len__(self) -> int:
        return len(self._parameters)

    def __repr__(self) -> str:
        return (
            f"ParameterCatalog(parameters={len(self._parameters)}, "
            f"options={len(self._options)}, dependencies={len(self._dependencies)}, "
            f"filters={len(self._dependency_options)})"
        )

    # --- serialization ---

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParameterCatalog":
        """
        Build a snapshot from a table-shaped mapping.

        Accepts either short section names (`parameters`, `options`,
        `dependencies`, `dependency_options`) or the product's table names.
        """
        if not isinstance(data, Mapping):
            raise CatalogError(f"Catalog data must be a mapping, got {type(data).__name__}")

        sections = {key: _section(data, key) for key in SECTION_ALIASES}
        try:
            catalog = cls(
                parameters=[Parameter.model_validate(row) for row in sections["parameters"]],
                options=[ParameterOption.model_validate(row) for row in sections["options"]],
                dependencies=[DependencyEdge.model_validate(row) for row in sections["dependencies"]],
                dependency_options=[
                    DependencyOptionFilter.model_validate(row)
                    for row in sections["dependency_options"]
                ],
            )
        except PydanticValidationError as e:
            raise CatalogError(f"Malformed catalog row: {e}") from e

        logger.debug(f"Loaded {catalog!r}")
        return catalog

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "parameters": [p.model_dump(mode="json") for p in self._parameters],
            "options": [o.model_dump(mode="json") for o in self._options],
            "dependencies": [d.model_dump(mode="json") for d in self._dependencies],
            "dependency_options": [
                f.model_dump(mode="json", exclude_none=True) for f in self._dependency_options
            ],
        }


def _section(data: Mapping[str, Any], key: str) -> List[Any]:
    for alias in SECTION_ALIASES[key]:
        if alias in data:
            rows = data[alias] or []
            if not isinstance(rows, list):
                raise CatalogError(f"Catalog section '{alias}' must be a list")
            return rows
    return []
