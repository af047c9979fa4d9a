"""
Dependency graph over task parameters, backed by rustworkx.

Built once per catalog snapshot. It manages:
- The bimap between parameter IDs and rustworkx integer indices.
- An index from (parent parameter, parent option) to the parameters that
  selection unlocks.
- An index from (parent parameter, parent option, child) to the option
  filters authored for the matching edges.
- Root detection and structural checks (cycles, dangling references).
"""

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Set, Tuple

import rustworkx as rx

from .catalog import ParameterCatalog
from .exceptions import CatalogError
from .types import DependencyEdge, Parameter, ParameterOption

if TYPE_CHECKING:
    from .selection import SelectionSet

logger = logging.getLogger(__name__)

Trigger = Tuple[str, str]


class DependencyGraph:
    """
    Indexed view of a catalog's unlock rules.

    Only `select` parameters participate. Edges whose endpoints are unknown,
    or whose trigger option does not belong to the parent parameter, never
    fire and are left out of every index.
    """

    def __init__(self, catalog: ParameterCatalog, root_slug: Optional[str] = None):
        self.catalog = catalog
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}

        self._unlocks: Dict[Trigger, Set[str]] = defaultdict(set)
        self._filters: Dict[Tuple[str, str, str], Set[str]] = defaultdict(set)

        for param in catalog.list_parameters():
            if param.is_selectable() and param.id not in self._id_to_idx:
                idx = self._graph.add_node(param)
                self._id_to_idx[param.id] = idx
                self._idx_to_id[idx] = param.id

        filters_by_edge: Dict[str, Set[str]] = defaultdict(set)
        for row in catalog.list_dependency_option_filters():
            filters_by_edge[row.dependency_id].add(row.child_option_id)

        for edge in catalog.list_dependencies():
            if not self._edge_is_live(edge):
                logger.debug(f"Ignoring dependency {edge.id}: unknown endpoint or trigger option")
                continue
            self._graph.add_edge(
                self._id_to_idx[edge.parent_parameter_id],
                self._id_to_idx[edge.child_parameter_id],
                edge,
            )
            self._unlocks[edge.trigger].add(edge.child_parameter_id)
            key = (edge.parent_parameter_id, edge.parent_option_id, edge.child_parameter_id)
            self._filters[key].update(filters_by_edge.get(edge.id, set()))

        self._root_id = self._resolve_root(root_slug)

    def _edge_is_live(self, edge: DependencyEdge) -> bool:
        if edge.parent_parameter_id not in self._id_to_idx:
            return False
        if edge.child_parameter_id not in self._id_to_idx:
            return False
        option = self.catalog.get_option(edge.parent_option_id)
        return option is not None and option.parameter_id == edge.parent_parameter_id

    def _resolve_root(self, root_slug: Optional[str]) -> str:
        candidates = self.root_candidates()

        if root_slug:
            param = self.catalog.get_parameter_by_slug(root_slug)
            if param is None or param.id not in self._id_to_idx:
                raise CatalogError(f"Configured root parameter not found: {root_slug}")
            if param.id not in candidates:
                raise CatalogError(f"Configured root parameter is unlocked by another parameter: {root_slug}")
            return param.id

        if not candidates:
            raise CatalogError("Catalog has no root parameter")
        if len(candidates) > 1:
            slugs = sorted(self.catalog.get_parameter(pid).slug for pid in candidates)
            raise CatalogError(f"Catalog has {len(candidates)} root parameters: {', '.join(slugs)}")
        return candidates[0]

    def root_candidates(self) -> List[str]:
        return self.catalog.root_candidates()

    @property
    def root_id(self) -> str:
        return self._root_id

    @property
    def root(self) -> Parameter:
        return self._graph[self._id_to_idx[self._root_id]]

    def is_root(self, parameter_id: str) -> bool:
        return parameter_id == self._root_id

    def has_parameter(self, parameter_id: str) -> bool:
        return parameter_id in self._id_to_idx

    def get_parameter(self, parameter_id: str) -> Optional[Parameter]:
        idx = self._id_to_idx.get(parameter_id)
        if idx is None:
            return None
        return self._graph[idx]

    def is_valid_choice(self, parameter_id: str, option_id: str) -> bool:
        """Whether option_id is one of parameter_id's own options."""
        if parameter_id not in self._id_to_idx:
            return False
        option = self.catalog.get_option(option_id)
        return option is not None and option.parameter_id == parameter_id

    def children_unlocked_by(self, parameter_id: str, option_id: str) -> Set[str]:
        """Parameters unlocked when option_id is chosen for parameter_id."""
        return set(self._unlocks.get((parameter_id, option_id), ()))

    def allowed_options(self, parameter_id: str, selection_set: "SelectionSet") -> List[ParameterOption]:
        """
        Options of parameter_id that are legal under the current selections.

        The root always offers every option. For other parameters the filters
        of every satisfied edge targeting it are unioned; an empty union means
        no filter was authored, so every option is legal.

        Args:
            parameter_id: Parameter whose options are requested.
            selection_set: Current selections; only their triggers are read.

        Returns:
            List[ParameterOption]: Legal options, in catalog order.
        """
        options = self.catalog.options_for(parameter_id)
        if parameter_id not in self._id_to_idx or self.is_root(parameter_id):
            return options

        allowed: Set[str] = set()
        for selection in selection_set:
            allowed |= self._filters.get(
                (selection.parameter_id, selection.option_id, parameter_id), set()
            )

        if not allowed:
            return options
        return [opt for opt in options if opt.id in allowed]

    def descendants(self, parameter_id: str) -> Set[str]:
        """Every parameter reachable through any edge, whatever the option."""
        if parameter_id not in self._id_to_idx:
            return set()
        return {self._idx_to_id[idx] for idx in rx.descendants(self._graph, self._id_to_idx[parameter_id])}

    def find_cycles(self) -> List[FrozenSet[str]]:
        """Groups of parameters that unlock each other."""
        cycles = []
        for component in rx.strongly_connected_components(self._graph):
            if len(component) > 1 or self._graph.has_edge(component[0], component[0]):
                cycles.append(frozenset(self._idx_to_id[idx] for idx in component))
        return cycles

    def validate(self) -> List[str]:
        """Catalog problems, as reported by find_catalog_problems."""
        return find_catalog_problems(self.catalog, self.root.slug)

    @property
    def parameter_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, object]:
        return {
            "parameters": self.parameter_count,
            "options": len(self.catalog.list_options()),
            "live_dependencies": self.edge_count,
            "declared_dependencies": len(self.catalog.list_dependencies()),
            "option_filters": len(self.catalog.list_dependency_option_filters()),
            "root": self.root.slug,
            "backend": "rustworkx",
        }


def find_catalog_problems(catalog: ParameterCatalog, root_slug: Optional[str] = None) -> List[str]:
    """
    Collect human-readable problems that would make a catalog misbehave.

    Never raises; an empty list means the catalog is usable as-is.

    Args:
        catalog: Snapshot to check.
        root_slug: Root to use when the catalog has several candidates.

    Returns:
        List[str]: One message per problem found.
    """
    problems: List[str] = []

    seen_slugs: Set[str] = set()
    for param in catalog.list_parameters():
        if param.slug in seen_slugs:
            problems.append(f"Duplicate parameter slug: {param.slug}")
        seen_slugs.add(param.slug)
        if param.is_selectable() and not catalog.options_for(param.id):
            problems.append(f"Parameter '{param.slug}' has no options")

    for option in catalog.list_options():
        if catalog.get_parameter(option.parameter_id) is None:
            problems.append(f"Option '{option.name}' references unknown parameter {option.parameter_id}")

    edges_by_id: Dict[str, DependencyEdge] = {}
    for edge in catalog.list_dependencies():
        edges_by_id[edge.id] = edge
        parent = catalog.get_parameter(edge.parent_parameter_id)
        child = catalog.get_parameter(edge.child_parameter_id)
        if parent is None:
            problems.append(f"Dependency {edge.id} references unknown parent {edge.parent_parameter_id}")
        if child is None:
            problems.append(f"Dependency {edge.id} references unknown child {edge.child_parameter_id}")
        trigger = catalog.get_option(edge.parent_option_id)
        if trigger is None or trigger.parameter_id != edge.parent_parameter_id:
            problems.append(f"Dependency {edge.id} trigger option {edge.parent_option_id} does not belong to its parent")

    for row in catalog.list_dependency_option_filters():
        edge = edges_by_id.get(row.dependency_id)
        if edge is None:
            problems.append(f"Option filter references unknown dependency {row.dependency_id}")
            continue
        option = catalog.get_option(row.child_option_id)
        if option is None or option.parameter_id != edge.child_parameter_id:
            problems.append(f"Option filter on dependency {edge.id} names option {row.child_option_id} outside its child parameter")

    try:
        graph = DependencyGraph(catalog, root_slug=root_slug)
    except CatalogError as e:
        problems.append(str(e))
        return problems

    root = graph.root
    if not (root.expression_template or "").strip():
        problems.append(f"Root parameter '{root.slug}' has no expression template")

    for cycle in graph.find_cycles():
        slugs = sorted(catalog.get_parameter(pid).slug for pid in cycle)
        problems.append(f"Dependency cycle between: {', '.join(slugs)}")

    return problems
