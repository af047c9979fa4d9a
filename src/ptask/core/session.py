"""
Task configuration session.

One session per task being composed. It owns the selection set, the current
catalog snapshot and its dependency graph, and keeps them consistent: every
mutation is followed by a reconcile pass, and a catalog refresh swaps the
snapshot atomically before reconciling against it.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Set

from .availability import AvailabilityResolver, dropped
from .catalog import ParameterCatalog
from .exceptions import StaleCatalogWarning, UnknownOptionError, UnknownParameterError
from .graph import DependencyGraph
from .render import TemplateRenderer
from .result import Err, Ok, Result
from .selection import SelectionSet
from .types import (
    Parameter,
    ParameterOption,
    PersistedTask,
    PlaceholderPolicy,
    Selection,
    SelectionBadge,
    SessionState,
    SessionUpdate,
)

if TYPE_CHECKING:
    from ..config import EngineConfig
    from .storage.base import CatalogProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    """Catalog and the graph built from it; replaced as one unit."""
    catalog: ParameterCatalog
    graph: DependencyGraph


class TaskConfigurationSession:
    """
    Façade used by the task-authoring UI and the persistence layer.

    Example:
        session = TaskConfigurationSession(catalog)
        session.select(root.id, option.id)
        session.current_rendered_name()
    """

    def __init__(
        self,
        catalog: ParameterCatalog,
        root_slug: Optional[str] = None,
        placeholder_policy: PlaceholderPolicy = PlaceholderPolicy.BLANK,
        tidy_punctuation: bool = True,
        preferred_order: Iterable[str] = (),
    ):
        self.root_slug = root_slug
        self.preferred_order: List[str] = list(preferred_order)
        self.renderer = TemplateRenderer(placeholder_policy, tidy_punctuation)
        self.resolver = AvailabilityResolver()
        self._snapshot = _Snapshot(catalog, DependencyGraph(catalog, root_slug=root_slug))
        self._selections = SelectionSet()

    @classmethod
    def from_config(cls, catalog: ParameterCatalog, config: "EngineConfig") -> "TaskConfigurationSession":
        return cls(
            catalog,
            root_slug=config.root_slug,
            placeholder_policy=config.placeholder_policy,
            tidy_punctuation=config.tidy_punctuation,
            preferred_order=config.preferred_order,
        )

    # --- state ---

    @property
    def catalog(self) -> ParameterCatalog:
        return self._snapshot.catalog

    @property
    def graph(self) -> DependencyGraph:
        return self._snapshot.graph

    @property
    def selections(self) -> SelectionSet:
        """A copy of the current selection set."""
        return self._selections.copy()

    @property
    def root(self) -> Parameter:
        return self.graph.root

    @property
    def state(self) -> SessionState:
        if self.graph.root_id not in self._selections:
            return SessionState.EMPTY
        if self.is_complete:
            return SessionState.COMPLETE
        if len(self._selections) == 1:
            return SessionState.ROOT_SELECTED
        return SessionState.COMPOSING

    @property
    def is_complete(self) -> bool:
        return self.graph.root_id in self._selections and not self.missing_required()

    def missing_required(self) -> List[Parameter]:
        """Available parameters flagged is_required that have no selection."""
        return [
            param for param in self.current_available_parameters()
            if param.is_required and param.id not in self._selections
        ]

    # --- queries ---

    def available_parameter_ids(self) -> Set[str]:
        return self.resolver.compute_available(self._selections, self.graph)

    def current_available_parameters(self) -> List[Parameter]:
        """
        Pickable parameters: selected ones in selection order, then the rest
        by preferred slug order and finally catalog order.
        """
        available = self.available_parameter_ids()
        selected = [
            self.graph.get_parameter(pid)
            for pid in self._selections.parameter_ids()
            if pid in available and self.graph.has_parameter(pid)
        ]
        pending = [
            self.graph.get_parameter(pid)
            for pid in available
            if pid not in self._selections and self.graph.has_parameter(pid)
        ]
        pending.sort(key=self._display_rank)
        return selected + pending

    def _display_rank(self, param: Parameter):
        if self.graph.is_root(param.id):
            return (0, 0, 0)
        try:
            preferred = self.preferred_order.index(param.slug)
        except ValueError:
            preferred = len(self.preferred_order)
        return (1, preferred, self.catalog.parameter_index(param.id))

    def allowed_options(self, parameter_id: str) -> List[ParameterOption]:
        return self.graph.allowed_options(parameter_id, self._selections)

    def current_selections(self) -> List[SelectionBadge]:
        badges = []
        for selection in self._selections:
            param = self.catalog.get_parameter(selection.parameter_id)
            option = self.catalog.get_option(selection.option_id)
            if param is None or option is None:
                continue
            badges.append(SelectionBadge(
                parameter_id=param.id,
                parameter_slug=param.slug,
                parameter_label=param.label,
                option_id=option.id,
                option_name=option.name,
                option_label=option.display_label,
            ))
        return badges

    def current_rendered_name(self) -> Optional[str]:
        return self.renderer.render(self._selections, self.catalog, self.graph.root_id)

    # --- mutations ---

    def select(self, parameter_id: str, option_id: str) -> SessionUpdate:
        """
        Choose an option for a parameter.

        Args:
            parameter_id: A select parameter that is currently available.
            option_id: One of the options allowed_options(parameter_id) returns.

        Returns:
            SessionUpdate: Available parameters, rendered name and any
            selections dropped by the cascade.

        Raises:
            UnknownParameterError: parameter_id is not a select parameter.
            SelectionNotAllowedError: the parameter is not currently available.
            UnknownOptionError: the option is not legal for the parameter now.
        """
        graph = self.graph
        if not graph.has_parameter(parameter_id):
            raise UnknownParameterError(parameter_id)

        available = self.resolver.compute_available(self._selections, graph)
        candidate = self._selections.copy()
        candidate.set(parameter_id, option_id, available=available)

        if option_id not in {opt.id for opt in graph.allowed_options(parameter_id, self._selections)}:
            raise UnknownOptionError(parameter_id, option_id)

        return self._commit(candidate)

    def deselect(self, parameter_id: str) -> SessionUpdate:
        """Clear a parameter's selection and everything that depended on it."""
        candidate = self._selections.copy()
        candidate.remove(parameter_id)
        return self._commit(candidate)

    def clear(self) -> SessionUpdate:
        return self._commit(SelectionSet())

    def _commit(self, candidate: SelectionSet) -> SessionUpdate:
        reconciled = self.resolver.reconcile(candidate, self.graph)
        self._selections = reconciled
        # Entries removed by reconcile, not by the caller's own request.
        cascaded = dropped(candidate, reconciled)
        if cascaded:
            logger.debug(f"Cascade removed: {[s.parameter_id for s in cascaded]}")
        return self._update(cascaded)

    def _update(self, removed: List[Selection]) -> SessionUpdate:
        return SessionUpdate(
            available_parameters=self.current_available_parameters(),
            rendered_name=self.current_rendered_name(),
            dropped=removed,
            state=self.state,
        )

    # --- catalog refresh ---

    def apply_catalog(self, catalog: ParameterCatalog) -> SessionUpdate:
        """
        Swap in a new catalog snapshot and reconcile against it.

        Selections the new snapshot no longer supports are dropped and logged
        as stale; the session carries on with whatever remains.
        """
        snapshot = _Snapshot(catalog, DependencyGraph(catalog, root_slug=self.root_slug))
        self._snapshot = snapshot

        before = self._selections
        self._selections = self.resolver.reconcile(before, snapshot.graph)
        stale = dropped(before, self._selections)
        if stale:
            logger.warning(
                f"{StaleCatalogWarning.__name__}: catalog refresh dropped {len(stale)} selection(s): "
                f"{[s.parameter_id for s in stale]}",
                extra={"category": StaleCatalogWarning.__name__, "dropped": stale},
            )
        return self._update(stale)

    def refresh(self, provider: "CatalogProvider") -> SessionUpdate:
        return self.apply_catalog(provider.fetch())

    async def refresh_async(self, provider: "CatalogProvider") -> SessionUpdate:
        """Fetch off the event loop, then swap and reconcile in one step."""
        catalog = await asyncio.to_thread(provider.fetch)
        return self.apply_catalog(catalog)

    # --- persistence ---

    def to_persisted(self) -> PersistedTask:
        """The shape handed to the external task repository."""
        param_values: Dict[str, str] = {}
        param_order: List[str] = []
        for badge in self.current_selections():
            param_values[badge.parameter_slug] = badge.option_name
            param_order.append(badge.parameter_slug)
        return PersistedTask(
            param_values=param_values,
            param_order=param_order,
            name_rendered=self.current_rendered_name(),
        )

    @classmethod
    def restore(
        cls,
        catalog: ParameterCatalog,
        param_values: Mapping[str, str],
        param_order: Optional[Iterable[str]] = None,
        **kwargs,
    ) -> "TaskConfigurationSession":
        """
        Rebuild a session from a persisted task.

        Keys may be parameter slugs or ids; values may be option ids, names or
        labels. Entries are applied in param_order, then any remaining keys.
        Anything that cannot be resolved or is not available at that point is
        skipped and logged; restore never fails on bad stored data.

        Args:
            catalog: Snapshot to restore against.
            param_values: Stored parameter key to option value.
            param_order: Keys in their original selection order.
            **kwargs: Passed through to the session constructor.

        Returns:
            TaskConfigurationSession: A session holding every entry that
            could be applied.
        """
        session = cls(catalog, **kwargs)

        ordered_keys = [key for key in (param_order or []) if key in param_values]
        ordered_keys += [key for key in param_values if key not in ordered_keys]

        # Parents must be applied before the children they unlock, so keep
        # retrying skipped entries while progress is being made.
        pending = ordered_keys
        while pending:
            deferred = []
            for key in pending:
                resolved = session._resolve_stored(key, param_values[key])
                if resolved.is_err():
                    logger.warning(f"Skipping stored value for '{key}': {resolved.error}")
                    continue
                parameter_id, option_id = resolved.unwrap()
                if parameter_id not in session.available_parameter_ids():
                    deferred.append(key)
                    continue
                if option_id not in {o.id for o in session.allowed_options(parameter_id)}:
                    logger.warning(f"Skipping stored value for '{key}': option not allowed")
                    continue
                session.select(parameter_id, option_id)
            if len(deferred) == len(pending):
                for key in deferred:
                    logger.warning(f"Skipping stored value for '{key}': parameter not reachable")
                break
            pending = deferred

        return session

    def _resolve_stored(self, key: str, value: object) -> Result:
        param = self.catalog.get_parameter(key) or self.catalog.get_parameter_by_slug(key)
        if param is None or not self.graph.has_parameter(param.id):
            return Err(f"unknown parameter {key!r}")

        option = resolve_option(self.catalog.options_for(param.id), value)
        if option is None:
            return Err(f"no option of {param.slug!r} matches {value!r}")
        return Ok((param.id, option.id))


def resolve_option(options: List[ParameterOption], value: object) -> Optional[ParameterOption]:
    """Match a stored value against options by id, name, label, then case-insensitively."""
    if value is None:
        return None
    text = str(value)
    for attr in ("id", "name", "label"):
        for option in options:
            if getattr(option, attr) == text:
                return option
    folded = text.casefold()
    for option in options:
        if option.name.casefold() == folded or option.label.casefold() == folded:
            return option
    return None
