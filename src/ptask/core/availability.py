"""
Availability analysis.

Works out which parameters the user may pick right now, and prunes
selections that are no longer reachable from the root after a change.
"""

import logging
from typing import List, Set

from .graph import DependencyGraph
from .selection import SelectionSet
from .types import Selection

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """
    Computes the available parameter set and cascades removals.
    """

    def compute_available(self, selection_set: SelectionSet, graph: DependencyGraph) -> Set[str]:
        """
        Root, plus everything the current selections unlock, plus everything
        that already holds a selection.
        """
        available = {graph.root_id}
        for selection in selection_set:
            available |= graph.children_unlocked_by(selection.parameter_id, selection.option_id)
        available.update(selection_set.parameter_ids())
        return available

    def reconcile(self, selection_set: SelectionSet, graph: DependencyGraph) -> SelectionSet:
        """
        Return a copy of selection_set without unreachable entries.

        An entry survives when its parameter is the root or is unlocked by
        another surviving entry, and its option belongs to that parameter.
        Option filters are not re-applied here; they only constrain new
        selections. The reachable set is grown from the root outward until
        it stops changing, so one pass reaches the fixpoint.

        Args:
            selection_set: Current selections. Not modified.
            graph: Dependency graph of the catalog snapshot to check against.

        Returns:
            SelectionSet: The surviving entries, in their original order.
        """
        reachable = self._reachable_entries(selection_set, graph)
        current = SelectionSet(s for s in selection_set if s.parameter_id in reachable)

        removed = dropped(selection_set, current)
        if removed:
            logger.debug(f"Reconcile removed {len(removed)} selection(s): {[s.parameter_id for s in removed]}")
        return current

    def _reachable_entries(self, selection_set: SelectionSet, graph: DependencyGraph) -> Set[str]:
        unlocked = {graph.root_id}
        kept: Set[str] = set()
        changed = True
        while changed:
            changed = False
            for selection in selection_set:
                if selection.parameter_id in kept or selection.parameter_id not in unlocked:
                    continue
                if not graph.is_valid_choice(selection.parameter_id, selection.option_id):
                    continue
                kept.add(selection.parameter_id)
                unlocked |= graph.children_unlocked_by(selection.parameter_id, selection.option_id)
                changed = True
        return kept


def dropped(before: SelectionSet, after: SelectionSet) -> List[Selection]:
    """Selections present in `before` that `after` no longer holds unchanged."""
    return [s for s in before if after.get(s.parameter_id) != s.option_id]
