"""
Ordered selection set: at most one option per parameter.

Entries are keyed by parameter id. Re-selecting a parameter keeps its
original position and only swaps the option.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Set

from .catalog import ParameterCatalog
from .exceptions import SelectionNotAllowedError
from .types import ParameterOption, Selection


class SelectionSet:
    """The user's current choices, in selection order."""

    def __init__(self, selections: Iterable[Selection] = ()):
        self._entries: Dict[str, str] = {}
        for selection in selections:
            self._entries[selection.parameter_id] = selection.option_id

    def set(self, parameter_id: str, option_id: str, available: Optional[Set[str]] = None) -> None:
        """
        Choose option_id for parameter_id.

        When `available` is given, the parameter must be in it or
        SelectionNotAllowedError is raised and nothing changes.
        """
        if available is not None and parameter_id not in available:
            raise SelectionNotAllowedError(parameter_id)
        self._entries[parameter_id] = option_id

    def remove(self, parameter_id: str) -> Optional[Selection]:
        """Delete the entry for parameter_id. Does not cascade."""
        option_id = self._entries.pop(parameter_id, None)
        if option_id is None:
            return None
        return Selection(parameter_id=parameter_id, option_id=option_id)

    def get(self, parameter_id: str) -> Optional[str]:
        return self._entries.get(parameter_id)

    def parameter_ids(self) -> List[str]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def copy(self) -> "SelectionSet":
        clone = SelectionSet()
        clone._entries = dict(self._entries)
        return clone

    def to_map(self, catalog: ParameterCatalog) -> Dict[str, ParameterOption]:
        """Parameter slug to chosen option; rows unknown to the catalog are skipped."""
        result: Dict[str, ParameterOption] = {}
        for parameter_id, option_id in self._entries.items():
            param = catalog.get_parameter(parameter_id)
            option = catalog.get_option(option_id)
            if param is not None and option is not None:
                result[param.slug] = option
        return result

    def __iter__(self) -> Iterator[Selection]:
        for parameter_id, option_id in list(self._entries.items()):
            yield Selection(parameter_id=parameter_id, option_id=option_id)

    def __contains__(self, parameter_id: object) -> bool:
        return parameter_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SelectionSet):
            return list(self._entries.items()) == list(other._entries.items())
        return NotImplemented

    def __repr__(self) -> str:
        pairs = ", ".join(f"{p}={o}" for p, o in self._entries.items())
        return f"SelectionSet({pairs})"
