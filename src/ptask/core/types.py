"""
Core type definitions for ptask.

Catalog rows mirror the product's four catalog tables. All rows are frozen:
a catalog snapshot never changes once built.
"""

from enum import StrEnum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ParameterType(StrEnum):
    """Input kinds a task parameter can declare."""
    SELECT = "select"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"


class PlaceholderPolicy(StrEnum):
    """What the renderer does with `{{slug}}` tokens nobody selected."""
    KEEP = "keep"
    BLANK = "blank"
    NONE = "none"


class SessionState(StrEnum):
    """Selection workflow states."""
    EMPTY = "empty"
    ROOT_SELECTED = "root_selected"
    COMPOSING = "composing"
    COMPLETE = "complete"


class Parameter(BaseModel):
    """
    A configurable axis of a task description (e.g. thickness).
    """
    id: str
    slug: str
    label: str = ""
    type: ParameterType = ParameterType.SELECT
    expression_template: str | None = None
    is_required: bool = False

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    @property
    def placeholder(self) -> str:
        """The token other templates use to reference this parameter."""
        return "{{" + self.slug + "}}"

    def is_selectable(self) -> bool:
        return self.type == ParameterType.SELECT


class ParameterOption(BaseModel):
    """One concrete value of a Parameter."""
    id: str
    parameter_id: str
    name: str
    label: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    @property
    def display_label(self) -> str:
        return self.label or self.name


class DependencyEdge(BaseModel):
    """
    Unlock rule: `child_parameter_id` becomes relevant once
    `parent_option_id` is chosen for `parent_parameter_id`.
    """
    id: str
    parent_parameter_id: str
    parent_option_id: str
    child_parameter_id: str

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    @property
    def trigger(self) -> tuple[str, str]:
        return (self.parent_parameter_id, self.parent_option_id)


class DependencyOptionFilter(BaseModel):
    """Narrows the options of an unlocked child for one specific edge."""
    dependency_id: str
    child_option_id: str
    id: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)


class Selection(BaseModel):
    """A single (parameter, option) choice."""
    parameter_id: str
    option_id: str

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)


class SelectionBadge(BaseModel):
    """Display data for one chosen option."""
    parameter_id: str
    parameter_slug: str
    parameter_label: str
    option_id: str
    option_name: str
    option_label: str


class PersistedTask(BaseModel):
    """
    Shape handed to the external task repository.

    `param_values` maps parameter slug to option name, `param_order` lists
    slugs in selection order.
    """
    param_values: Dict[str, str] = Field(default_factory=dict)
    param_order: List[str] = Field(default_factory=list)
    name_rendered: str | None = None


class SessionUpdate(BaseModel):
    """Result of a mutating session call."""
    available_parameters: List[Parameter] = Field(default_factory=list)
    rendered_name: str | None = None
    dropped: List[Selection] = Field(default_factory=list)
    state: SessionState = SessionState.EMPTY
