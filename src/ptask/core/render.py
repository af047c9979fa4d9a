"""
Task name rendering.

The root parameter's expression template is the sentence skeleton, holding
one `{{slug}}` placeholder per parameter. Each selection renders its own
parameter template (`{value}` replaced by the option label) into that
parameter's placeholder. Rendering is pure: same inputs, same output.
"""

import logging
import re
from typing import Optional

from .catalog import ParameterCatalog
from .selection import SelectionSet
from .types import PlaceholderPolicy

logger = logging.getLogger(__name__)

VALUE_TOKEN = "{value}"
PLACEHOLDER_RE = re.compile(r"\{\{\s*[^{}]+?\s*\}\}")
WHITESPACE_RE = re.compile(r"\s+")
SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([,.;:])")
DOUBLE_COMMA_RE = re.compile(r",\s*,")
DOUBLE_PERIOD_RE = re.compile(r"\.\s*\.")
COMMA_BEFORE_PERIOD_RE = re.compile(r",\s*\.")


class TemplateRenderer:
    """
    Renders the human-readable task name from a selection set.

    Args:
        placeholder_policy: What to do with placeholders nobody selected.
        tidy_punctuation: Collapse doubled commas/periods and spaces
            before punctuation left behind by blanked placeholders, and end a
            name that trails off in a comma with a period. On by default.
    """

    def __init__(
        self,
        placeholder_policy: PlaceholderPolicy = PlaceholderPolicy.BLANK,
        tidy_punctuation: bool = True,
    ):
        self.placeholder_policy = PlaceholderPolicy(placeholder_policy)
        self.tidy_punctuation = tidy_punctuation

    def render(
        self,
        selection_set: SelectionSet,
        catalog: ParameterCatalog,
        root_id: Optional[str] = None,
    ) -> Optional[str]:
        """
        Render the task name, or None when no preview can be produced.

        None is returned when the root has no template, when the root has no
        selection, or (under PlaceholderPolicy.NONE) while placeholders remain.
        """
        root_id = root_id or _single_root(catalog)
        root = catalog.get_parameter(root_id) if root_id else None
        if root is None:
            logger.debug("No root parameter; nothing to render")
            return None

        template = root.expression_template
        if not template or not template.strip():
            logger.debug(f"Root parameter '{root.slug}' has no expression template")
            return None

        if root.id not in selection_set:
            return None

        for selection in selection_set:
            param = catalog.get_parameter(selection.parameter_id)
            option = catalog.get_option(selection.option_id)
            if param is None or option is None:
                continue

            if param.id == root.id:
                child_template = VALUE_TOKEN
            else:
                child_template = param.expression_template or VALUE_TOKEN
            generated = child_template.replace(VALUE_TOKEN, option.display_label)
            template = template.replace(param.placeholder, generated)

        if PLACEHOLDER_RE.search(template):
            if self.placeholder_policy == PlaceholderPolicy.NONE:
                return None
            if self.placeholder_policy == PlaceholderPolicy.BLANK:
                template = PLACEHOLDER_RE.sub("", template)

        return self._clean(template)

    def _clean(self, text: str) -> str:
        text = WHITESPACE_RE.sub(" ", text).strip()
        if self.tidy_punctuation:
            text = SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
            text = DOUBLE_COMMA_RE.sub(",", text)
            text = DOUBLE_PERIOD_RE.sub(".", text)
            text = COMMA_BEFORE_PERIOD_RE.sub(".", text)
            if text.endswith(","):
                text = text[:-1] + "."
        return text


def render(
    selection_set: SelectionSet,
    catalog: ParameterCatalog,
    root_id: Optional[str] = None,
    placeholder_policy: PlaceholderPolicy = PlaceholderPolicy.BLANK,
) -> Optional[str]:
    """Convenience wrapper around TemplateRenderer.render."""
    return TemplateRenderer(placeholder_policy).render(selection_set, catalog, root_id)


def _single_root(catalog: ParameterCatalog) -> Optional[str]:
    candidates = catalog.root_candidates()
    if len(candidates) == 1:
        return candidates[0]
    return None
