"""
Render Command - Produce the task name for a set of selections.
"""

import sys
from typing import Dict, List, Optional, Tuple

import click
from pydantic import BaseModel, Field

from ..renderers import JsonRenderer, _null_context
from ..utils import apply_choices, build_session, echo_info, echo_warning, exit_with_error, parse_choices


class RenderResponse(BaseModel):
    name_rendered: Optional[str]
    state: str
    param_values: Dict[str, str] = Field(default_factory=dict)
    param_order: List[str] = Field(default_factory=list)
    missing_required: List[str] = Field(default_factory=list)


@click.command()
@click.option("-c", "--catalog", "catalog_path", default=None,
              help="Catalog file (.yaml, .json or .db)")
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("-s", "--select", "choices", multiple=True,
              help="Selection as slug=value (repeatable, applied in order)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def render(catalog_path: Optional[str], config_path: Optional[str], choices: Tuple[str, ...], as_json: bool):
    """
    Render the task name for the given selections.

    \b
    Example:
      ptask render -s tipo-de-tarea=Mampostería -s espesor=18
    """
    renderer = JsonRenderer("render")
    context_manager = renderer.capture() if as_json else _null_context()

    error_to_report = None
    response_data = None

    with context_manager:
        try:
            session = build_session(catalog_path, config_path)
            apply_choices(session, parse_choices(choices))
            persisted = session.to_persisted()
            response_data = RenderResponse(
                name_rendered=persisted.name_rendered,
                state=session.state.value,
                param_values=persisted.param_values,
                param_order=persisted.param_order,
                missing_required=[param.slug for param in session.missing_required()],
            )
        except click.BadParameter:
            raise
        except Exception as e:
            error_to_report = e

    if as_json:
        if error_to_report:
            renderer.render_error(error_to_report)
            sys.exit(1)
        renderer.render_success(response_data)
        return

    if error_to_report:
        exit_with_error(error_to_report)

    if response_data.name_rendered is None:
        echo_warning("No name could be rendered (select the root parameter first)")
        return

    click.echo(response_data.name_rendered)
    if response_data.missing_required:
        echo_info(f"Still required: {', '.join(response_data.missing_required)}")
