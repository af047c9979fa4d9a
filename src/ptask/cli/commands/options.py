"""
Options Command - What can be picked next, given some selections.
"""

import sys
from typing import List, Optional, Tuple

import click
from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from ..renderers import JsonRenderer, _null_context
from ..utils import apply_choices, build_session, exit_with_error, parse_choices


class ApiOption(BaseModel):
    id: str
    name: str
    label: str


class ApiAvailableParameter(BaseModel):
    slug: str
    label: str
    is_required: bool
    selected: Optional[str] = None
    options: List[ApiOption] = Field(default_factory=list)


class OptionsResponse(BaseModel):
    state: str
    parameters: List[ApiAvailableParameter]


@click.command()
@click.option("-c", "--catalog", "catalog_path", default=None,
              help="Catalog file (.yaml, .json or .db)")
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("-s", "--select", "choices", multiple=True,
              help="Selection as slug=value (repeatable, applied in order)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def options(catalog_path: Optional[str], config_path: Optional[str], choices: Tuple[str, ...], as_json: bool):
    """
    List the parameters available after applying selections, with their allowed options.

    \b
    Examples:
      ptask options
      ptask options -s tipo-de-tarea=Mampostería
    """
    renderer = JsonRenderer("options")
    context_manager = renderer.capture() if as_json else _null_context()

    error_to_report = None
    response_data = None

    with context_manager:
        try:
            session = build_session(catalog_path, config_path)
            apply_choices(session, parse_choices(choices))

            selected = {badge.parameter_id: badge.option_label for badge in session.current_selections()}
            response_data = OptionsResponse(
                state=session.state.value,
                parameters=[
                    ApiAvailableParameter(
                        slug=param.slug,
                        label=param.label,
                        is_required=param.is_required,
                        selected=selected.get(param.id),
                        options=[
                            ApiOption(id=opt.id, name=opt.name, label=opt.display_label)
                            for opt in session.allowed_options(param.id)
                        ],
                    )
                    for param in session.current_available_parameters()
                ],
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

    console = Console()
    table = Table(title=f"Available parameters ({response_data.state})")
    table.add_column("Parameter", style="cyan")
    table.add_column("Selected", style="green")
    table.add_column("Allowed options")
    for param in response_data.parameters:
        name = f"{param.slug} *" if param.is_required else param.slug
        table.add_row(name, param.selected or "", ", ".join(opt.label for opt in param.options))
    console.print(table)
