"""
Inspect Command - Summarize a catalog and its dependency graph.
"""

import sys
from typing import List, Optional

import click
from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from ..renderers import JsonRenderer, _null_context
from ..utils import build_session, exit_with_error


class ApiParameter(BaseModel):
    id: str
    slug: str
    label: str
    type: str
    option_count: int
    is_root: bool
    is_required: bool
    unlocks: List[str] = Field(default_factory=list)
    reaches: List[str] = Field(default_factory=list)


class InspectResponse(BaseModel):
    root: str
    stats: dict
    parameters: List[ApiParameter]


@click.command()
@click.option("-c", "--catalog", "catalog_path", default=None,
              help="Catalog file (.yaml, .json or .db)")
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("--root", "root_slug", default=None, help="Slug of the root parameter")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def inspect(catalog_path: Optional[str], config_path: Optional[str], root_slug: Optional[str], as_json: bool):
    """
    Show the parameters of a catalog, what each one unlocks directly
    and how many parameters sit below it.
    """
    renderer = JsonRenderer("inspect")
    context_manager = renderer.capture() if as_json else _null_context()

    error_to_report = None
    response_data = None

    with context_manager:
        try:
            session = build_session(catalog_path, config_path, root_slug)
            graph = session.graph

            parameters = []
            for param in session.catalog.list_parameters():
                unlocks = set()
                if graph.has_parameter(param.id):
                    for option in session.catalog.options_for(param.id):
                        unlocks |= graph.children_unlocked_by(param.id, option.id)
                parameters.append(ApiParameter(
                    id=param.id,
                    slug=param.slug,
                    label=param.label,
                    type=param.type.value,
                    option_count=len(session.catalog.options_for(param.id)),
                    is_root=graph.is_root(param.id),
                    is_required=param.is_required,
                    unlocks=sorted(session.catalog.get_parameter(pid).slug for pid in unlocks),
                    reaches=sorted(session.catalog.get_parameter(pid).slug for pid in graph.descendants(param.id)),
                ))

            response_data = InspectResponse(
                root=graph.root.slug,
                stats=graph.get_stats(),
                parameters=parameters,
            )
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

    _print_table(response_data)


def _print_table(response: InspectResponse) -> None:
    console = Console()
    table = Table(title=f"Catalog (root: {response.root})")
    table.add_column("Slug", style="cyan")
    table.add_column("Label")
    table.add_column("Type", style="dim")
    table.add_column("Options", justify="right")
    table.add_column("Unlocks", style="green")
    table.add_column("Reaches", style="dim")

    for param in response.parameters:
        slug = f"★ {param.slug}" if param.is_root else param.slug
        if param.is_required:
            slug += " *"
        table.add_row(
            slug, param.label, param.type, str(param.option_count),
            ", ".join(param.unlocks), str(len(param.reaches)),
        )

    console.print(table)
    stats = response.stats
    console.print(
        f"[dim]{stats['parameters']} selectable parameters, {stats['options']} options, "
        f"{stats['live_dependencies']}/{stats['declared_dependencies']} live dependencies[/dim]"
    )
