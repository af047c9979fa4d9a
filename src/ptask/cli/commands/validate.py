"""
Validate Command - Report catalog problems before they reach a user.

Exits non-zero when problems are found so it can gate a catalog import.
"""

import sys
from pathlib import Path
from typing import List, Optional

import click
from pydantic import BaseModel, Field
from rich.console import Console
from rich.panel import Panel

from ...config import load_config
from ...core.graph import find_catalog_problems
from ..renderers import JsonRenderer, _null_context
from ..utils import echo_success, exit_with_error, load_catalog


class ValidateResponse(BaseModel):
    valid: bool
    problems: List[str] = Field(default_factory=list)


@click.command()
@click.option("-c", "--catalog", "catalog_path", default=None,
              help="Catalog file (.yaml, .json or .db)")
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("--root", "root_slug", default=None, help="Slug of the root parameter")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def validate(catalog_path: Optional[str], config_path: Optional[str], root_slug: Optional[str], as_json: bool):
    """
    Check a catalog for dangling references, missing roots and cycles.
    """
    renderer = JsonRenderer("validate")
    context_manager = renderer.capture() if as_json else _null_context()

    error_to_report = None
    response_data = None

    with context_manager:
        try:
            config = load_config(Path(config_path) if config_path else None)
            catalog = load_catalog(catalog_path, config)
            problems = find_catalog_problems(catalog, root_slug or config.engine.root_slug)
            response_data = ValidateResponse(valid=not problems, problems=problems)
        except Exception as e:
            error_to_report = e

    if as_json:
        if error_to_report:
            renderer.render_error(error_to_report)
            sys.exit(1)
        renderer.render_success(response_data)
        if not response_data.valid:
            sys.exit(1)
        return

    if error_to_report:
        exit_with_error(error_to_report)

    if response_data.valid:
        echo_success("Catalog is valid")
        return

    console = Console()
    console.print(Panel(
        "\n".join(f"• {problem}" for problem in response_data.problems),
        title=f"[red]{len(response_data.problems)} problem(s) found[/red]",
        border_style="red",
    ))
    sys.exit(1)
