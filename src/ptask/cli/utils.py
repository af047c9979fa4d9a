"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing, catalog loading, and turning `slug=value` arguments into
session selections.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import click

from ..config import PtaskConfig, load_config
from ..core.catalog import ParameterCatalog
from ..core.exceptions import PtaskError, UnknownOptionError, UnknownParameterError
from ..core.session import TaskConfigurationSession, resolve_option
from ..core.storage import CatalogProvider, FileCatalogProvider, SQLiteCatalogProvider

DEFAULT_CATALOG_PATH = "catalog.yaml"
SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


def echo_success(message: str) -> None:
    """Print a success message with a green checkmark."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Print an error message with a red cross."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """Print a warning message with a yellow alert symbol."""
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """Print an informational message, dimmed."""
    click.echo(click.style(f"   {message}", dim=True))


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_provider(catalog_path: str) -> CatalogProvider:
    """
    Pick a provider from the file suffix.

    Args:
        catalog_path (str): Path to a .db/.sqlite file or a JSON/YAML catalog.

    Returns:
        CatalogProvider: SQLiteCatalogProvider for database suffixes,
        FileCatalogProvider for everything else.
    """
    path = Path(catalog_path)
    if path.suffix.lower() in SQLITE_SUFFIXES:
        return SQLiteCatalogProvider(path)
    return FileCatalogProvider(path)


def resolve_catalog_path(catalog_path: Optional[str], config: PtaskConfig) -> str:
    return catalog_path or config.catalog_path or DEFAULT_CATALOG_PATH


def load_catalog(catalog_path: Optional[str], config: Optional[PtaskConfig] = None) -> ParameterCatalog:
    """
    Load a catalog snapshot from a JSON, YAML or SQLite file.

    Args:
        catalog_path (Optional[str]): Explicit path; falls back to the configured
            path, then to catalog.yaml.
        config (Optional[PtaskConfig]): Loaded configuration. Read from disk if omitted.

    Returns:
        ParameterCatalog: One consistent snapshot of the catalog tables.

    Raises:
        CatalogError: the file is missing or malformed.
    """
    config = config or load_config()
    return get_provider(resolve_catalog_path(catalog_path, config)).fetch()


def parse_choices(raw: Iterable[str]) -> List[Tuple[str, str]]:
    """Split `slug=value` arguments."""
    choices = []
    for item in raw:
        if "=" not in item:
            raise click.BadParameter(f"Expected slug=value, got '{item}'", param_hint="--select")
        key, value = item.split("=", 1)
        choices.append((key.strip(), value.strip()))
    return choices


def apply_choices(session: TaskConfigurationSession, choices: Iterable[Tuple[str, str]]) -> None:
    """
    Select each `(slug, value)` in order, failing loudly on the first bad one.

    Values may be option ids, names or labels.

    Args:
        session (TaskConfigurationSession): Session to mutate.
        choices: `(slug, value)` pairs, as returned by parse_choices.

    Raises:
        ValidationError: a parameter or value is unknown, or the parameter is
            not available yet.
    """
    for key, value in choices:
        param = session.catalog.get_parameter_by_slug(key) or session.catalog.get_parameter(key)
        if param is None:
            raise UnknownParameterError(key)
        option = resolve_option(session.allowed_options(param.id), value)
        if option is None:
            raise UnknownOptionError(param.slug, value)
        session.select(param.id, option.id)


def build_session(
    catalog_path: Optional[str],
    config_path: Optional[str],
    root_slug: Optional[str] = None,
) -> TaskConfigurationSession:
    """Load config and catalog, then open a session honouring both."""
    config = load_config(Path(config_path) if config_path else None)
    catalog = load_catalog(catalog_path, config)
    engine = config.engine
    if root_slug:
        engine = engine.model_copy(update={"root_slug": root_slug})
    return TaskConfigurationSession.from_config(catalog, engine)


def exit_with_error(error: Exception) -> None:
    """Text-mode failure: known errors get a clean message, anything else propagates."""
    if isinstance(error, PtaskError):
        echo_error(str(error))
        sys.exit(1)
    raise error
