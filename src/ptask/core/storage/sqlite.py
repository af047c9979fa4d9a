"""
SQLite catalog provider.

Reads the product's catalog tables from a local SQLite file:
- task_parameters
- task_parameter_options
- task_parameter_dependencies
- task_parameter_dependency_options

`init_schema` and `save_catalog` exist to seed fixtures and local copies of
the remote store; the engine itself only reads.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, List

from ..catalog import ParameterCatalog
from ..exceptions import CatalogError, CatalogNotFoundError
from ..types import DependencyEdge, DependencyOptionFilter, Parameter, ParameterOption
from .base import CatalogProvider

logger = logging.getLogger(__name__)


class SQLiteCatalogProvider(CatalogProvider):
    """
    Catalog snapshot stored in a local SQLite file.

    Parameters are ordered by label and options by label, matching the order
    the product presents them in.
    """

    def __init__(self, db_path: Path, create: bool = False):
        self.db_path = Path(db_path)
        if create:
            self.init_schema()
        elif not self.db_path.exists():
            raise CatalogNotFoundError(str(self.db_path))

    @contextmanager
    def _connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS task_parameters (
                    id TEXT PRIMARY KEY,
                    slug TEXT NOT NULL UNIQUE,
                    label TEXT NOT NULL DEFAULT '',
                    type TEXT NOT NULL DEFAULT 'select',
                    expression_template TEXT,
                    is_required INTEGER NOT NULL DEFAULT 0
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS task_parameter_options (
                    id TEXT PRIMARY KEY,
                    parameter_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    label TEXT NOT NULL DEFAULT ''
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS task_parameter_dependencies (
                    id TEXT PRIMARY KEY,
                    parent_parameter_id TEXT NOT NULL,
                    parent_option_id TEXT NOT NULL,
                    child_parameter_id TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS task_parameter_dependency_options (
                    id TEXT,
                    dependency_id TEXT NOT NULL,
                    child_option_id TEXT NOT NULL,
                    PRIMARY KEY (dependency_id, child_option_id)
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_options_parameter ON task_parameter_options(parameter_id)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_dependencies_trigger "
                "ON task_parameter_dependencies(parent_parameter_id, parent_option_id)"
            )

    def _select(self, query: str) -> List[Dict[str, Any]]:
        try:
            with self._connection() as conn:
                return [dict(row) for row in conn.execute(query).fetchall()]
        except sqlite3.Error as e:
            raise CatalogError(f"Failed to read catalog from {self.db_path}: {e}") from e

    def list_parameters(self) -> List[Parameter]:
        rows = self._select("SELECT * FROM task_parameters ORDER BY label, rowid")
        return [Parameter.model_validate({**row, "is_required": bool(row.get("is_required"))}) for row in rows]

    def list_options(self) -> List[ParameterOption]:
        rows = self._select("SELECT * FROM task_parameter_options ORDER BY label, rowid")
        return [ParameterOption.model_validate(row) for row in rows]

    def list_dependencies(self) -> List[DependencyEdge]:
        rows = self._select("SELECT * FROM task_parameter_dependencies ORDER BY rowid")
        return [DependencyEdge.model_validate(row) for row in rows]

    def list_dependency_option_filters(self) -> List[DependencyOptionFilter]:
        rows = self._select("SELECT * FROM task_parameter_dependency_options ORDER BY rowid")
        return [DependencyOptionFilter.model_validate(row) for row in rows]

    def save_catalog(self, catalog: ParameterCatalog) -> None:
        """Replace every catalog table with the given snapshot in one transaction."""
        with self._connection() as conn:
            conn.execute("DELETE FROM task_parameter_dependency_options")
            conn.execute("DELETE FROM task_parameter_dependencies")
            conn.execute("DELETE FROM task_parameter_options")
            conn.execute("DELETE FROM task_parameters")

            conn.executemany("""
                INSERT INTO task_parameters (id, slug, label, type, expression_template, is_required)
                VALUES (?, ?, ?, ?, ?, ?)
            """, [
                (p.id, p.slug, p.label, p.type.value, p.expression_template, int(p.is_required))
                for p in catalog.list_parameters()
            ])
            conn.executemany("""
                INSERT INTO task_parameter_options (id, parameter_id, name, label)
                VALUES (?, ?, ?, ?)
            """, [(o.id, o.parameter_id, o.name, o.label) for o in catalog.list_options()])
            conn.executemany("""
                INSERT INTO task_parameter_dependencies
                (id, parent_parameter_id, parent_option_id, child_parameter_id)
                VALUES (?, ?, ?, ?)
            """, [
                (d.id, d.parent_parameter_id, d.parent_option_id, d.child_parameter_id)
                for d in catalog.list_dependencies()
            ])
            conn.executemany("""
                INSERT INTO task_parameter_dependency_options (id, dependency_id, child_option_id)
                VALUES (?, ?, ?)
            """, [(f.id, f.dependency_id, f.child_option_id) for f in catalog.list_dependency_option_filters()])

        logger.info(f"Saved {catalog!r} to {self.db_path}")

    def get_stats(self) -> Dict[str, Any]:
        with self._connection() as conn:
            counts = {
                table: conn.execute(f"SELECT COUNT(*) AS c FROM {table}").fetchone()["c"]
                for table in (
                    "task_parameters",
                    "task_parameter_options",
                    "task_parameter_dependencies",
                    "task_parameter_dependency_options",
                )
            }
        counts["db_size_bytes"] = self.db_path.stat().st_size if self.db_path.exists() else 0
        return counts
