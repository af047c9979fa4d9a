"""
File-backed catalog provider.

Reads a table-shaped JSON or YAML document (see ParameterCatalog.from_dict).
The file is re-read on every fetch so edits show up on refresh.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..catalog import ParameterCatalog
from ..exceptions import CatalogError, CatalogNotFoundError
from ..types import DependencyEdge, DependencyOptionFilter, Parameter, ParameterOption
from .base import CatalogProvider

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class FileCatalogProvider(CatalogProvider):
    """
    Catalog snapshot stored in a single JSON or YAML file.

    `fetch()` parses the file once and is the only consistent read. Each
    `list_*` accessor parses the file again on its own, so calling several
    of them while the file is being rewritten can mix two versions.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            raise CatalogNotFoundError(str(self.path))

        text = self.path.read_text(encoding="utf-8")
        try:
            if self.path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise CatalogError(f"Failed to parse catalog {self.path}: {e}") from e
        return data

    def fetch(self) -> ParameterCatalog:
        catalog = ParameterCatalog.from_dict(self._read())
        logger.debug(f"Read catalog from {self.path}: {catalog!r}")
        return catalog

    def list_parameters(self) -> List[Parameter]:
        return self.fetch().list_parameters()

    def list_options(self) -> List[ParameterOption]:
        return self.fetch().list_options()

    def list_dependencies(self) -> List[DependencyEdge]:
        return self.fetch().list_dependencies()

    def list_dependency_option_filters(self) -> List[DependencyOptionFilter]:
        return self.fetch().list_dependency_option_filters()

    def save(self, catalog: ParameterCatalog) -> None:
        """Write a snapshot out in the format implied by the file suffix."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = catalog.to_dict()
        if self.path.suffix.lower() in YAML_SUFFIXES:
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True, default_flow_style=False)
        else:
            self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
