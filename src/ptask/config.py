"""
Configuration and defaults.

Settings are read from `.ptask/config.yaml` when present, then overridden by
environment variables. Anything missing falls back to the defaults below.

Example config.yaml:

    engine:
      root_slug: tipo-de-tarea
      placeholder_policy: blank
      tidy_punctuation: true
      preferred_order: [tipo-de-tarea, tipo-de-muro, espesor]
    catalog:
      path: catalog.yaml
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .core.exceptions import PtaskError
from .core.types import PlaceholderPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".ptask/config.yaml")

# Display order used by the product for its standard parameters.
DEFAULT_PREFERRED_ORDER: List[str] = [
    "tipo_tarea",
    "tipo_de_muro",
    "tipo_elemento",
    "tipo_ladrillo",
    "tipo_mortero",
    "aditivos",
]

ENV_ROOT_SLUG = "PTASK_ROOT_SLUG"
ENV_PLACEHOLDER_POLICY = "PTASK_PLACEHOLDER_POLICY"
ENV_CATALOG_PATH = "PTASK_CATALOG"


class ConfigError(PtaskError):
    """The configuration file could not be read."""


class EngineConfig(BaseModel):
    """Knobs for a configuration session."""
    root_slug: Optional[str] = None
    placeholder_policy: PlaceholderPolicy = PlaceholderPolicy.BLANK
    tidy_punctuation: bool = True
    preferred_order: List[str] = Field(default_factory=lambda: list(DEFAULT_PREFERRED_ORDER))

    model_config = ConfigDict(extra="ignore")


class PtaskConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    catalog_path: Optional[str] = None


def load_config(config_path: Optional[Path] = None) -> PtaskConfig:
    """
    Load configuration from YAML plus environment overrides.

    A missing file is not an error; a malformed one is.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    data: Dict[str, Any] = {}

    if path.exists():
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        logger.debug(f"Loaded config from {path}")

    engine_data = dict(data.get("engine") or {})
    if os.getenv(ENV_ROOT_SLUG):
        engine_data["root_slug"] = os.environ[ENV_ROOT_SLUG]
    if os.getenv(ENV_PLACEHOLDER_POLICY):
        engine_data["placeholder_policy"] = os.environ[ENV_PLACEHOLDER_POLICY]

    catalog_path = (data.get("catalog") or {}).get("path")
    if os.getenv(ENV_CATALOG_PATH):
        catalog_path = os.environ[ENV_CATALOG_PATH]

    try:
        return PtaskConfig(engine=EngineConfig.model_validate(engine_data), catalog_path=catalog_path)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
