"""Fixtures shared by the CLI tests."""

import pytest
import yaml
from click.testing import CliRunner

from ptask.config import ENV_CATALOG_PATH, ENV_PLACEHOLDER_POLICY, ENV_ROOT_SLUG


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (ENV_ROOT_SLUG, ENV_PLACEHOLDER_POLICY, ENV_CATALOG_PATH):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def catalog_file(tmp_path, deep_data):
    path = tmp_path / "catalog.yaml"
    path.write_text(yaml.safe_dump(deep_data, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def base_args(tmp_path, catalog_file):
    """--catalog plus a config path that does not exist, so defaults apply."""
    return ["--catalog", str(catalog_file), "--config", str(tmp_path / "no-config.yaml")]
