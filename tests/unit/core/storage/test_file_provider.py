"""Unit tests for the JSON/YAML file provider."""

import json
from unittest.mock import patch

import pytest
import yaml

from ptask.core.exceptions import CatalogError, CatalogNotFoundError
from ptask.core.storage import FileCatalogProvider


class TestFileCatalogProvider:
    def test_reads_yaml(self, tmp_path, scenario_data):
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump(scenario_data, allow_unicode=True), encoding="utf-8")

        catalog = FileCatalogProvider(path).fetch()
        assert catalog.get_option("o-mamp").label == "Mampostería"

    def test_reads_json(self, tmp_path, scenario_data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(scenario_data), encoding="utf-8")

        provider = FileCatalogProvider(path)
        assert [p.slug for p in provider.list_parameters()] == ["tipo-de-tarea", "espesor"]
        assert len(provider.list_dependencies()) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogNotFoundError):
            FileCatalogProvider(tmp_path / "missing.yaml").fetch()

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="Failed to parse"):
            FileCatalogProvider(path).fetch()

    def test_empty_yaml_is_empty_catalog(self, tmp_path):
        path = tmp_path / "catalog.yml"
        path.write_text("", encoding="utf-8")
        assert len(FileCatalogProvider(path).fetch()) == 0

    def test_rereads_on_every_fetch(self, tmp_path, scenario_data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(scenario_data), encoding="utf-8")
        provider = FileCatalogProvider(path)
        assert len(provider.fetch().list_options()) == 4

        scenario_data["options"].pop()
        path.write_text(json.dumps(scenario_data), encoding="utf-8")
        assert len(provider.fetch().list_options()) == 3

    @pytest.mark.parametrize("name", ["out.yaml", "out.json"])
    def test_save_then_fetch(self, tmp_path, deep_catalog, name):
        provider = FileCatalogProvider(tmp_path / "nested" / name)
        provider.save(deep_catalog)
        assert provider.fetch().list_parameters() == deep_catalog.list_parameters()

    def test_fetch_parses_the_file_once(self, tmp_path, scenario_data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(scenario_data), encoding="utf-8")
        provider = FileCatalogProvider(path)

        with patch.object(provider, "_read", wraps=provider._read) as mock_read:
            catalog = provider.fetch()

        assert mock_read.call_count == 1
        assert len(catalog.list_dependencies()) == 1
