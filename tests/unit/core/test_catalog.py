"""Unit tests for the catalog snapshot."""

import pytest

from ptask.core.catalog import ParameterCatalog
from ptask.core.exceptions import CatalogError
from ptask.core.types import Parameter, ParameterOption, ParameterType


class TestParameterCatalog:
    def test_lookups(self, deep_catalog):
        assert deep_catalog.get_parameter("muro").slug == "muro"
        assert deep_catalog.get_parameter_by_slug("ladrillo").id == "ladrillo"
        assert deep_catalog.get_option("o-cem").name == "cementicio"
        assert deep_catalog.get_parameter("missing") is None
        assert deep_catalog.get_option("missing") is None

    def test_options_for_keeps_catalog_order(self, deep_catalog):
        names = [opt.name for opt in deep_catalog.options_for("ladrillo")]
        assert names == ["hueco", "macizo", "bloque"]

    def test_options_for_unknown_parameter_is_empty(self, deep_catalog):
        assert deep_catalog.options_for("nope") == []

    def test_root_candidates_skip_children_and_non_select(self, deep_catalog):
        assert deep_catalog.root_candidates() == ["tipo"]

    def test_parameter_index(self, deep_catalog):
        assert deep_catalog.parameter_index("tipo") == 0
        assert deep_catalog.parameter_index("mortero") == 3

    def test_len_and_repr(self, deep_catalog):
        assert len(deep_catalog) == 5
        assert "parameters=5" in repr(deep_catalog)


class TestCatalogFromDict:
    def test_accepts_table_names(self, scenario_data):
        data = {
            "task_parameters": scenario_data["parameters"],
            "task_parameter_options": scenario_data["options"],
            "task_parameter_dependencies": scenario_data["dependencies"],
        }
        catalog = ParameterCatalog.from_dict(data)
        assert len(catalog.list_options()) == 4
        assert len(catalog.list_dependencies()) == 1

    def test_numeric_ids_are_coerced(self):
        catalog = ParameterCatalog.from_dict({
            "parameters": [{"id": 1, "slug": "a"}],
            "options": [{"id": 10, "parameter_id": 1, "name": 18}],
        })
        assert catalog.get_parameter("1").type == ParameterType.SELECT
        assert catalog.get_option("10").name == "18"

    def test_missing_sections_are_empty(self):
        catalog = ParameterCatalog.from_dict({})
        assert len(catalog) == 0
        assert catalog.list_dependencies() == []

    def test_rejects_non_mapping(self):
        with pytest.raises(CatalogError):
            ParameterCatalog.from_dict(["not", "a", "mapping"])

    def test_rejects_non_list_section(self):
        with pytest.raises(CatalogError, match="must be a list"):
            ParameterCatalog.from_dict({"parameters": {"id": "a"}})

    def test_rejects_malformed_row(self):
        with pytest.raises(CatalogError, match="Malformed"):
            ParameterCatalog.from_dict({"parameters": [{"slug": "no-id"}]})

    def test_to_dict_round_trip(self, deep_catalog):
        rebuilt = ParameterCatalog.from_dict(deep_catalog.to_dict())
        assert rebuilt.list_parameters() == deep_catalog.list_parameters()
        assert rebuilt.list_dependency_option_filters() == deep_catalog.list_dependency_option_filters()


class TestCatalogTypes:
    def test_placeholder_uses_slug(self):
        param = Parameter(id="p", slug="espesor")
        assert param.placeholder == "{{espesor}}"

    def test_display_label_falls_back_to_name(self):
        assert ParameterOption(id="o", parameter_id="p", name="hueco").display_label == "hueco"
        assert ParameterOption(id="o", parameter_id="p", name="cal", label="de cal").display_label == "de cal"

    def test_only_select_parameters_are_selectable(self):
        assert Parameter(id="p", slug="a").is_selectable()
        assert not Parameter(id="p", slug="a", type="text").is_selectable()
