"""Unit tests for the dependency graph."""

import pytest

from ptask.core.catalog import ParameterCatalog
from ptask.core.exceptions import CatalogError
from ptask.core.graph import DependencyGraph, find_catalog_problems
from ptask.core.selection import SelectionSet
from ptask.core.types import Selection


def _ids(options):
    return [opt.id for opt in options]


class TestRootResolution:
    def test_single_root(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        assert graph.root_id == "tipo"
        assert graph.root.slug == "tipo"
        assert graph.is_root("tipo")
        assert not graph.is_root("muro")

    def test_multiple_roots_raise(self, deep_data):
        deep_data["parameters"].append({"id": "extra", "slug": "extra"})
        deep_data["options"].append({"id": "o-x", "parameter_id": "extra", "name": "x"})
        with pytest.raises(CatalogError, match="2 root parameters"):
            DependencyGraph(ParameterCatalog.from_dict(deep_data))

    def test_root_slug_picks_among_candidates(self, deep_data):
        deep_data["parameters"].append({"id": "extra", "slug": "extra"})
        graph = DependencyGraph(ParameterCatalog.from_dict(deep_data), root_slug="extra")
        assert graph.root_id == "extra"

    def test_root_slug_of_child_raises(self, deep_catalog):
        with pytest.raises(CatalogError, match="unlocked by another"):
            DependencyGraph(deep_catalog, root_slug="muro")

    def test_unknown_root_slug_raises(self, deep_catalog):
        with pytest.raises(CatalogError, match="not found"):
            DependencyGraph(deep_catalog, root_slug="missing")

    def test_no_root_raises(self):
        with pytest.raises(CatalogError, match="no root"):
            DependencyGraph(ParameterCatalog())


class TestGraphQueries:
    def test_text_parameters_are_left_out(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        assert not graph.has_parameter("notas")
        assert graph.parameter_count == 4

    def test_children_unlocked_by(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        assert graph.children_unlocked_by("tipo", "o-mamp") == {"muro"}
        assert graph.children_unlocked_by("tipo", "o-rev") == {"mortero"}
        assert graph.children_unlocked_by("muro", "missing") == set()

    def test_is_valid_choice(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        assert graph.is_valid_choice("muro", "o-ext")
        assert not graph.is_valid_choice("muro", "o-mamp")
        assert not graph.is_valid_choice("notas", "o-ext")

    def test_descendants(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        assert graph.descendants("tipo") == {"muro", "ladrillo", "mortero"}
        assert graph.descendants("mortero") == set()
        assert graph.descendants("notas") == set()

    def test_dangling_edges_never_fire(self, deep_data):
        deep_data["dependencies"].append({
            "id": "bad", "parent_parameter_id": "tipo", "parent_option_id": "o-ext",
            "child_parameter_id": "ladrillo",
        })
        deep_data["dependencies"].append({
            "id": "ghost", "parent_parameter_id": "tipo", "parent_option_id": "o-mamp",
            "child_parameter_id": "ghost",
        })
        graph = DependencyGraph(ParameterCatalog.from_dict(deep_data))
        assert graph.children_unlocked_by("tipo", "o-ext") == set()
        assert graph.children_unlocked_by("tipo", "o-mamp") == {"muro"}
        assert graph.edge_count == 5

    def test_stats(self, deep_catalog):
        stats = DependencyGraph(deep_catalog).get_stats()
        assert stats["root"] == "tipo"
        assert stats["live_dependencies"] == 5
        assert stats["option_filters"] == 3


class TestAllowedOptions:
    def test_root_offers_everything(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        assert _ids(graph.allowed_options("tipo", SelectionSet())) == ["o-mamp", "o-rev"]

    def test_filtered_edge_narrows_options(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        sel = SelectionSet([
            Selection(parameter_id="tipo", option_id="o-mamp"),
            Selection(parameter_id="muro", option_id="o-ext"),
        ])
        assert _ids(graph.allowed_options("ladrillo", sel)) == ["o-macizo", "o-bloque"]

    def test_unfiltered_edge_allows_all(self, deep_catalog):
        graph = DependencyGraph(deep_catalog)
        sel = SelectionSet([
            Selection(parameter_id="tipo", option_id="o-mamp"),
            Selection(parameter_id="muro", option_id="o-int"),
        ])
        assert _ids(graph.allowed_options("ladrillo", sel)) == ["o-hueco", "o-macizo", "o-bloque"]

    def test_filters_from_several_edges_are_unioned(self, deep_data):
        deep_data["options"].append({"id": "o-mixto", "parameter_id": "mortero", "name": "mixto"})
        deep_data["dependency_options"].append({"dependency_id": "e-mort-rev", "child_option_id": "o-cal"})
        catalog = ParameterCatalog.from_dict(deep_data)
        graph = DependencyGraph(catalog)
        sel = SelectionSet([
            Selection(parameter_id="tipo", option_id="o-rev"),
            Selection(parameter_id="ladrillo", option_id="o-macizo"),
        ])
        assert _ids(graph.allowed_options("mortero", sel)) == ["o-cal", "o-cem"]


class TestCatalogProblems:
    def test_clean_catalog(self, deep_catalog, scenario_catalog):
        assert find_catalog_problems(deep_catalog) == []
        assert find_catalog_problems(scenario_catalog) == []

    def test_reports_cycles(self, deep_data):
        deep_data["dependencies"].append({
            "id": "loop", "parent_parameter_id": "ladrillo", "parent_option_id": "o-bloque",
            "child_parameter_id": "muro",
        })
        catalog = ParameterCatalog.from_dict(deep_data)
        assert DependencyGraph(catalog).find_cycles() == [frozenset({"muro", "ladrillo"})]
        assert "Dependency cycle between: ladrillo, muro" in find_catalog_problems(catalog)

    def test_reports_dangling_rows(self, deep_data):
        deep_data["options"].append({"id": "o-orphan", "parameter_id": "gone", "name": "orphan"})
        deep_data["dependency_options"].append({"dependency_id": "e-missing", "child_option_id": "o-cal"})
        deep_data["dependency_options"].append({"dependency_id": "e-muro", "child_option_id": "o-cal"})
        problems = find_catalog_problems(ParameterCatalog.from_dict(deep_data))
        assert any("unknown parameter gone" in p for p in problems)
        assert any("unknown dependency e-missing" in p for p in problems)
        assert any("outside its child parameter" in p for p in problems)

    def test_reports_missing_root_template_and_options(self, scenario_data):
        scenario_data["parameters"][0]["expression_template"] = "  "
        scenario_data["options"] = [o for o in scenario_data["options"] if o["parameter_id"] != "p-esp"]
        problems = find_catalog_problems(ParameterCatalog.from_dict(scenario_data))
        assert "Parameter 'espesor' has no options" in problems
        assert "Root parameter 'tipo-de-tarea' has no expression template" in problems

    def test_reports_root_errors_without_raising(self):
        problems = find_catalog_problems(ParameterCatalog())
        assert problems == ["Catalog has no root parameter"]

    def test_graph_validate_uses_its_root(self, deep_data):
        deep_data["parameters"].append({"id": "extra", "slug": "extra"})
        catalog = ParameterCatalog.from_dict(deep_data)
        assert "Parameter 'extra' has no options" in DependencyGraph(catalog, root_slug="tipo").validate()
