"""Shared catalog fixtures."""

import copy

import pytest

from ptask.core.catalog import ParameterCatalog

SCENARIO_DATA = {
    "parameters": [
        {"id": "p-tipo", "slug": "tipo-de-tarea", "label": "Tipo de tarea",
         "expression_template": "{{tipo-de-tarea}} de {{espesor}}."},
        {"id": "p-esp", "slug": "espesor", "label": "Espesor", "expression_template": "{value} cm"},
    ],
    "options": [
        {"id": "o-mamp", "parameter_id": "p-tipo", "name": "mamposteria", "label": "Mampostería"},
        {"id": "o-rev", "parameter_id": "p-tipo", "name": "revoque", "label": "Revoque"},
        {"id": "o-18", "parameter_id": "p-esp", "name": "18", "label": "18"},
        {"id": "o-12", "parameter_id": "p-esp", "name": "12", "label": "12"},
    ],
    "dependencies": [
        {"id": "d-esp", "parent_parameter_id": "p-tipo", "parent_option_id": "o-mamp",
         "child_parameter_id": "p-esp"},
    ],
    "dependency_options": [],
}

# tipo -(mamposteria)-> muro -(exterior)-> ladrillo [macizo, bloque only]
#                            -(interior)-> ladrillo [unfiltered]
# tipo -(revoque)-> mortero
# ladrillo -(macizo)-> mortero [cementicio only]
DEEP_DATA = {
    "parameters": [
        {"id": "tipo", "slug": "tipo", "label": "Tipo",
         "expression_template": "{{tipo}} {{muro}} {{ladrillo}}, {{mortero}}."},
        {"id": "muro", "slug": "muro", "label": "Muro", "expression_template": "de {value}"},
        {"id": "ladrillo", "slug": "ladrillo", "label": "Ladrillo",
         "expression_template": "con ladrillo {value}"},
        {"id": "mortero", "slug": "mortero", "label": "Mortero",
         "expression_template": "mortero {value}", "is_required": True},
        {"id": "notas", "slug": "notas", "label": "Notas", "type": "text"},
    ],
    "options": [
        {"id": "o-mamp", "parameter_id": "tipo", "name": "mamposteria", "label": "Mampostería"},
        {"id": "o-rev", "parameter_id": "tipo", "name": "revoque", "label": "Revoque"},
        {"id": "o-ext", "parameter_id": "muro", "name": "exterior"},
        {"id": "o-int", "parameter_id": "muro", "name": "interior"},
        {"id": "o-hueco", "parameter_id": "ladrillo", "name": "hueco"},
        {"id": "o-macizo", "parameter_id": "ladrillo", "name": "macizo"},
        {"id": "o-bloque", "parameter_id": "ladrillo", "name": "bloque"},
        {"id": "o-cal", "parameter_id": "mortero", "name": "cal", "label": "de cal"},
        {"id": "o-cem", "parameter_id": "mortero", "name": "cementicio"},
    ],
    "dependencies": [
        {"id": "e-muro", "parent_parameter_id": "tipo", "parent_option_id": "o-mamp",
         "child_parameter_id": "muro"},
        {"id": "e-lad-ext", "parent_parameter_id": "muro", "parent_option_id": "o-ext",
         "child_parameter_id": "ladrillo"},
        {"id": "e-lad-int", "parent_parameter_id": "muro", "parent_option_id": "o-int",
         "child_parameter_id": "ladrillo"},
        {"id": "e-mort-rev", "parent_parameter_id": "tipo", "parent_option_id": "o-rev",
         "child_parameter_id": "mortero"},
        {"id": "e-mort-lad", "parent_parameter_id": "ladrillo", "parent_option_id": "o-macizo",
         "child_parameter_id": "mortero"},
    ],
    "dependency_options": [
        {"dependency_id": "e-lad-ext", "child_option_id": "o-macizo"},
        {"dependency_id": "e-lad-ext", "child_option_id": "o-bloque"},
        {"dependency_id": "e-mort-lad", "child_option_id": "o-cem"},
    ],
}


@pytest.fixture
def scenario_data():
    return copy.deepcopy(SCENARIO_DATA)


@pytest.fixture
def scenario_catalog(scenario_data):
    return ParameterCatalog.from_dict(scenario_data)


@pytest.fixture
def deep_data():
    return copy.deepcopy(DEEP_DATA)


@pytest.fixture
def deep_catalog(deep_data):
    return ParameterCatalog.from_dict(deep_data)
