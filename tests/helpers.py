"""
Shared builders for compiler tests.

Keeps model and registry construction short so tests read as the schema
they describe.
"""

from typing import Dict, List, Optional

from psql_schema_compiler.config import CompilerConfig
from psql_schema_compiler.domain.models import (
    Enum,
    Model,
    ModelField,
    ModelIdentifier,
    ModelRelation,
    RelationType,
)
from psql_schema_compiler.registry import ModelRegistry


def make_model(
    name: str,
    fields: Dict[str, str],
    identifiers: Optional[Dict[str, List[str]]] = None,
    related: Optional[Dict[str, str]] = None,
) -> Model:
    """Build a model from plain name -> type / name -> fields mappings."""
    if identifiers is None:
        identifiers = {"primary": ["ID"]}
    return Model(
        name=name,
        fields={key: ModelField(name=key, type=value) for key, value in fields.items()},
        identifiers={key: ModelIdentifier(name=key, fields=list(value)) for key, value in identifiers.items()},
        related={key: ModelRelation(type=RelationType(value)) for key, value in (related or {}).items()},
    )


def make_config(schema_name: str = "public", use_big_serial: bool = False) -> CompilerConfig:
    return CompilerConfig(schema_name=schema_name, use_big_serial=use_big_serial)


def person_model() -> Model:
    return make_model(
        "Person",
        {
            "ID": "AutoIncrement",
            "Email": "String",
            "LastName": "String",
            "Nationality": "Nationality",
        },
        related={"Company": "ForOne"},
    )


def company_model() -> Model:
    return make_model(
        "Company",
        {"ID": "AutoIncrement", "Name": "String", "TaxID": "String"},
        identifiers={"primary": ["ID"], "name": ["Name"]},
        related={"Person": "HasMany"},
    )


def nationality_enum() -> Enum:
    return Enum(
        name="Nationality",
        type="String",
        entries={"US": "American", "DE": "German", "FR": "French"},
    )


def person_registry(extra_models: Optional[List[Model]] = None) -> ModelRegistry:
    models = [person_model(), company_model()] + list(extra_models or [])
    return ModelRegistry(models=models, enums=[nationality_enum()])
