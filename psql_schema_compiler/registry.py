"""
Model registry for the PSQL schema compiler.

The registry is a read-only lookup of models and enums by name. It can be
built in memory or loaded from a directory of YAML definition files:

    registry/
        models/person.yaml
        enums/nationality.yaml

A model file looks like::

    name: Person
    fields:
      ID: {type: AutoIncrement}
      Email: {type: String}
      Nationality: {type: Nationality}
    identifiers:
      primary: ID
      email: [Email]
    related:
      Company: {type: ForOne}
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from .constants import RegistryDirs
from .domain.models import (
    Enum,
    Model,
    ModelField,
    ModelIdentifier,
    ModelRelation,
    RelationType,
)
from .exceptions import (
    EnumNotFoundError,
    MalformedEntryError,
    ModelNotFoundError,
    RegistryNotFoundError,
)


logger = logging.getLogger(__name__)


class ModelRegistry:
    """Read-only lookup of models and enums by name."""

    def __init__(self, models: Iterable[Model] = (), enums: Iterable[Enum] = ()):
        self._models: Dict[str, Model] = {model.name: model for model in models}
        self._enums: Dict[str, Enum] = {enum.name: enum for enum in enums}

    def get_model(self, name: str) -> Model:
        """
        Look up a model by name.

        Raises:
            ModelNotFoundError: No model with this name is registered
        """
        model = self._models.get(name)
        if model is None:
            raise ModelNotFoundError(f"model '{name}' not found", name=name)
        return model

    def get_enum(self, name: str) -> Enum:
        """
        Look up an enum by name.

        Raises:
            EnumNotFoundError: No enum with this name is registered
        """
        enum = self._enums.get(name)
        if enum is None:
            raise EnumNotFoundError(f"enum '{name}' not found", name=name)
        return enum

    def get_all_models(self) -> Dict[str, Model]:
        return dict(self._models)

    def get_all_enums(self) -> Dict[str, Enum]:
        return dict(self._enums)

    def has_model(self, name: str) -> bool:
        return name in self._models

    def has_enum(self, name: str) -> bool:
        return name in self._enums


# --- Parsing ---

def _require_mapping(value: Any, what: str, source: Optional[str]) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedEntryError(f"{what} must be a mapping, got {type(value).__name__}", source=source)
    return value


def _require_name(data: Dict[str, Any], source: Optional[str]) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedEntryError("entry is missing a non-empty 'name'", source=source)
    return name.strip()


def _parse_field(field_name: str, value: Any, source: Optional[str]) -> ModelField:
    if isinstance(value, str):
        return ModelField(name=field_name, type=value)
    value = _require_mapping(value, f"field '{field_name}'", source)
    field_type = value.get("type")
    if not isinstance(field_type, str) or not field_type:
        raise MalformedEntryError(f"field '{field_name}' is missing a 'type'", source=source)
    return ModelField(name=field_name, type=field_type)


def _parse_identifier(identifier_name: str, value: Any, source: Optional[str]) -> ModelIdentifier:
    if isinstance(value, dict):
        value = value.get("fields")
    if isinstance(value, str):
        fields = [value]
    elif isinstance(value, list) and all(isinstance(item, str) for item in value):
        fields = list(value)
    else:
        raise MalformedEntryError(
            f"identifier '{identifier_name}' must be a field name or a list of field names",
            source=source,
        )
    if not fields:
        raise MalformedEntryError(f"identifier '{identifier_name}' has no fields", source=source)
    return ModelIdentifier(name=identifier_name, fields=fields)


def _parse_relation(related_name: str, value: Any, source: Optional[str]) -> ModelRelation:
    if isinstance(value, dict):
        value = value.get("type")
    try:
        return ModelRelation(type=RelationType(value))
    except ValueError:
        allowed = ", ".join(t.value for t in RelationType)
        raise MalformedEntryError(
            f"relation to '{related_name}' has unknown type '{value}' (allowed: {allowed})",
            source=source,
        )


def parse_model(data: Any, source: Optional[str] = None) -> Model:
    """
    Build a Model from a parsed definition mapping.

    Raises:
        MalformedEntryError: The mapping does not describe a model
    """
    data = _require_mapping(data, "model definition", source)
    name = _require_name(data, source)
    fields = _require_mapping(data.get("fields"), "fields", source)
    identifiers = _require_mapping(data.get("identifiers"), "identifiers", source)
    related = _require_mapping(data.get("related"), "related", source)

    return Model(
        name=name,
        fields={key: _parse_field(key, value, source) for key, value in fields.items()},
        identifiers={key: _parse_identifier(key, value, source) for key, value in identifiers.items()},
        related={key: _parse_relation(key, value, source) for key, value in related.items()},
    )


def parse_enum(data: Any, source: Optional[str] = None) -> Enum:
    """
    Build an Enum from a parsed definition mapping.

    Raises:
        MalformedEntryError: The mapping does not describe an enum
    """
    data = _require_mapping(data, "enum definition", source)
    name = _require_name(data, source)
    enum_type = data.get("type")
    if not isinstance(enum_type, str) or not enum_type:
        raise MalformedEntryError(f"enum '{name}' is missing a 'type'", source=source)
    entries = _require_mapping(data.get("entries"), "entries", source)
    return Enum(name=name, type=enum_type, entries=dict(entries))


# --- Loading ---

def _definition_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        path for path in directory.iterdir()
        if path.is_file() and path.suffix in RegistryDirs.YAML_SUFFIXES
    )


def _load_yaml(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise MalformedEntryError(f"Error parsing YAML file {path}: {e}", source=str(path)) from e


def load_registry(registry_dir: Union[str, Path]) -> ModelRegistry:
    """
    Load models and enums from a registry directory.

    Args:
        registry_dir: Directory holding 'models/' and 'enums/' sub-directories

    Returns:
        The loaded registry

    Raises:
        RegistryNotFoundError: The registry directory does not exist
        MalformedEntryError: A definition file is invalid or a name is duplicated
    """
    root = Path(registry_dir)
    if not root.is_dir():
        raise RegistryNotFoundError(f"Registry directory not found at {root}", path=str(root))
    models: Dict[str, Model] = {}
    enums: Dict[str, Enum] = {}

    for path in _definition_files(root / RegistryDirs.MODELS):
        model = parse_model(_load_yaml(path), source=str(path))
        if model.name in models:
            raise MalformedEntryError(f"duplicate model '{model.name}'", source=str(path))
        models[model.name] = model
        logger.debug(f"Loaded model '{model.name}' from {path}")

    for path in _definition_files(root / RegistryDirs.ENUMS):
        enum = parse_enum(_load_yaml(path), source=str(path))
        if enum.name in enums:
            raise MalformedEntryError(f"duplicate enum '{enum.name}'", source=str(path))
        enums[enum.name] = enum
        logger.debug(f"Loaded enum '{enum.name}' from {path}")

    logger.info(f"Loaded registry with {len(models)} models and {len(enums)} enums from {root}")
    return ModelRegistry(models.values(), enums.values())
