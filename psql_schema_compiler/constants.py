"""
Centralized constants for the PSQL schema compiler.

This module contains the field type vocabulary, PostgreSQL type names,
type mappings, naming prefixes and reserved words used across the compiler.
Keeping them in one place makes it easy to adjust the generated schema.
"""

from typing import Dict, FrozenSet


# =============================================================================
# MODEL FIELD TYPES
# =============================================================================

class ModelFieldTypes:
    """Primitive field types a model may declare."""

    AUTO_INCREMENT = "AutoIncrement"
    UUID = "UUID"
    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"
    TIME = "Time"
    DATE = "Date"
    BOOLEAN = "Boolean"
    PROTECTED = "Protected"
    SEALED = "Sealed"


class EnumValueTypes:
    """Value types an enum may declare for its entries."""

    STRING = "String"
    INTEGER = "Integer"
    FLOAT = "Float"


# =============================================================================
# POSTGRESQL TYPES
# =============================================================================

class PSQLTypes:
    """PostgreSQL storage types emitted by the compiler."""

    SERIAL = "SERIAL"
    BIG_SERIAL = "BIGSERIAL"
    INTEGER = "INTEGER"
    BIG_INTEGER = "BIGINT"
    TEXT = "TEXT"
    UUID = "UUID"
    DOUBLE_PRECISION = "DOUBLE PRECISION"
    TIMESTAMPTZ = "TIMESTAMPTZ"
    DATE = "DATE"
    BOOLEAN = "BOOLEAN"


# Model field type to column type, standard auto-increment width
MODEL_FIELD_TYPE_MAP: Dict[str, str] = {
    ModelFieldTypes.AUTO_INCREMENT: PSQLTypes.SERIAL,
    ModelFieldTypes.UUID: PSQLTypes.UUID,
    ModelFieldTypes.STRING: PSQLTypes.TEXT,
    ModelFieldTypes.INTEGER: PSQLTypes.INTEGER,
    ModelFieldTypes.FLOAT: PSQLTypes.DOUBLE_PRECISION,
    ModelFieldTypes.TIME: PSQLTypes.TIMESTAMPTZ,
    ModelFieldTypes.DATE: PSQLTypes.DATE,
    ModelFieldTypes.BOOLEAN: PSQLTypes.BOOLEAN,
    ModelFieldTypes.PROTECTED: PSQLTypes.TEXT,
    ModelFieldTypes.SEALED: PSQLTypes.TEXT,
}

# Same as above with wide auto-increment columns
MODEL_FIELD_TYPE_MAP_BIG_SERIAL: Dict[str, str] = {
    **MODEL_FIELD_TYPE_MAP,
    ModelFieldTypes.AUTO_INCREMENT: PSQLTypes.BIG_SERIAL,
}

# Column types for columns that reference a field of the given type
FOREIGN_FIELD_TYPE_MAP: Dict[str, str] = {
    **MODEL_FIELD_TYPE_MAP,
    ModelFieldTypes.AUTO_INCREMENT: PSQLTypes.INTEGER,
}

FOREIGN_FIELD_TYPE_MAP_BIG_SERIAL: Dict[str, str] = {
    **MODEL_FIELD_TYPE_MAP,
    ModelFieldTypes.AUTO_INCREMENT: PSQLTypes.BIG_INTEGER,
}

ENUM_VALUE_TYPE_MAP: Dict[str, str] = {
    EnumValueTypes.STRING: PSQLTypes.TEXT,
    EnumValueTypes.INTEGER: PSQLTypes.INTEGER,
    EnumValueTypes.FLOAT: PSQLTypes.DOUBLE_PRECISION,
}


# =============================================================================
# NAMING
# =============================================================================

class NamePrefixes:
    """Prefixes distinguishing generated artifact names."""

    INDEX = "idx"
    UNIQUE_INDEX = "uidx"
    FOREIGN_KEY = "fk"
    UNIQUE_CONSTRAINT = "uk"


class ColumnNames:
    """Fixed column names used by synthesized tables."""

    ID = "id"
    ID_SUFFIX = "_id"
    RELATED_PREFIX = "related_"
    ENUM_KEY = "key"
    ENUM_VALUE = "value"


PRIMARY_IDENTIFIER = "primary"


class ReferentialActions:
    """ON DELETE / ON UPDATE actions."""

    CASCADE = "CASCADE"


# Column names quoted when they appear inside index column lists
RESERVED_WORDS: FrozenSet[str] = frozenset({
    "name", "type", "user", "case", "when", "then", "else", "end", "null",
    "true", "false", "select", "insert", "update", "delete", "from", "where",
    "group", "order", "limit", "offset", "join", "on", "using", "and", "or",
    "not", "between", "alter", "table", "index", "unique", "primary",
    "foreign", "key",
})


# =============================================================================
# REGISTRY LAYOUT
# =============================================================================

class RegistryDirs:
    """Sub-directories of a registry directory."""

    MODELS = "models"
    ENUMS = "enums"

    YAML_SUFFIXES = (".yaml", ".yml")
