"""
Domain module for the PSQL schema compiler.

This module contains the pure translation logic from declarative domain
models to relational schema objects, separated from configuration, I/O
and process wiring.
"""

from .models import (
    RelationType,
    ModelField,
    ModelIdentifier,
    ModelRelation,
    Model,
    Enum,
    Column,
    Index,
    ForeignKey,
    UniqueConstraint,
    InsertStatement,
    Table
)

from .naming import (
    to_snake_case,
    pluralize,
    get_table_name,
    get_column_name,
    get_enum_column_name,
    get_foreign_key_column_name,
    get_junction_table_name,
    get_index_name,
    get_unique_index_name,
    get_foreign_key_constraint_name,
    get_unique_constraint_name
)

from .type_mapping import (
    TypeMapper,
    MappedField
)

from .relationships import (
    RelationResolver,
    ResolvedRelations,
    get_primary_field
)

from .junctions import JunctionSynthesizer

from .tables import (
    TableAssembler,
    EnumTableAssembler,
    validate_model
)

__all__ = [
    # Models
    'RelationType',
    'ModelField',
    'ModelIdentifier',
    'ModelRelation',
    'Model',
    'Enum',
    'Column',
    'Index',
    'ForeignKey',
    'UniqueConstraint',
    'InsertStatement',
    'Table',

    # Naming
    'to_snake_case',
    'pluralize',
    'get_table_name',
    'get_column_name',
    'get_enum_column_name',
    'get_foreign_key_column_name',
    'get_junction_table_name',
    'get_index_name',
    'get_unique_index_name',
    'get_foreign_key_constraint_name',
    'get_unique_constraint_name',

    # Type mapping
    'TypeMapper',
    'MappedField',

    # Relationships
    'RelationResolver',
    'ResolvedRelations',
    'get_primary_field',

    # Tables
    'JunctionSynthesizer',
    'TableAssembler',
    'EnumTableAssembler',
    'validate_model'
]
