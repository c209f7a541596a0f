"""
Core domain models for the PSQL schema compiler.

The input side describes declarative domain models (fields, identifiers,
relations, enums) as handed over by a model registry. The output side
describes the relational schema objects a writer turns into SQL. Output
objects are built fresh on every compilation.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum as PyEnum
from typing import List, Dict, Any, Optional


class RelationType(PyEnum):
    """Cardinality and direction of a model relation."""

    FOR_ONE = "ForOne"
    FOR_MANY = "ForMany"
    HAS_ONE = "HasOne"
    HAS_MANY = "HasMany"

    @property
    def is_for(self) -> bool:
        """Check if the owning model holds the reference."""
        return self in (RelationType.FOR_ONE, RelationType.FOR_MANY)

    @property
    def is_many(self) -> bool:
        return self in (RelationType.FOR_MANY, RelationType.HAS_MANY)


# =============================================================================
# INPUT MODELS
# =============================================================================

@dataclass
class ModelField:
    """A typed field declared on a model."""

    name: str
    type: str


@dataclass
class ModelIdentifier:
    """An ordered, non-empty list of field names identifying a row."""

    name: str
    fields: List[str]


@dataclass
class ModelRelation:
    """A relation from the owning model to a related model."""

    type: RelationType


@dataclass
class Model:
    """
    A named domain entity definition.

    Fields, identifiers and relations are keyed by name. Their insertion
    order carries no meaning; the compiler always walks them sorted.
    """

    name: str
    fields: Dict[str, ModelField] = field(default_factory=dict)
    identifiers: Dict[str, ModelIdentifier] = field(default_factory=dict)
    related: Dict[str, ModelRelation] = field(default_factory=dict)

    def deep_clone(self) -> "Model":
        return copy.deepcopy(self)


@dataclass
class Enum:
    """A named enumerated type with typed entries."""

    name: str
    type: str
    entries: Dict[str, Any] = field(default_factory=dict)

    def deep_clone(self) -> "Enum":
        return copy.deepcopy(self)


# =============================================================================
# OUTPUT SCHEMA OBJECTS
# =============================================================================

@dataclass
class Column:
    """A table column."""

    name: str
    type: str
    not_null: bool = False
    primary_key: bool = False
    default: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'type': self.type,
            'not_null': self.not_null,
            'primary_key': self.primary_key,
            'default': self.default,
        }


@dataclass
class Index:
    """An index over an ordered list of columns."""

    name: str
    table_name: str
    columns: List[str] = field(default_factory=list)
    is_unique: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'table_name': self.table_name,
            'columns': list(self.columns),
            'is_unique': self.is_unique,
        }


@dataclass
class ForeignKey:
    """A foreign key constraint from the owning table to a referenced table."""

    schema: str
    name: str
    table_name: str
    column_names: List[str]
    ref_table_name: str
    ref_column_names: List[str]
    on_delete: str = ""
    on_update: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'schema': self.schema,
            'name': self.name,
            'table_name': self.table_name,
            'column_names': list(self.column_names),
            'ref_table_name': self.ref_table_name,
            'ref_column_names': list(self.ref_column_names),
            'on_delete': self.on_delete,
            'on_update': self.on_update,
        }


@dataclass
class UniqueConstraint:
    """A unique constraint over an ordered list of columns."""

    name: str
    table_name: str
    column_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'name': self.name,
            'table_name': self.table_name,
            'column_names': list(self.column_names),
        }


@dataclass
class InsertStatement:
    """One seed row for a table."""

    table_name: str
    columns: List[str]
    values: List[Any]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'table_name': self.table_name,
            'columns': list(self.columns),
            'values': list(self.values),
        }


@dataclass
class Table:
    """
    A relational table produced by the compiler.

    This is the aggregate handed to writers: columns in emission order,
    plus indices, foreign keys, unique constraints and optional seed rows.
    """

    schema: str
    name: str
    columns: List[Column] = field(default_factory=list)
    indices: List[Index] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    unique_constraints: List[UniqueConstraint] = field(default_factory=list)
    seed_data: List[InsertStatement] = field(default_factory=list)

    @property
    def primary_key_columns(self) -> List[Column]:
        """Get all primary key columns."""
        return [col for col in self.columns if col.primary_key]

    def get_column_by_name(self, name: str) -> Optional[Column]:
        """Get a column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def get_index_by_name(self, name: str) -> Optional[Index]:
        for index in self.indices:
            if index.name == name:
                return index
        return None

    def deep_clone(self) -> "Table":
        """Return a structurally independent copy of this table."""
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            'schema': self.schema,
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns],
            'indices': [index.to_dict() for index in self.indices],
            'foreign_keys': [fk.to_dict() for fk in self.foreign_keys],
            'unique_constraints': [uc.to_dict() for uc in self.unique_constraints],
            'seed_data': [row.to_dict() for row in self.seed_data],
        }
