"""
Field type mapping for the PSQL schema compiler.

Maps declared model field types to PostgreSQL column types. Primitive types
are looked up in the active type map (standard or wide auto-increment);
anything else is resolved as an enum and lowered to an integer foreign key.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from ..constants import (
    MODEL_FIELD_TYPE_MAP,
    MODEL_FIELD_TYPE_MAP_BIG_SERIAL,
    FOREIGN_FIELD_TYPE_MAP,
    FOREIGN_FIELD_TYPE_MAP_BIG_SERIAL,
    ColumnNames,
    PSQLTypes,
    ReferentialActions,
)
from ..exceptions import EnumNotFoundError, UnsupportedFieldTypeError
from .models import Column, Enum, ForeignKey, ModelField
from .naming import (
    get_column_name,
    get_enum_column_name,
    get_foreign_key_constraint_name,
    get_table_name,
)


logger = logging.getLogger(__name__)


class EnumLookup(Protocol):
    """The part of the model registry the type mapper needs."""

    def get_enum(self, name: str) -> Enum:
        ...


@dataclass
class MappedField:
    """Result of mapping one model field."""

    column: Column
    foreign_key: Optional[ForeignKey] = None

    @property
    def is_enum(self) -> bool:
        return self.foreign_key is not None


class TypeMapper:
    """
    Maps model field types to column types.

    Args:
        use_big_serial: Select BIGSERIAL/BIGINT for auto-increment columns
    """

    def __init__(self, use_big_serial: bool = False):
        self.use_big_serial = use_big_serial
        if use_big_serial:
            self.type_map: Dict[str, str] = MODEL_FIELD_TYPE_MAP_BIG_SERIAL
            self.foreign_type_map: Dict[str, str] = FOREIGN_FIELD_TYPE_MAP_BIG_SERIAL
        else:
            self.type_map = MODEL_FIELD_TYPE_MAP
            self.foreign_type_map = FOREIGN_FIELD_TYPE_MAP

    @property
    def serial_type(self) -> str:
        """Type of synthetic auto-incrementing primary keys."""
        return PSQLTypes.BIG_SERIAL if self.use_big_serial else PSQLTypes.SERIAL

    def primitive_type(self, field_type: str) -> Optional[str]:
        """Column type for a primitive field type, or None if not primitive."""
        return self.type_map.get(field_type)

    def foreign_type(self, field: ModelField) -> str:
        """
        Column type for a column referencing the given field.

        Raises:
            UnsupportedFieldTypeError: If the referenced field is not primitive
        """
        column_type = self.foreign_type_map.get(field.type)
        if column_type is None:
            raise UnsupportedFieldTypeError(
                f"related model field '{field.name}' has unsupported type '{field.type}'",
                field=field.name,
                field_type=field.type,
            )
        return column_type

    def map_field(
        self,
        field: ModelField,
        registry: EnumLookup,
        schema: str,
        table_name: str,
        primary_fields: List[str],
    ) -> MappedField:
        """
        Map one model field to its column (and enum foreign key, if any).

        Args:
            field: The model field to map
            registry: Enum lookup used when the type is not primitive
            schema: Schema of the owning table
            table_name: Name of the owning table
            primary_fields: Field names of the model's primary identifier

        Returns:
            The mapped column, with a foreign key for enum-typed fields

        Raises:
            UnsupportedFieldTypeError: If the type is neither primitive nor an enum
        """
        is_primary = field.name in primary_fields

        column_type = self.primitive_type(field.type)
        if column_type is not None:
            column = Column(
                name=get_column_name(field.name),
                type=column_type,
                not_null=False,
                primary_key=is_primary,
            )
            return MappedField(column=column)

        try:
            enum = registry.get_enum(field.type)
        except EnumNotFoundError as e:
            raise UnsupportedFieldTypeError(
                f"model field '{field.name}' has unsupported type '{field.type}'",
                field=field.name,
                field_type=field.type,
            ) from e

        column_name = get_enum_column_name(field.name)
        logger.debug(f"Lowering enum field '{field.name}' ({enum.name}) to column '{column_name}'")

        foreign_key = ForeignKey(
            schema=schema,
            name=get_foreign_key_constraint_name(table_name, column_name),
            table_name=table_name,
            column_names=[column_name],
            ref_table_name=get_table_name(enum.name),
            ref_column_names=[ColumnNames.ID],
            on_delete=ReferentialActions.CASCADE,
        )
        column = Column(
            name=column_name,
            type=PSQLTypes.INTEGER,
            not_null=True,
            primary_key=is_primary,
        )
        return MappedField(column=column, foreign_key=foreign_key)
