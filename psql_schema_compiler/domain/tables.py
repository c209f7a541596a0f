"""
Table assembly for the PSQL schema compiler.

Combines field columns, relation columns, foreign keys and derived indices
into one table per model, followed by the junction tables of the model's
to-many relations. Enum backing tables are assembled here as well.
"""

import logging
from typing import Dict, List, Protocol

from ..constants import ENUM_VALUE_TYPE_MAP, PRIMARY_IDENTIFIER, ColumnNames, PSQLTypes
from ..exceptions import (
    MissingPrimaryIdentifierError,
    MissingRelatedFieldError,
    UnsupportedFieldTypeError,
)
from .constraints import (
    add_unique_indices_from_identifiers,
    finalize_table,
    get_indices_for_foreign_keys,
)
from .junctions import JunctionSynthesizer
from .models import Column, Enum, InsertStatement, Model, Table, UniqueConstraint
from .naming import get_table_name, get_unique_constraint_name
from .relationships import ModelLookup, RelationResolver
from .type_mapping import EnumLookup, TypeMapper


logger = logging.getLogger(__name__)


class Registry(ModelLookup, EnumLookup, Protocol):
    """Model and enum lookups needed to assemble a model's tables."""


def validate_model(model: Model) -> None:
    """
    Re-check the structural preconditions table assembly relies on.

    Raises:
        MissingPrimaryIdentifierError: No non-empty 'primary' identifier
        MissingRelatedFieldError: An identifier names an undeclared field
    """
    primary_id = model.identifiers.get(PRIMARY_IDENTIFIER)
    if primary_id is None or not primary_id.fields:
        raise MissingPrimaryIdentifierError(
            f"no primary identifier set for model '{model.name}'",
            model=model.name,
        )

    for identifier_name in sorted(model.identifiers):
        for field_name in model.identifiers[identifier_name].fields:
            if field_name not in model.fields:
                raise MissingRelatedFieldError(
                    f"model '{model.name}' identifier '{identifier_name}' field '{field_name}' not found",
                    model=model.name,
                    field=field_name,
                )


class TableAssembler:
    """
    Assembles the tables produced for one model.

    Args:
        registry: Read-only model and enum lookup
        schema: Schema the tables belong to
        use_big_serial: Use wide auto-increment columns
    """

    def __init__(self, registry: Registry, schema: str, use_big_serial: bool = False):
        self.registry = registry
        self.schema = schema
        self.type_mapper = TypeMapper(use_big_serial=use_big_serial)
        self.relation_resolver = RelationResolver(registry, self.type_mapper)
        self.junction_synthesizer = JunctionSynthesizer(self.type_mapper)

    def assemble(self, model: Model) -> List[Table]:
        """
        Build the model table followed by its junction tables.

        Args:
            model: The model to compile

        Returns:
            The model's table first, then one junction table per "for"
            to-many relation in sorted related-model order
        """
        validate_model(model)

        table_name = get_table_name(model.name)
        primary_fields = model.identifiers[PRIMARY_IDENTIFIER].fields

        columns = []
        foreign_keys = []
        field_columns: Dict[str, str] = {}
        for field_name in sorted(model.fields):
            mapped = self.type_mapper.map_field(
                model.fields[field_name],
                self.registry,
                self.schema,
                table_name,
                primary_fields,
            )
            columns.append(mapped.column)
            field_columns[field_name] = mapped.column.name
            if mapped.foreign_key is not None:
                foreign_keys.append(mapped.foreign_key)

        relations = self.relation_resolver.resolve(model, self.schema, table_name)
        columns.extend(relations.columns)
        foreign_keys.extend(relations.foreign_keys)

        model_table = Table(
            schema=self.schema,
            name=table_name,
            columns=columns,
            indices=get_indices_for_foreign_keys(table_name, foreign_keys),
            foreign_keys=foreign_keys,
        )
        add_unique_indices_from_identifiers(model_table, model, field_columns)
        finalize_table(model_table)

        tables = [model_table]
        for to_many in relations.to_many:
            junction = self.junction_synthesizer.synthesize(self.schema, model, to_many.related_model)
            tables.append(finalize_table(junction))

        logger.debug(
            f"Assembled table '{table_name}' with {len(columns)} columns, "
            f"{len(foreign_keys)} foreign keys and {len(tables) - 1} junction tables"
        )
        return tables


class EnumTableAssembler:
    """Assembles the backing table of an enum, seeded with its entries."""

    def __init__(self, schema: str, use_big_serial: bool = False):
        self.schema = schema
        self.type_mapper = TypeMapper(use_big_serial=use_big_serial)

    def assemble(self, enum: Enum) -> Table:
        """
        Build the backing table of an enum.

        Raises:
            UnsupportedFieldTypeError: The enum value type has no column type
        """
        value_type = ENUM_VALUE_TYPE_MAP.get(enum.type)
        if value_type is None:
            raise UnsupportedFieldTypeError(
                f"enum '{enum.name}' has unsupported type '{enum.type}'",
                field=enum.name,
                field_type=enum.type,
            )

        table_name = get_table_name(enum.name)
        key_columns = [ColumnNames.ENUM_KEY]
        seed_columns = [ColumnNames.ENUM_KEY, ColumnNames.ENUM_VALUE]

        table = Table(
            schema=self.schema,
            name=table_name,
            columns=[
                Column(name=ColumnNames.ID, type=self.type_mapper.serial_type, not_null=True, primary_key=True),
                Column(name=ColumnNames.ENUM_KEY, type=PSQLTypes.TEXT, not_null=True),
                Column(name=ColumnNames.ENUM_VALUE, type=value_type, not_null=True),
            ],
            unique_constraints=[
                UniqueConstraint(
                    name=get_unique_constraint_name(table_name, key_columns),
                    table_name=table_name,
                    column_names=key_columns,
                ),
            ],
            seed_data=[
                InsertStatement(table_name=table_name, columns=list(seed_columns), values=[key, enum.entries[key]])
                for key in sorted(enum.entries)
            ],
        )
        return finalize_table(table)
