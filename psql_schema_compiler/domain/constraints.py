"""
Constraint and index post-processing for the PSQL schema compiler.

These steps run on assembled tables: indices for foreign key columns,
unique indices for secondary identifiers, quoting of reserved column
names inside index column lists, and backfilling of foreign key names
and delete actions.
"""

import logging
from typing import Dict, List

from ..constants import PRIMARY_IDENTIFIER, RESERVED_WORDS, ReferentialActions
from ..exceptions import MissingRelatedFieldError
from .models import ForeignKey, Index, Model, Table
from .naming import (
    get_foreign_key_constraint_name,
    get_index_name,
    get_unique_index_name,
    quote_identifier,
)


logger = logging.getLogger(__name__)


def get_indices_for_foreign_keys(table_name: str, foreign_keys: List[ForeignKey]) -> List[Index]:
    """One non-unique index per foreign key column."""
    indices = []

    for fk in foreign_keys:
        for column_name in fk.column_names:
            indices.append(Index(
                name=get_index_name(table_name, column_name),
                table_name=table_name,
                columns=[column_name],
                is_unique=False,
            ))

    return indices


def add_unique_indices_from_identifiers(
    table: Table,
    model: Model,
    field_columns: Dict[str, str],
) -> None:
    """
    Add a unique index for every non-primary identifier of a model.

    Args:
        table: The model's table, modified in place
        model: The model declaring the identifiers
        field_columns: Emitted column name per model field name

    Raises:
        MissingRelatedFieldError: An identifier names an undeclared field
    """
    for identifier_name in sorted(model.identifiers):
        if identifier_name == PRIMARY_IDENTIFIER:
            continue

        identifier = model.identifiers[identifier_name]
        column_names = []
        for field_name in identifier.fields:
            if field_name not in field_columns:
                raise MissingRelatedFieldError(
                    f"model '{model.name}' identifier '{identifier_name}' field '{field_name}' not found",
                    model=model.name,
                    field=field_name,
                )
            column_names.append(field_columns[field_name])

        index_name = get_unique_index_name(table.name, column_names)
        if table.get_index_by_name(index_name) is not None:
            logger.debug(f"Identifier '{identifier_name}' duplicates index '{index_name}'")
            continue

        table.indices.append(Index(
            name=index_name,
            table_name=table.name,
            columns=column_names,
            is_unique=True,
        ))


def quote_reserved_column_names(table: Table) -> None:
    """Quote reserved words appearing in index column lists."""
    for index in table.indices:
        index.columns = [
            quote_identifier(column) if column in RESERVED_WORDS else column
            for column in index.columns
        ]


def ensure_named_foreign_key_constraints(table: Table) -> None:
    """Give every foreign key a name and a delete action."""
    for fk in table.foreign_keys:
        if not fk.name:
            fk.name = get_foreign_key_constraint_name(table.name, fk.column_names[0])
        if not fk.on_delete:
            fk.on_delete = ReferentialActions.CASCADE


def finalize_table(table: Table) -> Table:
    """Apply the post-processing shared by every produced table."""
    quote_reserved_column_names(table)
    ensure_named_foreign_key_constraints(table)
    return table
