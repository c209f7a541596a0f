"""
Junction table synthesis for to-many relations.

A "for" to-many relation between two models is stored in a standalone
join table: a synthetic serial key, one column per participant, a
cascading foreign key back to each participant, a composite unique
constraint over the pair and one index per foreign key column.

Participants are ordered by model name before anything is derived, so the
same relation pair yields the same table no matter which side declared it.
"""

import logging

from ..constants import ColumnNames, ReferentialActions
from .constraints import get_indices_for_foreign_keys
from .models import Column, ForeignKey, Model, Table, UniqueConstraint
from .naming import (
    get_column_name,
    get_foreign_key_column_name,
    get_foreign_key_constraint_name,
    get_junction_table_name,
    get_table_name,
    get_unique_constraint_name,
    order_participants,
)
from .relationships import get_primary_field
from .type_mapping import TypeMapper


logger = logging.getLogger(__name__)


class JunctionSynthesizer:
    """Builds junction tables for to-many relations."""

    def __init__(self, type_mapper: TypeMapper):
        self.type_mapper = type_mapper

    def synthesize(self, schema: str, model: Model, related_model: Model) -> Table:
        """
        Build the junction table between two models.

        Args:
            schema: Schema for the junction table
            model: The model declaring the to-many relation
            related_model: The related model

        Returns:
            The junction table

        Raises:
            MissingPrimaryIdentifierError, MultiFieldPrimaryUnsupportedError,
            MissingRelatedFieldError: A participant lacks a usable primary field
        """
        models = {model.name: model, related_model.name: related_model}
        left_name, right_name = order_participants(model.name, related_model.name)
        left, right = models[left_name], models[right_name]

        left_field = get_primary_field(left)
        right_field = get_primary_field(right)

        table_name = get_junction_table_name(left.name, right.name)
        left_column = get_foreign_key_column_name(left.name, left_field.name)
        right_column = get_foreign_key_column_name(right.name, right_field.name)
        if left_column == right_column:
            right_column = ColumnNames.RELATED_PREFIX + right_column

        columns = [
            Column(
                name=ColumnNames.ID,
                type=self.type_mapper.serial_type,
                not_null=True,
                primary_key=True,
            ),
            Column(
                name=left_column,
                type=self.type_mapper.foreign_type(left_field),
                not_null=True,
            ),
            Column(
                name=right_column,
                type=self.type_mapper.foreign_type(right_field),
                not_null=True,
            ),
        ]

        foreign_keys = [
            ForeignKey(
                schema=schema,
                name=get_foreign_key_constraint_name(table_name, left_column),
                table_name=table_name,
                column_names=[left_column],
                ref_table_name=get_table_name(left.name),
                ref_column_names=[get_column_name(left_field.name)],
                on_delete=ReferentialActions.CASCADE,
            ),
            ForeignKey(
                schema=schema,
                name=get_foreign_key_constraint_name(table_name, right_column),
                table_name=table_name,
                column_names=[right_column],
                ref_table_name=get_table_name(right.name),
                ref_column_names=[get_column_name(right_field.name)],
                on_delete=ReferentialActions.CASCADE,
            ),
        ]

        unique_constraints = [
            UniqueConstraint(
                name=get_unique_constraint_name(table_name, [left_column, right_column]),
                table_name=table_name,
                column_names=[left_column, right_column],
            ),
        ]

        logger.debug(f"Synthesized junction table '{table_name}' for {model.name} -> {related_model.name}")

        return Table(
            schema=schema,
            name=table_name,
            columns=columns,
            indices=get_indices_for_foreign_keys(table_name, foreign_keys),
            foreign_keys=foreign_keys,
            unique_constraints=unique_constraints,
        )
