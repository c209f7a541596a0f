"""
Relationship resolution for the PSQL schema compiler.

This module classifies a model's relations by cardinality and direction.
"For" to-one relations become inline foreign key columns on the owning
table; "for" to-many relations are handed to the junction synthesizer.
"Has" relations are validated but produce nothing.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Protocol

from ..constants import PRIMARY_IDENTIFIER, ReferentialActions
from ..exceptions import (
    MissingPrimaryIdentifierError,
    MissingRelatedFieldError,
    ModelNotFoundError,
    MultiFieldPrimaryUnsupportedError,
    UnknownRelatedModelError,
)
from .models import Column, ForeignKey, Model, ModelField, ModelRelation
from .naming import (
    get_column_name,
    get_foreign_key_column_name,
    get_foreign_key_constraint_name,
    get_table_name,
)
from .type_mapping import TypeMapper


logger = logging.getLogger(__name__)


class ModelLookup(Protocol):
    """The part of the model registry the resolver needs."""

    def get_model(self, name: str) -> Model:
        ...


def get_primary_field(model: Model) -> ModelField:
    """
    Return the single field of a model's primary identifier.

    Raises:
        MissingPrimaryIdentifierError: No 'primary' identifier is declared
        MultiFieldPrimaryUnsupportedError: The identifier has several fields
        MissingRelatedFieldError: The identifier names an undeclared field
    """
    primary_id = model.identifiers.get(PRIMARY_IDENTIFIER)
    if primary_id is None:
        raise MissingPrimaryIdentifierError(
            f"model '{model.name}' has no primary identifier",
            model=model.name,
        )

    if len(primary_id.fields) != 1:
        raise MultiFieldPrimaryUnsupportedError(
            f"model '{model.name}' primary identifier must have exactly one field",
            model=model.name,
            fields=list(primary_id.fields),
        )

    field_name = primary_id.fields[0]
    primary_field = model.fields.get(field_name)
    if primary_field is None:
        raise MissingRelatedFieldError(
            f"model '{model.name}' primary identifier field '{field_name}' not found",
            model=model.name,
            field=field_name,
        )
    return primary_field


@dataclass
class ToManyRelation:
    """A 'for' to-many relation awaiting junction synthesis."""

    related_model: Model
    relation: ModelRelation


@dataclass
class ResolvedRelations:
    """Everything the relations of one model contribute."""

    columns: List[Column] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)
    to_many: List[ToManyRelation] = field(default_factory=list)


class RelationResolver:
    """
    Resolves a model's relations against the registry.

    Relations are visited in sorted related-model order so the emitted
    columns and foreign keys do not depend on declaration order.
    """

    def __init__(self, registry: ModelLookup, type_mapper: TypeMapper):
        self.registry = registry
        self.type_mapper = type_mapper

    def resolve(self, model: Model, schema: str, table_name: str) -> ResolvedRelations:
        """
        Resolve all relations declared on a model.

        Args:
            model: The owning model
            schema: Schema of the owning table
            table_name: Name of the owning table

        Returns:
            Inline columns and foreign keys for to-one relations, plus the
            to-many relations in the same sorted order
        """
        resolved = ResolvedRelations()

        for related_name in sorted(model.related):
            relation = model.related[related_name]
            related_model = self._get_related_model(model, related_name)
            target_field = get_primary_field(related_model)

            if not relation.type.is_for:
                logger.debug(f"Skipping inverse relation {model.name} -> {related_name}")
                continue

            if relation.type.is_many:
                resolved.to_many.append(ToManyRelation(related_model=related_model, relation=relation))
                continue

            column_name = get_foreign_key_column_name(related_name, target_field.name)
            resolved.columns.append(Column(
                name=column_name,
                type=self.type_mapper.foreign_type(target_field),
                not_null=True,
                primary_key=False,
            ))
            resolved.foreign_keys.append(ForeignKey(
                schema=schema,
                name=get_foreign_key_constraint_name(table_name, column_name),
                table_name=table_name,
                column_names=[column_name],
                ref_table_name=get_table_name(related_name),
                ref_column_names=[get_column_name(target_field.name)],
                on_delete=ReferentialActions.CASCADE,
            ))
            logger.debug(f"Resolved to-one relation {model.name} -> {related_name} as '{column_name}'")

        return resolved

    def _get_related_model(self, model: Model, related_name: str) -> Model:
        try:
            return self.registry.get_model(related_name)
        except ModelNotFoundError as e:
            raise UnknownRelatedModelError(
                f"model '{model.name}' relates to unknown model '{related_name}'",
                model=model.name,
                related_model=related_name,
            ) from e
