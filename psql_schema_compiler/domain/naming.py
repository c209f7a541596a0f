"""
Naming convention utilities for the PSQL schema compiler.

Every generated identifier (table, column, index, constraint, junction
table) is derived here. All functions are pure: the same input always
yields the same name, so repeated compilations of an unchanged model
produce identical schemas.
"""

import re
from typing import List, Tuple
import inflect

from ..constants import ColumnNames, NamePrefixes


# Initialize inflect engine for pluralization
p = inflect.engine()


def to_snake_case(name: str) -> str:
    """
    Convert CamelCase or PascalCase to lower snake_case.

    Args:
        name: The string to convert to snake_case

    Returns:
        The converted snake_case string

    Example:
        >>> to_snake_case("LastName")
        'last_name'
        >>> to_snake_case("CompanyID")
        'company_id'
        >>> to_snake_case("XMLHttpRequest")
        'xml_http_request'
    """
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    name = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    name = re.sub("__([A-Z])", r"_\1", name)
    name = re.sub("([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def pluralize(name: str) -> str:
    """
    Pluralize the last word of a snake_case name.

    Example:
        >>> pluralize("person")
        'people'
        >>> pluralize("user_account")
        'user_accounts'
    """
    head, sep, last = name.rpartition("_")
    if not last:
        return name
    return f"{head}{sep}{p.plural_noun(last)}"


def get_table_name(model_name: str) -> str:
    """Table name for a model or enum: pluralized lower snake_case."""
    return pluralize(to_snake_case(model_name))


def get_column_name(field_name: str) -> str:
    return to_snake_case(field_name)


def get_enum_column_name(field_name: str) -> str:
    """Column holding the foreign key of an enum-typed field."""
    return get_column_name(field_name) + ColumnNames.ID_SUFFIX


def get_foreign_key_column_name(related_model_name: str, field_name: str) -> str:
    """
    Column referencing a related model's field.

    Example:
        >>> get_foreign_key_column_name("Company", "ID")
        'company_id'
    """
    return f"{to_snake_case(related_model_name)}_{get_column_name(field_name)}"


def order_participants(first_model: str, second_model: str) -> Tuple[str, str]:
    """Order two relation participants independently of declaration side."""
    if second_model < first_model:
        return second_model, first_model
    return first_model, second_model


def get_junction_table_name(first_model: str, second_model: str) -> str:
    """
    Junction table for a to-many relation between two models.

    Example:
        >>> get_junction_table_name("Tag", "Article")
        'article_tags'
    """
    left, right = order_participants(first_model, second_model)
    return f"{to_snake_case(left)}_{get_table_name(right)}"


def get_index_name(table_name: str, column_name: str) -> str:
    return f"{NamePrefixes.INDEX}_{table_name}_{column_name}"


def get_unique_index_name(table_name: str, column_names: List[str]) -> str:
    return f"{NamePrefixes.UNIQUE_INDEX}_{table_name}_{'_'.join(column_names)}"


def get_foreign_key_constraint_name(table_name: str, column_name: str) -> str:
    return f"{NamePrefixes.FOREIGN_KEY}_{table_name}_{column_name}"


def get_unique_constraint_name(table_name: str, column_names: List[str]) -> str:
    return f"{NamePrefixes.UNIQUE_CONSTRAINT}_{table_name}_{'_'.join(column_names)}"


def quote_identifier(name: str) -> str:
    """Quote a PostgreSQL identifier, doubling embedded quotes."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'
