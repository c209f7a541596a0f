"""
Table writers for the PSQL schema compiler.

The compiler only produces Table objects; rendering them is a writer's
job. ``TableWriter`` is the boundary, and ``YamlTableWriter`` dumps the
tables as ordered YAML documents for inspection or downstream tooling.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, TextIO

import yaml

from .domain.models import Table
from .exceptions import ConflictingTableError


logger = logging.getLogger(__name__)


class TableWriter(Protocol):
    """Protocol for table writers."""

    def write_table(self, table: Table) -> None:
        """Write one table."""
        ...


class YamlTableWriter(TableWriter):
    """
    Collects tables and dumps them as a YAML document.

    An identical table written twice is kept once, so a junction table
    produced from both sides of a relation appears a single time. A
    different table under an already written name is a conflict.
    """

    def __init__(self) -> None:
        self._tables: Dict[str, Table] = {}

    def write_table(self, table: Table) -> None:
        """
        Collect one table.

        Raises:
            ConflictingTableError: A different table with this name was written
        """
        key = f"{table.schema}.{table.name}"
        existing = self._tables.get(key)
        if existing is not None:
            if existing.to_dict() != table.to_dict():
                raise ConflictingTableError(
                    f"table '{key}' is defined twice with different contents",
                    table=key,
                )
            logger.debug(f"Skipping duplicate table '{key}'")
            return
        self._tables[key] = table

    def write_tables(self, tables: List[Table]) -> None:
        for table in tables:
            self.write_table(table)

    @property
    def tables(self) -> List[Table]:
        return list(self._tables.values())

    def to_document(self) -> Dict[str, Any]:
        return {'tables': [table.to_dict() for table in self._tables.values()]}

    def dump(self, stream: Optional[TextIO] = None) -> Optional[str]:
        """Dump collected tables to a stream, or return them as a string."""
        return yaml.safe_dump(
            self.to_document(),
            stream,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
