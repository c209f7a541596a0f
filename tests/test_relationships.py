"""
Tests for relation resolution.
"""

import unittest

from psql_schema_compiler.constants import PSQLTypes
from psql_schema_compiler.domain.relationships import RelationResolver, get_primary_field
from psql_schema_compiler.domain.type_mapping import TypeMapper
from psql_schema_compiler.exceptions import (
    MissingPrimaryIdentifierError,
    MissingRelatedFieldError,
    MultiFieldPrimaryUnsupportedError,
    UnknownRelatedModelError,
)
from psql_schema_compiler.registry import ModelRegistry

from helpers import make_model


def _resolve(model, *others, use_big_serial=False):
    registry = ModelRegistry(models=[model, *others])
    resolver = RelationResolver(registry, TypeMapper(use_big_serial=use_big_serial))
    return resolver.resolve(model, "public", "things")


class TestGetPrimaryField(unittest.TestCase):

    def test_single_field(self):
        model = make_model("Company", {"ID": "AutoIncrement"})
        self.assertEqual(get_primary_field(model).name, "ID")

    def test_missing_primary(self):
        model = make_model("Company", {"ID": "AutoIncrement"}, identifiers={"name": ["ID"]})
        with self.assertRaises(MissingPrimaryIdentifierError):
            get_primary_field(model)

    def test_multi_field_primary(self):
        model = make_model(
            "Company",
            {"Country": "String", "Code": "String"},
            identifiers={"primary": ["Country", "Code"]},
        )
        with self.assertRaises(MultiFieldPrimaryUnsupportedError) as ctx:
            get_primary_field(model)
        self.assertEqual(ctx.exception.context["fields"], ["Country", "Code"])

    def test_missing_field(self):
        model = make_model("Company", {"Name": "String"})
        with self.assertRaises(MissingRelatedFieldError):
            get_primary_field(model)


class TestToOneRelations(unittest.TestCase):
    """Test 'for' to-one relations become inline foreign keys."""

    def test_for_one_column_and_foreign_key(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Company": "ForOne"})
        company = make_model("Company", {"ID": "AutoIncrement"})

        resolved = _resolve(owner, company)

        self.assertEqual(len(resolved.columns), 1)
        column = resolved.columns[0]
        self.assertEqual(column.name, "company_id")
        self.assertEqual(column.type, PSQLTypes.INTEGER)
        self.assertTrue(column.not_null)
        self.assertFalse(column.primary_key)

        self.assertEqual(len(resolved.foreign_keys), 1)
        fk = resolved.foreign_keys[0]
        self.assertEqual(fk.name, "fk_things_company_id")
        self.assertEqual(fk.table_name, "things")
        self.assertEqual(fk.column_names, ["company_id"])
        self.assertEqual(fk.ref_table_name, "companies")
        self.assertEqual(fk.ref_column_names, ["id"])
        self.assertEqual(fk.on_delete, "CASCADE")
        self.assertEqual(resolved.to_many, [])

    def test_column_type_follows_target_field(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Company": "ForOne"})
        company = make_model("Company", {"UUID": "UUID"}, identifiers={"primary": ["UUID"]})

        resolved = _resolve(owner, company)

        self.assertEqual(resolved.columns[0].name, "company_uuid")
        self.assertEqual(resolved.columns[0].type, PSQLTypes.UUID)
        self.assertEqual(resolved.foreign_keys[0].ref_column_names, ["uuid"])

    def test_big_serial_reference(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Company": "ForOne"})
        company = make_model("Company", {"ID": "AutoIncrement"})

        resolved = _resolve(owner, company, use_big_serial=True)

        self.assertEqual(resolved.columns[0].type, PSQLTypes.BIG_INTEGER)

    def test_self_reference(self):
        owner = make_model("Employee", {"ID": "AutoIncrement"}, related={"Employee": "ForOne"})

        resolved = _resolve(owner)

        self.assertEqual(resolved.columns[0].name, "employee_id")
        self.assertEqual(resolved.foreign_keys[0].ref_table_name, "employees")

    def test_sorted_relation_order(self):
        owner = make_model(
            "Thing",
            {"ID": "AutoIncrement"},
            related={"Zone": "ForOne", "Account": "ForOne", "Mid": "ForOne"},
        )
        others = [make_model(name, {"ID": "AutoIncrement"}) for name in ("Mid", "Zone", "Account")]

        resolved = _resolve(owner, *others)

        self.assertEqual([c.name for c in resolved.columns], ["account_id", "mid_id", "zone_id"])
        self.assertEqual(
            [fk.name for fk in resolved.foreign_keys],
            ["fk_things_account_id", "fk_things_mid_id", "fk_things_zone_id"],
        )


class TestOtherRelations(unittest.TestCase):

    def test_for_many_deferred(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Tag": "ForMany"})
        tag = make_model("Tag", {"ID": "AutoIncrement"})

        resolved = _resolve(owner, tag)

        self.assertEqual(resolved.columns, [])
        self.assertEqual(resolved.foreign_keys, [])
        self.assertEqual(len(resolved.to_many), 1)
        self.assertEqual(resolved.to_many[0].related_model.name, "Tag")

    def test_has_relations_emit_nothing(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Tag": "HasMany", "Company": "HasOne"})
        others = [make_model(name, {"ID": "AutoIncrement"}) for name in ("Tag", "Company")]

        resolved = _resolve(owner, *others)

        self.assertEqual(resolved.columns, [])
        self.assertEqual(resolved.foreign_keys, [])
        self.assertEqual(resolved.to_many, [])


class TestRelationErrors(unittest.TestCase):

    def test_unknown_related_model(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Ghost": "ForOne"})
        with self.assertRaises(UnknownRelatedModelError) as ctx:
            _resolve(owner)
        self.assertEqual(ctx.exception.context["related_model"], "Ghost")

    def test_multi_field_target(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Company": "ForOne"})
        company = make_model("Company", {"A": "String", "B": "String"}, identifiers={"primary": ["A", "B"]})
        with self.assertRaises(MultiFieldPrimaryUnsupportedError):
            _resolve(owner, company)

    def test_target_without_primary(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Company": "HasOne"})
        company = make_model("Company", {"ID": "AutoIncrement"}, identifiers={})
        with self.assertRaises(MissingPrimaryIdentifierError):
            _resolve(owner, company)

    def test_target_primary_field_missing(self):
        owner = make_model("Thing", {"ID": "AutoIncrement"}, related={"Company": "ForOne"})
        company = make_model("Company", {"Name": "String"})
        with self.assertRaises(MissingRelatedFieldError):
            _resolve(owner, company)
