"""
Tests for junction table synthesis.
"""

import unittest

from psql_schema_compiler.constants import PSQLTypes
from psql_schema_compiler.domain.junctions import JunctionSynthesizer
from psql_schema_compiler.domain.type_mapping import TypeMapper
from psql_schema_compiler.exceptions import (
    MissingPrimaryIdentifierError,
    MultiFieldPrimaryUnsupportedError,
)

from helpers import make_model


class TestJunctionSynthesizer(unittest.TestCase):

    def setUp(self):
        self.synthesizer = JunctionSynthesizer(TypeMapper())
        self.article = make_model("Article", {"ID": "AutoIncrement"}, related={"Tag": "ForMany"})
        self.tag = make_model("Tag", {"ID": "AutoIncrement"}, related={"Article": "ForMany"})

    def test_table_shape(self):
        table = self.synthesizer.synthesize("public", self.article, self.tag)

        self.assertEqual(table.schema, "public")
        self.assertEqual(table.name, "article_tags")
        self.assertEqual([c.name for c in table.columns], ["id", "article_id", "tag_id"])
        self.assertEqual([c.type for c in table.columns], [PSQLTypes.SERIAL, PSQLTypes.INTEGER, PSQLTypes.INTEGER])
        self.assertEqual([c.name for c in table.primary_key_columns], ["id"])

    def test_foreign_keys(self):
        table = self.synthesizer.synthesize("public", self.article, self.tag)

        self.assertEqual(len(table.foreign_keys), 2)
        first, second = table.foreign_keys
        self.assertEqual(first.name, "fk_article_tags_article_id")
        self.assertEqual(first.ref_table_name, "articles")
        self.assertEqual(first.ref_column_names, ["id"])
        self.assertEqual(second.name, "fk_article_tags_tag_id")
        self.assertEqual(second.ref_table_name, "tags")
        for fk in table.foreign_keys:
            self.assertEqual(fk.on_delete, "CASCADE")
            self.assertEqual(fk.schema, "public")

    def test_unique_constraint_and_indices(self):
        table = self.synthesizer.synthesize("public", self.article, self.tag)

        self.assertEqual(len(table.unique_constraints), 1)
        unique = table.unique_constraints[0]
        self.assertEqual(unique.name, "uk_article_tags_article_id_tag_id")
        self.assertEqual(unique.column_names, ["article_id", "tag_id"])
        self.assertEqual(
            [(i.name, i.columns, i.is_unique) for i in table.indices],
            [
                ("idx_article_tags_article_id", ["article_id"], False),
                ("idx_article_tags_tag_id", ["tag_id"], False),
            ],
        )

    def test_same_table_from_either_side(self):
        from_article = self.synthesizer.synthesize("public", self.article, self.tag)
        from_tag = self.synthesizer.synthesize("public", self.tag, self.article)

        self.assertEqual(from_article.to_dict(), from_tag.to_dict())

    def test_self_reference_columns_distinct(self):
        person = make_model("Person", {"ID": "AutoIncrement"}, related={"Person": "ForMany"})

        table = self.synthesizer.synthesize("public", person, person)

        self.assertEqual(table.name, "person_people")
        self.assertEqual([c.name for c in table.columns], ["id", "person_id", "related_person_id"])
        self.assertEqual([fk.ref_table_name for fk in table.foreign_keys], ["people", "people"])
        self.assertEqual(len({i.name for i in table.indices}), 2)
        self.assertEqual(table.unique_constraints[0].column_names, ["person_id", "related_person_id"])

    def test_big_serial(self):
        table = JunctionSynthesizer(TypeMapper(use_big_serial=True)).synthesize("public", self.article, self.tag)

        self.assertEqual([c.type for c in table.columns], [PSQLTypes.BIG_SERIAL, PSQLTypes.BIG_INTEGER, PSQLTypes.BIG_INTEGER])

    def test_participant_columns_follow_key_types(self):
        tag = make_model("Tag", {"UUID": "UUID"}, identifiers={"primary": ["UUID"]})

        table = self.synthesizer.synthesize("public", self.article, tag)

        self.assertEqual(
            [(c.name, c.type) for c in table.columns],
            [("id", PSQLTypes.SERIAL), ("article_id", PSQLTypes.INTEGER), ("tag_uuid", PSQLTypes.UUID)],
        )
        self.assertEqual(table.foreign_keys[1].ref_column_names, ["uuid"])

    def test_owner_without_primary(self):
        owner = make_model("Article", {"ID": "AutoIncrement"}, identifiers={})
        with self.assertRaises(MissingPrimaryIdentifierError):
            self.synthesizer.synthesize("public", owner, self.tag)

    def test_multi_field_participant(self):
        tag = make_model("Tag", {"A": "String", "B": "String"}, identifiers={"primary": ["A", "B"]})
        with self.assertRaises(MultiFieldPrimaryUnsupportedError):
            self.synthesizer.synthesize("public", self.article, tag)
