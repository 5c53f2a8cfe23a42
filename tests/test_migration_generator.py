# ============================================================================
# MIGRATION GENERATOR TESTS
# ============================================================================
# STATUS: Tests - Discovery -> Reader -> Grammar composition
# PURPOSE: Verify script layout, table ordering, error comments and reports
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Migration Generator Tests

Run with:
    pytest tests/test_migration_generator.py -v
"""

import json
import logging
import sqlite3
from unittest.mock import MagicMock

from ormforge.contracts import ColumnType
from ormforge.migration import MigrationGenerator, MigrationReport, TableResult, order_tables
from ormforge.models import Column, ForeignKey, Table, Schema
from ormforge.schema import SchemaReadResult


INVOICES = """
    from typing import Annotated, ClassVar

    from pydantic import BaseModel

    from ormforge.contracts import ColumnType
    from ormforge.mapping import ColumnMeta


    class Invoice(BaseModel):
        __sql_table__: ClassVar[str] = "invoices"

        id: Annotated[int, ColumnMeta(primary_key=True, auto_increment=True)]
        state: Annotated[str, ColumnMeta(type=ColumnType.ENUM)]


    class Customer(BaseModel):
        __sql_table__: ClassVar[str] = "customers"

        id: Annotated[int, ColumnMeta(primary_key=True, auto_increment=True)]
"""


def _make_table(name, references=()):
    table = Table(name=name).set_columns([
        Column(name="id", type="integer", primary_key=True, auto_increment=True),
        *(Column(name=f"{ref}_id", type="integer", nullable=True) for ref in references),
    ])
    for ref in references:
        table.add_foreign_key(ForeignKey(name=f"fk_{name}_{ref}_id", local_column=f"{ref}_id", foreign_table=ref))
    return table


# ============================================================================
# SCRIPT LAYOUT
# ============================================================================

class TestGenerate:
    def test_statements_in_dependency_order(self, clean_entities_dir):
        report = MigrationGenerator(dialect="mysql").generate_report(clean_entities_dir)

        assert [t.table for t in report.tables] == ["users", "posts", "tags", "markers", "posts_tags"]
        assert [t.status for t in report.tables] == ["success", "success", "success", "skipped", "success"]

    def test_script_layout(self, clean_entities_dir):
        sql = MigrationGenerator(dialect="mysql").generate(clean_entities_dir)
        statements = sql.split("\n\n")

        assert len(statements) == 4
        assert all(statement.endswith(");") for statement in statements)
        assert statements[0].startswith("CREATE TABLE `users` (")
        assert statements[3].startswith("CREATE TABLE `posts_tags` (")
        assert "`markers`" not in sql

    def test_generate_statements(self, clean_entities_dir):
        generator = MigrationGenerator(dialect="postgresql")
        statements = generator.generate_statements(clean_entities_dir)

        assert statements == generator.generate(clean_entities_dir).split("\n\n")
        assert statements[1].startswith('CREATE TABLE "posts" (')

    def test_if_not_exists(self, clean_entities_dir):
        statements = MigrationGenerator(dialect="sqlite", if_not_exists=True).generate_statements(clean_entities_dir)
        assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)

    def test_dialect_from_config(self, monkeypatch):
        monkeypatch.setenv("ORMFORGE_DIALECT", "sqlite")
        assert MigrationGenerator().dialect.value == "sqlite"

    def test_empty_directory(self, tmp_path):
        report = MigrationGenerator(dialect="mysql").generate_report(tmp_path)
        assert report.to_sql() == ""
        assert report.success

    def test_sqlite_script_executes(self, clean_entities_dir):
        sql = MigrationGenerator(dialect="sqlite").generate(clean_entities_dir)

        connection = sqlite3.connect(":memory:")
        try:
            connection.executescript(sql)
            names = [row[0] for row in connection.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )]
        finally:
            connection.close()

        assert names == ["posts", "posts_tags", "tags", "users"]


# ============================================================================
# FAILURES
# ============================================================================

class TestFailures:
    def test_error_comment_for_uncompilable_entity(self, make_entities):
        root = make_entities({"invoices.py": INVOICES})
        report = MigrationGenerator(dialect="mysql").generate_report(root)

        blocks = report.blocks()
        assert len(blocks) == 2
        assert blocks[1].startswith("CREATE TABLE `customers`")

        comment = blocks[0]
        assert comment.startswith("-- Error generating SQL for ormforge_entities_")
        assert comment.endswith("invoices.Invoice: Enum column 'state' declares no options")
        assert not report.success

    def test_error_comment_uses_table_without_source(self):
        table = Table(name="invoices").set_columns([Column(name="state", type=ColumnType.ENUM)])
        report = MigrationGenerator(dialect="sqlite").compile_schema(Schema.from_tables([table]))

        assert report.to_sql() == "-- Error generating SQL for invoices: Enum column 'state' declares no options"
        assert report.errors == {"invoices": "Enum column 'state' declares no options"}

    def test_multiline_error_flattened(self):
        result = TableResult(table="t", entity="app.T", status="failed", error="first line\n  second line")
        assert result.to_block() == "-- Error generating SQL for app.T: first line second line"

    def test_discovery_skips_reported(self, entities_dir):
        report = MigrationGenerator(dialect="mysql").generate_report(entities_dir)

        assert report.success
        assert list(report.discovery_skipped) == [str((entities_dir / "broken.py").resolve())]

    def test_reader_is_injectable(self):
        reader = MagicMock()
        reader.read_detailed.return_value = SchemaReadResult(
            schema=Schema.from_tables([_make_table("accounts")]),
            sources={"accounts": "app.Account"},
            skipped={"app.Ghost": "no columns"},
        )

        report = MigrationGenerator(dialect="mysql", reader=reader).generate_report("ignored")

        reader.read_detailed.assert_called_once_with("ignored")
        assert report.tables[0].entity == "app.Account"
        assert report.discovery_skipped == {"app.Ghost": "no columns"}


# ============================================================================
# ORDERING
# ============================================================================

class TestOrderTables:
    def test_referenced_first(self):
        ordered = order_tables([_make_table("comments", ["posts"]), _make_table("posts", ["users"]),
                                _make_table("users")])
        assert [t.name for t in ordered] == ["users", "posts", "comments"]

    def test_stable_for_independent_tables(self):
        ordered = order_tables([_make_table("b"), _make_table("a"), _make_table("c")])
        assert [t.name for t in ordered] == ["b", "a", "c"]

    def test_external_references_ignored(self):
        ordered = order_tables([_make_table("orders", ["customers"])])
        assert [t.name for t in ordered] == ["orders"]

    def test_self_reference(self):
        ordered = order_tables([_make_table("categories", ["categories"]), _make_table("items")])
        assert [t.name for t in ordered] == ["categories", "items"]

    def test_cycle_keeps_declaration_order(self, caplog):
        with caplog.at_level(logging.WARNING):
            ordered = order_tables([_make_table("a", ["b"]), _make_table("b", ["a"]), _make_table("c")])

        assert [t.name for t in ordered] == ["c", "a", "b"]
        assert "Foreign key cycle" in caplog.text


# ============================================================================
# DROP SCRIPT AND REPORT
# ============================================================================

class TestDropAndReport:
    def test_generate_drop(self, clean_entities_dir):
        sql = MigrationGenerator(dialect="mysql").generate_drop(clean_entities_dir)

        assert sql.split("\n\n") == [
            "DROP TABLE IF EXISTS `posts_tags`;",
            "DROP TABLE IF EXISTS `tags`;",
            "DROP TABLE IF EXISTS `posts`;",
            "DROP TABLE IF EXISTS `users`;",
        ]

    def test_report_to_dict(self, clean_entities_dir):
        report = MigrationGenerator(dialect="sqlite").generate_report(clean_entities_dir)
        data = report.to_dict()

        assert data["dialect"] == "sqlite"
        assert data["source"] == str(clean_entities_dir)
        assert data["success"] is True
        assert data["summary"] == {"total_tables": 5, "compiled": 4, "failed": 0, "skipped": 1}
        assert data["tables"][0]["entity"].endswith("accounts.User")
        assert data["tables"][4]["entity"].endswith("blog.posts.Post")
        json.dumps(data)

    def test_empty_report(self):
        report = MigrationReport(dialect="mysql", source="<schema>", timestamp="2026-10-19T00:00:00+00:00")
        assert report.to_dict()["summary"] == {"total_tables": 0, "compiled": 0, "failed": 0, "skipped": 0}
        assert report.statements == []
