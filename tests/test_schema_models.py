# ============================================================================
# SCHEMA MODEL TESTS
# ============================================================================
# STATUS: Tests - Column / ForeignKey / Table / Schema unit tests
# PURPOSE: Verify validation, accessors and value equality
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Schema Model Tests

Unit tests for the dialect-independent model:
- Contracts: ColumnType registry, Dialect parsing, ForeignKeyAction
- Column: type validation, numeric spec, auto-increment rules
- ForeignKey: ON DELETE normalization
- Table / Schema: uniqueness, mutators, equality

Run with:
    pytest tests/test_schema_models.py -v
"""

import pytest
from pydantic import ValidationError

from ormforge.contracts import ColumnType, Dialect, ForeignKeyAction, INTEGER_TYPES
from ormforge.models import Column, ForeignKey, Table, Schema


# ============================================================================
# HELPERS
# ============================================================================

def _make_users() -> Table:
    return Table(name="users").set_columns([
        Column(name="id", type="integer", primary_key=True, auto_increment=True),
        Column(name="email", type="string", length=120, unique=True),
    ])


def _make_posts() -> Table:
    table = Table(name="posts").set_columns([
        Column(name="id", type="integer", primary_key=True),
        Column(name="author_id", type="integer", nullable=True),
    ])
    return table.add_foreign_key(ForeignKey(
        name="fk_posts_author_id", local_column="author_id", foreign_table="users",
    ))


# ============================================================================
# CONTRACTS
# ============================================================================

class TestColumnType:
    def test_registry(self):
        assert ColumnType.values() == [
            "smallint", "integer", "bigint", "decimal", "smallfloat", "float",
            "string", "text", "uuid", "binary", "blob", "boolean", "date",
            "datetime", "datetimetz", "time", "array", "json", "enum",
        ]

    def test_integer_family(self):
        assert INTEGER_TYPES == {ColumnType.SMALLINT, ColumnType.INTEGER, ColumnType.BIGINT}
        assert ColumnType.BIGINT.is_integer()
        assert not ColumnType.DECIMAL.is_integer()

    def test_temporal(self):
        assert ColumnType.DATETIME.is_temporal()
        assert ColumnType.TIME.is_temporal()
        assert not ColumnType.DATE.is_temporal()


class TestDialect:
    def test_parse_names_and_aliases(self):
        assert Dialect.parse("mysql") == Dialect.MYSQL
        assert Dialect.parse("Postgres") == Dialect.POSTGRESQL
        assert Dialect.parse("sqlite3") == Dialect.SQLITE
        assert Dialect.parse(Dialect.SQLITE) is Dialect.SQLITE

    def test_unknown_dialect(self):
        with pytest.raises(ValueError, match="oracle"):
            Dialect.parse("oracle")


class TestForeignKeyAction:
    def test_implicit_actions(self):
        assert ForeignKeyAction.NO_ACTION.is_implicit()
        assert ForeignKeyAction.RESTRICT.is_implicit()
        assert not ForeignKeyAction.CASCADE.is_implicit()


# ============================================================================
# COLUMN
# ============================================================================

class TestColumn:
    def test_defaults(self):
        column = Column(name="title")
        assert column.type == ColumnType.STRING
        assert column.nullable is False
        assert column.unique is False
        assert column.primary_key is False
        assert column.auto_increment is False

    def test_type_name_coerced(self):
        assert Column(name="id", type="integer").type == ColumnType.INTEGER

    def test_unknown_type_lists_supported_types(self):
        with pytest.raises(ValidationError) as exc_info:
            Column(name="price", type="money")
        message = str(exc_info.value)
        assert '"money" is not a valid column type' in message
        for name in ColumnType.values():
            assert name in message

    def test_scale_requires_precision(self):
        with pytest.raises(ValidationError, match="scale requires precision"):
            Column(name="price", type="decimal", scale=2)

    def test_scale_cannot_exceed_precision(self):
        with pytest.raises(ValidationError, match="cannot exceed"):
            Column(name="price", type="decimal", precision=4, scale=6)

    def test_length_must_be_positive(self):
        with pytest.raises(ValidationError):
            Column(name="code", length=0)

    def test_enum_options_normalized_to_tuple(self):
        column = Column(name="state", type="enum", enum_options=["draft", "published"])
        assert column.enum_options == ("draft", "published")

    def test_frozen(self):
        column = Column(name="id")
        with pytest.raises(ValidationError):
            column.name = "other"

    def test_auto_increment_effective(self):
        assert Column(name="id", type="bigint", primary_key=True, auto_increment=True).is_auto_increment_effective()
        # Not a primary key
        assert not Column(name="n", type="integer", auto_increment=True).is_auto_increment_effective()
        # Not an integer
        assert not Column(name="id", type="uuid", primary_key=True, auto_increment=True).is_auto_increment_effective()

    def test_renamed(self):
        column = Column(name="author", type="integer", nullable=True)
        renamed = column.renamed("author_id")
        assert renamed.name == "author_id"
        assert renamed.nullable is True
        assert column.name == "author"


# ============================================================================
# FOREIGN KEY
# ============================================================================

class TestForeignKey:
    def test_defaults(self):
        fk = ForeignKey(name="fk_posts_author_id", local_column="author_id", foreign_table="users")
        assert fk.foreign_column == "id"
        assert fk.on_delete is None

    @pytest.mark.parametrize("raw,expected", [
        ("cascade", ForeignKeyAction.CASCADE),
        ("set_null", ForeignKeyAction.SET_NULL),
        ("SET  NULL", ForeignKeyAction.SET_NULL),
        ("no action", ForeignKeyAction.NO_ACTION),
        (ForeignKeyAction.RESTRICT, ForeignKeyAction.RESTRICT),
    ])
    def test_on_delete_normalized(self, raw, expected):
        fk = ForeignKey(name="fk", local_column="a", foreign_table="t", on_delete=raw)
        assert fk.on_delete == expected

    def test_unknown_action(self):
        with pytest.raises(ValidationError, match="Invalid ON DELETE action"):
            ForeignKey(name="fk", local_column="a", foreign_table="t", on_delete="explode")


# ============================================================================
# TABLE
# ============================================================================

class TestTable:
    def test_duplicate_columns_rejected_on_construction(self):
        with pytest.raises(ValidationError, match="Duplicate column 'id'"):
            Table(name="users", columns=[Column(name="id"), Column(name="id")])

    def test_set_columns_rejects_duplicates(self):
        with pytest.raises(ValueError, match="Duplicate column 'id'"):
            Table(name="users").set_columns([Column(name="id"), Column(name="id")])

    def test_add_column_rejects_duplicates(self):
        table = _make_users()
        with pytest.raises(ValueError):
            table.add_column(Column(name="email"))

    def test_accessors(self):
        table = _make_users()
        assert table.column_names() == ["id", "email"]
        assert table.get_column("email").length == 120
        assert table.get_column("missing") is None
        assert [c.name for c in table.primary_key_columns()] == ["id"]
        assert table.has_columns()
        assert not Table(name="empty").has_columns()

    def test_referenced_tables_excludes_self(self):
        table = _make_posts().add_foreign_key(ForeignKey(
            name="fk_posts_parent_id", local_column="parent_id", foreign_table="posts",
        ))
        assert table.referenced_tables() == ["users"]


# ============================================================================
# SCHEMA
# ============================================================================

class TestSchema:
    def test_from_tables(self):
        schema = Schema.from_tables([_make_users(), _make_posts()])
        assert schema.table_names() == ["users", "posts"]
        assert len(schema) == 2
        assert schema.has_table("posts")
        assert schema.get_table("nope") is None
        assert [t.name for t in schema.all_tables()] == ["users", "posts"]

    def test_duplicate_tables_rejected(self):
        with pytest.raises(ValueError, match="Duplicate table 'users'"):
            Schema.from_tables([_make_users(), _make_users()])

    def test_value_equality(self):
        assert Schema.from_tables([_make_users(), _make_posts()]) == Schema.from_tables([_make_users(), _make_posts()])

    def test_differing_column_breaks_equality(self):
        changed = Table(name="users").set_columns([
            Column(name="id", type="integer", primary_key=True, auto_increment=True),
            Column(name="email", type="string", length=120, unique=True, nullable=True),
        ])
        assert Schema.from_tables([_make_users()]) != Schema.from_tables([changed])
