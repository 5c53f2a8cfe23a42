# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# STATUS: Tests - Defaults, environment and YAML layering
# PURPOSE: Verify ormforge.config resolution order
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

import dataclasses

import pytest

from ormforge.config import (
    DDLDefaults,
    DatabaseDefaults,
    Defaults,
    DiscoveryDefaults,
    get_defaults,
    load_defaults,
    reset_defaults,
)


class TestDefaults:
    def test_builtin_values(self):
        defaults = Defaults()
        assert defaults.ddl.string_length == 255
        assert defaults.ddl.binary_length == 255
        assert defaults.ddl.enum_length == 255
        assert defaults.ddl.decimal_precision == 10
        assert defaults.ddl.decimal_scale == 0
        assert defaults.ddl.if_not_exists is False
        assert defaults.discovery.file_suffix == ".py"
        assert defaults.discovery.strict is False
        assert defaults.discovery.entities_path == "src/entities"
        assert defaults.database.dialect == "mysql"
        assert defaults.database.migrations_table == "migrations"
        assert defaults.database.schema_name == "public"
        assert defaults.database.url is None

    def test_sections_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DDLDefaults().string_length = 10


class TestFromEnv:
    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ORMFORGE_STRING_LENGTH", "191")
        monkeypatch.setenv("ORMFORGE_IF_NOT_EXISTS", "true")
        monkeypatch.setenv("ORMFORGE_STRICT_DISCOVERY", "yes")
        monkeypatch.setenv("ORMFORGE_ENTITIES_PATH", "app/entities")
        monkeypatch.setenv("ORMFORGE_DIALECT", "postgresql")
        monkeypatch.setenv("ORMFORGE_DATABASE_URL", "postgresql://localhost/app")

        defaults = Defaults.from_env()
        assert defaults.ddl.string_length == 191
        assert defaults.ddl.if_not_exists is True
        assert defaults.discovery.strict is True
        assert defaults.discovery.entities_path == "app/entities"
        assert defaults.database.dialect == "postgresql"
        assert defaults.database.url == "postgresql://localhost/app"

    def test_false_words(self, monkeypatch):
        monkeypatch.setenv("ORMFORGE_STRICT_DISCOVERY", "off")
        assert DiscoveryDefaults.from_env().strict is False

    def test_unset_environment_matches_builtins(self):
        assert DatabaseDefaults.from_env() == DatabaseDefaults()


class TestGlobalDefaults:
    def test_cached_until_reset(self, monkeypatch):
        first = get_defaults()
        assert get_defaults() is first

        monkeypatch.setenv("ORMFORGE_DIALECT", "sqlite")
        assert get_defaults().database.dialect == "mysql"

        reset_defaults()
        assert get_defaults().database.dialect == "sqlite"


class TestYamlConfig:
    def test_load_defaults_installs_globally(self, tmp_path):
        path = tmp_path / "ormforge.yaml"
        path.write_text(
            "database:\n"
            "  dialect: postgresql\n"
            "  migrations_table: schema_migrations\n"
            "discovery:\n"
            "  strict: true\n"
            "ddl:\n"
            "  string_length: 191\n"
        )

        loaded = load_defaults(path)
        assert get_defaults() is loaded
        assert loaded.database.dialect == "postgresql"
        assert loaded.database.migrations_table == "schema_migrations"
        assert loaded.database.schema_name == "public"
        assert loaded.discovery.strict is True
        assert loaded.ddl.string_length == 191

    def test_file_layers_over_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORMFORGE_ENTITIES_PATH", "env/entities")
        monkeypatch.setenv("ORMFORGE_DIALECT", "sqlite")
        path = tmp_path / "ormforge.yaml"
        path.write_text("database:\n  dialect: mysql\n")

        defaults = Defaults.from_yaml(path)
        assert defaults.database.dialect == "mysql"
        assert defaults.discovery.entities_path == "env/entities"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Defaults.from_yaml(path) == Defaults.from_env()

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("ddl:\n  varchar_length: 100\n")
        with pytest.raises(ValueError, match="varchar_length"):
            Defaults.from_yaml(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- mysql\n- sqlite\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            Defaults.from_yaml(path)
