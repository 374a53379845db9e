"""
Tests for usergraph.app_config — Typed Application Configuration.

Covers: section defaults, from_dict / to_dict round-trip, env-var
overlays, validation, merge, and summary.
"""

import os
from unittest.mock import patch

from usergraph.app_config import (
    ApiConfig,
    AppConfig,
    CoreConfig,
    DatabaseConfig,
    ValidationError,
    _ENV_TO_KEY,
    _FIELD_TO_KEY,
    _KEY_TO_FIELD,
)
from usergraph.constants import MAX_QUERY_DEPTH


class TestDefaults:

    def test_sections(self):
        cfg = AppConfig()
        assert cfg.core == CoreConfig()
        assert cfg.database == DatabaseConfig()
        assert cfg.api == ApiConfig()

    def test_values(self):
        cfg = AppConfig()
        assert cfg.database.db_type == "sqlite"
        assert cfg.database.db_path == "usergraph.db"
        assert cfg.api.port == 8000
        assert cfg.api.max_query_depth == MAX_QUERY_DEPTH
        assert cfg.validate() == []


class TestFlatDict:

    def test_from_dict(self):
        cfg = AppConfig.from_dict({"_debug": True, "_apiport": "9000", "_maxdepth": 7, "custom": "x"})
        assert cfg.core.debug is True
        assert cfg.api.port == 9000
        assert cfg.api.max_query_depth == 7
        assert cfg.get("custom") == "x"

    def test_round_trip(self):
        original = {"_dbpath": "/tmp/a.db", "_pghost": "db", "__loglevel": "DEBUG", "extra": 1}
        out = AppConfig.from_dict(original).to_dict()
        for key, value in original.items():
            assert out[key] == value

    def test_every_field_exported(self):
        out = AppConfig().to_dict()
        assert set(_FIELD_TO_KEY.values()) <= set(out)

    def test_merge(self):
        cfg = AppConfig()
        cfg.merge({"_dbtype": "postgresql", "_pgport": "6543"})
        assert cfg.database.db_type == "postgresql"
        assert cfg.database.pg_port == 6543

    def test_get(self):
        cfg = AppConfig()
        assert cfg.get("_apihost") == "127.0.0.1"
        assert cfg.get("missing", "dflt") == "dflt"

    def test_bool_coercion(self):
        assert AppConfig.from_dict({"_production": "yes"}).core.production is True
        assert AppConfig.from_dict({"_production": "0"}).core.production is False

    def test_bad_int_coerces_to_zero(self):
        cfg = AppConfig.from_dict({"_apiport": "abc"})
        assert cfg.api.port == 0
        assert [e.field for e in cfg.validate()] == ["_apiport"]


class TestEnvOverrides:

    def test_env_keys_are_mapped(self):
        assert set(_ENV_TO_KEY.values()) <= set(_KEY_TO_FIELD)

    def test_apply(self):
        env = {"UG_DB_PATH": "/data/ug.db", "UG_API_PORT": "8080", "UG_DEBUG": "true", "POSTGRES_DB": "graph"}
        with patch.dict(os.environ, env):
            cfg = AppConfig()
            applied = cfg.apply_env_overrides()
        assert set(applied) == set(env)
        assert cfg.database.db_path == "/data/ug.db"
        assert cfg.api.port == 8080
        assert cfg.core.debug is True
        assert cfg.database.pg_db == "graph"

    def test_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            assert AppConfig().apply_env_overrides() == []


class TestValidation:

    def test_invalid_values(self):
        cfg = AppConfig.from_dict({
            "_dbtype": "mysql",
            "_apiport": 0,
            "__loglevel": "LOUD",
            "_maxdepth": 0,
        })
        fields = {e.field for e in cfg.validate()}
        assert fields == {"_dbtype", "_apiport", "__loglevel", "_maxdepth"}

    def test_postgresql_requires_host(self):
        cfg = AppConfig.from_dict({"_dbtype": "postgresql"})
        errors = cfg.validate()
        assert [e.field for e in errors] == ["_pghost"]

    def test_validation_error_str(self):
        err = ValidationError("_apiport", "Must be 1-65535", 0)
        assert str(err) == "_apiport: Must be 1-65535"
        assert "ValidationError" in repr(err)


class TestSummary:

    def test_sqlite(self):
        summary = AppConfig().summary()
        assert summary["database"] == "sqlite:usergraph.db"
        assert summary["api"] == "127.0.0.1:8000"
        assert summary["max_query_depth"] == 5

    def test_postgresql(self):
        cfg = AppConfig.from_dict({"_dbtype": "postgresql", "_pghost": "db"})
        assert cfg.summary()["database"] == "postgresql:db:5432/usergraph"
