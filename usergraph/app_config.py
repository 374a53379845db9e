"""
Typed Application Configuration for usergraph.

Single source of truth for the API server, database and logging settings.

Features:
  - Typed dataclass sections with defaults
  - ``from_dict()`` / ``to_dict()`` for flat-dict I/O (``_dbpath``, ``_apiport``, ...)
  - ``apply_env_overrides()`` overlay for UG_* / POSTGRES_* environment variables
  - Built-in validation with descriptive errors
  - Merge semantics: defaults -> file -> env -> runtime overrides

Usage::

    from usergraph.app_config import AppConfig

    cfg = AppConfig.from_dict({"_dbpath": "/var/lib/usergraph.db"})
    cfg.apply_env_overrides()

    errors = cfg.validate()
    if errors:
        raise ValueError(errors)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Tuple

from usergraph.constants import MAX_QUERY_DEPTH

log = logging.getLogger("usergraph.app_config")


# ---------------------------------------------------------------------------
# Section dataclasses
# ---------------------------------------------------------------------------

@dataclass
class CoreConfig:
    """Core / general settings."""
    debug: bool = False
    production: bool = False
    logging_enabled: bool = True
    log_dir: str = ""
    service_name: str = "usergraph"


@dataclass
class DatabaseConfig:
    """Database backend and connection settings."""
    db_type: str = "sqlite"    # 'sqlite' or 'postgresql'
    db_path: str = "usergraph.db"
    pg_host: str = ""
    pg_port: int = 5432
    pg_db: str = "usergraph"
    pg_user: str = ""
    pg_password: str = ""


@dataclass
class ApiConfig:
    """GraphQL API server settings."""
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    max_query_depth: int = MAX_QUERY_DEPTH


# ---------------------------------------------------------------------------
# Field-key mappings  (section_attr, field_attr) <-> flat key
# ---------------------------------------------------------------------------

_KEY_TO_FIELD: Dict[str, Tuple[str, str]] = {
    # Core
    "_debug": ("core", "debug"),
    "_production": ("core", "production"),
    "__logging": ("core", "logging_enabled"),
    "_logdir": ("core", "log_dir"),
    "_servicename": ("core", "service_name"),

    # Database
    "_dbtype": ("database", "db_type"),
    "_dbpath": ("database", "db_path"),
    "_pghost": ("database", "pg_host"),
    "_pgport": ("database", "pg_port"),
    "_pgdb": ("database", "pg_db"),
    "_pguser": ("database", "pg_user"),
    "_pgpassword": ("database", "pg_password"),

    # API
    "_apihost": ("api", "host"),
    "_apiport": ("api", "port"),
    "__loglevel": ("api", "log_level"),
    "_maxdepth": ("api", "max_query_depth"),
}

_FIELD_TO_KEY: Dict[Tuple[str, str], str] = {
    sf: k for k, sf in _KEY_TO_FIELD.items()
}

_ENV_TO_KEY: Dict[str, str] = {
    "UG_DEBUG": "_debug",
    "UG_PRODUCTION": "_production",
    "UG_LOG_DIR": "_logdir",
    "UG_LOG_LEVEL": "__loglevel",
    "UG_DB_TYPE": "_dbtype",
    "UG_DB_PATH": "_dbpath",
    "UG_API_HOST": "_apihost",
    "UG_API_PORT": "_apiport",
    "UG_MAX_QUERY_DEPTH": "_maxdepth",
    "POSTGRES_HOST": "_pghost",
    "POSTGRES_PORT": "_pgport",
    "POSTGRES_DB": "_pgdb",
    "POSTGRES_USER": "_pguser",
    "POSTGRES_PASSWORD": "_pgpassword",
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_DB_TYPES = ("sqlite", "sqlite3", "postgresql", "postgres", "psycopg2")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

class ValidationError:
    """Single validation failure."""

    __slots__ = ("field", "message", "value")

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.message = message
        self.value = value

    def __repr__(self) -> str:
        return f"ValidationError({self.field!r}, {self.message!r})"

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


# ---------------------------------------------------------------------------
# AppConfig: main typed configuration
# ---------------------------------------------------------------------------

@dataclass
class AppConfig:
    """Typed usergraph application configuration."""

    core: CoreConfig = field(default_factory=CoreConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    # ---- Extra keys not in any section (forward-compat) ----
    _extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppConfig":
        """Build an ``AppConfig`` from a flat config dict.

        Unknown keys are preserved in ``_extra`` so nothing is lost
        during round-trip conversion.
        """
        cfg = cls()
        cfg.merge(d)
        return cfg

    def to_dict(self) -> Dict[str, Any]:
        """Export back to a flat config dict (extras are passed through)."""
        out: Dict[str, Any] = {}
        for (section_attr, field_attr), key in _FIELD_TO_KEY.items():
            out[key] = getattr(getattr(self, section_attr), field_attr)
        out.update(self._extra)
        return out

    def apply_env_overrides(self) -> List[str]:
        """Read ``UG_*`` / ``POSTGRES_*`` environment variables and override matching fields.

        Returns a list of variables that were applied (for logging).
        """
        overridden: List[str] = []

        for env_var, key in _ENV_TO_KEY.items():
            raw = os.environ.get(env_var)
            if raw is None:
                continue
            section_attr, field_attr = _KEY_TO_FIELD[key]
            _set_field(getattr(self, section_attr), field_attr, raw)
            overridden.append(env_var)

        if overridden:
            log.info(
                "Applied %d env-var override(s): %s",
                len(overridden),
                ", ".join(overridden),
            )
        return overridden

    def merge(self, overrides: Dict[str, Any]) -> None:
        """Apply a flat dict of overrides (same keys as ``to_dict``)."""
        for key, value in overrides.items():
            if key in _KEY_TO_FIELD:
                section_attr, field_attr = _KEY_TO_FIELD[key]
                _set_field(getattr(self, section_attr), field_attr, value)
            else:
                self._extra[key] = value

    def validate(self) -> List[ValidationError]:
        """Validate all fields. Returns a list of errors (empty = valid)."""
        errors: List[ValidationError] = []

        # Database
        if self.database.db_type.lower() not in _DB_TYPES:
            errors.append(ValidationError(
                "_dbtype",
                "Must be 'sqlite' or 'postgresql'",
                self.database.db_type,
            ))
        if self.database.db_type.lower() in ("postgresql", "postgres", "psycopg2"):
            if not self.database.pg_host:
                errors.append(ValidationError(
                    "_pghost",
                    "PostgreSQL host is required when db type is postgresql",
                ))
            if self.database.pg_port < 1 or self.database.pg_port > 65535:
                errors.append(ValidationError(
                    "_pgport",
                    "Invalid PostgreSQL port",
                    self.database.pg_port,
                ))

        # API
        if self.api.port < 1 or self.api.port > 65535:
            errors.append(ValidationError(
                "_apiport",
                "Must be 1-65535",
                self.api.port,
            ))
        if self.api.log_level.upper() not in _LOG_LEVELS:
            errors.append(ValidationError(
                "__loglevel",
                "Invalid log level",
                self.api.log_level,
            ))
        if self.api.max_query_depth < 1:
            errors.append(ValidationError(
                "_maxdepth",
                "Must be >= 1",
                self.api.max_query_depth,
            ))

        return errors

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by flat-dict key name."""
        mapping = _KEY_TO_FIELD.get(key)
        if mapping is not None:
            section_attr, field_attr = mapping
            return getattr(getattr(self, section_attr), field_attr, default)
        return self._extra.get(key, default)

    def summary(self) -> Dict[str, Any]:
        """Return a concise overview suitable for logging."""
        if self.database.db_type.lower().startswith("sqlite"):
            db = f"sqlite:{self.database.db_path or ':memory:'}"
        else:
            db = f"postgresql:{self.database.pg_host}:{self.database.pg_port}/{self.database.pg_db}"
        return {
            "debug": self.core.debug,
            "production": self.core.production,
            "database": db,
            "api": f"{self.api.host}:{self.api.port}",
            "log_level": self.api.log_level,
            "max_query_depth": self.api.max_query_depth,
            "extra_keys": len(self._extra),
        }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _set_field(section: Any, field_attr: str, value: Any) -> None:
    """Coerce *value* to the target field's type and set it."""
    target_type: type = str
    for f in fields(section):
        if f.name == field_attr:
            # Annotations are strings under ``from __future__ import annotations``
            target_type = {"bool": bool, "int": int, "float": float}.get(f.type, str)
            break

    if isinstance(value, str) and target_type is not str:
        value = _coerce(value, target_type)
    if target_type is int and isinstance(value, float):
        value = int(value)

    setattr(section, field_attr, value)


def _coerce(raw: str, target: type) -> Any:
    """Best-effort coercion from string to target type."""
    if target is bool:
        return raw.lower() in ("1", "true", "yes", "on")
    if target is int:
        try:
            return int(raw)
        except (ValueError, TypeError):
            return 0
    if target is float:
        try:
            return float(raw)
        except (ValueError, TypeError):
            return 0.0
    return raw
