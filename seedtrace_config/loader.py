"""
Configuration Loader (``seedtrace_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen dataclasses
of ``seedtrace_config.schema``.  Callers go through
``seedtrace_config.get_active_config()``.

Invariants enforced
-------------------
* Unknown top-level sections are rejected, so a typo never silently falls
  back to a default.
* Values are type-checked; every failure raises ``ConfigurationError``
  naming the offending key.
* ``SEEDTRACE_DATABASE_URL`` in the environment overrides ``database.url``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``ConfigurationError`` (wrapping ``yaml.YAMLError``).
* Wrong value type or range  -> ``ConfigurationError``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from seedtrace_config.schema import (
    DatabaseSettings,
    GenealogySettings,
    LoggingSettings,
    SeedTraceConfig,
)
from seedtrace_kernel.domain.genealogy_export import ExportFormat
from seedtrace_kernel.exceptions import ConfigurationError, UnsupportedExportFormatError

DATABASE_URL_ENV = "SEEDTRACE_DATABASE_URL"

_SECTIONS = frozenset({"config_id", "database", "genealogy", "logging"})
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        ConfigurationError: if the file is not valid YAML or not a mapping.
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def parse_config(
    data: Mapping[str, Any],
    environ: Mapping[str, str] | None = None,
) -> SeedTraceConfig:
    """Build a SeedTraceConfig from parsed YAML plus environment overrides."""
    env = os.environ if environ is None else environ

    unknown = sorted(set(data) - _SECTIONS)
    if unknown:
        raise ConfigurationError(unknown[0], "unknown configuration section")

    database = _parse_database(_section(data, "database"), env)
    genealogy = _parse_genealogy(_section(data, "genealogy"))
    logging_settings = _parse_logging(_section(data, "logging"))

    return SeedTraceConfig(
        config_id=str(data.get("config_id", "default")),
        database=database,
        genealogy=genealogy,
        logging=logging_settings,
    )


def load_config(path: Path, environ: Mapping[str, str] | None = None) -> SeedTraceConfig:
    return parse_config(load_yaml_file(path), environ)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(name, "must be a mapping")
    return section


def _parse_database(section: Mapping[str, Any], env: Mapping[str, str]) -> DatabaseSettings:
    defaults = DatabaseSettings()
    url = env.get(DATABASE_URL_ENV) or section.get("url", defaults.url)
    if not isinstance(url, str) or not url:
        raise ConfigurationError("database.url", "must be a non-empty string")
    return DatabaseSettings(
        url=url,
        echo=_bool(section, "echo", defaults.echo, "database"),
        pool_size=_positive_int(section, "pool_size", defaults.pool_size, "database"),
        max_overflow=_int(section, "max_overflow", defaults.max_overflow, "database"),
        pool_timeout=_positive_int(section, "pool_timeout", defaults.pool_timeout, "database"),
        pool_recycle=_int(section, "pool_recycle", defaults.pool_recycle, "database"),
    )


def _parse_genealogy(section: Mapping[str, Any]) -> GenealogySettings:
    defaults = GenealogySettings()
    export_format = section.get("default_export_format", defaults.default_export_format)
    try:
        export_format = ExportFormat.parse(export_format).value
    except UnsupportedExportFormatError as exc:
        raise ConfigurationError("genealogy.default_export_format", str(exc)) from exc
    return GenealogySettings(
        max_tree_depth=_positive_int(
            section, "max_tree_depth", defaults.max_tree_depth, "genealogy"
        ),
        default_export_format=export_format,
    )


def _parse_logging(section: Mapping[str, Any]) -> LoggingSettings:
    level = str(section.get("level", LoggingSettings().level)).upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError("logging.level", f"unknown level {level!r}")
    return LoggingSettings(level=level)


def _int(section: Mapping[str, Any], key: str, default: int, prefix: str) -> int:
    value = section.get(key, default)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{prefix}.{key}", f"expected an integer, got {value!r}")
    return value


def _positive_int(section: Mapping[str, Any], key: str, default: int, prefix: str) -> int:
    value = _int(section, key, default, prefix)
    if value < 1:
        raise ConfigurationError(f"{prefix}.{key}", f"must be at least 1, got {value}")
    return value


def _bool(section: Mapping[str, Any], key: str, default: bool, prefix: str) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{prefix}.{key}", f"expected true/false, got {value!r}")
    return value
