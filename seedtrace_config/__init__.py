"""
seedtrace_config -- single public entrypoint for runtime configuration.

Responsibility:
    Provides ``get_active_config()``, which reads a YAML configuration set
    and returns a frozen ``SeedTraceConfig``.

Architecture position:
    Configuration sits above ``seedtrace_kernel``.  The kernel MUST NEVER
    import from ``seedtrace_config``; callers read the settings and pass
    plain values in (database URL to ``init_engine_from_url``, depth limit
    to ``GenealogyService``).

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``ConfigurationError`` -- malformed YAML or invalid values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from seedtrace_config.loader import DATABASE_URL_ENV, load_config
from seedtrace_config.schema import (
    DatabaseSettings,
    GenealogySettings,
    LoggingSettings,
    SeedTraceConfig,
)

_logger = logging.getLogger("seedtrace_kernel.config")

_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_CONFIG_PATH = _DEFAULT_CONFIG_DIR / "default.yaml"


def get_active_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> SeedTraceConfig:
    """Load ``config_path`` (the bundled default set when omitted)."""
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_config(path, environ)

    _logger.info(
        "seedtrace_config_loaded",
        extra={
            "config_id": config.config_id,
            "config_path": str(path),
            "max_tree_depth": config.genealogy.max_tree_depth,
            "default_export_format": config.genealogy.default_export_format,
        },
    )
    return config


__all__ = [
    "DATABASE_URL_ENV",
    "DEFAULT_CONFIG_PATH",
    "DatabaseSettings",
    "GenealogySettings",
    "LoggingSettings",
    "SeedTraceConfig",
    "get_active_config",
]
