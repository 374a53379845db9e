"""
Unified logging configuration for usergraph.

The logging pipeline is:

    Application code
        │
        ▼
    logging.getLogger("usergraph.*")
        │
        ├──► StructuredLogHandler (JSON) or StreamHandler (text) to stderr
        │
        └──► TimedRotatingFileHandler (debug.log, errors.log), when a
             log directory is configured

Usage::

    from usergraph.logging_config import configure_logging

    configure_logging(config)  # Call once at startup
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from typing import Optional

from usergraph import __version__
from usergraph.app_config import AppConfig
from usergraph.request_tracing import RequestIdFilter
from usergraph.structured_logging import StructuredLogHandler

DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT_TEXT = "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s : %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] [%(request_id)s] %(filename)s:%(lineno)s : %(message)s"

_CONFIGURED = False


def configure_logging(
    config: Optional[AppConfig] = None,
    *,
    force_json: Optional[bool] = None,
    force_text: bool = False,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """Configure the usergraph logging pipeline.

    This should be called **once** at application startup.  Subsequent
    calls are no-ops until :func:`reset_logging` is called.

    Args:
        config: Application configuration. Relevant fields:
            ``core.debug``, ``core.production``, ``core.logging_enabled``,
            ``core.log_dir``, ``core.service_name``, ``api.log_level``.
        force_json: Explicitly enable JSON output (default: auto-detect
            based on ``core.production`` or ``UG_LOG_FORMAT=json``).
        force_text: Force plain-text console output (overrides JSON).
        log_dir: Directory for file-based logs.  Falls back to
            ``core.log_dir``; no file logging when neither is set.

    Returns:
        The root ``usergraph`` logger.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return logging.getLogger("usergraph")

    config = config or AppConfig()

    if not config.core.logging_enabled:
        level = logging.WARNING
    elif config.core.debug:
        level = logging.DEBUG
    else:
        level = logging.getLevelName(config.api.log_level.upper())
        if not isinstance(level, int):
            level = DEFAULT_LOG_LEVEL

    production = config.core.production
    env_format = os.environ.get("UG_LOG_FORMAT", "").lower()

    if force_text:
        use_json = False
    elif force_json is not None:
        use_json = force_json
    elif env_format == "json":
        use_json = True
    elif env_format == "text":
        use_json = False
    else:
        use_json = production or _running_in_container()

    root = logging.getLogger("usergraph")
    root.setLevel(logging.DEBUG)  # handlers filter further
    root.handlers.clear()

    if use_json:
        console = StructuredLogHandler(
            stream=sys.stderr,
            service_name=config.core.service_name,
            environment="production" if production else "development",
            include_caller=config.core.debug,
            extra_fields={"version": __version__},
        )
    else:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(LOG_FORMAT_TEXT))
    console.setLevel(level)
    console.addFilter(RequestIdFilter())
    root.addHandler(console)

    resolved_log_dir = _resolve_log_dir(log_dir or config.core.log_dir)
    if resolved_log_dir:
        _add_file_handlers(root, resolved_log_dir)

    _CONFIGURED = True

    root.debug(
        "Logging configured",
        extra={
            "log_format": "json" if use_json else "text",
            "log_level": logging.getLevelName(level),
        },
    )
    return root


def reset_logging() -> None:
    """Reset the logging configuration (for testing)."""
    global _CONFIGURED
    _CONFIGURED = False
    root = logging.getLogger("usergraph")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def _running_in_container() -> bool:
    """Detect if we're running inside a Docker container."""
    return (
        os.path.exists("/.dockerenv")
        or os.environ.get("DOCKER_CONTAINER", "") == "1"
        or os.environ.get("KUBERNETES_SERVICE_HOST", "") != ""
    )


def _resolve_log_dir(log_dir: str) -> Optional[str]:
    """Create the log directory if needed; None when unset or not writable."""
    if not log_dir:
        return None
    try:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    except OSError:
        return None


def _add_file_handlers(logger: logging.Logger, log_dir: str) -> None:
    """Add rotating debug and error file handlers."""
    try:
        debug_handler = logging.handlers.TimedRotatingFileHandler(
            os.path.join(log_dir, "usergraph.debug.log"),
            when="d", interval=1, backupCount=30,
        )
        debug_handler.setLevel(logging.DEBUG)
        debug_handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        debug_handler.addFilter(RequestIdFilter())
        logger.addHandler(debug_handler)

        error_handler = logging.handlers.TimedRotatingFileHandler(
            os.path.join(log_dir, "usergraph.error.log"),
            when="d", interval=1, backupCount=30,
        )
        error_handler.setLevel(logging.WARNING)
        error_handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        error_handler.addFilter(RequestIdFilter())
        logger.addHandler(error_handler)
    except OSError:
        logger.warning("File logging not available in %s", log_dir)
