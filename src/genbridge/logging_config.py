"""
Logging configuration for genbridge.

Provides structured logging with verbosity levels. Logging is configured lazily
so library users who never call set_verbosity or configure_logging get no
logs unless they configure logging themselves.

Verbosity levels:
- 0 (default): INFO: provider calls, timings, poll progress
- 1 (info): INFO + prompt text sent to providers
- 2 (verbose): DEBUG + prompt text: request URLs, statuses, payloads

Use set_verbosity(level) or configure_logging(verbose_level, quiet).
GENBRIDGE_VERBOSITY env (0/1/2) is read when the CLI runs; CLI flags override env.
Credentials are never logged.
"""

import logging
import os

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "genbridge"

_log_prompts: bool = False
_configured: bool = False


def _ensure_handler() -> None:
    """Add a stderr handler to the root genbridge logger if not already present."""
    global _configured
    if _configured:
        return
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    _configured = True


def set_verbosity(level: int) -> None:
    """
    Set logging verbosity (0=default, 1=info, 2=verbose).

    - 0: INFO level; provider calls and timings only (no prompt text).
    - 1: INFO level; same + log prompt text.
    - 2: DEBUG level; same + request URLs, statuses and truncated payloads.
    """
    global _log_prompts
    _ensure_handler()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if level <= 0:
        root.setLevel(logging.INFO)
        _log_prompts = False
    elif level == 1:
        root.setLevel(logging.INFO)
        _log_prompts = True
    else:
        root.setLevel(logging.DEBUG)
        _log_prompts = True


def log_prompts() -> bool:
    """Return True if prompt text should be logged at INFO (verbosity 1 or 2)."""
    return _log_prompts


def configure_logging(verbose_level: int = 0, quiet: bool = False) -> None:
    """
    Configure logging from CLI or library.

    When quiet is True, sets level to WARNING. Otherwise calls set_verbosity(verbose_level).
    """
    global _log_prompts
    _ensure_handler()
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if quiet:
        root.setLevel(logging.WARNING)
        _log_prompts = False
        return
    set_verbosity(verbose_level)


def get_verbosity_from_env() -> int:
    """
    Read GENBRIDGE_VERBOSITY from environment (0, 1, or 2).

    Invalid or missing values return 0.
    """
    raw = os.environ.get("GENBRIDGE_VERBOSITY", "0").strip()
    if raw == "1":
        return 1
    if raw == "2":
        return 2
    return 0


_SECRET_HEADERS = frozenset({"authorization", "x-api-key", "api-key", "x-goog-api-key"})


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of headers safe to log (credential-bearing values masked)."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in _SECRET_HEADERS:
            scheme = value.split(" ", 1)[0] if " " in value else ""
            redacted[key] = f"{scheme} ***".strip()
        else:
            redacted[key] = value
    return redacted


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under genbridge (e.g. genbridge.core.client)."""
    if name.startswith(ROOT_LOGGER_NAME + ".") or name == ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(ROOT_LOGGER_NAME + "." + name)


__all__ = [
    "configure_logging",
    "get_logger",
    "get_verbosity_from_env",
    "log_prompts",
    "redact_headers",
    "set_verbosity",
]
