"""Structured logging helpers shared by the backend modules."""

from __future__ import annotations

import logging
from typing import Any

__all__ = ["StructuredFormatter", "configure_logging", "get_logger"]

ROOT_LOGGER_NAME = "backend"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = _extract_extra(record)
        if not fields:
            return base
        rendered = " ".join(f"{key}={value!r}" for key, value in sorted(fields.items()))
        return f"{base} {rendered}"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger; event names go in the message, data in ``extra``."""

    return logging.getLogger(name)


def configure_logging(config: Any | None = None) -> None:
    """Attach a structured stream handler to the backend logger tree.

    ``config`` is the ``LoggingConfig`` from settings; ``None`` keeps defaults.
    Calling this more than once replaces the previously installed handler.
    """

    level = getattr(config, "level", "INFO")
    fmt = getattr(config, "format", "%(asctime)s %(levelname)s %(name)s %(message)s")

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        if getattr(handler, "_growthlog_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(fmt))
    handler._growthlog_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)


def _extract_extra(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }
