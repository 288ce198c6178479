"""
Logging helpers.

``MetadbLogFilter`` derives readable ``[Identity] [Role]`` tags from module
logger names (``metadb.components.library.hash_index_comp`` becomes
``[Hash Index] [Component]``) and renders any key/values registered with
:func:`set_log_context`. The filter never suppresses a record.
"""

from __future__ import annotations

import contextvars
import logging
from typing import Any

_ROLE_SUFFIXES: dict[str, str] = {
    "_svc": "[Service]",
    "_comp": "[Component]",
    "_helper": "[Helper]",
    "_dto": "[DTO]",
}

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "metadb_log_context", default=None
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(metadb_identity_tag)s %(metadb_role_tag)s %(context_str)s%(message)s"


def set_log_context(**values: Any) -> None:
    """Attach key/values to every subsequent record in this context."""
    current = dict(_log_context.get() or {})
    current.update(values)
    _log_context.set(current)


def clear_log_context() -> None:
    """Drop all key/values registered with :func:`set_log_context`."""
    _log_context.set(None)


def _identity_and_role(name: str) -> tuple[str, str]:
    module = name.rsplit(".", 1)[-1]
    for suffix, role in _ROLE_SUFFIXES.items():
        if module.endswith(suffix):
            stem = module[: -len(suffix)]
            if not stem:
                break
            words = " ".join(part.capitalize() for part in stem.split("_") if part)
            return f"[{words}]", role
    return name, ""


class MetadbLogFilter(logging.Filter):
    """Inject ``metadb_identity_tag``, ``metadb_role_tag`` and ``context_str``."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = getattr(record, "name", "") or ""
        if not isinstance(name, str):
            name = str(name)
        identity, role = _identity_and_role(name)
        record.metadb_identity_tag = identity
        record.metadb_role_tag = role

        context = _log_context.get()
        if context:
            rendered = " ".join(f"{k}={v}" for k, v in context.items())
            record.context_str = f"[{rendered}] "
        else:
            record.context_str = ""
        return True


def configure_logging(level: int | str = logging.INFO) -> logging.Handler:
    """
    Install a stream handler with :class:`MetadbLogFilter` on the ``metadb`` logger.

    Calling this more than once replaces the previously installed handler.

    Returns:
        The installed handler
    """
    package_logger = logging.getLogger("metadb")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_metadb_handler", False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.addFilter(MetadbLogFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._metadb_handler = True  # type: ignore[attr-defined]
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
