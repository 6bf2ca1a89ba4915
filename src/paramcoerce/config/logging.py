"""structlog formatting for the ``paramcoerce`` logger.

The library only logs through ``logging.getLogger(__name__)`` and leaves the
root logger alone. :func:`configure_logging` attaches one structlog-formatted
handler to the ``paramcoerce`` logger:

- Human (default): console-rendered lines to stderr
- JSON (``log_json=True``): one JSON object per line to stderr

The default engine calls :func:`configure_from_settings` when
``setup_logging`` is enabled in ``[tool.paramcoerce]`` or the environment.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from paramcoerce.config.settings import CoerceSettings

LOGGER_NAME = "paramcoerce"

# Marks the handler installed here so a later call replaces it.
_HANDLER_ATTR = "_paramcoerce_handler"


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install (or replace) the structlog handler on the ``paramcoerce`` logger.

    Args:
        verbose: DEBUG-level output. When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Where to write; defaults to the current ``sys.stderr``.

    Returns:
        The installed handler.
    """
    stream = stream if stream is not None else sys.stderr

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_json:
        renderers: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=stream.isatty())]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )
    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_ATTR, True)

    pkg_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(pkg_logger.handlers):
        if getattr(existing, _HANDLER_ATTR, False):
            pkg_logger.removeHandler(existing)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    pkg_logger.propagate = False
    return handler


def configure_from_settings(settings: CoerceSettings) -> logging.Handler:
    """Apply the ``verbose`` and ``log_json`` fields of *settings*."""
    return configure_logging(verbose=settings.verbose, log_json=settings.log_json)
