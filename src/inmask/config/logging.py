"""structlog configuration for inmask.

inmask usually runs inside someone else's application, so its output goes
through one handler on the ``inmask`` logger and the root logger is left
alone.  Two renderers:

- console (default): human-readable lines on stderr
- JSON (``--log-json``): one JSON object per line on stderr

Anything logged while the controller handles a keystroke carries the
``field_id`` bound through :func:`structlog.contextvars.bound_contextvars`.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "inmask"
HANDLER_NAME = "inmask-stderr"

_SHARED_PROCESSORS: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> logging.Handler:
    """Route ``inmask.*`` records (stdlib and structlog alike) to stderr.

    Calling it again replaces the handler installed by the previous call.

    Args:
        verbose: DEBUG output, which includes every rejected edit.
            Otherwise WARNING and above only.
        log_json: Use the JSON renderer instead of the console renderer.

    Returns:
        The installed handler.
    """
    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_SHARED_PROCESSORS),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False

    logging.getLogger("pluggy").setLevel(logging.WARNING)
    return handler
