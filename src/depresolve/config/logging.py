"""structlog configuration for depresolve.

Engine modules log through stdlib ``logging.getLogger(__name__)``, which
stays silent until the host configures logging; telemetry spans are
emitted through ``structlog``. Both end up in one handler on stderr:

- Human (default): console renderer, colored on a TTY
- JSON (--log-json): one JSON object per line
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

import structlog


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    levels: Mapping[str, int] | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        verbose: Enable DEBUG-level output for ``depresolve`` loggers.
            When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        levels: Extra per-logger levels, e.g. for the application's own
            loader modules.
    """
    dep_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        # Loader failures carry tracebacks; JSON needs them pre-rendered.
        final_processors: list[structlog.types.Processor] = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ]
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        final_processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=final_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("depresolve").setLevel(dep_level)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    for name, level in (levels or {}).items():
        logging.getLogger(name).setLevel(level)
