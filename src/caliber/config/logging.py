"""structlog configuration for caliber.

All diagnostics go to stderr so stdout stays clean for command output
(including ``--json`` payloads). Two renderings:

- console (default): short timestamps, colored when stderr is a TTY
- JSON lines (``--log-json``): ISO timestamps, one object per record

Records from plain ``logging.getLogger(__name__)`` loggers in the
service and infrastructure layers go through the same processor chain
as structlog loggers, so both render identically.
"""

from __future__ import annotations

import logging
import sys

import structlog

HANDLER_NAME = "caliber"


def _shared_processors(*, log_json: bool) -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso" if log_json else "%H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(*, log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Route structlog and stdlib records to stderr.

    Calling it again replaces the handler installed by the previous
    call; handlers added by anyone else are left alone.

    Args:
        verbose: Show DEBUG records from ``caliber.*`` loggers. Otherwise
            only WARNING and above.
        log_json: Render JSON lines instead of console text.
    """
    shared = _shared_processors(log_json=log_json)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *([structlog.processors.format_exc_info] if log_json else []),
                _renderer(log_json=log_json),
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("caliber").setLevel(logging.DEBUG if verbose else logging.WARNING)
