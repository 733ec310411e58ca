"""structlog rendering for the video redirect service's stdlib logs.

Modules log through plain ``logging.getLogger(__name__)`` with dotted event
names and ``extra=`` fields:

    logger = logging.getLogger(__name__)
    logger.info("video_data.loaded", extra={"records": 120, "entries": 118})

configure_logging() routes every record, uvicorn's included, through a
structlog ProcessorFormatter, so ``extra`` fields become keys of the event:
one JSON object per line with LOG_FORMAT=json, coloured console lines
otherwise. LOG_LEVEL sets the root level (INFO when unset or unknown).
"""

import logging
import os
import sys

import structlog
from structlog.types import Processor


def _get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _is_json_format() -> bool:
    return os.environ.get("LOG_FORMAT", "").lower() == "json"


def _build_renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True, exception_formatter=structlog.dev.plain_traceback
    )


def configure_logging() -> None:
    """Install the structlog formatter on the root logger.

    Called once when ``main`` is imported. Calling it again replaces the
    handler rather than stacking a second one.
    """
    # Applied to every stdlib record before rendering
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            _build_renderer(_is_json_format()),
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(_get_log_level())

    # Every static asset hit would otherwise produce an access line
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
