import logging
import logging.handlers
import sys

import structlog
from structlog.types import EventDict, Processor

from infrastructure.config import Settings

# Loggers of libraries that install their own handlers; routed to ours instead.
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "temporalio")

# httpx logs every request at INFO; the archive fetcher logs its own events.
QUIET_LOGGERS = ("httpx", "httpcore")

_installed_handlers: list[logging.Handler] = []


def _add_service_name(app_name: str) -> Processor:
    def processor(
        _logger: object,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("service", app_name)
        return event_dict

    return processor


def setup_logging(settings: Settings) -> None:
    """Route structlog, uvicorn, Temporal and stdlib logging to stdout and a daily file.

    Both the API process and the refresh worker call this at startup. Calling
    it again replaces the handlers instead of stacking duplicates.
    """
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = settings.log_dir / f"{settings.app_env}.log"

    common_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_service_name(settings.app_name),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.app_env == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *common_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=common_processors,
        processor=renderer,
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_file,
        when="midnight",
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [stream_handler, file_handler]

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = handlers
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(settings.log_level.upper())

    for logger_name in INTERCEPTED_LOGGERS:
        intercepted = logging.getLogger(logger_name)
        intercepted.handlers = list(handlers)
        intercepted.propagate = False

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
