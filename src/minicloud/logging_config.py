"""structlog setup for the control plane.

stdlib loggers (``logging.getLogger(__name__)``) are routed through a
structlog ProcessorFormatter, so kubectl, service and uvicorn records share one
format. Request and resource context lives in contextvars and is copied into
orchestrator worker threads by ``asyncio.to_thread``.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

SERVICE_NAME = "minicloud-control-plane"

_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "asyncio")


def _add_service(logger, method_name, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        log_level: Level name (debug/info/warning/error); unknown names mean info.
        json_output: JSON lines when True, the coloured console renderer otherwise.
    """
    chain = _processors()
    renderer = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, namespace: str | None = None) -> None:
    ctx = {"trace_id": trace_id}
    if namespace:
        ctx["namespace"] = namespace
    structlog.contextvars.bind_contextvars(**ctx)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def resource_context(kind: str, namespace: str, name: str) -> Iterator[None]:
    """Tag every record logged inside the block with the resource identity."""
    with structlog.contextvars.bound_contextvars(
        resource=f"{kind}:{namespace}/{name}", namespace=namespace
    ):
        yield
