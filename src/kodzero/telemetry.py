"""Logging and tracing for the Kodzero SDK.

Log lines go through structlog, spans through the OpenTelemetry API. The
session guard's work gets dedicated spans: each refresh attempt is numbered,
and the number is bound into the structlog context for everything logged
while that refresh runs, including the refresh HTTP call itself.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Awaitable, Callable, ParamSpec, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator

    from .config import TelemetryConfig

P = ParamSpec("P")
T = TypeVar("T")

SDK_NAME = "kodzero"
SDK_VERSION = "0.1.0"

# Span attribute keys
ATTR_REFRESH_ATTEMPT = "kodzero.refresh.attempt"
ATTR_REFRESH_WAITERS = "kodzero.refresh.waiters"
ATTR_REPLAY_OUTCOME = "kodzero.replay.outcome"
ATTR_AUTH_COLLECTION = "kodzero.auth.collection"

_tracer: trace.Tracer | None = None


def get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, SDK_VERSION)
    return _tracer


def get_logger(**context: Any) -> structlog.typing.FilteringBoundLogger:
    """Return the SDK logger, bound to ``context`` when given."""
    logger = structlog.get_logger(SDK_NAME)
    return logger.bind(**context) if context else logger


def configure_telemetry(config: TelemetryConfig) -> None:
    """Apply telemetry settings.

    A disabled config swaps in a no-op tracer and leaves structlog as the
    host application configured it.
    """
    global _tracer

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _log_level(config.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
    )
    _tracer = trace.get_tracer(config.service_name, SDK_VERSION)


def _log_level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run the block inside a span, marking the span failed on error."""
    with get_tracer().start_as_current_span(name, attributes=attributes) as span:
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


@contextmanager
def refresh_span(attempt: int) -> Generator[trace.Span, None, None]:
    """Span for one refresh attempt.

    The attempt number is bound into the structlog context variables, so it
    only tags log lines emitted by the task running the refresh.
    """
    with structlog.contextvars.bound_contextvars(refresh_attempt=attempt):
        with trace_operation(
            "session.refresh", attributes={ATTR_REFRESH_ATTEMPT: attempt}
        ) as span:
            yield span


@contextmanager
def replay_span(method: str, url: str) -> Generator[trace.Span, None, None]:
    """Span for resending a request after a refresh."""
    with trace_operation(
        "session.replay", attributes={"http.method": method, "http.url": url}
    ) as span:
        yield span


def record_replay(span: trace.Span, outcome: str, status: int | None = None) -> None:
    """Tag a replay span with ``replayed`` or ``transport_error``."""
    span.set_attribute(ATTR_REPLAY_OUTCOME, outcome)
    if status is not None:
        span.set_attribute("http.status_code", status)


def traced_auth(
    action: str,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Trace an auth strategy coroutine as ``auth.<action>``.

    The strategy's collection, read from ``self.collection``, is recorded on
    the span.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            collection = getattr(args[0], "collection", "") if args else ""
            with trace_operation(
                f"auth.{action}", attributes={ATTR_AUTH_COLLECTION: collection}
            ):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
