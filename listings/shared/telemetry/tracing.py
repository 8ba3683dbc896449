"""Utility functions and decorators for distributed tracing"""
import asyncio
import logging
from collections.abc import Callable
from functools import wraps

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

logger = logging.getLogger(__name__)

_SENSITIVE_ARGS = ("password", "token", "secret", "payload", "changes")


def traced(operation_name: str | None = None, attributes: dict | None = None):
    """
    Decorator to create a span for an async function

    Usage:
        @traced("gateway.update")
        async def update(self, principal, resource_id, changes):
            ...

    Without a configured SDK the OpenTelemetry API hands out no-op spans, so
    decorated code runs unchanged.
    """

    def decorator(func: Callable) -> Callable:
        if not asyncio.iscoroutinefunction(func):
            raise TypeError("traced() only supports coroutine functions")

        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            tracer = trace.get_tracer(__name__)
            span_name = operation_name or f"{func.__module__}.{func.__name__}"

            with tracer.start_as_current_span(span_name) as span:
                if attributes:
                    for key, value in attributes.items():
                        span.set_attribute(key, value)

                for key, value in kwargs.items():
                    if not key.startswith("_") and key not in _SENSITIVE_ARGS:
                        span.set_attribute(f"arg.{key}", str(value))

                try:
                    result = await func(*args, **kwargs)
                    span.set_status(Status(StatusCode.OK))
                    return result
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise

        return async_wrapper

    return decorator


def add_span_attributes(**attributes):
    """
    Add attributes to the current span

    Usage:
        add_span_attributes(resource_kind="PROPERTY", principal_id="abc")
    """
    span = trace.get_current_span()
    if span:
        for key, value in attributes.items():
            span.set_attribute(key, value)
