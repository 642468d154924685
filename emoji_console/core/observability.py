"""Observability helpers for the emoji console.

Structured logging goes through structlog on top of the stdlib logging
module, so `logging.getLogger(__name__)` in any module ends up in the same
JSON (or console) output. `debug_wrapper` traces service and adapter calls.
"""

import asyncio
import functools
import json
import logging
import re
import sys
import time
import traceback
from collections.abc import Callable
from typing import Any, TypeVar, cast

import structlog
from pydantic import BaseModel
from structlog.contextvars import bind_contextvars, unbind_contextvars

_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        *_SHARED_PROCESSORS,
        structlog.processors.format_exc_info,
        structlog.processors.dict_tracebacks,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    context_class=dict,
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=False,
)

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])

_SENSITIVE_KEY_RE = re.compile(r"(token|key|secret|password|authorization)", re.IGNORECASE)


def configure_stdlib_json_logging(level: str = "INFO", file_target: str | None = None) -> None:
    """Route stdlib logging through structlog's renderer.

    JSON lines are written to stderr (console rendering when attached to a
    TTY) and, when `file_target` is given, to that file as JSON.
    """
    renderer: Any = (
        structlog.dev.ConsoleRenderer()
        if sys.stderr.isatty()
        else structlog.processors.JSONRenderer(ensure_ascii=False)
    )
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    handlers: list[logging.Handler] = [stream_handler]

    if file_target:
        file_handler = logging.FileHandler(file_target, encoding="utf-8")
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=_SHARED_PROCESSORS,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(ensure_ascii=False),
                ],
            )
        )
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(level.upper())


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation id to every log line emitted in this context."""
    bind_contextvars(correlation_id=correlation_id)


def clear_correlation_id() -> None:
    unbind_contextvars("correlation_id")


def _mask_scalar(value: Any) -> Any:
    if value is None:
        return None
    s = str(value)
    if len(s) <= 8:
        return "***"
    return f"{s[:4]}…{s[-3:]}"


def _serialize_value(value: Any, max_length: int = 1000) -> Any:
    """Safely serialize a value for logging, truncating large payloads."""
    try:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", exclude_unset=True)
        json_str = json.dumps(value, default=str, ensure_ascii=False)
        if len(json_str) > max_length:
            return json_str[:max_length] + "..."
        return json.loads(json_str)
    except (TypeError, ValueError):
        str_repr = str(value)
        if len(str_repr) > max_length:
            return str_repr[:max_length] + "..."
        return str_repr


def _safe_serialize_kv(key: str, value: Any, max_length: int) -> Any:
    if _SENSITIVE_KEY_RE.search(str(key)):
        return _mask_scalar(value)
    return _serialize_value(value, max_length)


def debug_wrapper(
    *,
    capture_result: bool = False,
    capture_args: bool = True,
    max_arg_length: int = 300,
    log_level: str = "INFO",
    add_metadata: dict[str, Any] | None = None,
    warn_over_ms: float | None = None,
) -> Callable[[F], F]:
    """Decorator for function tracing.

    Logs entry, success (with duration) and failures (with traceback) for
    both sync and async callables. Exceptions are re-raised unchanged.

    Args:
        capture_result: Whether to log the return value
        capture_args: Whether to log input arguments
        max_arg_length: Maximum length for serialized arguments
        log_level: Log level for successful executions
        add_metadata: Additional fields to include in every log line
        warn_over_ms: Log a warning when execution exceeds this duration

    Example:
        >>> @debug_wrapper(add_metadata={"layer": "service"})
        ... def build_set_map(set_key: str) -> dict: ...
    """

    def decorator(func: F) -> F:
        function_name = f"{func.__module__}.{func.__qualname__}"
        metadata = add_metadata or {}
        level = log_level.lower()

        def _start(args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
            execution_id = f"{function_name}_{int(time.time() * 1000000)}"
            fields: dict[str, Any] = {"execution_id": execution_id, **metadata}
            if capture_args:
                fields["args"] = [_serialize_value(a, max_arg_length) for a in args]
                fields["kwargs"] = {
                    k: _safe_serialize_kv(k, v, max_arg_length) for k, v in kwargs.items()
                }
            bind_contextvars(execution_id=execution_id)
            return execution_id, fields

        def _finish(execution_id: str, started: float, result: Any) -> None:
            duration_ms = (time.perf_counter() - started) * 1000
            getattr(logger, level)(
                f"Successfully executed: {function_name}",
                execution_id=execution_id,
                duration_ms=duration_ms,
                result=_serialize_value(result, max_arg_length) if capture_result else None,
                **metadata,
            )
            if warn_over_ms is not None and duration_ms > warn_over_ms:
                logger.warning(
                    "slow_execution",
                    function_name=function_name,
                    duration_ms=duration_ms,
                    threshold_ms=warn_over_ms,
                )

        def _fail(started: float, exc: Exception, fields: dict[str, Any]) -> None:
            logger.error(
                f"Error in function: {function_name}",
                duration_ms=(time.perf_counter() - started) * 1000,
                error_type=type(exc).__name__,
                error_message=str(exc),
                traceback=traceback.format_exc(),
                **fields,
            )

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            execution_id, fields = _start(args, kwargs)
            getattr(logger, level)(f"Executing async function: {function_name}", **fields)
            started = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                _finish(execution_id, started, result)
                return result
            except Exception as e:
                _fail(started, e, fields)
                raise
            finally:
                unbind_contextvars("execution_id")

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            execution_id, fields = _start(args, kwargs)
            getattr(logger, level)(f"Executing function: {function_name}", **fields)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                _finish(execution_id, started, result)
                return result
            except Exception as e:
                _fail(started, e, fields)
                raise
            finally:
                unbind_contextvars("execution_id")

        if asyncio.iscoroutinefunction(func):
            return cast(F, async_wrapper)
        return cast(F, sync_wrapper)

    return decorator


def trace_service(func: F) -> F:
    """Decorator for artifact-producing service operations."""
    return debug_wrapper(
        capture_result=False,
        capture_args=True,
        log_level="INFO",
        add_metadata={"layer": "service"},
        warn_over_ms=5000,
    )(func)


def trace_adapter(func: F) -> F:
    """Decorator specifically for adapter layer functions."""
    return debug_wrapper(
        capture_result=False,
        capture_args=True,
        log_level="INFO",
        add_metadata={"layer": "adapter"},
    )(func)
