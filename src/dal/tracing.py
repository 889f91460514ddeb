import hashlib
from typing import Awaitable, Optional, TypeVar

from common.config.env import get_env_bool

T = TypeVar("T")


def trace_enabled() -> bool:
    """Return True when DAL query tracing is enabled."""
    return bool(get_env_bool("DAL_TRACE_QUERIES", False))


def _hash_sql(sql: str) -> str:
    return hashlib.sha256(sql.encode("utf-8")).hexdigest()


def statement_kind(sql: Optional[str]) -> str:
    """Return the leading SQL verb in upper case (or UNKNOWN)."""
    if not sql:
        return "UNKNOWN"
    parts = sql.strip().split(maxsplit=1)
    return parts[0].upper() if parts else "UNKNOWN"


async def trace_query_operation(
    name: str,
    provider: str,
    sql: Optional[str],
    operation: Awaitable[T],
) -> T:
    """Trace a DAL query operation with OTEL when enabled."""
    if not trace_enabled():
        return await operation

    from opentelemetry import trace

    tracer = trace.get_tracer("dal")
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("db.provider", provider)
        span.set_attribute("db.statement_kind", statement_kind(sql))
        if sql:
            span.set_attribute("db.statement_hash", _hash_sql(sql))
        try:
            result = await operation
            span.set_attribute("db.status", "ok")
            return result
        except Exception:
            span.set_attribute("db.status", "error")
            raise
