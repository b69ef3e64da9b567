import contextvars
import uuid

import starlette.middleware.base
import starlette.requests

from app import config

ctx_trace_id: contextvars.ContextVar[str] = contextvars.ContextVar("trace_id")


class TraceIdMiddleware(starlette.middleware.base.BaseHTTPMiddleware):
    """Propagate the inbound trace header, generating one when absent."""

    async def dispatch(self, request: starlette.requests.Request, call_next):
        header = config.get_config().tracing_header
        trace_id = request.headers.get(header) or uuid.uuid4().hex
        token = ctx_trace_id.set(trace_id)
        try:
            response = await call_next(request)
        finally:
            ctx_trace_id.reset(token)

        response.headers[header] = trace_id
        return response
