"""
Context variables for request tracing across the application.

This module provides context variables for trace IDs, request IDs and
the authenticated user that can be accessed from anywhere in the codebase
during request processing.
"""

from contextvars import ContextVar

# Context variables for distributed tracing
trace_id_var: ContextVar[str] = ContextVar("trace_id", default="")
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")
