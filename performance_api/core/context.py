# performance_api/core/context.py

import contextvars

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
user_id_ctx = contextvars.ContextVar("user_id", default=None)
