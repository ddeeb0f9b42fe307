"""Platform context variable for logging"""

import contextvars

# Label of the adapter a log line was emitted for (e.g. "p1:woocommerce")
platform_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "platform", default=None
)
