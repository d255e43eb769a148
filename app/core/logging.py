import logging
import sys
import contextvars

# Correlation id of the request being served, read by the log filter below
request_id_ctx_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)

NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx_var.get() or "none"
        return True


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler whose lines carry the request id.

    Safe to call more than once: an already configured root logger only gets
    the request id filter added to its handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        for h in root.handlers:
            if not any(isinstance(f, RequestIdFilter) for f in h.filters):
                h.addFilter(RequestIdFilter())
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s")
    )
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)
    root.setLevel((level or "INFO").upper())

    # upstream request lines are logged by the backend client itself
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
