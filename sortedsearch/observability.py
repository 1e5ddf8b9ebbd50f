import logging
import json
import os
import threading
from contextvars import ContextVar


class Counter:
    """Prometheus-style counter, safe to bump from the request threadpool."""

    def __init__(self, name: str, documentation: str):
        self.name = name
        self.documentation = documentation
        self.value = 0.0
        self._lock = threading.Lock()

    def inc(self, amount: float = 1.0) -> float:
        """Add ``amount`` and return the new total."""
        with self._lock:
            self.value += amount
            return self.value

    def reset(self) -> None:
        with self._lock:
            self.value = 0.0

    def render(self) -> str:
        return (
            f"# HELP {self.name} {self.documentation}\n"
            f"# TYPE {self.name} counter\n"
            f"{self.name} {self.value}\n"
        )


# Correlation id of the request being served, if any
correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "correlation_id",
    "message",
}


class JSONFormatter(logging.Formatter):
    """JSON log formatter including correlation id and ``extra`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        data = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                data[key] = value
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class CorrelationIdFilter(logging.Filter):
    """Inject correlation id from context into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get("")
        return True


handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
handler.addFilter(CorrelationIdFilter())


def configure_logging(level: str | None = None) -> None:
    """Route the root logger through the JSON handler."""
    level = (level or os.getenv("SORTEDSEARCH_LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, handlers=[handler], force=True)


logger = logging.getLogger("sortedsearch.observability")

# Counters
SEARCH_COUNTER = Counter("searches_total", "Number of searches performed")
SEARCH_MISS_COUNTER = Counter(
    "search_misses_total", "Number of searches that matched nothing"
)
HTTP_400_COUNTER = Counter("http_400_total", "Number of HTTP 400 responses")

COUNTERS = [
    SEARCH_COUNTER,
    SEARCH_MISS_COUNTER,
    HTTP_400_COUNTER,
]

THRESHOLDS = {
    "search_misses_total": int(os.getenv("SEARCH_MISS_ALERT_THRESHOLD", "0")),
    "http_400_total": int(os.getenv("HTTP_400_ALERT_THRESHOLD", "0")),
}


def _bump(counter: Counter) -> None:
    value = counter.inc()
    threshold = THRESHOLDS.get(counter.name) or 0
    # Warn once, when the total first reaches the threshold.
    if threshold and value - 1 < threshold <= value:
        logger.warning(
            f"{counter.name} threshold {threshold} reached",
            extra={"counter": counter.name, "value": value},
        )


def inc_search() -> None:
    SEARCH_COUNTER.inc()


def inc_search_miss() -> None:
    _bump(SEARCH_MISS_COUNTER)


def inc_http_400() -> None:
    _bump(HTTP_400_COUNTER)


def reset_counters() -> None:
    for counter in COUNTERS:
        counter.reset()


def generate_metrics() -> bytes:
    return "".join(counter.render() for counter in COUNTERS).encode()


CONTENT_TYPE_LATEST = "text/plain; version=0.0.4"


__all__ = [
    "correlation_id_ctx",
    "configure_logging",
    "inc_search",
    "inc_search_miss",
    "inc_http_400",
    "reset_counters",
    "generate_metrics",
    "CONTENT_TYPE_LATEST",
    "logger",
]
