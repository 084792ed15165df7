from __future__ import annotations

import hashlib
import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable

from .metrics import Counter, Histogram

logger = logging.getLogger("craftmatch")
logger.setLevel(logging.INFO)

MATCH_REQUESTS = Counter("match_requests_total", "Match requests served", labelnames=("kind",))
MATCH_INVALID_INPUT = Counter(
    "match_invalid_input_total", "Match requests rejected for unusable item lists", labelnames=("kind",)
)
MATCH_LATENCY_MS = Histogram(
    "match_latency_ms",
    "Matching and ranking latency in milliseconds",
    buckets=(1, 2, 5, 10, 25, 50, 100, 250, 500),
    labelnames=("kind",),
)
MATCH_RESULTS = Histogram(
    "match_results_returned",
    "Number of ranked results returned per request",
    buckets=(0, 1, 3, 5, 10, 15, 25, 50),
    labelnames=("kind",),
)


class _Span:
    def __init__(self, name: str):
        self.name = name

    def __enter__(self) -> "_Span":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def set_attribute(self, key: str, value: Any) -> None:
        logger.debug("span_attribute", extra={"span": self.name, key: value})


class _Tracer:
    def start_as_current_span(self, name: str) -> _Span:
        return _Span(name)


tracer = _Tracer()


def record_match(kind: str, latency_ms: float, results: int) -> None:
    MATCH_REQUESTS.labels(kind=kind).inc()
    MATCH_LATENCY_MS.labels(kind=kind).observe(latency_ms)
    MATCH_RESULTS.labels(kind=kind).observe(results)


def record_invalid_input(kind: str) -> None:
    MATCH_INVALID_INPUT.labels(kind=kind).inc()


@contextmanager
def span(name: str, **attributes: Any):
    with tracer.start_as_current_span(name) as current_span:
        for key, value in attributes.items():
            current_span.set_attribute(key, value)
        yield current_span


def hash_items(items: Iterable[str]) -> str:
    joined = "|".join(sorted(items))
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def structured_log(event: str, **payload: Any) -> None:
    entry: Dict[str, Any] = {"event": event, **payload}
    logger.info(json.dumps(entry, default=str))
