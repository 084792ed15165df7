from __future__ import annotations

import threading
from typing import Dict, Iterable, Iterator, List, Tuple

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

Sample = Tuple[str, Dict[str, str], float]
LabelKey = Tuple[str, ...]


class Registry:
    def __init__(self) -> None:
        self._metrics: List["_Metric"] = []

    def register(self, metric: "_Metric") -> None:
        if any(existing.name == metric.name for existing in self._metrics):
            raise ValueError(f"Metric already registered: {metric.name}")
        self._metrics.append(metric)

    def expose(self) -> bytes:
        lines: List[str] = []
        for metric in self._metrics:
            lines.append(f"# HELP {metric.name} {metric.documentation}")
            lines.append(f"# TYPE {metric.name} {metric.kind}")
            for sample_name, labels, value in metric.samples():
                if labels:
                    rendered = ",".join(f'{key}="{val}"' for key, val in sorted(labels.items()))
                    lines.append(f"{sample_name}{{{rendered}}} {value}")
                else:
                    lines.append(f"{sample_name} {value}")
        return "\n".join(lines).encode("utf-8")


REGISTRY = Registry()


class _Metric:
    kind = "untyped"

    def __init__(
        self,
        name: str,
        documentation: str,
        labelnames: Iterable[str] = (),
        registry: Registry = REGISTRY,
    ):
        self.name = name
        self.documentation = documentation
        self.labelnames: LabelKey = tuple(labelnames)
        self._lock = threading.Lock()
        registry.register(self)

    def _key(self, labels: Dict[str, str]) -> LabelKey:
        if set(labels) != set(self.labelnames):
            raise ValueError(
                f"{self.name} expects labels {sorted(self.labelnames)}, got {sorted(labels)}"
            )
        return tuple(str(labels[name]) for name in self.labelnames)

    def _label_dict(self, key: LabelKey) -> Dict[str, str]:
        return dict(zip(self.labelnames, key))

    def samples(self) -> Iterator[Sample]:
        raise NotImplementedError


class _BoundCounter:
    def __init__(self, parent: "Counter", key: LabelKey):
        self._parent = parent
        self._key = key

    def inc(self, amount: float = 1.0) -> None:
        self._parent._add(self._key, amount)


class Counter(_Metric):
    kind = "counter"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._values: Dict[LabelKey, float] = {}

    def _add(self, key: LabelKey, amount: float) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase")
        with self._lock:
            self._values[key] = self._values.get(key, 0.0) + amount

    def inc(self, amount: float = 1.0) -> None:
        self._add(self._key({}), amount)

    def labels(self, **labels: str) -> _BoundCounter:
        return _BoundCounter(self, self._key(labels))

    def samples(self) -> Iterator[Sample]:
        for key, value in self._values.items():
            yield self.name, self._label_dict(key), value


class _BoundHistogram:
    def __init__(self, parent: "Histogram", key: LabelKey):
        self._parent = parent
        self._key = key

    def observe(self, value: float) -> None:
        self._parent._observe(self._key, value)


class Histogram(_Metric):
    kind = "histogram"

    def __init__(self, name: str, documentation: str, buckets: Iterable[float], **kwargs):
        super().__init__(name, documentation, **kwargs)
        bounds = tuple(sorted(float(bound) for bound in buckets))
        if not bounds or bounds[-1] != float("inf"):
            bounds += (float("inf"),)
        self._bounds = bounds
        self._counts: Dict[LabelKey, List[int]] = {}
        self._sums: Dict[LabelKey, float] = {}

    def _observe(self, key: LabelKey, value: float) -> None:
        with self._lock:
            counts = self._counts.setdefault(key, [0] * len(self._bounds))
            for idx, upper in enumerate(self._bounds):
                if value <= upper:
                    counts[idx] += 1
                    break
            self._sums[key] = self._sums.get(key, 0.0) + value

    def observe(self, value: float) -> None:
        self._observe(self._key({}), value)

    def labels(self, **labels: str) -> _BoundHistogram:
        return _BoundHistogram(self, self._key(labels))

    def samples(self) -> Iterator[Sample]:
        for key, counts in self._counts.items():
            labels = self._label_dict(key)
            cumulative = 0
            for upper, count in zip(self._bounds, counts):
                cumulative += count
                le = "+Inf" if upper == float("inf") else f"{upper:g}"
                yield f"{self.name}_bucket", {**labels, "le": le}, cumulative
            yield f"{self.name}_count", labels, cumulative
            yield f"{self.name}_sum", labels, self._sums.get(key, 0.0)


def generate_latest(registry: Registry = REGISTRY) -> bytes:
    return registry.expose()
