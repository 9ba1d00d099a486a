"""Checkout metrics built on the Python standard library.

Counters and histograms are kept in process‑wide objects and can be
exported in the Prometheus text exposition format with
:func:`generate_metrics_text`.  Only the metric types the checkout needs
are provided.
"""

from collections import defaultdict
from threading import Lock
from typing import Dict, Iterable, List, Tuple

LabelValues = Tuple[str, ...]


class Metric:
    """Base class for all metrics."""

    kind = "untyped"

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        self.name = name
        self.description = description
        self.label_names = list(label_names)
        self._lock = Lock()
        _METRIC_REGISTRY.append(self)

    def _key(self, labels: Dict[str, str]) -> LabelValues:
        return tuple(str(labels.get(k, "")) for k in self.label_names)

    def _format_labels(self, label_values: LabelValues, **more: str) -> str:
        pairs = [f'{name}="{value}"' for name, value in zip(self.label_names, label_values)]
        pairs.extend(f'{name}="{value}"' for name, value in more.items())
        if not pairs:
            return ""
        return "{" + ",".join(pairs) + "}"

    def _header(self) -> List[str]:
        return [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} {self.kind}"]

    def reset(self) -> None:
        raise NotImplementedError

    def to_prometheus(self) -> List[str]:
        raise NotImplementedError


class Counter(Metric):
    """Monotonic counter.  ``inc(amount, **labels)`` adds to the labelled value.

    ``CHECKOUT_ERROR_TOTAL.inc(type="empty_cart")``
    """

    kind = "counter"

    def __init__(self, name: str, description: str, label_names: Iterable[str] = ()):
        super().__init__(name, description, label_names)
        self._values: Dict[LabelValues, float] = defaultdict(float)

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        if amount < 0:
            raise ValueError("Counters can only increase.")
        with self._lock:
            self._values[self._key(labels)] += amount

    def value(self, **labels: str) -> float:
        with self._lock:
            return self._values.get(self._key(labels), 0.0)

    def reset(self) -> None:
        with self._lock:
            self._values.clear()

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        with self._lock:
            for label_values, value in self._values.items():
                lines.append(f"{self.name}{self._format_labels(label_values)} {value}")
        return lines


class Histogram(Metric):
    """Histogram with fixed upper‑bound buckets.

    Observations above the largest bucket only show up in ``+Inf``.
    """

    kind = "histogram"

    def __init__(self, name: str, description: str, label_names: Iterable[str] = (),
                 buckets: Iterable[float] = (0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0)):
        super().__init__(name, description, label_names)
        self.buckets = sorted(float(b) for b in buckets)
        self._counts: Dict[LabelValues, List[int]] = defaultdict(lambda: [0] * len(self.buckets))
        self._sums: Dict[LabelValues, float] = defaultdict(float)
        self._totals: Dict[LabelValues, int] = defaultdict(int)

    def observe(self, value: float, **labels: str) -> None:
        key = self._key(labels)
        with self._lock:
            for idx, upper in enumerate(self.buckets):
                if value <= upper:
                    self._counts[key][idx] += 1
            self._totals[key] += 1
            self._sums[key] += float(value)

    def count(self, **labels: str) -> int:
        with self._lock:
            return self._totals.get(self._key(labels), 0)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._sums.clear()
            self._totals.clear()

    def to_prometheus(self) -> List[str]:
        lines = self._header()
        with self._lock:
            for label_values, total in self._totals.items():
                # Bucket counts are already cumulative: each observation was
                # counted in every bucket whose bound it fits under.
                for idx, upper in enumerate(self.buckets):
                    labels = self._format_labels(label_values, le=str(upper))
                    lines.append(f"{self.name}_bucket{labels} {self._counts[label_values][idx]}")
                labels = self._format_labels(label_values, le="+Inf")
                lines.append(f"{self.name}_bucket{labels} {total}")
                plain = self._format_labels(label_values)
                lines.append(f"{self.name}_sum{plain} {self._sums[label_values]}")
                lines.append(f"{self.name}_count{plain} {total}")
        return lines


_METRIC_REGISTRY: List[Metric] = []


def generate_metrics_text() -> bytes:
    """Generate the text representation of all registered metrics."""
    lines: List[str] = []
    for metric in _METRIC_REGISTRY:
        lines.extend(metric.to_prometheus())
    return "\n".join(lines).encode("utf-8")


def reset_metrics() -> None:
    """Zero every registered metric.  Used by tests."""
    for metric in _METRIC_REGISTRY:
        metric.reset()


# -----------------------------------------------------------------------------
# Metrics recorded by the checkout processor.
# -----------------------------------------------------------------------------

# Finished checkouts, labelled by outcome ("success" or "failure")
CHECKOUT_TOTAL = Counter(
    name="checkout_total",
    description="Total number of checkout attempts",
    label_names=["outcome"],
)

# Failed checkouts, labelled by the error code of the raised exception
CHECKOUT_ERROR_TOTAL = Counter(
    name="checkout_error_total",
    description="Total number of checkout errors, labelled by type",
    label_names=["type"],
)

CHECKOUT_DURATION_SECONDS = Histogram(
    name="checkout_duration_seconds",
    description="Duration of checkout operations in seconds",
)

SHIPPED_UNITS_TOTAL = Counter(
    name="shipped_units_total",
    description="Total number of physical units placed on shipment manifests",
)
