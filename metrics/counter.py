"""Labeled counters backed by prometheus_client"""
from typing import Dict, Mapping, Optional, Sequence, Tuple
from prometheus_client import Counter
from .exceptions import InvalidLabelError
from .models import MetricType, RequestLabels


class LabeledCounter:
    """Monotonic counter segmented by a fixed set of label names.

    Label tuples are created lazily on the first increment, so combinations
    that were never observed do not appear in the rendered output.
    """

    metric_type = MetricType.COUNTER

    def __init__(self, name: str, help_text: str, label_names: Sequence[str] = ()):
        self._name = name
        self._help_text = help_text
        self._label_names: Tuple[str, ...] = tuple(label_names)
        # Unregistered until handed to a MetricsRegistry
        self._counter = Counter(name, help_text, self._label_names, registry=None)

    @property
    def name(self) -> str:
        return self._name

    @property
    def help_text(self) -> str:
        return self._help_text

    @property
    def label_names(self) -> Tuple[str, ...]:
        return self._label_names

    @property
    def collector(self) -> Counter:
        """Underlying prometheus_client collector"""
        return self._counter

    def validate_labels(self, labels: Mapping[str, str]) -> Dict[str, str]:
        """Check that labels carry exactly the declared label names"""
        if set(labels) != set(self._label_names):
            raise InvalidLabelError(self._name, self._label_names, labels.keys())
        return {key: str(value) for key, value in labels.items()}

    def increment(self, labels: Optional[Mapping[str, str]] = None, amount: float = 1) -> None:
        """Increment the value of a label combination, creating it if absent"""
        labels = self.validate_labels(labels or {})
        if amount < 0:
            raise ValueError(f"Counter '{self._name}' can only be incremented by non-negative amounts")

        if self._label_names:
            self._counter.labels(**labels).inc(amount)
        else:
            self._counter.inc(amount)

    def get(self, labels: Optional[Mapping[str, str]] = None) -> Optional[float]:
        """Current value for a label combination, None if never observed"""
        wanted = self.validate_labels(labels or {})
        for family in self._counter.collect():
            total_name = f"{family.name}_total"
            for sample in family.samples:
                if sample.name == total_name and sample.labels == wanted:
                    return sample.value
        return None

    def reset(self) -> None:
        """Forget every observed label combination"""
        if self._label_names:
            self._counter.clear()
        else:
            self._counter.reset()


class RequestCounter(LabeledCounter):
    """HTTP requests counted by method and status"""

    NAME = "http_requests_total"
    HELP = "Total HTTP requests"
    LABEL_NAMES = ("method", "status")

    def __init__(self):
        super().__init__(self.NAME, self.HELP, self.LABEL_NAMES)

    def count(self, labels: RequestLabels) -> None:
        """Count one request"""
        self.increment(labels.as_dict())

    def value(self, labels: RequestLabels) -> Optional[float]:
        return self.get(labels.as_dict())
