"""Metric data models"""
from dataclasses import dataclass, field
from typing import Dict
from enum import Enum


class MetricType(Enum):
    """Prometheus metric types exposed by this service"""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass
class MetricValue:
    """Single sampled value produced by a runtime collector"""
    name: str
    value: float
    help_text: str
    labels: Dict[str, str] = field(default_factory=dict)
    metric_type: MetricType = MetricType.GAUGE

    def __post_init__(self):
        # Ensure labels is never None
        if self.labels is None:
            self.labels = {}


@dataclass(frozen=True)
class RequestLabels:
    """Label set of the HTTP request counter"""
    method: str
    status: str

    def as_dict(self) -> Dict[str, str]:
        return {"method": self.method, "status": self.status}
