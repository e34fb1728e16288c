"""Metrics registry owning every metric exposed by the process"""
from typing import Any, Dict, Iterator, List, Optional
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from .counter import LabeledCounter
from .exceptions import DuplicateNameError, InternalError
from .models import MetricType, MetricValue
from collectors.base import BaseCollector
from collectors.event_loop import EventLoopLagCollector
from collectors.resources import ActiveResourcesCollector
from logging_config import get_logger


logger = get_logger(__name__)


def _new_family(metric: MetricValue, label_names: List[str]):
    if metric.metric_type == MetricType.COUNTER:
        return CounterMetricFamily(metric.name, metric.help_text, labels=label_names)
    return GaugeMetricFamily(metric.name, metric.help_text, labels=label_names)


class CollectorBridge:
    """Expose the MetricValue samples of a BaseCollector to prometheus_client"""

    def __init__(self, collector: BaseCollector):
        self.collector = collector

    def describe(self):
        # Reserve every declared series name, even before the first sample
        return [GaugeMetricFamily(name, help_text) for name, help_text in self.collector.metric_names.items()]

    def collect(self):
        # Group metrics by name so each family gets a single HELP/TYPE block
        families = {}
        label_names_by_family = {}
        for metric in self.collector.collect():
            if metric.name not in families:
                label_names_by_family[metric.name] = sorted(metric.labels)
                families[metric.name] = _new_family(metric, label_names_by_family[metric.name])
            label_values = [metric.labels.get(label, "") for label in label_names_by_family[metric.name]]
            families[metric.name].add_metric(label_values, metric.value)
        return list(families.values())


class MetricsRegistry:
    """Central registry for all metrics and runtime collectors.

    Metric names and collector keys live in separate namespaces; clashes
    between the series they expose are caught by the wrapped
    prometheus_client CollectorRegistry.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, config=None):
        self.config = config
        self._registry = CollectorRegistry(auto_describe=True)
        self.metrics: Dict[str, LabeledCounter] = {}
        self.collectors: Dict[str, Any] = {}
        # Collector key -> object registered with prometheus_client
        self._collector_entries: Dict[str, Any] = {}

    def _register_series(self, name: str, collector) -> None:
        try:
            self._registry.register(collector)
        except ValueError as e:
            raise DuplicateNameError(name) from e

    def register(self, metric: LabeledCounter) -> LabeledCounter:
        """Register a metric, failing if its name is already taken"""
        if metric.name in self.metrics:
            raise DuplicateNameError(metric.name)
        self._register_series(metric.name, metric.collector)
        self.metrics[metric.name] = metric
        logger.info(
            "Registered metric",
            metric_name=metric.name,
            metric_type=metric.metric_type.value,
            label_names=list(metric.label_names),
            event_type="metric_registered"
        )
        return metric

    def _add_collector(self, name: str, collector, entry) -> None:
        if name in self.collectors:
            raise DuplicateNameError(name)
        self._register_series(name, entry)
        self.collectors[name] = collector
        self._collector_entries[name] = entry

    def register_collector(self, collector: BaseCollector) -> BaseCollector:
        """Register a runtime collector under its collector name"""
        if not isinstance(collector, BaseCollector):
            raise ValueError("Collector must inherit from BaseCollector")

        self._add_collector(collector.name, collector, CollectorBridge(collector))
        logger.info(f"Registered collector: {collector.name}")
        return collector

    def unregister_collector(self, name: str) -> None:
        """Remove a collector by key"""
        entry = self._collector_entries.pop(name)
        self._registry.unregister(entry)
        del self.collectors[name]

    def _collector_enabled(self, name: str) -> bool:
        if self.config is not None and hasattr(self.config, 'is_collector_enabled'):
            return self.config.is_collector_enabled(name)
        return True

    def collect_default_metrics(self) -> None:
        """Register the standard bundle of process and runtime metrics.

        The exact series depend on the platform: process metrics are only
        available where /proc exists and GC metrics only on CPython.
        Collectors disabled in the config are skipped. If any member clashes
        with an existing series, nothing from the bundle stays registered.
        """
        candidates = []
        builtin = (
            ("process", ProcessCollector(registry=None)),
            ("platform", PlatformCollector(registry=None)),
            # GCCollector always registers itself, so hand it a throwaway registry
            ("gc", GCCollector(registry=CollectorRegistry())),
        )
        for name, collector in builtin:
            if self._collector_enabled(name):
                candidates.append((name, collector, collector))

        for collector in (EventLoopLagCollector(self.config), ActiveResourcesCollector(self.config)):
            if collector.is_enabled():
                candidates.append((collector.name, collector, CollectorBridge(collector)))

        added = []
        try:
            for name, collector, entry in candidates:
                self._add_collector(name, collector, entry)
                added.append(name)
        except DuplicateNameError:
            for name in added:
                self.unregister_collector(name)
            raise

        logger.info("Default metrics enabled", collectors=added, event_type="default_metrics")

    @property
    def runtime_collectors(self) -> List[BaseCollector]:
        """Collectors with background work tied to the event loop"""
        return [c for c in self.collectors.values() if isinstance(c, BaseCollector)]

    def get(self, name: str) -> Optional[LabeledCounter]:
        """Get metric by name"""
        return self.metrics.get(name)

    def names(self) -> List[str]:
        """Names of all registered metrics in registration order"""
        return list(self.metrics)

    def collector_names(self) -> List[str]:
        """Keys of all registered collectors in registration order"""
        return list(self.collectors)

    def unregister(self, name: str) -> None:
        """Remove a metric by name"""
        metric = self.metrics.pop(name)
        self._registry.unregister(metric.collector)

    def reset(self) -> None:
        """Reset every registered counter"""
        for metric in self.metrics.values():
            metric.reset()

    def collector_status(self) -> Dict[str, Dict]:
        """Get status information for registered metrics and collectors"""
        return {
            "metrics": {
                name: {"type": metric.metric_type.value, "help": metric.help_text}
                for name, metric in self.metrics.items()
            },
            "collectors": {
                name: {
                    "class": collector.__class__.__name__,
                    "help": getattr(collector, 'help_text', name),
                }
                for name, collector in self.collectors.items()
            },
        }

    def render(self) -> bytes:
        """Serialize the current values in the Prometheus text exposition format"""
        try:
            return generate_latest(self._registry)
        except Exception as e:
            raise InternalError(f"Failed to render metrics: {e}") from e

    def render_lines(self) -> Iterator[str]:
        """Iterate over the lines of the rendered exposition"""
        yield from self.render().decode("utf-8").splitlines()
