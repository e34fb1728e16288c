"""Errors raised by the metrics registry and its metrics"""


class MetricsError(Exception):
    """Base class for metrics errors"""


class DuplicateNameError(MetricsError, ValueError):
    """A metric with the same name is already registered"""

    def __init__(self, name: str):
        super().__init__(f"Metric '{name}' is already registered")
        self.name = name


class InvalidLabelError(MetricsError, ValueError):
    """Label keys do not match the label names declared by the metric"""

    def __init__(self, metric_name: str, expected, received):
        self.metric_name = metric_name
        self.expected = tuple(expected)
        self.received = tuple(received)
        super().__init__(
            f"Invalid labels for '{metric_name}': "
            f"expected {sorted(self.expected)}, got {sorted(self.received)}"
        )


class InternalError(MetricsError):
    """Rendering the registry failed"""
