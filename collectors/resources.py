"""Active runtime resources collector"""
import asyncio
from typing import List
import psutil
from .base import BaseCollector
from metrics.models import MetricValue, MetricType


class ActiveResourcesCollector(BaseCollector):
    """Report threads and asyncio tasks alive in this process"""

    THREADS_METRIC = "process_threads"
    TASKS_METRIC = "python_asyncio_tasks"
    metric_names = {
        THREADS_METRIC: "Number of OS threads in the process",
        TASKS_METRIC: "Number of asyncio tasks not yet done on the running loop",
    }

    def __init__(self, config=None):
        super().__init__(config, "resources", "Active threads and asyncio tasks")
        self._process = psutil.Process()

    def collect(self) -> List[MetricValue]:
        metrics = []

        try:
            metrics.append(MetricValue(
                name=self.THREADS_METRIC,
                value=self._process.num_threads(),
                help_text=self.metric_names[self.THREADS_METRIC],
                metric_type=MetricType.GAUGE
            ))
        except psutil.Error:
            pass

        try:
            tasks = asyncio.all_tasks()
        except RuntimeError:
            # No running loop in this thread
            tasks = None
        if tasks is not None:
            metrics.append(MetricValue(
                name=self.TASKS_METRIC,
                value=len(tasks),
                help_text=self.metric_names[self.TASKS_METRIC],
                metric_type=MetricType.GAUGE
            ))

        return metrics
