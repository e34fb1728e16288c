"""Event loop lag collector"""
import asyncio
from typing import List, Optional
from .base import BaseCollector
from metrics.models import MetricValue, MetricType
from logging_config import get_logger


logger = get_logger(__name__)

DEFAULT_PRECISION = 0.01


class EventLoopLagCollector(BaseCollector):
    """Measure how late the event loop wakes up a sleeping task"""

    LAG_METRIC = "python_eventloop_lag_seconds"
    metric_names = {LAG_METRIC: "Lag of the event loop in seconds"}

    def __init__(self, config=None):
        super().__init__(config, "eventloop", "Event loop scheduling lag")
        self.precision = getattr(config, 'eventloop_monitoring_precision', DEFAULT_PRECISION)
        self.last_lag: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._monitor_loop())
        logger.debug("Event loop monitor started", precision_seconds=self.precision,
                     event_type="eventloop_monitor_start")

    async def shutdown(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _monitor_loop(self):
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            await asyncio.sleep(self.precision)
            self.record(loop.time() - started)

    def record(self, elapsed: float) -> None:
        """Record one sleep cycle that took elapsed seconds"""
        self.last_lag = max(0.0, elapsed - self.precision)

    def collect(self) -> List[MetricValue]:
        if self.last_lag is None:
            return []

        return [
            MetricValue(
                name=self.LAG_METRIC,
                value=self.last_lag,
                help_text=self.metric_names[self.LAG_METRIC],
                metric_type=MetricType.GAUGE
            )
        ]
