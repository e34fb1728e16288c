"""Base collector class and interfaces"""
from abc import ABC, abstractmethod
from typing import Dict, List
from metrics.models import MetricValue


class BaseCollector(ABC):
    """Base class for runtime metric collectors registered with the default bundle"""

    # Series this collector may emit, mapped to their help text
    metric_names: Dict[str, str] = {}

    def __init__(self, config=None, name: str = "", help_text: str = ""):
        self.config = config
        self._name = name
        self._help_text = help_text

    @abstractmethod
    def collect(self) -> List[MetricValue]:
        """Collect metrics and return list of MetricValue objects"""
        pass

    async def start(self) -> None:
        """Start background work bound to the running event loop"""

    async def shutdown(self) -> None:
        """Stop background work"""

    @property
    def name(self) -> str:
        """Collector name for identification"""
        return self._name

    @property
    def help_text(self) -> str:
        """Help text describing what this collector does"""
        return self._help_text or f"{self.name} metrics collector"

    def is_enabled(self) -> bool:
        """Check if this collector is enabled"""
        if hasattr(self.config, 'is_collector_enabled'):
            return self.config.is_collector_enabled(self.name)
        return True
