from pipeline.dedup import DeduplicationStore
from pipeline.event_bus import EventBus
from pipeline.parse import BatchResult, parse_batch
from pipeline.registry import SourceRegistry
from pipeline.scheduler import Scheduler

__all__ = [
    "BatchResult",
    "DeduplicationStore",
    "EventBus",
    "Scheduler",
    "SourceRegistry",
    "parse_batch",
]
