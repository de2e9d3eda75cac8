from consumers.archive import ArchiveConsumer, IncidentArchive
from consumers.base import IncidentConsumer
from consumers.console import ConsoleConsumer

__all__ = ["ArchiveConsumer", "ConsoleConsumer", "IncidentArchive", "IncidentConsumer"]
