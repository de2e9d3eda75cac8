from models.incident import IncidentStatus, RawIncident
from models.timeline import DatedUpdate, EventTimeline, TimeInterval

__all__ = ["DatedUpdate", "EventTimeline", "IncidentStatus", "RawIncident", "TimeInterval"]
