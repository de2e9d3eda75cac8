from providers.base import IncidentSource
from providers.dashboard import DashboardSource

__all__ = ["IncidentSource", "DashboardSource"]
