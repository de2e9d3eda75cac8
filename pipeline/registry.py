from __future__ import annotations

from providers.base import IncidentSource


class SourceRegistry:
    """Central registry of incident sources.

    Adding a new source requires only instantiating it and calling
    ``register()``; the scheduler picks it up on start.
    """

    def __init__(self) -> None:
        self._sources: list[IncidentSource] = []

    def register(self, source: IncidentSource) -> None:
        self._sources.append(source)

    @property
    def sources(self) -> list[IncidentSource]:
        return list(self._sources)
