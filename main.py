"""Service Availability -- entry point.

Assembles the ingestion pipeline around the timeline engine:

    Source workers (one asyncio task per source)
        -> per-incident timeline parse
        -> dedup
        -> EventBus (asyncio.Queue fan-out)
        -> Consumer tasks (react to queue.get())

A shared httpx.AsyncClient is injected into all sources.
A semaphore inside the scheduler caps concurrent network fetches.

With ``--once`` the dashboard is fetched a single time and the parsed,
filtered incidents are printed as JSON or CSV instead.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

from consumers.archive import ArchiveConsumer, IncidentArchive
from consumers.console import ConsoleConsumer
from export import OUTPUT_FORMATS, render
from pipeline.dedup import DeduplicationStore
from pipeline.event_bus import EventBus
from pipeline.parse import parse_batch
from pipeline.registry import SourceRegistry
from pipeline.scheduler import Scheduler
from providers.dashboard import DashboardSource
from timeline.config import TimelineConfig, load_config

log = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract outage timelines from the service health dashboard"
    )
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--once", action="store_true", help="Fetch once and print the export")
    parser.add_argument("--output", choices=OUTPUT_FORMATS, default="json")
    parser.add_argument("--services", default="", help="Comma separated service names")
    parser.add_argument("--regions", default="", help="Comma separated regions")
    parser.add_argument("--start", type=int, default=0, help="Earliest posting time (epoch seconds)")
    parser.add_argument("--end", type=int, default=0, help="Latest posting time (epoch seconds)")
    return parser.parse_args(argv)


async def run(config: TimelineConfig) -> None:
    async with httpx.AsyncClient(timeout=30.0) as client:
        bus = EventBus()

        registry = SourceRegistry()
        registry.register(DashboardSource(client=client, config=config))

        scheduler = Scheduler(
            registry=registry,
            dedup=DeduplicationStore(),
            bus=bus,
            config=config,
            concurrency_limit=20,
        )

        consumers = [
            ConsoleConsumer(queue=bus.subscribe()),
            ArchiveConsumer(queue=bus.subscribe(), archive=IncidentArchive(config)),
        ]

        tasks = [
            asyncio.create_task(scheduler.run(), name="scheduler"),
            *(
                asyncio.create_task(c.run(), name=type(c).__name__)
                for c in consumers
            ),
        ]

        await asyncio.gather(*tasks)


async def export_once(config: TimelineConfig, args: argparse.Namespace) -> str:
    async with httpx.AsyncClient(timeout=30.0) as client:
        raw = await DashboardSource(client=client, config=config).fetch_incidents()

    result = parse_batch(raw, config)
    log.info(
        "Parsed %d incident(s), %d failure(s), %d without stated window",
        len(result.parsed),
        len(result.failures),
        result.missed,
    )

    archive = IncidentArchive(config)
    for incident in result.parsed:
        archive.add(incident)

    selected = archive.query(
        services=args.services.split(","),
        regions=args.regions.split(","),
        start=args.start,
        end=args.end,
    )
    return render(selected, args.output)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    args = parse_args(argv)
    config = load_config(args.config)

    try:
        if args.once:
            print(asyncio.run(export_once(config, args)))
        else:
            asyncio.run(run(config))
    except KeyboardInterrupt:
        print("\nShutting down.")


if __name__ == "__main__":
    main()
