"""Command line interface for Bill Effect."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

from .config import load_config
from .core.errors import BillEffectError
from .playback import PlaybackEngine
from .runtime import create_resources
from .session import SimulationSession
from .store import AppStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate the downstream effects of a bill across US states")
    parser.add_argument("--config", type=Path, help="Path to an explicit configuration file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ui_parser = subparsers.add_parser("ui", help="Start the interactive map and timeline")
    ui_parser.add_argument("--host", default="127.0.0.1", help="Host interface for the UI server")
    ui_parser.add_argument("--port", type=int, default=8080, help="Port for the UI server")

    simulate_parser = subparsers.add_parser("simulate", help="Analyse a bill file and print the simulated events")
    simulate_parser.add_argument("file", type=Path, help="Bill as PDF, plain text or Markdown")
    simulate_parser.add_argument(
        "--offline",
        action="store_true",
        help="Use the offline analyst even if an API key is configured",
    )
    return parser


async def _simulate(session: SimulationSession, path: Path) -> int:
    try:
        await session.load_file(path.name, path.read_bytes())
    except BillEffectError as exc:
        LOGGER.error("Could not load %s: %s", path, exc)
        return 1
    if not await session.start_simulation():
        LOGGER.error("Simulation failed: %s", session.last_error)
        return 1
    for event in session.store.events:
        print(json.dumps(event.to_dict(), ensure_ascii=False))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)

    if args.command == "simulate":
        if args.offline:
            config.analysis.mode = "local"
        config.analysis.analysis_delay = 0.0
        config.analysis.simulation_delay = 0.0
        try:
            resources = create_resources(config)
        except BillEffectError as exc:
            LOGGER.error("%s", exc)
            return 1
        try:
            store = AppStore(PlaybackEngine(horizon_years=config.playback.horizon_years))
            session = SimulationSession(
                store=store,
                analyst=resources.analyst,
                pdf_extractor=resources.pdf_extractor,
                remote=resources.remote,
            )
            return asyncio.run(_simulate(session, args.file))
        finally:
            resources.close()
    if args.command == "ui":
        from .ui import run_ui

        run_ui(config, host=args.host, port=args.port, config_path=args.config)
        return 0
    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
