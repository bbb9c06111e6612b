"""Command-line entry point.

Exit codes: ``0`` after a normal shutdown (or a successful ``--once``
cycle), ``1`` on configuration errors, ``2`` when a ``--once`` cycle could
not fetch the board.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
from collections.abc import Sequence

import aiohttp
from dotenv import find_dotenv, load_dotenv

from trellowatch import __version__
from trellowatch._transport import HttpTransport
from trellowatch.board import BoardFetcher
from trellowatch.config import MonitorConfig
from trellowatch.exceptions import MonitorConfigError
from trellowatch.health import HealthServer
from trellowatch.monitor import BoardMonitor, CycleReport
from trellowatch.notifier import Notifier
from trellowatch.state.store import SnapshotStore

_logger = logging.getLogger("trellowatch")

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_FETCH_FAILED = 2


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="trellowatch",
        description="Notify a phone number whenever cards move between lists on a Trello board.",
    )
    parser.add_argument("--env-file", help="Load environment variables from this file (default: nearest .env)")
    parser.add_argument("--state-dir", help="Directory for the snapshot and marker files (overrides STATE_DIR)")
    parser.add_argument("--once", action="store_true", help="Run a single poll cycle and exit")
    parser.add_argument(
        "--reset-state",
        action="store_true",
        help="Delete the stored snapshot first; the next cycle records the board without notifying",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _load_env_file(path: str | None) -> None:
    env_path = path or find_dotenv(usecwd=True)
    if not env_path:
        return
    if not load_dotenv(env_path, override=False) and path:
        _logger.warning("Environment file %s not found or empty", path)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _build_monitor(config: MonitorConfig, store: SnapshotStore, http: aiohttp.ClientSession) -> BoardMonitor:
    transport = HttpTransport(http, timeout=config.http_timeout)
    return BoardMonitor(config, store, BoardFetcher(config, transport), Notifier(config, transport))


async def _run_once(config: MonitorConfig, store: SnapshotStore) -> CycleReport:
    async with aiohttp.ClientSession() as http:
        return await _build_monitor(config, store, http).run_cycle()


async def _serve(config: MonitorConfig, store: SnapshotStore) -> None:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def _request_stop(signum: signal.Signals) -> None:
        _logger.info("Received %s, shutting down", signum.name)
        stop.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, _request_stop, signum)

    health = HealthServer(config)
    async with aiohttp.ClientSession() as http:
        monitor = _build_monitor(config, store, http)
        await health.start()
        monitor_task = asyncio.create_task(monitor.run(stop))
        stop_task = asyncio.create_task(stop.wait())
        try:
            await asyncio.wait({monitor_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
            await health.stop()
            try:
                await asyncio.wait_for(monitor_task, config.shutdown_grace)
            except TimeoutError:
                _logger.warning("Poll cycle still running after %.0f seconds, abandoning it", config.shutdown_grace)
        finally:
            stop_task.cancel()
            await health.stop()


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    _load_env_file(args.env_file)
    _configure_logging(args.verbose)

    overrides = {"state_dir": args.state_dir} if args.state_dir else {}
    try:
        config = MonitorConfig.from_env(**overrides)
    except MonitorConfigError as exc:
        _logger.error("%s", exc)
        _logger.error("Set them in the environment or in a .env file")
        return EXIT_CONFIG

    store = SnapshotStore(config.snapshot_path, config.marker_path)
    if args.reset_state:
        store.reset()

    _logger.info("Trello monitor %s started", __version__)
    _logger.info("Notifications will be sent to: %s", config.phone_number)

    if args.once:
        report = asyncio.run(_run_once(config, store))
        return EXIT_FETCH_FAILED if report.aborted else EXIT_OK

    asyncio.run(_serve(config, store))
    return EXIT_OK
