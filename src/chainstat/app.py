from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

from .config import load_settings
from .di import AppContainer, build_container
from .logging import configure_logging
from .runtime import run

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point supporting both CLI commands and scheduler mode.

    - `chainstat` or `chainstat daemon`: collect on a fixed interval
    - `chainstat <typer-subcommand>`: run CLI mode (e.g. `chainstat status BTC`)
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv:
        return _run_daemon_mode([])

    if argv[0] == "daemon":
        return _run_daemon_mode(argv[1:])

    return _run_cli_mode(argv)


def _run_daemon_mode(argv: list[str]) -> int:
    """Run the periodic collector."""
    parser = argparse.ArgumentParser(
        prog="chainstat daemon", description="Collect deposit/withdraw status on a fixed interval"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file (default: CHAINSTAT_CONFIG or ./config.yml)",
    )

    args = parser.parse_args(argv)
    settings = load_settings(args.config)
    configure_logging(settings.log_dir)

    logger.info("chainstat daemon booting (env=%s, data_dir=%s)", settings.env, settings.data_dir)
    asyncio.run(_serve(settings))
    logger.info("chainstat daemon exit")

    return 0


async def _serve(settings) -> None:
    container: AppContainer = build_container(settings)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, container.shutdown.set)
        except (NotImplementedError, RuntimeError):
            # Not available on every platform (e.g. Windows event loops)
            pass

    await run(container)


def _run_cli_mode(argv: list[str]) -> int:
    """Run in CLI mode using Typer."""
    try:
        configure_logging()

        # Import CLI app here to avoid circular import
        from .cli import run_cli
        run_cli(argv)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.error("CLI error: %s", e, exc_info=True)
        return 1
