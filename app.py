"""
app.py

Responsibility: Command-line entry point. Loads configuration, sets up
logging, wires the HTTP client, provider, IP service, engine and scheduler
together, and runs until a termination signal arrives.
Does NOT: contain DNS business logic or scheduling decisions.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import httpx

from config import AppConfig, load_config
from exceptions import ConfigError
from logger import LOG_DIR, configure_logging
from providers.cloudflare_client import CloudflareClient
from scheduler import Scheduler, shutdown_signal
from services.ip_service import IpService
from services.reconciliation_engine import ReconciliationEngine

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_CYCLE_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    """
    Builds the command-line parser.

    Returns:
        An ArgumentParser for --config, --once, --log-level and --log-dir.
    """
    parser = argparse.ArgumentParser(
        prog="cloudflare-ddns",
        description="Keep Cloudflare A records pointed at this host's public IPv4 address.",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to the JSON config file (default: $DDNS_CONFIG or config/config.json).",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single reconciliation cycle and exit.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log verbosity (default: INFO).",
    )
    parser.add_argument(
        "--log-dir",
        default=LOG_DIR,
        help="Directory for the rotating log file; empty string disables it.",
    )
    return parser


def build_scheduler(config: AppConfig, http_client: httpx.AsyncClient) -> Scheduler:
    """
    Wires all collaborators for the given configuration.

    Args:
        config: The validated application configuration.
        http_client: A long-lived httpx.AsyncClient shared by all services.

    Returns:
        A Scheduler in the IDLE state.
    """
    provider = CloudflareClient(
        http_client=http_client,
        api_token=config.api_token,
        base_url=config.api_base_url,
    )
    ip_service = IpService(http_client=http_client, url=config.ip_service_url)
    engine = ReconciliationEngine(provider, ip_service)
    return Scheduler(engine, config)


async def run(config: AppConfig, once: bool = False) -> int:
    """
    Runs the updater until shutdown, or for a single cycle when once is set.

    Args:
        config: The validated application configuration.
        once: Run one cycle and return instead of looping.

    Returns:
        The process exit code.
    """
    async with httpx.AsyncClient(timeout=config.request_timeout) as http_client:
        scheduler = build_scheduler(config, http_client)

        if once:
            report = await scheduler.run_once()
            return EXIT_OK if report is not None and report.ok else EXIT_CYCLE_FAILED

        await scheduler.run(shutdown_signal())
        return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """
    Console entry point.

    Args:
        argv: Command-line arguments; defaults to sys.argv[1:].

    Returns:
        The process exit code: 0 on success, 1 on a configuration error,
        2 when a --once cycle had failures.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_dir or None)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    logger.info("DDNS updater started for %s.", ", ".join(d.name for d in config.domains))
    return asyncio.run(run(config, once=args.once))


if __name__ == "__main__":
    sys.exit(main())
