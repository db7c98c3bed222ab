"""Entry point for thread-notifier."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from thread_notifier.aggregator import set_notification
from thread_notifier.config import Config, load_config
from thread_notifier.profiles import ProfileContributor
from thread_notifier.remote_profiles import RemoteProfileContributor
from thread_notifier.store import Store

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="thread-notifier",
        description="Classify stored thread items and record who should be notified.",
    )
    parser.add_argument(
        "item_ids",
        metavar="ITEM_ID",
        type=int,
        nargs="+",
        help="Id of a stored item to classify",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Path to config YAML (default: ~/.config/thread-notifier/config.yaml)",
    )
    parser.add_argument(
        "--database",
        metavar="PATH",
        default=None,
        help="Path to the SQLite database (overrides the config file)",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    return parser.parse_args(argv)


def build_contributors(config: Config) -> list[ProfileContributor]:
    """Profile contributors enabled by the configuration."""
    contributors: list[ProfileContributor] = []
    if config.profile_endpoint:
        contributors.append(
            RemoteProfileContributor(config.profile_endpoint, config.profile_timeout)
        )
    return contributors


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        level=getattr(logging, args.log_level),
    )

    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        logger.error("Config file not found: %s", exc)
        sys.exit(1)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    logger.info("Configuration loaded successfully")

    if args.database is not None:
        config.database = args.database

    store = Store(os.path.expanduser(config.database))
    store.init_schema()
    contributors = build_contributors(config)

    try:
        for item_id in args.item_ids:
            set_notification(
                item_id, store=store, config=config, contributors=contributors
            )
    finally:
        store.close()
