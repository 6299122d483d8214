"""Command-line entry point: poll one OpenF1 route target into a file."""

from __future__ import annotations

import argparse
from typing import Any, Sequence

from loguru import logger

from openf1_tap.config import AppConfig, default_config, load_config
from openf1_tap.data.endpoints import EndpointError, build_url, parse_param_value
from openf1_tap.data.openf1_client import OpenF1Client, OpenF1ClientError
from openf1_tap.data.poller import Poller, PollRequest
from openf1_tap.log import setup_logger
from openf1_tap.output import CSV, OUTPUT_FORMATS, PersistError, open_persister
from openf1_tap.routes import ROUTE_TARGETS, get_route_target

SHUTDOWN_GRACE_SECONDS = 5.0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openf1-tap",
        description="Poll an OpenF1 endpoint and append the records to a file.",
    )
    parser.add_argument("file_path", nargs="?", metavar="filePath", help="output file")
    parser.add_argument("route_target", nargs="?", metavar="routeTarget", help="route target name")
    parser.add_argument("interval", nargs="?", help="poll interval in milliseconds")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default=None, help="output format")
    parser.add_argument("--config", default=None, help="path to a YAML config file")
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="override or add a query parameter (repeatable)",
    )
    return parser


def _parse_interval(raw: str) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_overrides(endpoint: str, pairs: Sequence[str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise EndpointError(f"Malformed --param '{pair}', expected KEY=VALUE")
        overrides[key] = parse_param_value(endpoint, key, raw)
    return overrides


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.file_path or not args.route_target:
        parser.print_usage()
        return 1

    target = get_route_target(args.route_target)
    if target is None:
        print("Invalid route target")
        print("Valid route targets:\n" + "\n".join(ROUTE_TARGETS))
        return 0

    interval_ms = None
    if args.interval is not None:
        interval_ms = _parse_interval(args.interval)
        if interval_ms is None:
            print(f"Interval must be a positive integer number of milliseconds, got '{args.interval}'")
            parser.print_usage()
            return 1
    elif target.requires_interval:
        print(f"Route target '{target.name}' requires an interval in milliseconds")
        return 0

    try:
        config: AppConfig = load_config(args.config) if args.config else default_config()
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 1
    setup_logger(config.log.log_dir, config.log.level)

    output_format = args.format or config.output.format
    try:
        params = target.build_params(_parse_overrides(target.endpoint, args.param))
        url = build_url(target.endpoint, params, base_url=config.openf1.base_url)
        request = PollRequest(
            endpoint=target.endpoint,
            params=params,
            output_path=args.file_path,
            interval_ms=interval_ms,
            output_format=output_format,
        )
    except ValueError as exc:
        logger.error(f"Configuration error: {exc}")
        return 1

    logger.info(f"Target {target.name} -> {url} ({output_format} output to {args.file_path})")

    try:
        persister = open_persister(output_format, args.file_path, config.output.high_water_mark)
    except PersistError as exc:
        logger.error(str(exc))
        return 1

    client = OpenF1Client(base_url=config.openf1.base_url, timeout_seconds=config.openf1.timeout_seconds)
    poller = Poller(client, persister, request)

    if not request.is_interval:
        try:
            poller.poll_once()
        except (OpenF1ClientError, PersistError) as exc:
            logger.error(f"Single-shot poll failed: {exc}")
            return 1
        finally:
            persister.close()
        if output_format == CSV:
            logger.info(f"Done writing {args.file_path}")
        return 0

    try:
        poller.run()
    except KeyboardInterrupt:
        logger.info("Interrupted, stopping poller")
    finally:
        poller.stop()
        poller.join(timeout=SHUTDOWN_GRACE_SECONDS)
        try:
            persister.close()
        except PersistError as exc:
            logger.error(str(exc))
    return 0


__all__ = ["main"]
