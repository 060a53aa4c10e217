"""CLI entrypoint for reading shared locations."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from locationsharing.client import LocationSharingClient
from locationsharing.common.config_loader import load_config
from locationsharing.common.constants import EXIT_HARD_FAIL, EXIT_NOT_FOUND, EXIT_SUCCESS
from locationsharing.common.errors import LocationSharingError, PersonNotFoundError
from locationsharing.common.logging import build_logger, log_event

COMMANDS = ("people", "self", "find", "check-session")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="locationsharing", description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--config", default="./config/locationsharing.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--cookies", default=None)
    parser.add_argument("--nickname", default=None)
    parser.add_argument("--fullname", default=None)
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARN", "ERROR"])
    args = parser.parse_args(argv)
    if args.command == "find" and not (args.nickname or args.fullname):
        parser.error("find requires --nickname or --fullname")
    return args


def build_client(args: argparse.Namespace) -> LocationSharingClient:
    overlay = Path(args.overlay_config) if args.overlay_config else None
    config = load_config(Path(args.config), overlay_path=overlay)
    if args.cookies:
        config = replace(config, cookies_file=Path(args.cookies))
    logger = build_logger(level=args.log_level or config.log_level, log_path=config.log_file)
    return LocationSharingClient(config, logger=logger)


def _emit(payload) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))
    sys.stdout.write("\n")


def execute_command(command: str, client: LocationSharingClient, args: argparse.Namespace) -> None:
    if command == "people":
        snapshot = client.fetch()
        _emit(
            {
                "self": snapshot.self_record.to_dict() if snapshot.self_record else None,
                "shared": [record.to_dict() for record in snapshot.shared],
            }
        )
    elif command == "self":
        _emit(client.get_authenticated_person().to_dict())
    elif command == "find":
        if args.nickname:
            record = client.get_person_by_nickname(args.nickname)
        else:
            record = client.get_person_by_fullname(args.fullname)
        _emit(record.to_dict())
    elif command == "check-session":
        client.check_session()
        _emit({"session": "ok"})
    else:
        raise ValueError(f"Unknown command: {command}")


def run_command(args: argparse.Namespace) -> int:
    client = build_client(args)
    with client:
        try:
            execute_command(args.command, client, args)
        except PersonNotFoundError as exc:
            log_event(client.logger, str(exc), event="COMMAND_FAIL", status="not_found", error_code=exc.error_code)
            return EXIT_NOT_FOUND
        except LocationSharingError as exc:
            log_event(client.logger, str(exc), event="COMMAND_FAIL", status="error", error_code=exc.error_code)
            return EXIT_HARD_FAIL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or sys.argv[1:])
    try:
        return run_command(args)
    except LocationSharingError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
