"""
Command line entry point.

    season-spillover check-config config/settings.yaml
    season-spillover simulate scenario.yaml --config config/settings.yaml
    season-spillover inspect --config config/settings.yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_CONFIG_PATH, ConfigError, Settings
from .gamedate import add_days
from .simulation import Scenario, ScenarioError, Simulation, format_day


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def cmd_check_config(args: argparse.Namespace) -> int:
    try:
        settings = Settings.from_yaml(args.config)
    except ConfigError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return 1

    print(f"Watch rule: {settings.watch_rule.value}")
    for season, grace in settings.grace.describe().items():
        print(f"  {season:<7} {grace}")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    try:
        settings = Settings.from_yaml(args.config)
        scenario = Scenario.from_yaml(args.scenario)
    except (ConfigError, ScenarioError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _setup_logging(args.log_level or settings.log_level)
    sim = Simulation(scenario, settings)
    for log in sim.run(args.days):
        print(format_day(log))
    return 0


def cmd_inspect(args: argparse.Namespace) -> int:
    """Dry run against the live game: show what tonight's pass would kill."""
    from .bridge import BridgeError, SMAPIBridgeClient
    from .farm.inspector import CropInspector
    from .farm.models import iter_planted_crops
    from .policy.grace import GracePolicy

    try:
        settings = Settings.from_yaml(args.config)
    except ConfigError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return 1

    _setup_logging(args.log_level or settings.log_level)
    inspector = CropInspector(GracePolicy(settings.grace), settings.watch_rule)
    client = SMAPIBridgeClient(settings.bridge_url, settings.bridge_timeout)
    try:
        today = client.current_date()
        upcoming = add_days(today, 1)
        farm = client.get_farm()
    except BridgeError as e:
        print(f"Bridge error: {e}", file=sys.stderr)
        return 1
    finally:
        client.close()

    active = inspector.policy.any_grace_active(upcoming)
    print(f"Tomorrow: {upcoming} (grace {'active' if active else 'inactive'})")
    for crop in iter_planted_crops(farm):
        verdict = "kill" if active and inspector.should_kill(crop, upcoming) else "keep"
        watched = " [watched]" if inspector.is_suspicious(crop, today.season) else ""
        print(f"  ({crop.x}, {crop.y}) {crop.name}: {verdict}{watched}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="season-spillover",
        description="Let crops outlive their season for a configurable grace period",
    )
    parser.add_argument("--log-level", default=None, help="Override log level from config")
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check-config", help="Validate a config file and show grace windows")
    check.add_argument("config", nargs="?", default=DEFAULT_CONFIG_PATH)
    check.set_defaults(func=cmd_check_config)

    simulate = sub.add_parser("simulate", help="Replay a scenario against an in-memory farm")
    simulate.add_argument("scenario", help="Path to scenario YAML")
    simulate.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Path to config file")
    simulate.add_argument("--days", "-d", type=int, default=None, help="Override scenario day count")
    simulate.set_defaults(func=cmd_simulate)

    inspect = sub.add_parser("inspect", help="Show tonight's decisions for the live farm")
    inspect.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Path to config file")
    inspect.set_defaults(func=cmd_inspect)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
