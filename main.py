#!/usr/bin/env python3
"""
gnome-randr - Monitor layout control for GNOME (X11 and Wayland)
================================================================

Query and change the monitor configuration through Mutter's DisplayConfig
D-Bus interface.

Usage:
    python main.py [--config PATH] [--debug] [query|modify|adjust] ...

    Commands:
        query [CONNECTOR] [--summary]
                        Show the current configuration (default command)
        modify CONNECTOR [--rotate R] [--mode ID] [--scale S]
                         [--displace X,Y,S] [--primary] [--property NAME=VALUE]
                         [--persistent] [--strict] [--dry-run]
                        Change one monitor; changes apply in the order given
        adjust CONNECTOR --brightness B [--dry-run]
                        Set brightness (0.0-1.0) through the gamma ramp

Examples:
    gnome-randr modify eDP-1 --rotate left --primary
    gnome-randr modify HDMI-1 --displace 1920,0,1 --persistent
    gnome-randr modify HDMI-1 --displace=-1920,0,1   (use "=" when X is negative)
    gnome-randr adjust HDMI-1 --brightness 0.7
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, List

from gnome_randr.apply import (
    SetDisplacement, SetMode, SetOrientation, SetPrimary, SetProperty, SetScale,
    build_apply_configs, describe_action,
)
from gnome_randr.config import Config
from gnome_randr.errors import DisplayConfigError, InvalidArgumentError
from gnome_randr.formatting import format_display_config, format_pair
from gnome_randr.gamma import fit, generate
from gnome_randr.locator import find_crtc, search
from gnome_randr.models import Displacement, Orientation
from gnome_randr.transport import MutterDisplayConfig


def setup_logging(debug: bool = False, log_file: Optional[Path] = None):
    """Configure logging."""
    level = logging.DEBUG if debug else logging.WARNING

    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True,
    )

logger = logging.getLogger(__name__)


def _parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise InvalidArgumentError(f"not a number: {text!r}")


def _parse_property(text: str) -> SetProperty:
    name, sep, value = text.partition('=')
    if not sep or not name:
        raise InvalidArgumentError(f"property must be NAME=VALUE, got {text!r}")
    return SetProperty(name=name, value=value)


class CollectAction(argparse.Action):
    """Append a display action to ``namespace.actions``, keeping command-line order."""

    def __init__(self, option_strings, dest, build=None, **kwargs):
        self.build = build
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        actions = list(getattr(namespace, self.dest, None) or [])
        try:
            actions.append(self.build(values))
        except InvalidArgumentError as e:
            parser.error(f"{option_string}: {e}")
        setattr(namespace, self.dest, actions)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gnome-randr",
        description="Query and change monitor configuration on GNOME",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        '--config', '-c',
        type=Path,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--debug', '-d',
        action='store_true',
        help='Enable debug logging'
    )

    commands = parser.add_subparsers(dest='command')

    query = commands.add_parser('query', help='Show the current configuration (default)')
    query.add_argument('connector', nargs='?', help='Only show this connector, e.g. HDMI-1')
    query.add_argument('--summary', '-s', action='store_true',
                       help='Only list logical monitors')

    modify = commands.add_parser('modify', help='Change the configuration of one monitor')
    modify.add_argument('connector', help='Connector of the monitor to change, e.g. HDMI-1')
    modify.set_defaults(actions=[])
    modify.add_argument(
        '--rotate', '-r', dest='actions', action=CollectAction, metavar='ORIENTATION',
        build=lambda v: SetOrientation(Orientation.parse(v)),
        help='normal, left, right or inverted, optionally with ",flipped"'
    )
    modify.add_argument(
        '--mode', '-m', dest='actions', action=CollectAction, metavar='ID',
        build=lambda v: SetMode(v),
        help='Mode ID as listed by query'
    )
    modify.add_argument(
        '--scale', dest='actions', action=CollectAction, metavar='SCALE',
        build=lambda v: SetScale(_parse_float(v)),
        help='Scale of the logical monitor'
    )
    modify.add_argument(
        '--displace', dest='actions', action=CollectAction, metavar='X,Y,SCALE',
        build=lambda v: SetDisplacement(Displacement.parse(v)),
        help="Position and scale of the logical monitor; write --displace=X,Y,SCALE when X is negative"
    )
    modify.add_argument(
        '--primary', '-p', dest='actions', action=CollectAction, nargs=0,
        build=lambda v: SetPrimary(),
        help='Make this the primary monitor'
    )
    modify.add_argument(
        '--property', dest='actions', action=CollectAction, metavar='NAME=VALUE',
        build=_parse_property,
        help='Set a monitor property, e.g. underscanning=true'
    )
    modify.add_argument('--persistent', action='store_true', default=None,
                        help='Remember the layout for this set of monitors')
    modify.add_argument('--strict', action='store_true', default=None,
                        help='Refuse options that overwrite each other')
    modify.add_argument('--dry-run', action='store_true',
                        help='List changes without applying them')

    adjust = commands.add_parser('adjust', help='Adjust brightness through the gamma ramp')
    adjust.add_argument('connector', help='Connector of the monitor, e.g. HDMI-1')
    adjust.add_argument('--brightness', '-b', type=float, required=True,
                        help='Brightness between 0.0 and 1.0')
    adjust.add_argument('--dry-run', action='store_true',
                        help='Compute the new gamma ramp without writing it')

    return parser


def run_query(args, client: MutterDisplayConfig) -> int:
    display_config = client.fetch_display_config()
    connector = getattr(args, 'connector', None)
    if connector:
        logical_monitor, physical_monitor = search(display_config, connector)
        print(format_pair(logical_monitor, physical_monitor), end="")
    else:
        print(format_display_config(display_config, getattr(args, 'summary', False)), end="")
    return 0


def run_modify(args, config: Config, client: MutterDisplayConfig) -> int:
    display_config = client.fetch_display_config()

    if not args.actions:
        # Also verify the connector so typos are not reported as success
        search(display_config, args.connector)
        print("no changes made.")
        return 0

    strict = config.apply.strict if args.strict is None else args.strict
    persistent = config.apply.persistent if args.persistent is None else args.persistent

    for action in args.actions:
        print(describe_action(action))
    configs = build_apply_configs(display_config, args.connector, args.actions, strict=strict)

    if args.dry_run:
        print("dry run: no changes made.")
        return 0

    client.apply_configs(display_config.serial, persistent, configs)
    return 0


def run_adjust(args, client: MutterDisplayConfig) -> int:
    if not 0.0 <= args.brightness <= 1.0:
        raise InvalidArgumentError(f"brightness must be between 0.0 and 1.0, got {args.brightness}")

    resources = client.fetch_resources()
    crtc = find_crtc(resources, args.connector)
    ramp = client.fetch_gamma_ramp(resources.serial, crtc.id)
    ramp.validate()

    current = fit(ramp)
    print(f"current: {current}")
    wanted = current.with_brightness(args.brightness)
    print(f"setting brightness to {args.brightness}")
    new_ramp = generate(wanted, ramp.size)

    if args.dry_run:
        print("dry run: no changes made.")
        return 0

    client.write_gamma_ramp(resources.serial, crtc.id, new_ramp)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config(args.config)
    setup_logging(args.debug)
    if config.load() and config.logging.file:
        setup_logging(args.debug, config.logging.file)

    try:
        client = MutterDisplayConfig.connect(timeout_ms=config.dbus.timeout_ms)
        if args.command == 'modify':
            return run_modify(args, config, client)
        if args.command == 'adjust':
            return run_adjust(args, client)
        return run_query(args, client)
    except DisplayConfigError as e:
        print(f"fatal: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
