#!/usr/bin/env python3
"""
g213-cols - Command Line Interface

Set the backlight of a Logitech G213 keyboard.
"""

import argparse
import logging
import sys

from g213cols.__version__ import __version__
from g213cols.commands import Status, build_command, run_command
from g213cols.device_g213 import G213Error, describe_device, find_g213_keyboard


def _setup_logging(verbose=0):
    """Configure logging from the -v count."""
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format='[%(levelname)s] %(name)s: %(message)s')
        logging.getLogger('usb').setLevel(logging.WARNING)
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(message)s')


def _build_parser():
    parser = argparse.ArgumentParser(
        prog="g213-cols",
        description="Logitech G213 keyboard colours",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Colours:
    ff0055, 0xf05         Hex (3 digits expand: f05 = ff0055)
    AliceBlue, alice blue X11 colour names (case and _ insensitive)
    random, randomx11     Any colour / any X11 named colour

Examples:
    g213-cols colour medium violet red
    g213-cols region 2 0x00ff00
    g213-cols regions red blue green white black
    g213-cols breathe 2000 dodger blue
    g213-cols cycle 5000
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v, -vv)"
    )
    parser.add_argument(
        "--timeout", "-t",
        type=int,
        metavar="MS",
        help="USB transfer timeout in milliseconds"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    colour_parser = subparsers.add_parser("colour", aliases=["color"],
                                          help="Set the whole keyboard to one colour")
    colour_parser.add_argument("colour", nargs="*", help="Colour (default: warm white)")

    region_parser = subparsers.add_parser("region", help="Set one region (1-5, 0 = all)")
    region_parser.add_argument("region", help="Region number")
    region_parser.add_argument("colour", nargs="*", help="Colour")

    regions_parser = subparsers.add_parser("regions", help="Set all five regions")
    regions_parser.add_argument("colours", nargs="*",
                                help="Up to five colours; the last one fills the rest")

    breathe_parser = subparsers.add_parser("breathe", help="Pulse one colour")
    breathe_parser.add_argument("speed", help="Period in ms (min 32)")
    breathe_parser.add_argument("colour", nargs="*", help="Colour")

    cycle_parser = subparsers.add_parser("cycle", help="Cycle through all colours")
    cycle_parser.add_argument("speed", help="Period in ms (min 32)")

    subparsers.add_parser("colours", aliases=["colors"], help="List X11 colour names")
    subparsers.add_parser("help", help="Show keyboard details")

    return parser


def _command_tokens(args):
    """Flatten parsed arguments back into the command's token list."""
    if args.command == "region":
        return [args.region] + args.colour
    if args.command == "regions":
        return args.colours
    if args.command == "breathe":
        return [args.speed] + args.colour
    if args.command == "cycle":
        return [args.speed]
    return args.colour


def main(argv=None):
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command in ("colours", "colors"):
        return list_colours().exit_code()

    from g213cols.conf import settings
    settings.override_timeout(args.timeout)

    if args.command == "help":
        return show_keyboard().exit_code()

    name = "colour" if args.command == "color" else args.command
    return set_lighting(name, _command_tokens(args), settings.timeout_ms).exit_code()


def list_colours():
    """Print every known X11 colour name with its value."""
    from g213cols.x11_colors import load_color_table

    table = load_color_table()
    for name in table.names():
        print(f"{table[name]:06x}  {name}")
    return Status.SUCCESS_NO_SAVE


def show_keyboard():
    """Show details of the connected keyboard."""
    try:
        device = find_g213_keyboard()
    except G213Error as e:
        print(f"Error: {e}")
        return Status.FAILURE

    info = describe_device(device)
    print("You do have a G213 keyboard")
    print(f"  USB ID:  {info['vid']:04x}:{info['pid']:04x}")
    print(f"  Bus:     {info['bus']:03d} Device {info['address']:03d}")
    if info['manufacturer'] or info['product']:
        print(f"  Name:    {info['manufacturer']} {info['product']}".rstrip())
    if info['serial']:
        print(f"  Serial:  {info['serial']}")
    return Status.SUCCESS_NO_SAVE


def set_lighting(name, tokens, timeout_ms=None):
    """Resolve a lighting command and send it to the keyboard."""
    try:
        command, status = build_command(name, tokens)
    except ValueError as e:
        print(f"Error: {e}")
        return Status.FAILURE

    try:
        device = find_g213_keyboard()
        status = run_command(device, command, status, timeout_ms)
    except G213Error as e:
        print(f"Error: {e}")
        return Status.FAILURE

    return status


if __name__ == "__main__":
    sys.exit(main())
