#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

from argparse import ArgumentParser
from nb8 import main
from nb8.constants import DEFAULT_CLOCK_SPEED, DEFAULT_KEYMAP


def parse_args():
    parser = ArgumentParser()
    parser.add_argument("filename", help="program to execute, loaded at address 0x000 (up to 512 bytes)")
    parser.add_argument(
        "-s", "--sprites",
        help="sprite ROM image: up to 16 sprites of 8x8 pixels at 4 bits per pixel (32 bytes each)"
    )
    parser.add_argument(
        "-f", "--font",
        help="font ROM image for digits 0-9, in the same format as sprites (built-in digits are used by default)"
    )
    parser.add_argument(
        "-c", "--clock_speed", type=int,
        help="set the CPU speed in operations/second (default {}, 0 = uncapped)".format(DEFAULT_CLOCK_SPEED)
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "null"],
        help="set the rendering and input systems (pygame by default if available, otherwise null)"
    )
    parser.add_argument(
        "--scale", type=int,
        help="set the window width and height in PyGame mode (default 512)"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 6 keyscan codes (PyGame).  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--pygame_palette",
        help="redefine up to 16 colours for the PyGame renderer in comma-separated hex, e.g. 112233,FF0000,.. etc."
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output.  Slows CPU execution"
    )
    return parser.parse_args()  # Can call sys.exit(2) if args are incorrect


if __name__ == "__main__":
    args = vars(parse_args())
    # It is possible to start the emulator from a GUI by calling this with a dictionary
    main(args)
