#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import (
    APP_INTRO, APP_COPYRIGHT, DEFAULT_KEYMAP, FONT_ROM_START, GLYPH_SIZE, NUM_FONT_GLYPHS, NUM_SPRITES, RAM_SIZE,
    SPRITE_ROM_START
)
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .ram import RAM


class StartupError(Exception):
    pass


def _load_region(cpu, data, start, max_size, description):
    if len(data) > max_size:
        raise StartupError(
            "{} is {} bytes long, but only {} bytes are available.".format(description, len(data), max_size)
        )

    cpu.load(data, start, start + len(data))


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then fall back to no display

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                print("PyGame does not appear to be installed.  Running without a display.")
                opt_renderer = "null"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer

    loader = Loader()

    # Allocate memory for program code, sprite ROM and font ROM
    ram = RAM()
    ram.resize(RAM_SIZE)

    # Set up a new rendering system, and attach a framebuffer to it
    renderer = Renderer(scale=args["scale"], pygame_palette=args["pygame_palette"])
    framebuffer = Framebuffer(renderer)

    # Set up host inputs, and link to the chosen rendering module in case it provides inputs too
    keymap = args["keymap"]
    inputs = Inputs(DEFAULT_KEYMAP if keymap is None else keymap, renderer)

    # Set up debugger and live output if necessary
    debugger = Debugger()
    debugger.set_live(args["debug"])

    try:
        # Create a new CPU and plug it into the rest of the system
        cpu = CPU(ram, framebuffer, inputs, debugger, clock_speed=args["clock_speed"])

        # Write the ROMs and program into RAM.  Without a font file, the built-in digits are used
        sprites_filename = args["sprites"]
        font_filename = args["font"]

        if sprites_filename is not None:
            _load_region(
                cpu, loader.load_binary(sprites_filename), SPRITE_ROM_START, NUM_SPRITES * GLYPH_SIZE, "Sprite ROM"
            )

        font = loader.load_system_font() if font_filename is None else loader.load_binary(font_filename)
        _load_region(cpu, font, FONT_ROM_START, NUM_FONT_GLYPHS * GLYPH_SIZE, "Font ROM")
        _load_region(cpu, loader.load_binary(args["filename"]), 0, SPRITE_ROM_START, "Program")

        # Boot up at the start of memory
        cpu.run(0x000)
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        inputs.shutdown()
        renderer.shutdown()
