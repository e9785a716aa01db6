#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "Nibble8 Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout.  Program code sits at the bottom, followed by 16 sprites and then 10 digit glyphs
GLYPH_SIZE = 32  # 8 rows of 4 bytes, 2 pixels per byte
NUM_SPRITES = 0x10
NUM_FONT_GLYPHS = 10
SPRITE_ROM_START = 0x200
FONT_ROM_START = SPRITE_ROM_START + NUM_SPRITES * GLYPH_SIZE
RAM_SIZE = FONT_ROM_START + NUM_FONT_GLYPHS * GLYPH_SIZE

# Registers and inputs
NUM_REGISTERS = 0x10
NUM_KEYS = 6
DEFAULT_FONT_COLOUR = 0xF

# Display
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 64
NUM_COLOURS = 0x10

# Host loop
DEFAULT_CLOCK_SPEED = 500  # Operations per second

# Default mappings for keys 0-5, later populated into a dictionary.  These are the keyscan codes (and ASCII
# characters) for W, A, S, D, J and K
DEFAULT_KEYMAP = "119,97,115,100,106,107"

# Default 16-colour palette.  Index 0 is the background, index 15 the default font colour
DEFAULT_PALETTE = [
    0x111111, 0x1D2B53, 0x7E2553, 0x008751,
    0xAB5236, 0x5F574F, 0xC2C3C7, 0xFFF1E8,
    0xFF004D, 0xFFA300, 0xFFEC27, 0x00E436,
    0x29ADFF, 0x83769C, 0xFF77A8, 0xFFFFFF
]

# Fault tags carried by CPUError
FAULT_ADDRESSING = "addressing"
FAULT_UNIMPLEMENTED = "unimplemented opcode"
FAULT_INVALID_KEY = "invalid key index"
FAULT_ARITHMETIC = "arithmetic"

# Digit outlines for the built-in font ROM, one byte per row, most-significant bit leftmost
SYSTEM_FONT_ROWS = [
    [0x38, 0x44, 0x4C, 0x54, 0x64, 0x44, 0x38, 0x00],  # 0
    [0x10, 0x30, 0x10, 0x10, 0x10, 0x10, 0x38, 0x00],  # 1
    [0x38, 0x44, 0x04, 0x08, 0x10, 0x20, 0x7C, 0x00],  # 2
    [0x7C, 0x08, 0x10, 0x08, 0x04, 0x44, 0x38, 0x00],  # 3
    [0x08, 0x18, 0x28, 0x48, 0x7C, 0x08, 0x08, 0x00],  # 4
    [0x7C, 0x40, 0x78, 0x04, 0x04, 0x44, 0x38, 0x00],  # 5
    [0x18, 0x20, 0x40, 0x78, 0x44, 0x44, 0x38, 0x00],  # 6
    [0x7C, 0x04, 0x08, 0x10, 0x20, 0x20, 0x20, 0x00],  # 7
    [0x38, 0x44, 0x44, 0x38, 0x44, 0x44, 0x38, 0x00],  # 8
    [0x38, 0x44, 0x44, 0x3C, 0x04, 0x08, 0x30, 0x00]   # 9
]
