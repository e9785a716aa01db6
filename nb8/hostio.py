#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program and ROM binaries for later writing into RAM, and builds
the system font when no font ROM file is supplied.

Glyphs are 8x8 pixels at 4 bits per pixel, stored as 8 rows of 4 bytes.  In the
system font, lit pixels are 0xF (the stencil key used by the font drawing
instructions) and everything else is 0x0.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import SYSTEM_FONT_ROWS


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_system_font(self):
        font = bytearray()

        for glyph_rows in SYSTEM_FONT_ROWS:
            font += self.pack_glyph(glyph_rows)

        return bytes(font)

    def pack_glyph(self, glyph_rows, colour=0xF):
        # Convert 1-bit rows (MSB leftmost) into 4-bit pixel pairs
        glyph = bytearray()

        for row in glyph_rows:
            for pair in range(4):
                high = colour if row & (0x80 >> (pair * 2)) else 0
                low = colour if row & (0x40 >> (pair * 2)) else 0
                glyph.append((high << 4) | low)

        return glyph
