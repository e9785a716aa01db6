#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Used by a Framebuffer object to draw the screen.  This draws graphics onto an
SDL window surface via PyGame.  The offscreen surface is allocated at the
emulated resolution (64x64), and then the contents are stretched (using
'Nearest Neighbour' translation) to fit the window itself.  This means we don't
have to draw the same pixel multiple times.

Every pixel is a 4-bit index into a 16-colour palette, which can be overridden
from the command line.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME, DEFAULT_PALETTE, NUM_COLOURS


class Renderer(RendererBase):
    def __init__(self, scale=None, pygame_palette=None, **kwargs):
        if scale is None:
            scale = 512  # Default window size if not supplied

        pygame.display.init()
        self.set_title(APP_NAME)
        self.rgb_buffer = None
        self.scaled_size = (scale, scale)  # The emulated screen is square
        self.display_surface = pygame.display.set_mode(self.scaled_size)

        # These are looked up instantly by index, so no need for a dictionary on this occasion
        colour_map = list(DEFAULT_PALETTE)

        # Override some (or all) of the colours with a user-defined palette, if necessary
        if pygame_palette is not None:
            pygame_palette_split = pygame_palette.split(",")

            if len(pygame_palette_split) > NUM_COLOURS:
                raise RendererError("Too many palette colours defined.")

            for pygame_colour_num, pygame_colour in enumerate(pygame_palette_split):
                if len(pygame_colour) != 6:
                    raise RendererError("Palette colours must all be 6 hex digits long.")

                try:
                    colour_map[pygame_colour_num] = int(pygame_colour, 16)
                except ValueError:
                    raise RendererError("Invalid palette colour defined.") from None

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [memoryview(bytearray([i >> 16, (i >> 8) & 0xFF, i & 0xFF])) for i in colour_map]

        super().__init__(scale)

    def set_resolution(self, width, height):
        total_pixels = width * height
        self.rgb_buffer = memoryview(bytearray(total_pixels * 3))  # 24-bit

        # Call superclass method first, so pixel locations can be calculated
        super().set_resolution(width, height)

        # Fill the offscreen RGB buffer with the background colour
        for y in range(height):
            for x in range(width):
                self.set_pixel(x, y, 0)

        # Force a refresh now, in case nothing else is drawn afterwards
        self.refresh_display(True)

    def set_pixel(self, x, y, colour):
        # Update RGB buffer in-place to minimise allocations and PyGame calls
        rgb_location = (y * self.width + x) * 3
        self.rgb_buffer[rgb_location:rgb_location + 3] = self.rgb_map[colour]

    def refresh_display(self, content_changed=False):
        if content_changed and self.rgb_buffer:
            # Blit the bytearray straight to the surface, rather than setting individual pixels
            render_surface = pygame.image.frombuffer(self.rgb_buffer, (self.width, self.height), "RGB")
            scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
            self.display_surface.blit(scaled_win, (0, 0))
            pygame.display.flip()

    def set_title(self, title):
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
