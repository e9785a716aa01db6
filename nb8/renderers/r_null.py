#!/usr/bin/env python3

"""
Null Renderer Plugin

Base class for the display plugins.  The framebuffer calls set_resolution() once
with the 64x64 screen size, then set_pixel() with a 4-bit colour index (0-15)
whenever a pixel changes.  refresh_display() is called at the display rate with
the framebuffer's dirty flag, so a plugin only needs to redraw when it is set.

Used on its own, nothing is drawn: the machine runs headless, which suits tests
and trace-only sessions.  The FPS/OPS title is discarded.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.set_resolution(0, 0)

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def set_pixel(self, x, y, colour):  # pylint: disable=unused-argument
        pass

    def refresh_display(self, content_changed=False):
        pass

    def set_title(self, title):
        pass

    def shutdown(self):
        pass
