#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are usually only drawn to the actual display (the
host rendering system) at 60Hz.  Keeping our own copy means the CPU never has
to ask the rendering framework what is on screen, and gives the host a cheap
snapshot of the display at any time.

The screen is a single plane of 64x64 colour indices, one byte per pixel,
stored row-major in a RAM bank.  Only the low 4 bits of a colour are kept, so
every pixel is always one of the 16 palette entries.

All coordinates wrap around the screen edges, so anything drawn off one side
reappears on the opposite side.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, SCREEN_WIDTH, SCREEN_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer():
    def __init__(self, renderer):
        self.renderer = renderer
        self.vid_width = 0
        self.vid_height = 0
        self.vid_size = 0
        self.ram_bank = RAM()
        self.content_changed = False
        self.report_perf()

    def resize_vid(self, vid_width=SCREEN_WIDTH, vid_height=SCREEN_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Screen dimensions must be positive")

        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = self.vid_width * self.vid_height
        self.ram_bank.resize(self.vid_size)  # Update RAM size
        self.renderer.set_resolution(vid_width, vid_height)  # Update screen resolution
        self.content_changed = True

    def clear(self):
        self.ram_bank.clear()

        for y in range(self.vid_height):
            for x in range(self.vid_width):
                self.renderer.set_pixel(x, y, 0)

        self.content_changed = True

    def set_pixel(self, x, y, colour):
        x %= self.vid_width
        y %= self.vid_height
        colour &= 0xF
        vram_loc = y * self.vid_width + x

        if self.ram_bank.read(vram_loc) != colour:
            self.ram_bank.write(vram_loc, colour)
            self.renderer.set_pixel(x, y, colour)
            self.content_changed = True

    def get_pixel(self, x, y):
        return self.ram_bank.read((y % self.vid_height) * self.vid_width + (x % self.vid_width))

    def get_screen(self):
        # Copy each row out, so later drawing doesn't alter the snapshot
        vid_width = self.vid_width
        return [bytes(self.ram_bank.read_block(y * vid_width, vid_width)) for y in range(self.vid_height)]

    def refresh_display(self):
        self.renderer.refresh_display(self.content_changed)
        self.content_changed = False

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
