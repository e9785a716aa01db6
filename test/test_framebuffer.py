#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nb8.renderers.r_null import Renderer
from nb8.framebuffer import Framebuffer, FramebufferError


class RecordingRenderer(Renderer):
    def __init__(self):
        self.pixels = {}
        self.refreshes = []
        self.title = None
        super().__init__()

    def set_pixel(self, x, y, colour):
        self.pixels[(x, y)] = colour

    def refresh_display(self, content_changed=False):
        self.refreshes.append(content_changed)

    def set_title(self, title):
        self.title = title


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.renderer = RecordingRenderer()
        self.framebuffer = Framebuffer(self.renderer)
        self.framebuffer.resize_vid(4, 3)

    def test_framebuffer_resize_vid(self):
        self.assertEqual((4, 3), (self.renderer.width, self.renderer.height))
        self.assertEqual((4, 3), self.framebuffer.get_vid_size())
        self.assertEqual(12, self.framebuffer.ram_bank.mem_size)

    def test_framebuffer_resize_vid_default(self):
        self.framebuffer.resize_vid()
        self.assertEqual((64, 64), self.framebuffer.get_vid_size())

    def test_framebuffer_resize_vid_invalid(self):
        self.assertRaises(FramebufferError, self.framebuffer.resize_vid, 0, 4)

    def test_framebuffer_set_pixel(self):
        fb = self.framebuffer
        fb.set_pixel(1, 2, 0x7)
        self.assertEqual("000000000000000000070000", fb.ram_bank.mem.hex())
        self.assertEqual(0x7, fb.get_pixel(1, 2))
        self.assertEqual(0x7, self.renderer.pixels[(1, 2)])

    def test_framebuffer_set_pixel_wraps(self):
        fb = self.framebuffer
        fb.set_pixel(4, 3, 0x1)  # Wraps to (0, 0)
        fb.set_pixel(-1, 5, 0x2)  # Wraps to (3, 2)
        self.assertEqual(0x1, fb.get_pixel(0, 0))
        self.assertEqual(0x2, fb.get_pixel(3, 2))

    def test_framebuffer_set_pixel_masks_colour(self):
        self.framebuffer.set_pixel(0, 0, 0x1F)
        self.assertEqual(0xF, self.framebuffer.get_pixel(0, 0))

    def test_framebuffer_get_screen(self):
        fb = self.framebuffer
        fb.set_pixel(3, 0, 0x5)
        fb.set_pixel(0, 2, 0xA)
        screen = fb.get_screen()
        self.assertEqual([b"\x00\x00\x00\x05", b"\x00\x00\x00\x00", b"\x0A\x00\x00\x00"], screen)

        # Snapshots don't change with later drawing
        fb.set_pixel(3, 0, 0x6)
        self.assertEqual(0x5, screen[0][3])

    def test_framebuffer_clear(self):
        fb = self.framebuffer
        fb.set_pixel(1, 1, 0x3)
        fb.clear()
        self.assertEqual("000000000000000000000000", fb.ram_bank.mem.hex())
        self.assertEqual(0, self.renderer.pixels[(1, 1)])

    def test_framebuffer_refresh(self):
        fb = self.framebuffer
        fb.refresh_display()
        fb.refresh_display()
        fb.set_pixel(0, 0, 0x1)
        fb.set_pixel(0, 0, 0x1)  # No change, but still pending from the previous write
        fb.refresh_display()
        self.assertEqual([True, False, True], self.renderer.refreshes)

    def test_framebuffer_report_perf(self):
        self.framebuffer.report_perf(60, 500)
        self.assertEqual("Nibble8 Emulator - 60 FPS, 500 OPS", self.renderer.title)
