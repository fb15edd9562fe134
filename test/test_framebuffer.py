#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.constants import PIXEL_ON, PIXEL_OFF
from pchip.renderers.r_null import Renderer
from pchip.framebuffer import Framebuffer, FramebufferError


class RecordingRenderer(Renderer):
    def __init__(self, **kwargs):
        self.pixels = {}
        super().__init__(**kwargs)

    def set_pixel(self, x, y, lit):
        self.pixels[(x, y)] = lit


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.renderer_clip = RecordingRenderer()
        self.renderer_wrap = Renderer()
        self.framebuffer_clip = Framebuffer(self.renderer_clip, allow_wrapping=False, vid_width=4, vid_height=5)
        self.framebuffer_wrap = Framebuffer(self.renderer_wrap, allow_wrapping=True, vid_width=3, vid_height=4)

    def _words(self, framebuffer):
        return ["1" if word == PIXEL_ON else "0" for word in framebuffer.video]

    def test_framebuffer_default_size(self):
        renderer = Renderer()
        fb = Framebuffer(renderer)
        self.assertEqual((64, 32), fb.get_vid_size())
        self.assertEqual(64 * 32, len(fb.video))
        self.assertEqual((64, 32), (renderer.width, renderer.height))
        self.assertTrue(all(word == PIXEL_OFF for word in fb.video))

    def test_framebuffer_bad_size(self):
        self.assertRaises(FramebufferError, Framebuffer, Renderer(), vid_width=0)

    def test_framebuffer_resolution(self):
        self.assertEqual((4, 5), (self.renderer_clip.width, self.renderer_clip.height))
        self.assertEqual((3, 4), (self.renderer_wrap.width, self.renderer_wrap.height))

    def test_framebuffer_writes_clipped(self):
        fb = self.framebuffer_clip
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("10000000000000000000", "".join(self._words(fb)))
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("10000100000000000000", "".join(self._words(fb)))
        self.assertIsNone(fb.xor_pixel(4, 5))  # Should do nothing as wrapping is off
        self.assertEqual("10000100000000000000", "".join(self._words(fb)))
        self.assertTrue(self.renderer_clip.pixels[(1, 1)])
        self.assertTrue(fb.is_pixel_on(1, 1))

        # Check collisions are reported, and the pixel is turned off
        self.assertTrue(fb.xor_pixel(1, 1))
        self.assertFalse(fb.is_pixel_on(1, 1))
        self.assertFalse(self.renderer_clip.pixels[(1, 1)])

        # Check clear works
        fb.clear()
        self.assertEqual("00000000000000000000", "".join(self._words(fb)))
        self.assertFalse(any(self.renderer_clip.pixels.values()))

    def test_framebuffer_writes_wrapped(self):
        fb = self.framebuffer_wrap
        fb.xor_pixel(0, 0)
        self.assertEqual("100000000000", "".join(self._words(fb)))
        fb.xor_pixel(1, 1)
        self.assertEqual("100010000000", "".join(self._words(fb)))
        self.assertTrue(fb.xor_pixel(3, 4))  # Should erase the first pixel
        self.assertEqual("000010000000", "".join(self._words(fb)))

    def test_framebuffer_rows(self):
        fb = self.framebuffer_wrap
        fb.xor_pixel(2, 1)
        self.assertEqual(
            [[False, False, False], [False, False, True], [False, False, False], [False, False, False]], fb.rows()
        )

    def test_framebuffer_refresh(self):
        fb = self.framebuffer_wrap
        refreshes = self.renderer_wrap.frames
        fb.refresh_display()
        self.assertFalse(fb.changed)
        fb.xor_pixel(0, 0)
        self.assertTrue(fb.changed)
        fb.refresh_display()
        self.assertFalse(fb.changed)
        self.assertEqual(refreshes + 2, self.renderer_wrap.frames)

    def test_framebuffer_report_perf(self):
        self.framebuffer_wrap.report_perf(60, 500)
        self.assertEqual("PlainChip Emulator - 60 FPS, 500 OPS", self.renderer_wrap.title)

    def test_framebuffer_clear_only_sends_lit_pixels(self):
        fb = self.framebuffer_wrap
        fb.xor_pixel(0, 0)
        fb.xor_pixel(2, 3)
        fb.xor_pixel(1, 1)
        fb.xor_pixel(1, 1)  # Back off again
        updates = self.renderer_wrap.pixel_updates
        fb.clear()
        self.assertEqual(updates + 2, self.renderer_wrap.pixel_updates)
        fb.clear()
        self.assertEqual(updates + 2, self.renderer_wrap.pixel_updates)
        self.assertFalse(any(any(row) for row in fb.rows()))
