#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and are usually only drawn to the actual display (the
host rendering system) at 60Hz.  Programs cannot write into video memory
directly.  Instead, sprites are drawn with an XOR against the 64x32 grid.

Each pixel is stored as a 32-bit word which is either all zeros (off) or all
ones (on), row-major, so a host could blit the buffer directly as colours.
Every change is also passed on to the attached renderer, which only needs to
know whether a pixel is lit.

Collisions (where a pixel was set, but was unset by an XOR) are reported back
to the caller.

Sprite pixels landing beyond the right or bottom edge are wrapped around to
the opposite edge by default.  With wrapping disabled, they are clipped.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_NAME, VIDEO_WIDTH, VIDEO_HEIGHT, PIXEL_ON, PIXEL_OFF


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, renderer, allow_wrapping=True, vid_width=VIDEO_WIDTH, vid_height=VIDEO_HEIGHT):
        if vid_width <= 0 or vid_height <= 0:
            raise FramebufferError("Display size must be positive")

        self.renderer = renderer
        self.allow_wrapping = allow_wrapping
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.video = memoryview(bytearray(self.vid_size * 4)).cast("I")
        self.changed = True
        self.renderer.set_resolution(vid_width, vid_height)
        self.report_perf()

    def clear(self):
        # Only lit pixels need to be passed on, the renderer already has the rest unlit
        video = self.video

        for vram_loc in range(self.vid_size):
            if video[vram_loc] == PIXEL_ON:
                video[vram_loc] = PIXEL_OFF
                y, x = divmod(vram_loc, self.vid_width)
                self.renderer.set_pixel(x, y, False)

        self.changed = True

    def xor_pixel(self, x, y):
        # Returns True on collision, False if not, or None if the pixel was clipped

        if self.allow_wrapping:
            x %= self.vid_width
            y %= self.vid_height
        elif x >= self.vid_width or y >= self.vid_height:
            return None

        vram_loc = y * self.vid_width + x
        pixel = self.video[vram_loc]
        collision = (pixel == PIXEL_ON)
        new_pixel = pixel ^ PIXEL_ON
        self.video[vram_loc] = new_pixel
        self.renderer.set_pixel(x, y, new_pixel == PIXEL_ON)
        self.changed = True

        return collision

    def is_pixel_on(self, x, y):
        return self.video[y * self.vid_width + x] == PIXEL_ON

    def rows(self):
        # Plain on/off view, mostly useful for tests and text dumps
        width = self.vid_width
        return [
            [self.video[y * width + x] == PIXEL_ON for x in range(width)] for y in range(self.vid_height)
        ]

    def refresh_display(self):
        self.renderer.refresh_display(self.changed)
        self.changed = False

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def report_perf(self, fps=0, ops=0):
        title = "{} - {} FPS, {} OPS".format(APP_NAME, fps, ops)
        self.renderer.set_title(title)
