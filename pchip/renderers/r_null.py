#!/usr/bin/env python3

"""
Null Renderer Plugin

Base class for the other rendering plugins.  On its own it draws nothing, which
suits trace-only runs and tests.

The framebuffer owns the pixels.  A renderer is only told the screen size, each
pixel that changes, when a frame is due, and the window title.  This one keeps
count of pixel updates and frames, and remembers the latest title.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class RendererError(Exception):
    pass


class Renderer:
    def __init__(self, scale=None, **kwargs):  # pylint: disable=unused-argument
        self.scale = 1 if scale is None else scale
        self.width = 0
        self.height = 0
        self.title = ""
        self.pixel_updates = 0
        self.frames = 0

    def set_resolution(self, width, height):
        self.width = width
        self.height = height

    def set_pixel(self, x, y, lit):  # pylint: disable=unused-argument
        self.pixel_updates += 1

    def refresh_display(self, content_changed=False):  # pylint: disable=unused-argument
        self.frames += 1

    def set_title(self, title):
        self.title = title

    def shutdown(self):
        pass
