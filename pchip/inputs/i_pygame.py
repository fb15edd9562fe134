#!/usr/bin/env python3

"""
PyGame Input Plugin

SDL reports real key-down and key-up events, so the held array simply follows
them.  Keys not in the keymap are ignored.  Closing the window, or pressing
ESC, asks the host to quit.

Draining the event queue is slow, so the host should only do it at display
rate rather than every cycle.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def process_messages(self):
        quit_requested = False

        # Keep going after a quit, so the held array matches the keyboard when we return
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                quit_requested = True
            elif event.type == pygame.KEYDOWN or event.type == pygame.KEYUP:
                if event.key == pygame.K_ESCAPE:
                    quit_requested = True
                else:
                    self._key_event(event.key, event.type == pygame.KEYDOWN)

        return quit_requested

    def _key_event(self, host_code, down):
        key_num = self.host_keys.get(host_code)

        if key_num is None:
            return

        if down:
            self.press(key_num)
        else:
            self.release(key_num)
