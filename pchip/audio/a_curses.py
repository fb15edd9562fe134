#!/usr/bin/env python3

"""
Curses Audio Plugin

All a terminal can do is ring its bell (BEL, CTRL+G), which can be neither held
nor cut short.  So there is one beep each time the buzzer switches on, however
long the sound timer runs.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import curses
from .a_null import Audio as AudioBase


class Audio(AudioBase):
    def _start(self):
        curses.beep()
