#!/usr/bin/env python3

"""
Null Audio Plugin

Base class for the other Audio plugins, and usable by itself for silence.

There is one buzzer, which sounds whenever the sound timer is above zero.  The
host calls set_buzzer() after every cycle, and only actual changes reach the
_start() and _stop() hooks that plugins override.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        self.buzzer_on = False
        self.beeps = 0  # Number of times the buzzer has switched on

    def set_buzzer(self, on):
        if on == self.buzzer_on:
            return

        self.buzzer_on = on

        if on:
            self.beeps += 1
            self._start()
        else:
            self._stop()

    def _start(self):
        pass

    def _stop(self):
        pass

    def shutdown(self):
        self.set_buzzer(False)
