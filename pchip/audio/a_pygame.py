#!/usr/bin/env python3

"""
PyGame Audio Plugin

Sounds the buzzer through PyGame / SDL's mixer.

The buzzer has no pitch or volume of its own, it is simply on or off.  Here it
is given a square wave tone: one period is built as unsigned 8-bit samples when
the plugin starts, and looped for as long as the buzzer is on.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
TONE_FREQUENCY = 250.0
DEFAULT_VOLUME = 0.1


def square_wave(tone_frequency, playback_frequency=PLAYBACK_FREQUENCY):
    # One period, high half first.  Always at least one sample per half.
    half_period = max(1, int(round(playback_frequency / tone_frequency / 2.0)))
    return bytes([0xFF] * half_period + [0x00] * half_period)


class Audio(AudioBase):
    def __init__(self, tone_frequency=TONE_FREQUENCY, volume=DEFAULT_VOLUME):
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=1, allowedchanges=0)
        pygame.mixer.init()
        self.sound = pygame.mixer.Sound(buffer=square_wave(tone_frequency))
        self.sound.set_volume(volume)
        super().__init__()

    def _start(self):
        self.sound.play(-1)  # Loop until stopped

    def _stop(self):
        self.sound.stop()

    def shutdown(self):
        super().shutdown()
        pygame.mixer.quit()
