#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.audio.a_null import Audio
from pchip.audio.a_pygame import square_wave


class CountingAudio(Audio):
    def __init__(self):
        self.starts = 0
        self.stops = 0
        super().__init__()

    def _start(self):
        self.starts += 1

    def _stop(self):
        self.stops += 1


class TestAudio(unittest.TestCase):
    def test_audio_buzzer_changes_only(self):
        audio = CountingAudio()
        audio.set_buzzer(False)
        self.assertEqual((0, 0), (audio.starts, audio.stops))
        audio.set_buzzer(True)
        audio.set_buzzer(True)
        self.assertTrue(audio.buzzer_on)
        self.assertEqual((1, 0), (audio.starts, audio.stops))
        audio.set_buzzer(False)
        audio.set_buzzer(True)
        self.assertEqual((2, 1), (audio.starts, audio.stops))
        self.assertEqual(2, audio.beeps)

    def test_audio_shutdown_silences(self):
        audio = CountingAudio()
        audio.set_buzzer(True)
        audio.shutdown()
        self.assertFalse(audio.buzzer_on)
        self.assertEqual(1, audio.stops)

    def test_audio_square_wave(self):
        wave = square_wave(250.0, 44100)
        self.assertEqual(176, len(wave))
        self.assertEqual(b"\xFF" * 88 + b"\x00" * 88, wave)
        self.assertEqual(b"\xFF\x00", square_wave(100000.0, 44100))
