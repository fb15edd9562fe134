#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from pchip.constants import DEFAULT_KEYMAP
from pchip.cpu import CPU
from pchip.tracer import Tracer
from pchip.ram import RAM
from pchip.runner import Runner
from pchip.stack import Stack
from pchip.framebuffer import Framebuffer
from pchip.renderers.r_null import Renderer
from pchip.inputs.i_null import Inputs
from pchip.audio.a_null import Audio


class ScriptedInputs(Inputs):
    # Holds key 0x5 down, and asks to quit after a set number of polls
    def __init__(self, keymap, renderer, polls_before_quit):
        self.polls_left = polls_before_quit
        super().__init__(keymap, renderer)
        self.press(0x5)

    def process_messages(self):
        self.polls_left -= 1
        return self.polls_left < 0


class TestRunner(unittest.TestCase):
    def setUp(self):
        self.ram = RAM()
        self.renderer = Renderer()
        self.framebuffer = Framebuffer(self.renderer)
        self.cpu = CPU(self.ram, Stack(), self.framebuffer, Tracer())
        self.audio = Audio()

    def test_runner_buzzer(self):
        # LD V0, 3; LD ST, V0; then loop forever
        self.ram.write_block(0x200, b"\x60\x03\xF0\x18\x12\x04")
        runner = Runner(self.cpu, self.framebuffer, Inputs(DEFAULT_KEYMAP, self.renderer), self.audio)
        runner.step()
        self.assertFalse(self.audio.buzzer_on)
        runner.step()
        self.assertEqual(2, self.cpu.st)
        self.assertTrue(self.audio.buzzer_on)
        runner.step()
        self.assertTrue(self.audio.buzzer_on)
        runner.step()
        self.assertEqual(0, self.cpu.st)
        self.assertFalse(self.audio.buzzer_on)
        self.assertEqual(1, self.audio.beeps)

    def test_runner_clock_speed(self):
        inputs = Inputs(DEFAULT_KEYMAP, self.renderer)
        self.assertAlmostEqual(1.0 / 500, Runner(self.cpu, self.framebuffer, inputs, self.audio).core_interval)
        self.assertAlmostEqual(1.0 / 60, Runner(self.cpu, self.framebuffer, inputs, self.audio, 60).core_interval)
        self.assertIsNone(Runner(self.cpu, self.framebuffer, inputs, self.audio, 0).core_interval)

    def test_runner_run_until_quit(self):
        # LD V1, K; then loop forever
        self.ram.write_block(0x200, b"\xF1\x0A\x12\x02")
        inputs = ScriptedInputs(DEFAULT_KEYMAP, self.renderer, 2)
        runner = Runner(self.cpu, self.framebuffer, inputs, self.audio, clock_speed=0)
        runner.run()
        self.assertEqual(0x5, self.cpu.v[0x1])
        self.assertEqual(1, self.cpu.keypad[0x5])
        self.assertEqual(0x202, self.cpu.pc)
        self.assertGreaterEqual(self.renderer.frames, 3)
