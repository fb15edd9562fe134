#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import unittest
from contextlib import redirect_stdout
from pchip.cpu import CPU
from pchip.tracer import Tracer
from pchip.ram import RAM
from pchip.stack import Stack
from pchip.framebuffer import Framebuffer
from pchip.renderers.r_null import Renderer


class TestTracer(unittest.TestCase):
    def setUp(self):
        self.tracer = Tracer()
        self.ram = RAM()
        self.cpu = CPU(self.ram, Stack(), Framebuffer(Renderer()), self.tracer)

    def test_tracer_trace(self):
        self.cpu.v[0xF] = 0xAB
        self.cpu.v[0x0] = 0x01
        self.cpu.i = 0x123
        self.cpu.opcode = 0x00E0
        trace_str = self.tracer.trace(self.cpu, "CLS")
        self.assertTrue(trace_str.startswith("V: 0xab"))
        self.assertIn("01 I: 0x0123", trace_str)
        self.assertIn("PC: 0x200 OP: 0x00e0 IN: CLS", trace_str)
        self.assertNotIn("Stack", trace_str)

    def test_tracer_trace_verbose(self):
        self.cpu.stack.push(0x202)
        self.assertIn("Stack: 0x202", self.tracer.trace(self.cpu, "RET", verbose=True))
        self.cpu.stack.pop()
        self.assertIn("Stack: (Empty)", self.tracer.trace(self.cpu, "RET", verbose=True))

    def test_tracer_anomaly_silent(self):
        output = io.StringIO()

        with redirect_stdout(output):
            self.tracer.anomaly(self.cpu, "Stack underflow")

        self.assertEqual(1, self.tracer.anomalies)
        self.assertEqual("", output.getvalue())

    def test_tracer_live(self):
        tracer = Tracer()
        tracer.set_live(True)
        self.assertTrue(tracer.is_live())
        cpu = CPU(self.ram, Stack(), Framebuffer(Renderer()), tracer)
        self.ram.write_block(0x200, b"\x63\x2A\x00\xEE")
        output = io.StringIO()

        with redirect_stdout(output):
            cpu.cycle()
            cpu.cycle()

        lines = output.getvalue()
        self.assertIn("IN: LD V3, 0x2a", lines)
        self.assertIn("IN: RET", lines)
        self.assertIn("Undefined behaviour at 0x202: Stack underflow", lines)
        self.assertEqual(1, tracer.anomalies)
