#!/usr/bin/env python3

"""
CPU Tracer

If live tracing is enabled, this will output information before each
instruction executed:
    * All 16 of the [V] registers, starting with most significant (Vf) and
      reducing to least significant (V0)
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * SP - Stack pointer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction

Anomalies are situations the original hardware leaves undefined, such as the
stack overflowing or the index register leaving the 12-bit address space.
Emulation always continues regardless, but each one is counted, and printed
along with the stack contents when tracing is live.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Tracer:
    def __init__(self):
        self.live = False
        self.anomalies = 0

    def trace(self, cpu, instruction, verbose=False):
        trace_str = (
            "V: 0x" + ("{:02x}" * 16) +
            " I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} SP: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x} IN: {}"
        ).format(
            *[cpu.v[reg_num] for reg_num in range(15, -1, -1)] +
            [cpu.i, cpu.dt, cpu.st, cpu.stack.sp, cpu.trace_pc, cpu.opcode, instruction]
        )

        if verbose:
            stack_items = cpu.stack.get_items()
            stack_str = (" 0x{:03x}" * len(stack_items)).format(*stack_items)
            trace_str += "\nStack:{}".format(stack_str or " (Empty)")

        return trace_str

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        print(self.trace(cpu, instruction))

    def anomaly(self, cpu, description):
        self.anomalies += 1

        if self.live:
            print("Undefined behaviour at 0x{:03x}: {}\n{}".format(
                cpu.trace_pc, description, self.trace(cpu, "???", verbose=True)
            ))
