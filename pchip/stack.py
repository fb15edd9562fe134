#!/usr/bin/env python3

"""
Stack Emulator

The call stack lives outside system RAM, as there is no specified location for
it and programs cannot address it.  It holds 16 return addresses and an 8-bit
stack pointer (SP).

A CALL stores the return address at SP and then increments SP.  A RET
decrements SP and then loads.  Nothing stops SP leaving the 0-15 range: it
wraps as an 8-bit value, and slots are selected modulo 16.  Whether that is
about to happen can be checked beforehand with is_full() and is_empty().
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_SIZE


class Stack:
    def __init__(self, size=STACK_SIZE):
        self.items = [0] * size
        self.size = size
        self.sp = 0

    def push(self, item):
        self.items[self.sp % self.size] = item & 0xFFFF
        self.sp = (self.sp + 1) & 0xFF

    def pop(self):
        self.sp = (self.sp - 1) & 0xFF
        return self.items[self.sp % self.size]

    def is_full(self):
        return self.sp >= self.size

    def is_empty(self):
        return self.sp == 0

    def clear(self):
        self.items[:] = [0] * self.size
        self.sp = 0

    def get_items(self):
        # For tracing.  Only the levels below SP are in use.
        return self.items[:min(self.sp, self.size)]
