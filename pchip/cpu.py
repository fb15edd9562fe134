#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  Each call
to cycle() fetches one instruction, advances the program counter past it,
decodes and executes it, and then ticks both timers down by one.  The CPU
never waits on anything itself: pacing cycles against the wall clock, reading
the keyboard and drawing the screen are all left to the host.

Decoding uses two levels of lookup.  The first nibble of the opcode selects an
instruction family.  Families 0x0, 0x8 and 0xE are then looked up again by the
last nibble, and family 0xF by the last byte.  Any opcode with no matching
entry does nothing (the program counter has already moved past it).

Situations the original hardware leaves undefined (stack overflow, jumps or
index values beyond 0xFFF, and so on) are carried out using plain fixed-width
arithmetic and reported to the tracer, but never stop emulation.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random
from time import time_ns
from .constants import FONT_START, FONT_CHAR_SIZE, FONTSET, NUM_KEYS, NUM_REGISTERS, PROGRAM_START

ADDR_TOP = 0xFFF  # Highest address reachable with 12 bits


class CPU:
    def __init__(self, ram, stack, framebuffer, tracer, shift_quirks=None, load_quirks=None, seed=None):
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.tracer = tracer
        self.live_trace = self.tracer.is_live()

        """
        Quirks
        ------

        Both are off unless requested, giving the behaviour most CHIP-8 documentation describes.

        - Shift quirks: 8xy6/8xyE shift Vy into Vx (original COSMAC VIP), rather than shifting Vx in place.
        - Load quirks : Fx55/Fx65 leave I pointing just past the last register transferred (original COSMAC VIP).
        """

        self.shift_quirks = False if shift_quirks is None else shift_quirks
        self.load_quirks = False if load_quirks is None else load_quirks

        # Seeded once.  There is no guarantee of repeatability between runs unless a seed is supplied.
        self.rng = Random(time_ns() if seed is None else seed)

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Looked up again by last nibble
            0x1: self._1nnn,
            0x2: self._2nnn,
            0x3: self._3xkk,
            0x4: self._4xkk,
            0x5: self._5xy0,
            0x6: self._6xkk,
            0x7: self._7xkk,
            0x8: self._8nnn,  # Looked up again by last nibble
            0x9: self._9xy0,
            0xA: self._Annn,
            0xB: self._Bnnn,
            0xC: self._Cxkk,
            0xD: self._Dxyn,
            0xE: self._Ennn,  # Looked up again by last nibble
            0xF: self._Fnnn   # Looked up again by last byte
        }

        # Instructions beginning with nibble 0x0, keyed by last nibble
        self.instructions_0 = {
            0x0: self._00E0,
            0xE: self._00EE
        }

        # Instructions beginning with nibble 0x8, keyed by last nibble
        self.instructions_8 = {
            0x0: self._8xy0,
            0x1: self._8xy1,
            0x2: self._8xy2,
            0x3: self._8xy3,
            0x4: self._8xy4,
            0x5: self._8xy5,
            0x6: self._8xy6,
            0x7: self._8xy7,
            0xE: self._8xyE
        }

        # Instructions beginning with nibble 0xE, keyed by last nibble
        self.instructions_E = {
            0xE: self._Ex9E,
            0x1: self._ExA1
        }

        # Instructions beginning with nibble 0xF, keyed by last byte
        self.instructions_F = {
            0x07: self._Fx07,
            0x0A: self._Fx0A,
            0x15: self._Fx15,
            0x18: self._Fx18,
            0x1E: self._Fx1E,
            0x29: self._Fx29,
            0x33: self._Fx33,
            0x55: self._Fx55,
            0x65: self._Fx65
        }

        # Initialise registers
        self.v = memoryview(bytearray(NUM_REGISTERS))
        self.i = 0  # Index register

        # Initialise timers
        self.dt = 0  # Delay timer
        self.st = 0  # Sound timer

        # Written by the host before each cycle.  1 = held, 0 = released.
        self.keypad = memoryview(bytearray(NUM_KEYS))

        self.pc = 0
        self.trace_pc = 0
        self.opcode = 0
        self.reset()

    def reset(self):
        # Power on state: empty memory apart from the font, and ready to run from the start of the program area
        self.ram.clear()
        self.ram.write_block(FONT_START, FONTSET)
        self.stack.clear()
        self.v[:] = bytes(NUM_REGISTERS)
        self.keypad[:] = bytes(NUM_KEYS)
        self.i = 0
        self.dt = 0
        self.st = 0
        self.pc = PROGRAM_START
        self.trace_pc = PROGRAM_START
        self.opcode = 0
        self.framebuffer.clear()

    def cycle(self):
        # Keep track of the program counter before altering it in any way for tracing purposes
        self.trace_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch, but before execute
        self.decode_exec()
        self.tick_timers()

    def fetch(self):
        # CHIP-8 is big-endian
        pc = self.pc
        return (self.ram.read(pc) << 8) | self.ram.read(pc + 1)

    def decode_exec(self):
        self.instructions[self.opcode >> 12]()

    def tick_timers(self):
        if self.dt > 0:
            self.dt -= 1

        if self.st > 0:
            self.st -= 1

    def inc_pc(self):
        self.pc = (self.pc + 2) & 0xFFFF

    def dec_pc(self):
        # Only used to re-run the keypress wait instruction
        self.pc = (self.pc - 2) & 0xFFFF

    # References to Vx, Vy, byte and addr are always in the same opcode position throughout all instructions, so avoid
    # excessive code duplication (ever so slight slowdown).  Don't reference these more than necessary as they are
    # recalculated each time.
    @property
    def vx(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def vy(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    @property
    def nibble(self):
        return self.opcode & 0xF

    def trace(self, instruction):
        self.tracer.output(self, instruction)

    def _anomaly(self, description):
        self.tracer.anomaly(self, description)

    def _0nnn(self):
        self.instructions_0.get(self.opcode & 0xF, self._op_null)()

    def _8nnn(self):
        self.instructions_8.get(self.opcode & 0xF, self._op_null)()

    def _Ennn(self):
        self.instructions_E.get(self.opcode & 0xF, self._op_null)()

    def _Fnnn(self):
        self.instructions_F.get(self.opcode & 0xFF, self._op_null)()

    def _op_null(self):
        # Unrecognised opcodes are skipped, as the original interpreter does
        if self.live_trace:
            self.trace("???")

    def _00E0(self):  # CLS
        if self.live_trace:
            self.trace("CLS")

        self.framebuffer.clear()

    def _00EE(self):  # RET
        if self.live_trace:
            self.trace("RET")

        if self.stack.is_empty():
            self._anomaly("Stack underflow")

        self.pc = self.stack.pop()

    def _1nnn(self):  # JP addr
        if self.live_trace:
            self.trace("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2nnn(self):  # CALL addr
        if self.live_trace:
            self.trace("CALL 0x{:03x}".format(self.addr))

        if self.stack.is_full():
            self._anomaly("Stack overflow")

        self.stack.push(self.pc)
        self.pc = self.addr

    def _3xkk(self):  # SE Vx, byte
        if self.live_trace:
            self.trace("SE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] == self.byte:
            self.inc_pc()

    def _4xkk(self):  # SNE Vx, byte
        if self.live_trace:
            self.trace("SNE V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        if self.v[self.vx] != self.byte:
            self.inc_pc()

    def _5xy0(self):  # SE Vx, Vy
        if self.live_trace:
            self.trace("SE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] == self.v[self.vy]:
            self.inc_pc()

    def _6xkk(self):  # LD Vx, byte
        if self.live_trace:
            self.trace("LD V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        self.v[self.vx] = self.byte

    def _7xkk(self):  # ADD Vx, byte
        vx = self.vx
        byte = self.byte

        if self.live_trace:
            self.trace("ADD V{:01x}, 0x{:02x}".format(vx, byte))

        # No carry flag for this one
        byte += self.v[vx]
        self.v[vx] = byte & 0xFF

    def _8xy0(self):  # LD Vx, Vy
        if self.live_trace:
            self.trace("LD V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] = self.v[self.vy]

    def _8xy1(self):  # OR Vx, Vy
        if self.live_trace:
            self.trace("OR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] |= self.v[self.vy]

    def _8xy2(self):  # AND Vx, Vy
        if self.live_trace:
            self.trace("AND V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] &= self.v[self.vy]

    def _8xy3(self):  # XOR Vx, Vy
        if self.live_trace:
            self.trace("XOR V{:01x}, V{:01x}".format(self.vx, self.vy))

        self.v[self.vx] ^= self.v[self.vy]

    # For the arithmetic instructions below, Vf is written first and the result last.  Apart from ADD, the result is
    # worked out from the registers after the flag write, so Vf as an operand holds the new flag.  If Vf is also the
    # destination, the result wins.

    def _8xy4(self):  # ADD Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_trace:
            self.trace("ADD V{:01x}, V{:01x}".format(vx, vy))

        val = self.v[vx] + self.v[vy]
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying
        self.v[vx] = val & 0xFF

    def _8xy5(self):  # SUB Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_trace:
            self.trace("SUB V{:01x}, V{:01x}".format(vx, vy))

        self.v[0xF] = int(self.v[vx] > self.v[vy])  # Vf is set when NOT borrowing.  Equal values count as a borrow
        self.v[vx] = (self.v[vx] - self.v[vy]) & 0xFF

    def _trace_8xy6_8xyE(self, direction):
        self.trace(
            "{} V{:01x}, V{:01x}".format(direction, self.vx, self.vy) if self.shift_quirks else
            "{} V{:01x}".format(direction, self.vx)
        )

    def _8xy6(self):  # SHR Vx {, Vy}
        # Vx is shifted in place, unless shift quirks are on, in which case Vy is the source
        if self.live_trace:
            self._trace_8xy6_8xyE("SHR")

        vx = self.vx
        src = self.vy if self.shift_quirks else vx
        self.v[0xF] = self.v[src] & 1  # Bit shifted out
        self.v[vx] = self.v[src] >> 1

    def _8xy7(self):  # SUBN Vx, Vy
        vx = self.vx
        vy = self.vy

        if self.live_trace:
            self.trace("SUBN V{:01x}, V{:01x}".format(vx, vy))

        self.v[0xF] = int(self.v[vy] > self.v[vx])
        self.v[vx] = (self.v[vy] - self.v[vx]) & 0xFF

    def _8xyE(self):  # SHL Vx {, Vy}
        # Vx is shifted in place, unless shift quirks are on, in which case Vy is the source
        if self.live_trace:
            self._trace_8xy6_8xyE("SHL")

        vx = self.vx
        src = self.vy if self.shift_quirks else vx
        self.v[0xF] = self.v[src] >> 7  # Bit shifted out
        self.v[vx] = (self.v[src] << 1) & 0xFF

    def _9xy0(self):  # SNE Vx, Vy
        if self.live_trace:
            self.trace("SNE V{:01x}, V{:01x}".format(self.vx, self.vy))

        if self.v[self.vx] != self.v[self.vy]:
            self.inc_pc()

    def _Annn(self):  # LD I, addr
        if self.live_trace:
            self.trace("LD I, 0x{:03x}".format(self.addr))

        self.i = self.addr

    def _Bnnn(self):  # JP V0, addr
        if self.live_trace:
            self.trace("JP V0, 0x{:03x}".format(self.addr))

        pc = self.v[0] + self.addr

        if pc > ADDR_TOP:
            self._anomaly("Jump beyond 0x{:03x}".format(ADDR_TOP))

        self.pc = pc

    def _Cxkk(self):  # RND Vx, byte
        if self.live_trace:
            self.trace("RND V{:01x}, 0x{:02x}".format(self.vx, self.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[self.vx] = self.rng.randint(0, 0xFF) & self.byte

    def _Dxyn(self):  # DRW Vx, Vy, nibble
        # Main sprite drawing routine.  Sprites are always 8 pixels wide and 'nibble' rows high.
        height = self.nibble

        if self.live_trace:
            self.trace("DRW V{:01x}, V{:01x}, 0x{:01x}".format(self.vx, self.vy, height))

        # The sprite's start always wraps.  Whether the rest of it wraps or is clipped is up to the framebuffer.
        vid_width, vid_height = self.framebuffer.get_vid_size()
        vx_pos = self.v[self.vx] % vid_width
        vy_pos = self.v[self.vy] % vid_height
        i = self.i
        self.v[0xF] = 0

        for y in range(height):
            spr_data = self.ram.read(i + y)
            scr_y = y + vy_pos

            for x in range(8):
                if spr_data & (0x80 >> x):
                    if self.framebuffer.xor_pixel(x + vx_pos, scr_y):
                        # Don't stop drawing.  Set the flag, and never unset it for this sprite.
                        self.v[0xF] = 1

    def _key_index(self):
        key = self.v[self.vx]

        if key >= NUM_KEYS:
            self._anomaly("Key 0x{:02x} does not exist".format(key))

        return key % NUM_KEYS

    def _Ex9E(self):  # SKP Vx
        if self.live_trace:
            self.trace("SKP V{:01x}".format(self.vx))

        if self.keypad[self._key_index()]:
            self.inc_pc()

    def _ExA1(self):  # SKNP Vx
        if self.live_trace:
            self.trace("SKNP V{:01x}".format(self.vx))

        if not self.keypad[self._key_index()]:
            self.inc_pc()

    def _Fx07(self):  # LD Vx, DT
        if self.live_trace:
            self.trace("LD V{:01x}, DT".format(self.vx))

        self.v[self.vx] = self.dt

    def _Fx0A(self):  # LD Vx, K
        if self.live_trace:
            self.trace("LD V{:01x}, K".format(self.vx))

        # Timers and the display must keep going while waiting, so rather than blocking, step the program counter back
        # and return.  This instruction is then fetched again on the next cycle.  If several keys are held, the highest
        # one wins.
        key = None

        for key_num in range(NUM_KEYS):
            if self.keypad[key_num]:
                key = key_num

        if key is None:
            self.dec_pc()
        else:
            self.v[self.vx] = key

    def _Fx15(self):  # LD DT, Vx
        if self.live_trace:
            self.trace("LD DT, V{:01x}".format(self.vx))

        self.dt = self.v[self.vx]

    def _Fx18(self):  # LD ST, Vx
        if self.live_trace:
            self.trace("LD ST, V{:01x}".format(self.vx))

        self.st = self.v[self.vx]

    def _Fx1E(self):  # ADD I, Vx
        if self.live_trace:
            self.trace("ADD I, V{:01x}".format(self.vx))

        val = self.i + self.v[self.vx]

        if val > ADDR_TOP:
            self._anomaly("Index moved beyond 0x{:03x}".format(ADDR_TOP))

        # Vf is left alone
        self.i = val & 0xFFFF

    def _Fx29(self):  # LD F, Vx
        if self.live_trace:
            self.trace("LD F, V{:01x}".format(self.vx))

        digit = self.v[self.vx]

        if digit > 0xF:
            self._anomaly("No font character for 0x{:02x}".format(digit))

        self.i = FONT_START + FONT_CHAR_SIZE * digit

    def _Fx33(self):  # LD B, Vx
        if self.live_trace:
            self.trace("LD B, V{:01x}".format(self.vx))

        val = self.v[self.vx]
        i = self.i
        self.ram.write(i, val // 100)             # Most-significant digit
        self.ram.write(i + 1, (val // 10) % 10)   # Middle digit
        self.ram.write(i + 2, val % 10)           # Least-significant digit

    def _post_Fx55_Fx65(self):
        if self.load_quirks:
            self.i = (self.i + self.vx + 1) & 0xFFFF

    def _Fx55(self):  # LD [I], Vx
        if self.live_trace:
            self.trace("LD [I], V{:01x}".format(self.vx))

        i = self.i

        for reg in range(self.vx + 1):
            self.ram.write(i + reg, self.v[reg])

        self._post_Fx55_Fx65()

    def _Fx65(self):  # LD Vx, [I]
        if self.live_trace:
            self.trace("LD V{:01x}, [I]".format(self.vx))

        i = self.i

        for reg in range(self.vx + 1):
            self.v[reg] = self.ram.read(i + reg)

        self._post_Fx55_Fx65()
