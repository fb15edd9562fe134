#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "PlainChip Emulator"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory map
MEM_SIZE = 0x1000
FONT_START = 0x50
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEM_SIZE - PROGRAM_START  # 0xE00 bytes

# Register file and call stack
NUM_REGISTERS = 0x10
NUM_KEYS = 0x10
STACK_SIZE = 16

# Display
VIDEO_WIDTH = 64
VIDEO_HEIGHT = 32
PIXEL_ON = 0xFFFFFFFF  # Each pixel is a whole 32-bit word, so it can be used directly as a colour
PIXEL_OFF = 0x00000000

# Host timing
DEFAULT_CLOCK_SPEED = 500  # Cycles per second.  Timers tick once per cycle, so this also sets their rate
DISPLAY_FREQ = 60.0

# Default mappings for keys 0-F, later populated into a dictionary.  Note that the keyscans (on a UK QWERTY keyboard)
# and ASCII characters for these are the same code
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Compatibility quirks (not including display wrapping).  All are off by default.
CPU_QUIRKS = ["shift", "load"]

# Built-in 4x5 hexadecimal digit sprites, 5 bytes each, copied to FONT_START
FONTSET = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
FONT_CHAR_SIZE = 5
