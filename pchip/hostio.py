#!/usr/bin/env python3

"""
Host I/O Functionality

Handles reading ROM binaries from the host, and writing them into the program
area of RAM.  Save states are not supported.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import PROGRAM_START, MAX_ROM_SIZE


class ROMError(Exception):
    pass


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()

    def load_rom(self, ram, rom):
        # Anything bytes-like is accepted.  Size is checked before anything is written, so a failed load leaves RAM
        # untouched.  Instructions are not validated.
        rom_size = len(rom)

        if rom_size > MAX_ROM_SIZE:
            raise ROMError(
                "ROM is too large: {} bytes, but only {} bytes are available from 0x{:03x}".format(
                    rom_size, MAX_ROM_SIZE, PROGRAM_START
                )
            )

        ram.write_block(PROGRAM_START, rom)
        return rom_size
