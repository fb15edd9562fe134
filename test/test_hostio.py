#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import os
import tempfile
import unittest
from pchip.hostio import Loader, ROMError
from pchip.ram import RAM


class TestLoader(unittest.TestCase):
    def setUp(self):
        self.loader = Loader()
        self.ram = RAM()

    def test_loader_load_file_present(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            filename = os.path.join(temp_dir, "test.ch8")

            with open(filename, "wb") as f:
                f.write(b"\x00\xE0\x12\x00")

            self.assertEqual(b"\x00\xE0\x12\x00", self.loader.load_binary(filename))

    def test_loader_load_file_missing(self):
        self.assertRaises(FileNotFoundError, self.loader.load_binary, "NoFile.ch8")

    def test_loader_load_rom(self):
        self.assertEqual(4, self.loader.load_rom(self.ram, b"\x00\xE0\x12\x00"))
        self.assertEqual(b"\x00\xE0\x12\x00", bytes(self.ram.read_block(0x200, 4)))
        self.assertEqual(0x0, self.ram.read(0x1FF))
        self.assertEqual(0x0, self.ram.read(0x204))

    def test_loader_load_rom_largest(self):
        rom = bytes(range(0x100)) * 0xE
        self.assertEqual(0xE00, self.loader.load_rom(self.ram, memoryview(rom)))
        self.assertEqual(0xFF, self.ram.read(0xFFF))

    def test_loader_load_rom_too_large(self):
        self.assertRaises(ROMError, self.loader.load_rom, self.ram, b"\xAA" * 0xE01)
        self.assertEqual(bytes(0x1000), bytes(self.ram.mem))
