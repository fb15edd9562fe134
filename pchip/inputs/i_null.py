#!/usr/bin/env python3

"""
Null Input Plugin

Base class for the other Input plugins, and usable by itself when the program
should run with no keys ever held.

The CHIP-8 keypad is level-triggered.  Instructions only ask whether a key is
held right now, never whether it was pressed or released since last time.  So
each plugin keeps a 16-byte 'held' array (1 = down), changes it as the host
reports keys, and update_keypad() copies the whole array into the CPU between
cycles.

The keymap is a comma-separated list of 16 host key codes, in CHIP-8 key order
(0x0 first, 0xF last).
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import NUM_KEYS


class InputsError(Exception):
    pass


def parse_keymap(keymap, force_lowercase=False):
    # Returns a dictionary of host key code -> CHIP-8 key number
    codes = keymap.split(",")

    if len(codes) != NUM_KEYS:
        raise InputsError("Keymap needs exactly {} comma-separated codes, got {}".format(NUM_KEYS, len(codes)))

    host_keys = {}

    for key_num, code in enumerate(codes):
        try:
            host_code = int(code)
        except ValueError:
            raise InputsError("Keymap code '{}' for key 0x{:01x} is not an integer".format(code, key_num)) from None

        if force_lowercase:
            # Terminals send characters, so both cases of a letter should map to the same key
            host_code = ord(chr(host_code).lower())

        if host_code in host_keys:
            raise InputsError("Keymap code {} is used for more than one key".format(host_code))

        host_keys[host_code] = key_num

    return host_keys


class Inputs:
    def __init__(self, keymap, renderer, force_lowercase=False):
        self.host_keys = parse_keymap(keymap, force_lowercase)
        self.renderer = renderer
        self.held = bytearray(NUM_KEYS)

    def press(self, key_num):
        self.held[key_num] = 1

    def release(self, key_num):
        self.held[key_num] = 0

    def process_messages(self):
        # Returns True once the user has asked to quit
        return False

    def update_keypad(self, keypad):
        keypad[:] = self.held

    def shutdown(self):
        self.held[:] = bytes(NUM_KEYS)
