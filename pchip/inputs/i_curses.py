#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

A terminal only sends characters.  It never says when a key goes down or comes
back up, so 'held' has to be guessed: each character for a mapped key holds
that key for KEY_HOLD_TIME seconds, and keyboard auto-repeat keeps extending
the hold while the key really is down.  Once the characters stop, the key is
released on the next poll after its time runs out.

getch() blocks, so it runs on a daemon reader thread, which hands characters to
the main thread through a queue.  ESC or CTRL+C asks the host to quit.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Event, Thread
from time import time
from .i_null import Inputs as InputsBase
from ..constants import NUM_KEYS

KEY_HOLD_TIME = 0.2
QUIT_CHARS = (27, 3)  # ESC, CTRL+C


class KeyReader(Thread):
    def __init__(self, curses_screen):
        # As a daemon, a reader stuck in getch() won't stop the program exiting
        super().__init__(daemon=True)
        self.curses_screen = curses_screen
        self.chars = queue.Queue(64)
        self.stopping = Event()

    def run(self):
        while not self.stopping.is_set():
            char = self.curses_screen.getch()

            if char < 0:
                continue

            if char in QUIT_CHARS:
                self.chars.put(char)  # Must get through, so wait for room if necessary
                break

            try:
                self.chars.put(char, block=False)
            except queue.Full:
                # Main thread is behind.  Losing an auto-repeat only shortens a hold.
                pass


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        super().__init__(keymap, renderer, force_lowercase=True)
        self.release_times = [0.0] * NUM_KEYS
        self.reader = KeyReader(renderer.get_curses_screen())
        self.reader.start()

    def process_messages(self):
        now = time()

        while True:
            try:
                char = self.reader.chars.get(block=False)
            except queue.Empty:
                break

            if self.handle_char(char, now):
                return True

        self.release_expired(now)
        return False

    def handle_char(self, char, now):
        # Returns True if the character asks to quit
        if char in QUIT_CHARS:
            return True

        key_num = self.host_keys.get(ord(chr(char).lower()))

        if key_num is not None:
            self.release_times[key_num] = now + KEY_HOLD_TIME
            self.press(key_num)

        return False

    def release_expired(self, now):
        for key_num in range(NUM_KEYS):
            if self.held[key_num] and self.release_times[key_num] <= now:
                self.release(key_num)

    def shutdown(self):
        # Don't join: the reader is probably blocked until the next keypress
        self.reader.stopping.set()
        super().shutdown()
