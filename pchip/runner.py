#!/usr/bin/env python3

"""
Host Runner

Drives the CPU against the wall clock.  The CPU itself has no notion of time:
every cycle runs one instruction and ticks both timers once.  The runner calls
it at a steady rate, processes inputs and refreshes the display at 60Hz, and
switches the buzzer on while the sound timer is running.

Because timers tick per cycle, the clock speed is also the timer rate.  The
default of 500 cycles a second keeps most programs responsive, but their delays
run about 8x shorter than on hardware with 60Hz timers.  A clock speed of 60
gives real-time timers at the cost of slow execution.

Timing is done by busy-waiting on perf_counter, as sleeping is nowhere near
precise enough at hundreds of cycles a second.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import DEFAULT_CLOCK_SPEED, DISPLAY_FREQ

DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class Runner:
    def __init__(self, cpu, framebuffer, inputs, audio, clock_speed=None):
        self.cpu = cpu
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.audio = audio

        # User can specify 0 for uncapped
        clock_speed = DEFAULT_CLOCK_SPEED if clock_speed is None else clock_speed
        self.core_interval = None if clock_speed <= 0 else 1.0 / clock_speed

        # Performance-related vars
        self.next_display_update_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

    def run(self):
        while True:
            this_time = perf_counter()  # Do this first for maximum precision

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = int(this_time) + 1.0
                # Reporting the performance should be done before a refresh, as refreshing will likely show the report
                self.framebuffer.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            # Prevent unnecessary display rendering in excess of host frame rate
            if this_time >= self.next_display_update_time:
                if self.inputs.process_messages():  # Process inputs at 60Hz too, to avoid slowdown
                    self.framebuffer.refresh_display()
                    return

                self.inputs.update_keypad(self.cpu.keypad)
                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.framebuffer.refresh_display()
                self.perf_counter_fps += 1

            self.step()

            if self.core_interval is not None:
                # Wait for next CPU cycle.  Do this last for maximum precision (takes into account time spent on this
                # cycle)
                next_time = this_time + self.core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

            self.perf_counter_ops += 1

    def step(self):
        self.cpu.cycle()
        self.audio.set_buzzer(self.cpu.st > 0)
