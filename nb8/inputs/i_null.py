#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
host input functionality is required.

This also holds the emulated input latch: 6 boolean key states, which are only
ever changed by key_down and key_up.  The CPU reads the latch, but never writes
to it.  Host plugins translate their own events into these calls, via the
keymap.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from ..constants import DEFAULT_KEYMAP, NUM_KEYS


class InputsError(Exception):
    pass


class Inputs:
    def __init__(self, keymap=DEFAULT_KEYMAP, renderer=None):
        self.keymap_dict = {}
        self.renderer = renderer
        self.keys = [False] * NUM_KEYS
        keymap_split = keymap.split(",")

        if len(keymap_split) != NUM_KEYS:
            raise InputsError(
                "Incorrect number of keys defined -- {} required.  Use commas to split numbers".format(NUM_KEYS)
            )

        for key_num, key_defined in enumerate(keymap_split):
            try:
                key_defined_ord = int(key_defined)
            except ValueError:
                raise InputsError("Defined keys are not all integer values") from None

            if key_defined_ord in self.keymap_dict:
                raise InputsError("Duplicate keys defined")

            self.keymap_dict[key_defined_ord] = key_num

    def process_messages(self):
        return False  # Don't exit the program

    def key_down(self, key):
        self.keys[key] = True

    def key_up(self, key):
        self.keys[key] = False

    def is_key_down(self, key):
        return self.keys[key]

    def get_keys(self):
        # For debugging
        return self.keys

    def shutdown(self):
        pass
