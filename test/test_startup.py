#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from nb8 import main, StartupError
from nb8.constants import APP_NAME, FAULT_UNIMPLEMENTED
from nb8.cpu import CPUError


class TestStartup(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def _write_file(self, name, data):
        filename = os.path.join(self.temp_dir.name, name)

        with open(filename, "wb") as f:
            f.write(data)

        return filename

    def _args(self, program, **overrides):
        args = {
            "filename": self._write_file("program.n8", program),
            "sprites": None,
            "font": None,
            "clock_speed": 0,
            "renderer": "null",
            "scale": None,
            "keymap": None,
            "pygame_palette": None,
            "debug": False
        }
        args.update(overrides)
        return args

    def _run_main(self, args):
        with redirect_stdout(io.StringIO()) as output:
            main(args)

        return output.getvalue()

    def test_startup_runs_program(self):
        # Stops at the first unimplemented opcode after the program
        with self.assertRaises(CPUError) as context:
            self._run_main(self._args(b"\x20\x05\xC0\x00"))

        self.assertEqual(FAULT_UNIMPLEMENTED, context.exception.fault)
        self.assertEqual(0x002, context.exception.pc)

    def test_startup_banner(self):
        output = io.StringIO()

        with redirect_stdout(output):
            self.assertRaises(CPUError, main, self._args(b"\xC0\x00"))

        self.assertTrue(output.getvalue().startswith(APP_NAME))

    def test_startup_with_roms(self):
        sprites = self._write_file("sprites.bin", bytes(16 * 32))
        font = self._write_file("font.bin", bytes(10 * 32))
        args = self._args(b"\xC0\x00", sprites=sprites, font=font)
        self.assertRaises(CPUError, self._run_main, args)

    def test_startup_program_too_long(self):
        self.assertRaises(StartupError, self._run_main, self._args(bytes(0x201)))

    def test_startup_sprites_too_long(self):
        sprites = self._write_file("sprites.bin", bytes(16 * 32 + 1))
        self.assertRaises(StartupError, self._run_main, self._args(b"\xC0\x00", sprites=sprites))

    def test_startup_font_too_long(self):
        font = self._write_file("font.bin", bytes(10 * 32 + 1))
        self.assertRaises(StartupError, self._run_main, self._args(b"\xC0\x00", font=font))
