#!/usr/bin/env python3

"""
CPU Emulator

Like a real computer, this is where most of the processing happens: each step
fetches a big-endian 16-bit opcode, moves the program counter past it, and then
decodes and executes it.

Decoding is done with dictionary lookups rather than chains of comparisons.
The first nibble selects either an instruction directly, or a family of
instructions which share that nibble.  Families are then looked up again, with
the opcode masked down to the nibbles that identify the instruction:
    * 0x0 - whole opcode (0xFFFF)
    * 0x5 - first two nibbles (0xFF00)
    * 0x6 to 0x9 - first three nibbles (0xFFF0)

Any opcode that isn't found halts emulation with a CPUError, as do the other
faults a program can cause (running off the end of memory, reading a key that
doesn't exist, or dividing by zero).  Faults are always raised before the
instruction changes anything, so the machine state can still be inspected.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from random import Random
from .constants import (
    APP_INTRO, DEFAULT_CLOCK_SPEED, DEFAULT_FONT_COLOUR, FAULT_ADDRESSING, FAULT_ARITHMETIC, FAULT_INVALID_KEY,
    FAULT_UNIMPLEMENTED, FONT_ROM_START, GLYPH_SIZE, NUM_KEYS, NUM_REGISTERS, RAM_SIZE, SCREEN_HEIGHT, SCREEN_WIDTH,
    SPRITE_ROM_START
)
from .ram import RAMError

CPU_ENDIAN = "big"   # Opcodes are big-endian
TIMER_FREQ = 60.0    # 60Hz delay timer
TIMER_INTERVAL = 1.0 / TIMER_FREQ
DISPLAY_FREQ = 60.0  # 60Hz emulated display refresh
DISPLAY_INTERVAL = 1.0 / DISPLAY_FREQ


class CPUError(Exception):
    def __init__(self, message, fault, opcode=None, pc=None):
        super().__init__(message)
        self.fault = fault
        self.opcode = opcode
        self.pc = pc


class CPU:
    def __init__(self, ram, framebuffer, inputs, debugger, rng=None, clock_speed=None):
        if ram.mem_size < RAM_SIZE:
            raise CPUError("RAM is too small to hold the sprite and font ROMs", FAULT_ADDRESSING)

        self.ram = ram
        self.framebuffer = framebuffer
        self.inputs = inputs
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.rng = Random() if rng is None else rng  # Anything with a 'randrange' method
        self.framebuffer.report_perf()

        if clock_speed is None:
            clock_speed = DEFAULT_CLOCK_SPEED

        # User can specify 0 for infinite
        self.core_interval = None if clock_speed <= 0 else 1.0 / clock_speed

        # Define instruction pointers.
        # x/y/z = 2nd/3rd/4th nibble (usually a register number)
        # nn = byte
        # nnn = address
        self.instructions = {
            # Initial lookup for instructions' first nibble
            0x0: self._0nnn,  # Alias for bitmask 0xFFFF
            0x1: self._1nnn,
            0x2: self._2xnn,
            0x3: self._3xnn,
            0x4: self._4xnn,
            0x5: self._5nnn,  # Alias for bitmask 0xFF00
            0x6: self._6nnn_7nnn_8nnn_9nnn,  # Alias for bitmask 0xFFF0
            0x7: self._6nnn_7nnn_8nnn_9nnn,  # Alias for bitmask 0xFFF0
            0x8: self._6nnn_7nnn_8nnn_9nnn,  # Alias for bitmask 0xFFF0
            0x9: self._6nnn_7nnn_8nnn_9nnn,  # Alias for bitmask 0xFFF0
            0xA: self._Axyz,
            0xD: self._Dxyz,
            0xE: self._Exyz,
            0xF: self._Fxyz
        }

        # Kept apart from the first-nibble table, since 0x0000 and 0x000C would clash with its keys
        self.masked_instructions = {
            # Instructions beginning with nibble 0x0, bitmask 0xFFFF (i.e., exact match)
            0x0000: self._0000,
            0x000C: self._000C,
            # Instructions beginning with nibble 0x5, bitmask 0xFF00
            0x5000: self._50yz,
            0x5100: self._51yz,
            0x5200: self._52yz,
            0x5300: self._53yz,
            0x5400: self._54yz,
            0x5500: self._55yz,
            0x5600: self._56yz,
            0x5700: self._57yz,
            0x5800: self._58yz,
            0x5900: self._59yz,
            0x5A00: self._5Ayz,
            # Instructions beginning with nibble 0x6/0x7/0x8/0x9, bitmask 0xFFF0
            0x6000: self._600z,
            0x6010: self._601z,
            0x7000: self._700z,
            0x7010: self._701z,
            0x8000: self._800z,
            0x9000: self._900z,
            0x9010: self._901z
        }

        # Initialise registers
        self.s = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so this should be fast
        self.f_reg = DEFAULT_FONT_COLOUR  # Font colour
        self.loop_point = 0
        self.dt = 0  # Delay timer, counts up

        # Initialise program counter and current opcode
        self.pc = 0
        self.debug_pc = 0
        self.opcode = 0

        # Display-related vars
        self.framebuffer.resize_vid(SCREEN_WIDTH, SCREEN_HEIGHT)

        # Timing and performance-related vars
        self.next_display_update_time = 0
        self.next_timer_tick_time = 0
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0

    def run(self, start_location):
        self.set_pc(start_location)
        self.next_timer_tick_time = perf_counter() + TIMER_INTERVAL

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
                    self.refresh_framebuffer()
                    return

                self.next_display_update_time = this_time + DISPLAY_INTERVAL
                self.refresh_framebuffer()
                self.perf_counter_fps += 1

            # Tick the delay timer once for every elapsed period, so it catches up if the CPU gets lagged
            while this_time >= self.next_timer_tick_time:
                self.tick_dt()
                self.next_timer_tick_time += TIMER_INTERVAL

            self.tick()

            if self.core_interval is not None:
                # Wait for next CPU instruction.  Do this last for maximum precision (takes into account time spent on
                # this instruction)
                next_time = this_time + self.core_interval

                while perf_counter() < next_time:  # Unfortunately we have to do this to get the timing right
                    pass

            self.perf_counter_ops += 1

    # Host-facing operations

    def load(self, data, start, end):
        try:
            data = bytes(data)
        except (TypeError, ValueError):
            self._fault(FAULT_ADDRESSING, "Load data is not a sequence of byte values", None, self.pc)

        if end - start != len(data):
            self._fault(
                FAULT_ADDRESSING,
                "Load range 0x{:04x}-0x{:04x} does not match the {} bytes supplied".format(start, end, len(data)),
                None, self.pc
            )

        if start < 0 or end > self.ram.mem_size:
            self._fault(
                FAULT_ADDRESSING, "Load range 0x{:04x}-0x{:04x} is outside memory".format(start, end), None, self.pc
            )

        self.ram.write_block(start, data)

    def tick(self):
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        self.inc_pc()  # Program counter updates after fetch, but before execute
        self.decode_exec()
        return self.pc

    def tick_dt(self):
        self.dt = (self.dt + 1) & 0xFFFF

    def key_down(self, key):
        self.inputs.key_down(key)

    def key_up(self, key):
        self.inputs.key_up(key)

    def get_screen(self):
        return self.framebuffer.get_screen()

    def set_pc(self, addr):
        self.pc = addr & 0xFFFF

    def get_loop_point(self):
        return self.loop_point

    def refresh_framebuffer(self):
        # Render pending screen updates.  Should be called whenever there will be a pause, a quit, or the display
        # refresh interval expires.
        self.framebuffer.refresh_display()

    # Fetch and decode

    def fetch(self):
        try:
            return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)
        except RAMError:
            self.opcode = 0  # Nothing was fetched
            self._fault(
                FAULT_ADDRESSING, "Cannot fetch an opcode from outside memory", None, self.pc
            )

    def _call_instruction(self, table, key):
        instruction = table.get(key)

        if instruction is None:
            self._opcode_fault(FAULT_UNIMPLEMENTED, "Opcode 0x{:04x} is not emulated".format(self.opcode))

        instruction()

    def decode_exec(self):
        self._call_instruction(self.instructions, (0xF000 & self.opcode) >> 12)

    def inc_pc(self):
        self.pc = (self.pc + 2) & 0xFFFF

    def skip(self):
        self.inc_pc()

    # References to the nibbles, byte and addr are always in the same opcode position throughout all instructions, so
    # avoid excessive code duplication.  Don't reference these more than necessary as they are recalculated each time.
    @property
    def x(self):
        return (self.opcode & 0xF00) >> 8

    @property
    def y(self):
        return (self.opcode & 0xF0) >> 4

    @property
    def z(self):
        return self.opcode & 0xF

    @property
    def addr(self):
        return self.opcode & 0xFFF

    @property
    def byte(self):
        return self.opcode & 0xFF

    # Faults

    def _fault(self, fault, reason, opcode, pc):
        raise CPUError(
            (
                "Emulation halted.\n\n" +
                "{}Debug info:\n" +
                "{}\n\n{} fault at address 0x{:04x}.  {}."
            ).format(
                APP_INTRO, self.debugger.debug(self, "???", verbose=True), fault.capitalize(), pc, reason
            ),
            fault, opcode, pc
        ) from None

    def _opcode_fault(self, fault, reason):
        self._fault(fault, reason, self.opcode, self.debug_pc)

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    # Instruction families

    def _0nnn(self):
        self._call_instruction(self.masked_instructions, self.opcode)

    def _5nnn(self):
        self._call_instruction(self.masked_instructions, self.opcode & 0xFF00)

    def _6nnn_7nnn_8nnn_9nnn(self):
        self._call_instruction(self.masked_instructions, self.opcode & 0xFFF0)

    # Instructions

    def _0000(self):  # NOP
        if self.live_debug:
            self.debug("NOP")

    def _000C(self):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()

    def _1nnn(self):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(self.addr))

        self.pc = self.addr

    def _2xnn(self):  # LD Sx, byte
        if self.live_debug:
            self.debug("LD S{:01x}, 0x{:02x}".format(self.x, self.byte))

        self.s[self.x] = self.byte

    def _3xnn(self):  # ADD Sx, byte
        sx = self.x
        byte = self.byte

        if self.live_debug:
            self.debug("ADD S{:01x}, 0x{:02x}".format(sx, byte))

        self.s[sx] = (self.s[sx] + byte) & 0xFF

    def _4xnn(self):  # SUB Sx, byte
        sx = self.x
        byte = self.byte

        if self.live_debug:
            self.debug("SUB S{:01x}, 0x{:02x}".format(sx, byte))

        self.s[sx] = (self.s[sx] - byte) & 0xFF

    def _debug_5nyz(self, mnemonic):
        self.debug("{} S{:01x}, S{:01x}".format(mnemonic, self.y, self.z))

    def _50yz(self):  # LD Sy, Sz
        if self.live_debug:
            self._debug_5nyz("LD")

        self.s[self.y] = self.s[self.z]

    def _51yz(self):  # ADD Sy, Sz
        if self.live_debug:
            self._debug_5nyz("ADD")

        sy = self.y
        self.s[sy] = (self.s[sy] + self.s[self.z]) & 0xFF

    def _52yz(self):  # SUB Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SUB")

        sy = self.y
        self.s[sy] = (self.s[sy] - self.s[self.z]) & 0xFF

    def _53yz(self):  # MUL Sy, Sz
        if self.live_debug:
            self._debug_5nyz("MUL")

        sy = self.y
        self.s[sy] = (self.s[sy] * self.s[self.z]) & 0xFF

    def _54yz(self):  # DIV Sy, Sz
        if self.live_debug:
            self._debug_5nyz("DIV")

        sy = self.y
        divisor = self.s[self.z]

        if divisor == 0:
            self._opcode_fault(FAULT_ARITHMETIC, "Division of S{:01x} by zero".format(sy))

        self.s[sy] //= divisor  # Quotient of two bytes always fits in a byte

    def _55yz(self):  # SE Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SE")

        if self.s[self.y] == self.s[self.z]:
            self.skip()

    def _56yz(self):  # SNE Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SNE")

        if self.s[self.y] != self.s[self.z]:
            self.skip()

    def _57yz(self):  # SGT Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SGT")

        if self.s[self.y] > self.s[self.z]:
            self.skip()

    # The two overlap tests treat each register as the left edge of an 8 pixel wide object.  The boundaries don't
    # match each other (the second wraps at the screen width, the first doesn't), but programs rely on them as-is.

    def _overlap_a_before_b(self, a, b):
        return a < b and ((a + 8) & 0xFF) > b

    def _overlap_b_before_a(self, a, b):
        b_right = (b + 8) % SCREEN_WIDTH
        return a < b_right and ((a + 8) & 0xFF) > b_right

    def _58yz(self):  # SOA Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SOA")

        if self._overlap_a_before_b(self.s[self.y], self.s[self.z]):
            self.skip()

    def _59yz(self):  # SOB Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SOB")

        if self._overlap_b_before_a(self.s[self.y], self.s[self.z]):
            self.skip()

    def _5Ayz(self):  # SCOL Sy, Sz
        if self.live_debug:
            self._debug_5nyz("SCOL")

        a = self.s[self.y]
        b = self.s[self.z]

        if self._overlap_a_before_b(a, b) or self._overlap_b_before_a(a, b) or a == b:
            self.skip()

    def _600z(self):  # LD F, nibble
        if self.live_debug:
            self.debug("LD F, 0x{:01x}".format(self.z))

        self.f_reg = self.z

    def _601z(self):  # LD F, Sz
        if self.live_debug:
            self.debug("LD F, S{:01x}".format(self.z))

        self.f_reg = self.s[self.z] & 0xF

    def _700z(self):  # RND Sz
        if self.live_debug:
            self.debug("RND S{:01x}".format(self.z))

        # A colour-sized value, not a full byte
        self.s[self.z] = self.rng.randrange(0x10)

    def _701z(self):  # LD L, Sz
        if self.live_debug:
            self.debug("LD L, S{:01x}".format(self.z))

        self.loop_point = self.s[self.z] & 0xF

    def _800z(self):  # LD L, nibble
        if self.live_debug:
            self.debug("LD L, 0x{:01x}".format(self.z))

        self.loop_point = self.z

    def _key_index(self):
        key = self.s[self.z]

        if key >= NUM_KEYS:
            self._opcode_fault(
                FAULT_INVALID_KEY, "Key {} in S{:01x} is out of range (0-{})".format(key, self.z, NUM_KEYS - 1)
            )

        return key

    def _900z(self):  # SKP Sz
        if self.live_debug:
            self.debug("SKP S{:01x}".format(self.z))

        if self.inputs.is_key_down(self._key_index()):
            self.skip()

    def _901z(self):  # SKNP Sz
        if self.live_debug:
            self.debug("SKNP S{:01x}".format(self.z))

        if not self.inputs.is_key_down(self._key_index()):
            self.skip()

    def _Axyz(self):  # SJNE nibble, Sy, Sz
        distance = self.x

        if self.live_debug:
            self.debug("SJNE 0x{:01x}, S{:01x}, S{:01x}".format(distance, self.y, self.z))

        if self.s[self.y] != self.s[self.z]:
            self.pc = (self.pc + distance * 2) & 0xFFFF

    # Drawing.  Glyphs are 8x8 pixels, stored as 8 rows of 4 bytes with 2 pixels per byte (high nibble on the left).
    # Sprites use their nibbles as colours, with 0 left transparent.  Font glyphs are stencils instead: only 0xF
    # nibbles are drawn, in the current font colour.

    def _read_glyph(self, location):
        try:
            return self.ram.read_block(location, GLYPH_SIZE)
        except RAMError:
            self._opcode_fault(FAULT_ADDRESSING, "Glyph at 0x{:04x} runs past the end of memory".format(location))

    def _blit_opaque(self, glyph, x_pos, y_pos):
        set_pixel = self.framebuffer.set_pixel  # The framebuffer wraps coordinates around the screen

        for i in range(4):
            scr_x = x_pos + i * 2

            for j in range(8):
                pixels = glyph[i + j * 4]
                scr_y = y_pos + j

                if pixels & 0xF0:
                    set_pixel(scr_x, scr_y, pixels >> 4)

                if pixels & 0x0F:
                    set_pixel(scr_x + 1, scr_y, pixels & 0x0F)

    def _blit_keyed(self, glyph, x_pos, y_pos):
        set_pixel = self.framebuffer.set_pixel
        colour = self.f_reg

        for i in range(4):
            scr_x = x_pos + i * 2

            for j in range(8):
                pixels = glyph[i + j * 4]
                scr_y = y_pos + j

                if (pixels & 0xF0) == 0xF0:
                    set_pixel(scr_x, scr_y, colour)

                if (pixels & 0x0F) == 0x0F:
                    set_pixel(scr_x + 1, scr_y, colour)

    def _Dxyz(self):  # DRW nibble, Sy, Sz
        sprite = self.x

        if self.live_debug:
            self.debug("DRW 0x{:01x}, S{:01x}, S{:01x}".format(sprite, self.y, self.z))

        glyph = self._read_glyph(SPRITE_ROM_START + sprite * GLYPH_SIZE)
        self._blit_opaque(glyph, self.s[self.y], self.s[self.z])

    def _Exyz(self):  # DEC Sx, Sy, Sz
        if self.live_debug:
            self.debug("DEC S{:01x}, S{:01x}, S{:01x}".format(self.x, self.y, self.z))

        # Read every glyph first, so nothing is drawn if one of them is out of range
        glyphs = [self._read_glyph(FONT_ROM_START + int(digit) * GLYPH_SIZE) for digit in str(self.s[self.x])]
        x_pos = self.s[self.y]
        y_pos = self.s[self.z]

        for digit_num, glyph in enumerate(glyphs):
            self._blit_keyed(glyph, x_pos + digit_num * 8, y_pos)

    def _Fxyz(self):  # DIG Sx, Sy, Sz
        if self.live_debug:
            self.debug("DIG S{:01x}, S{:01x}, S{:01x}".format(self.x, self.y, self.z))

        glyph = self._read_glyph(FONT_ROM_START + self.s[self.x] * GLYPH_SIZE)
        self._blit_keyed(glyph, self.s[self.y], self.s[self.z])
