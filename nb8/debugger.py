#!/usr/bin/env python3

"""
CPU Debugger

If enabled, this will output information before each instruction executed:
    * All 16 of the [S] registers, starting with most significant (Sf) and
      reducing to least significant (S0)
    * F  - Font colour register
    * LP - Loop point register
    * DT - Delay timer
    * PC - Program counter
    * OP - OpCode number
    * IN - Decoded instruction

If a fault occurs, all of the above will be outputted, with the addition of:
    * Keys - Input latch contents
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, instruction, verbose=False):
        debug_str = (
            "S: 0x" + ("{:02x}" * 16) + " F: 0x{:01x} LP: 0x{:04x} DT: 0x{:04x} PC: 0x{:04x} OP: 0x{:04x} IN: {}"
        ).format(
            *[cpu.s[reg_num] for reg_num in range(15, -1, -1)] +
            [cpu.f_reg, cpu.loop_point, cpu.dt, cpu.debug_pc, cpu.opcode, instruction]
        )

        if verbose:
            keys_str = "".join("1" if key else "0" for key in cpu.inputs.get_keys())
            debug_str += "\nKeys: {}".format(keys_str)

        return debug_str

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        print(self.debug(cpu, instruction))
