#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nb8.constants import DEFAULT_KEYMAP
from nb8.inputs.i_null import Inputs, InputsError


class TestInputs(unittest.TestCase):
    def setUp(self):
        self.inputs = Inputs(DEFAULT_KEYMAP)

    def test_inputs_keymap(self):
        self.assertEqual({119: 0, 97: 1, 115: 2, 100: 3, 106: 4, 107: 5}, self.inputs.keymap_dict)

    def test_inputs_keymap_wrong_length(self):
        self.assertRaises(InputsError, Inputs, "1,2,3")
        self.assertRaises(InputsError, Inputs, "1,2,3,4,5,6,7")

    def test_inputs_keymap_not_integers(self):
        self.assertRaises(InputsError, Inputs, "1,2,3,4,5,x")

    def test_inputs_keymap_duplicates(self):
        self.assertRaises(InputsError, Inputs, "1,2,3,4,5,1")

    def test_inputs_latch(self):
        self.assertEqual([False] * 6, self.inputs.get_keys())
        self.inputs.key_down(2)
        self.inputs.key_down(5)
        self.assertTrue(self.inputs.is_key_down(2))
        self.assertTrue(self.inputs.is_key_down(5))
        self.assertFalse(self.inputs.is_key_down(0))
        self.inputs.key_up(2)
        self.assertFalse(self.inputs.is_key_down(2))
        self.assertEqual([False, False, False, False, False, True], self.inputs.get_keys())

    def test_inputs_process_messages(self):
        self.assertFalse(self.inputs.process_messages())
