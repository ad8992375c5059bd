import unittest

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError, MachineSetupError
from rotor_and_reflector import Rotor, RotorKind, fixed_rotor, moving_rotor, reflector


class TestRotor(unittest.TestCase):
    def setUp(self) -> None:
        self.alpha = Alphabet("ABCD")
        self.perm = Permutation.from_notation("(BACD)", self.alpha)

    def test_kinds(self) -> None:
        mover = moving_rotor("M", self.perm, "C")
        fixed = fixed_rotor("F", self.perm)
        refl = reflector("R", self.perm)
        self.assertTrue(mover.rotates())
        self.assertFalse(mover.reflecting())
        self.assertFalse(fixed.rotates())
        self.assertFalse(fixed.reflecting())
        self.assertFalse(refl.rotates())
        self.assertTrue(refl.reflecting())
        self.assertIs(RotorKind.from_tag("M"), RotorKind.MOVING)

    def test_convert_at_setting_zero(self) -> None:
        rotor = fixed_rotor("F", self.perm)
        self.assertEqual(rotor.convert_forward(0), 2)
        self.assertEqual(rotor.convert_backward(2), 0)

    def test_convert_respects_setting(self) -> None:
        rotor = moving_rotor("M", self.perm, "A")
        rotor.set("B")
        self.assertEqual(rotor.convert_forward(0), 3)
        self.assertEqual(rotor.convert_backward(3), 0)
        for i in range(4):
            self.assertEqual(rotor.convert_backward(rotor.convert_forward(i)), i)

    def test_advance_wraps_after_full_turn(self) -> None:
        rotor = moving_rotor("M", self.perm, "A")
        rotor.set(2)
        for _ in range(self.alpha.size()):
            rotor.advance()
        self.assertEqual(rotor.setting, 2)
        rotor.advance()
        self.assertEqual(rotor.window(), "D")

    def test_notch(self) -> None:
        rotor = moving_rotor("M", self.perm, "CD")
        self.assertFalse(rotor.at_notch())
        rotor.set("C")
        self.assertTrue(rotor.at_notch())
        rotor.advance()
        self.assertTrue(rotor.at_notch())
        rotor.advance()
        self.assertFalse(rotor.at_notch())

    def test_fixed_and_reflector_never_move(self) -> None:
        for rotor in (fixed_rotor("F", self.perm), reflector("R", self.perm)):
            rotor.advance()
            self.assertEqual(rotor.setting, 0)
            self.assertFalse(rotor.at_notch())

    def test_fixed_rotor_can_be_set(self) -> None:
        rotor = fixed_rotor("F", self.perm)
        rotor.set("D")
        self.assertEqual(rotor.setting, 3)

    def test_reflector_has_one_position(self) -> None:
        refl = reflector("R", self.perm)
        refl.set(0)
        with self.assertRaises(MachineSetupError):
            refl.set("B")

    def test_bad_setting(self) -> None:
        with self.assertRaises(MachineSetupError):
            moving_rotor("M", self.perm, "A").set("Z")

    def test_bad_notches(self) -> None:
        with self.assertRaises(ConfigError):
            moving_rotor("M", self.perm, "")
        with self.assertRaises(ConfigError):
            moving_rotor("M", self.perm, "Z")
        with self.assertRaises(ConfigError):
            Rotor("F", self.perm, RotorKind.FIXED, "A")
        with self.assertRaises(ConfigError):
            RotorKind.from_tag("X")


if __name__ == "__main__":
    unittest.main()
