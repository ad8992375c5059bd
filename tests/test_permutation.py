import unittest

from alphabet_and_permutation import (
    Alpha26,
    Alphabet,
    Permutation,
    parse_cycles,
    wiring_to_cycles,
)
from errors import ConfigError, EnigmaError, PermutationError


class TestAlphabet(unittest.TestCase):
    def test_index_bijection(self) -> None:
        alpha = Alphabet("ABCD")
        self.assertEqual(alpha.size(), 4)
        self.assertEqual(len(alpha), 4)
        self.assertEqual(alpha.to_int("C"), 2)
        self.assertEqual(alpha.to_char(3), "D")
        self.assertIn("A", alpha)
        self.assertNotIn("E", alpha)

    def test_default_is_latin(self) -> None:
        self.assertEqual(Alphabet().chars, Alpha26)

    def test_rejects_bad_alphabets(self) -> None:
        for chars in ("", "ABCA", "AB C", "AB(C"):
            with self.assertRaises(ConfigError):
                Alphabet(chars)

    def test_foreign_symbol_and_index(self) -> None:
        alpha = Alphabet("ABCD")
        with self.assertRaises(EnigmaError):
            alpha.to_int("Z")
        with self.assertRaises(EnigmaError):
            alpha.to_char(4)


class TestCycleNotation(unittest.TestCase):
    def test_parse(self) -> None:
        self.assertEqual(parse_cycles("(ABC) (DE)"), ["ABC", "DE"])
        self.assertEqual(parse_cycles("(ABC)(DE)"), ["ABC", "DE"])
        self.assertEqual(parse_cycles("  "), [])
        self.assertEqual(parse_cycles("() (AB)"), ["AB"])

    def test_malformed(self) -> None:
        for text in ("(A B)", "AB", "(AB", "(AB) C", "(A(B))"):
            with self.assertRaises(PermutationError, msg=text):
                parse_cycles(text)

    def test_wiring_to_cycles(self) -> None:
        alpha = Alphabet("ABCD")
        self.assertEqual(wiring_to_cycles("BACD", alpha), ["AB"])
        self.assertEqual(wiring_to_cycles("BCDA", alpha), ["ABCD"])
        self.assertEqual(wiring_to_cycles("ABCD", alpha), [])
        with self.assertRaises(PermutationError):
            wiring_to_cycles("AACD", alpha)


class TestPermutation(unittest.TestCase):
    def setUp(self) -> None:
        self.alpha = Alphabet("ABCD")
        self.perm = Permutation.from_notation("(BACD)", self.alpha)

    def test_permute_and_invert(self) -> None:
        self.assertEqual([self.perm.permute(i) for i in range(4)], [2, 0, 3, 1])
        self.assertEqual([self.perm.invert(i) for i in range(4)], [1, 3, 0, 2])
        self.assertEqual(self.perm.permute_char("D"), "B")
        self.assertEqual(self.perm.invert_char("B"), "D")

    def test_indices_wrap(self) -> None:
        self.assertEqual(self.perm.permute(4), self.perm.permute(0))
        self.assertEqual(self.perm.permute(-1), self.perm.permute(3))
        self.assertEqual(self.perm.invert(9), self.perm.invert(1))

    def test_round_trip_every_index(self) -> None:
        alpha = Alphabet()
        perm = Permutation.from_wiring("EKMFLGDQVZNTOWYHXUSPAIBRCJ", alpha)
        for i in range(alpha.size()):
            self.assertEqual(perm.invert(perm.permute(i)), i)
            self.assertEqual(perm.permute(perm.invert(i)), i)

    def test_implicit_fixed_points(self) -> None:
        perm = Permutation.from_notation("(AB)", self.alpha)
        self.assertEqual(perm.permute(2), 2)
        self.assertEqual(perm.invert_char("D"), "D")
        self.assertFalse(perm.derangement())

    def test_derangement(self) -> None:
        self.assertTrue(self.perm.derangement())
        self.assertTrue(Permutation.from_notation("(AB) (CD)", self.alpha).derangement())
        self.assertFalse(Permutation.from_notation("(ABC) (D)", self.alpha).derangement())
        self.assertFalse(Permutation.identity(self.alpha).derangement())

    def test_derangement_is_structural(self) -> None:
        perm = Permutation.from_notation("(ABC)", self.alpha)
        self.assertFalse(perm.derangement())
        perm.permute(0)
        self.assertFalse(perm.derangement())

    def test_construction_errors(self) -> None:
        for cycles in (["ABZ"], ["ABA"], ["AB", "BC"], ["A B"]):
            with self.assertRaises(PermutationError, msg=cycles):
                Permutation(cycles, self.alpha)

    def test_wiring_matches_notation(self) -> None:
        self.assertEqual(Permutation.from_wiring("CADB", self.alpha), self.perm)
        self.assertEqual(self.perm.notation(), "(BACD)")


if __name__ == "__main__":
    unittest.main()
