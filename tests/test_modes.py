import unittest
from src.core.modes import expand_modes, ModeChange, MalformedModeError

class TestExpandModes(unittest.TestCase):

    def test_mixed_signs(self):
        changes = expand_modes("+o-v", ["alice", "bob"])
        self.assertEqual(changes, [
            ModeChange("+", "o", "alice"),
            ModeChange("-", "v", "bob"),
        ])

    def test_sign_applies_until_next_sign(self):
        changes = expand_modes("+ov-o", ["a", "b", "c"])
        self.assertEqual([c.mode for c in changes], ["+o", "+v", "-o"])
        self.assertEqual([c.target for c in changes], ["a", "b", "c"])

    def test_extra_targets_are_ignored(self):
        changes = expand_modes("-v", ["alice", "bob"])
        self.assertEqual(changes, [ModeChange("-", "v", "alice")])

    def test_missing_leading_sign(self):
        with self.assertRaises(MalformedModeError):
            expand_modes("o+v", ["alice", "bob"])

    def test_empty_flags(self):
        with self.assertRaises(MalformedModeError):
            expand_modes("", ["alice"])

    def test_more_letters_than_targets(self):
        with self.assertRaises(MalformedModeError):
            expand_modes("+ooo", ["alice", "bob"])

    def test_malformed_is_a_value_error(self):
        self.assertTrue(issubclass(MalformedModeError, ValueError))

if __name__ == '__main__':
    unittest.main()
