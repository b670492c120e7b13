import unittest

from xlbf import BracketMatcher, BrainfuckSyntaxError, find_matching_bracket


class FindMatchingBracketTests(unittest.TestCase):
    def test_simple_pair(self) -> None:
        self.assertEqual(find_matching_bracket("[-]", 0), 2)
        self.assertEqual(find_matching_bracket("[-]", 2), 0)

    def test_nested_pairs(self) -> None:
        code = "+[>[-]<[->+<]]."
        self.assertEqual(find_matching_bracket(code, 1), 13)
        self.assertEqual(find_matching_bracket(code, 13), 1)
        self.assertEqual(find_matching_bracket(code, 3), 5)
        self.assertEqual(find_matching_bracket(code, 12), 7)

    def test_ignores_other_characters(self) -> None:
        code = "[ comment\n with text ]"
        self.assertEqual(find_matching_bracket(code, 0), len(code) - 1)

    def test_unmatched_open(self) -> None:
        with self.assertRaises(BrainfuckSyntaxError) as ctx:
            find_matching_bracket("+[[-]", 1)
        self.assertEqual(ctx.exception.missing, "]")
        self.assertEqual(ctx.exception.position, 1)

    def test_unmatched_close(self) -> None:
        with self.assertRaises(BrainfuckSyntaxError) as ctx:
            find_matching_bracket("[-]]", 3)
        self.assertEqual(ctx.exception.missing, "[")
        self.assertIn("Missing '['", str(ctx.exception))

    def test_non_bracket_position(self) -> None:
        with self.assertRaises(ValueError):
            find_matching_bracket("+[-]", 0)


class BracketMatcherTests(unittest.TestCase):
    def test_matches_like_scan_and_caches_both_ends(self) -> None:
        matcher = BracketMatcher("[[-]>]")
        self.assertEqual(matcher.match(0), 5)
        self.assertEqual(matcher.match(5), 0)
        self.assertEqual(matcher.match(1), 3)
        self.assertEqual(matcher._partners, {0: 5, 5: 0, 1: 3, 3: 1})

    def test_unmatched_is_raised_every_time(self) -> None:
        matcher = BracketMatcher("[")
        for _ in range(2):
            with self.assertRaises(BrainfuckSyntaxError):
                matcher.match(0)


if __name__ == "__main__":
    unittest.main()
