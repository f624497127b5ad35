"""Unit tests for line tokenization."""

import unittest

from turtlesh_pkg.tokenizer import QuotedToken, is_quoted, tokenize


class TestTokenize(unittest.TestCase):
    """Test whitespace splitting and double-quote grouping."""

    def test_whitespace_split(self):
        self.assertEqual(tokenize("ls  -l\t/tmp\n"), ["ls", "-l", "/tmp"])

    def test_blank_line(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize("   \t "), [])

    def test_operators_are_separate_tokens(self):
        self.assertEqual(
            tokenize("echo hi | cat -n > out"),
            ["echo", "hi", "|", "cat", "-n", ">", "out"],
        )

    def test_operator_glued_to_word_is_not_split(self):
        self.assertEqual(tokenize("echo hi|cat"), ["echo", "hi|cat"])

    def test_quoted_group(self):
        self.assertEqual(tokenize('math "2 + 3"'), ["math", "2 + 3"])

    def test_quote_glued_to_word(self):
        self.assertEqual(tokenize('a"b c"d e'), ["ab cd", "e"])

    def test_empty_quotes(self):
        self.assertEqual(tokenize('echo ""'), ["echo", ""])

    def test_unterminated_quote(self):
        self.assertEqual(tokenize('echo "a b'), ["echo", "a b"])

    def test_quoted_tokens_are_marked(self):
        tokens = tokenize('grep "|" a"b"c plain')
        self.assertEqual(tokens, ["grep", "|", "abc", "plain"])
        self.assertIsInstance(tokens[1], QuotedToken)
        self.assertTrue(is_quoted(tokens[1]))
        self.assertTrue(is_quoted(tokens[2]))
        self.assertFalse(is_quoted(tokens[0]))
        self.assertFalse(is_quoted(tokens[3]))

    def test_marker_resets_between_tokens(self):
        tokens = tokenize('"x" y')
        self.assertTrue(is_quoted(tokens[0]))
        self.assertFalse(is_quoted(tokens[1]))


if __name__ == "__main__":
    unittest.main()
