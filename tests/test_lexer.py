"""
Test suite for the toyc lexer.

Tests cover:
- Identifier, keyword, number and character tokens
- Comment skipping and end-of-input handling
- Greedy splitting of numbers followed by letters
- Source location tracking

Author: xwest
"""

import io
import os
import sys
import tempfile
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from toyc.lexer import Lexer, TokenType, tokenize_string, tokenize_file


class TestLexer(unittest.TestCase):
    """Test cases for the lexer."""

    def _types(self, source: str):
        return [token.type for token in tokenize_string(source)]

    def test_identifiers_and_keyword(self):
        """'def' is the only keyword; identifiers may contain digits after the first letter."""
        tokens = tokenize_string("def foo x1 define")

        self.assertEqual(tokens[0].type, TokenType.DEF)
        self.assertEqual([t.value for t in tokens[1:4]], ["foo", "x1", "define"])
        self.assertTrue(all(t.is_identifier for t in tokens[1:4]))
        self.assertEqual(tokens[-1].type, TokenType.EOF)

    def test_numbers(self):
        tokens = tokenize_string("0 42 007")
        self.assertEqual([t.value for t in tokens[:-1]], [0, 42, 7])
        self.assertEqual(tokens[2].lexeme, "007")

    def test_single_characters(self):
        tokens = tokenize_string("+-*/(),;%")
        self.assertTrue(all(t.type == TokenType.CHAR for t in tokens[:-1]))
        self.assertEqual("".join(t.value for t in tokens[:-1]), "+-*/(),;%")

    def test_whitespace_is_skipped(self):
        self.assertEqual(self._types(" \t\n 1 \r\n 2 "),
                         [TokenType.NUMBER, TokenType.NUMBER, TokenType.EOF])

    def test_comment_skipping(self):
        """A comment line yields no tokens."""
        tokens = tokenize_string("# ignore\n5")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].type, TokenType.NUMBER)
        self.assertEqual(tokens[0].value, 5)

    def test_comment_at_end_of_input(self):
        self.assertEqual(self._types("1 # trailing"), [TokenType.NUMBER, TokenType.EOF])

    def test_comment_ended_by_carriage_return(self):
        self.assertEqual(self._types("# one\r2"), [TokenType.NUMBER, TokenType.EOF])

    def test_consecutive_comments(self):
        self.assertEqual(self._types("# a\n# b\n\nx"), [TokenType.IDENTIFIER, TokenType.EOF])

    def test_eof_is_idempotent(self):
        lexer = Lexer("x")
        self.assertEqual(lexer.next_token().type, TokenType.IDENTIFIER)
        for _ in range(3):
            self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_empty_input(self):
        lexer = Lexer("")
        self.assertEqual(lexer.next_token().type, TokenType.EOF)
        self.assertEqual(lexer.next_token().type, TokenType.EOF)

    def test_number_followed_by_letters_is_split(self):
        """12abc scans greedily as NUMBER then IDENTIFIER, with a warning."""
        lexer = Lexer("12abc")
        tokens = lexer.tokenize()

        self.assertEqual([t.type for t in tokens],
                         [TokenType.NUMBER, TokenType.IDENTIFIER, TokenType.EOF])
        self.assertEqual(tokens[0].value, 12)
        self.assertEqual(tokens[1].value, "abc")

        self.assertTrue(lexer.has_warnings())
        self.assertEqual(lexer.warnings[0].code, "L101")

    def test_non_ascii_letters_are_characters(self):
        tokens = tokenize_string("é")
        self.assertEqual(tokens[0].type, TokenType.CHAR)
        self.assertEqual(tokens[0].value, "é")

    def test_locations(self):
        tokens = tokenize_string("a\n  bc", filename="prog.toy")

        self.assertEqual((tokens[0].location.line, tokens[0].location.column), (1, 1))
        self.assertEqual((tokens[1].location.line, tokens[1].location.column), (2, 3))
        self.assertEqual(tokens[1].location.offset, 4)
        self.assertEqual(str(tokens[1].location), "prog.toy:2:3")

    def test_stream_source(self):
        stream = io.StringIO("def f(x) x")
        tokens = Lexer(stream).tokenize()
        self.assertEqual(len(tokens), 7)
        self.assertFalse(stream.closed)

    def test_tokenize_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.toy")
            with open(path, "w", encoding="utf-8") as f:
                f.write("def one() 1\n")

            tokens = tokenize_file(path)

        self.assertEqual(tokens[0].type, TokenType.DEF)
        self.assertEqual(tokens[0].location.filename, path)
        self.assertEqual(tokens[-1].type, TokenType.EOF)


if __name__ == '__main__':
    unittest.main()
