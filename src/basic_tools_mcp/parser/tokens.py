"""
Lossless tokenizer for Clojure-family S-expression text.

Every character of the input ends up in exactly one token, trivia included,
so concatenating token texts reproduces the input. Only unterminated string,
regex and char literals are lexical errors; delimiter balance is left to the
tree builder.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from basic_tools_mcp.exceptions import LexicalError


class TokenKind(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    PREFIX = "prefix"
    ATOM = "atom"
    STRING = "string"
    CHAR = "char"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    NEWLINE = "newline"


TRIVIA_KINDS = frozenset({TokenKind.WHITESPACE, TokenKind.NEWLINE, TokenKind.COMMENT})

# Open delimiter text -> matching close delimiter
CLOSING: Dict[str, str] = {
    "(": ")",
    "[": "]",
    "{": "}",
    "#{": "}",
    "#(": ")",
}

# Reader macros that consume two forms (metadata, then its target)
TWO_FORM_PREFIXES = frozenset({"^", "#^"})

# Characters that terminate an atom
_DELIMITERS = frozenset(' \t\n\r\f\v,()[]{}";')


@dataclass(frozen=True)
class Token:
    """One lexical unit: its kind, exact source text and start offset."""

    kind: TokenKind
    text: str
    offset: int

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA_KINDS

    @property
    def arity(self) -> int:
        """Number of forms a PREFIX token applies to."""
        if self.kind is not TokenKind.PREFIX:
            return 0
        return 2 if self.text in TWO_FORM_PREFIXES else 1

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, @{self.offset})"


def _is_whitespace(ch: str) -> bool:
    return ch == "," or (ch.isspace() and ch != "\n")


def _is_delimiter(ch: str) -> bool:
    return ch in _DELIMITERS or ch.isspace()


class Tokenizer:
    """Tokenize S-expression source into a gap-free token list."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _emit(self, kind: TokenKind, end: int) -> None:
        self.tokens.append(Token(kind, self.source[self.pos:end], self.pos))
        self.pos = end

    def _scan_while(self, start: int, predicate) -> int:
        end = start
        length = len(self.source)
        while end < length and predicate(self.source[end]):
            end += 1
        return end

    def _scan_atom(self, start: int) -> int:
        return self._scan_while(start, lambda ch: not _is_delimiter(ch))

    def _scan_to_eol(self, start: int) -> int:
        end = self.source.find("\n", start)
        return len(self.source) if end == -1 else end

    def _scan_string(self, quote_at: int) -> int:
        """Return the offset just past the closing quote of a string literal."""
        source = self.source
        i = quote_at + 1
        length = len(source)
        while i < length:
            ch = source[i]
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                return i + 1
            i += 1
        raise self._error("Unterminated string literal", self.pos)

    def _error(self, message: str, offset: int) -> LexicalError:
        before = self.source[:offset]
        line = before.count("\n") + 1
        column = offset - (before.rfind("\n") + 1) + 1
        return LexicalError(message, offset, line, column)

    def _read_dispatch(self) -> None:
        """Handle the forms introduced by '#'."""
        nxt = self._peek(1)
        start = self.pos
        if nxt in ("{", "("):
            self._emit(TokenKind.OPEN, start + 2)
        elif nxt == '"':
            self._emit(TokenKind.STRING, self._scan_string(start + 1))
        elif nxt == "!":
            self._emit(TokenKind.COMMENT, self._scan_to_eol(start))
        elif nxt in ("_", "'", "=", "^"):
            self._emit(TokenKind.PREFIX, start + 2)
        elif nxt == "?":
            end = start + 3 if self._peek(2) == "@" else start + 2
            self._emit(TokenKind.PREFIX, end)
        elif nxt == ":":
            # Namespaced map prefix: #:ns{...} or #::ns{...}
            self._emit(TokenKind.PREFIX, self._scan_atom(start + 2))
        elif nxt == "#":
            # Symbolic values: ##Inf, ##-Inf, ##NaN
            self._emit(TokenKind.ATOM, self._scan_atom(start + 2))
        elif nxt and not _is_delimiter(nxt):
            # Tagged literal: #inst "...", #uuid "...", #my/tag value
            self._emit(TokenKind.PREFIX, self._scan_atom(start + 1))
        else:
            self._emit(TokenKind.ATOM, start + 1)

    def _read_char(self) -> None:
        start = self.pos
        if start + 1 >= len(self.source):
            raise self._error("Unterminated character literal", start)
        # The first char after the backslash is always part of the literal,
        # so \( and \" never act as delimiters
        end = start + 2
        if self.source[start + 1].isalnum():
            end = self._scan_atom(end)
        self._emit(TokenKind.CHAR, end)

    def tokenize(self) -> List[Token]:
        """Produce the full token list for the source."""
        source = self.source
        length = len(source)
        while self.pos < length:
            ch = source[self.pos]
            start = self.pos

            if ch == "\n":
                self._emit(TokenKind.NEWLINE, start + 1)
            elif _is_whitespace(ch):
                self._emit(TokenKind.WHITESPACE, self._scan_while(start, _is_whitespace))
            elif ch == ";":
                self._emit(TokenKind.COMMENT, self._scan_to_eol(start))
            elif ch == '"':
                self._emit(TokenKind.STRING, self._scan_string(start))
            elif ch == "\\":
                self._read_char()
            elif ch in "([{":
                self._emit(TokenKind.OPEN, start + 1)
            elif ch in ")]}":
                self._emit(TokenKind.CLOSE, start + 1)
            elif ch == "#":
                self._read_dispatch()
            elif ch == "~":
                self._emit(TokenKind.PREFIX, start + 2 if self._peek(1) == "@" else start + 1)
            elif ch in "'`@^":
                self._emit(TokenKind.PREFIX, start + 1)
            else:
                self._emit(TokenKind.ATOM, self._scan_atom(start))

        return self.tokens


def tokenize(source: str) -> List[Token]:
    """
    Tokenize source text.

    Args:
        source: Any text

    Returns:
        Tokens covering the whole input in order

    Raises:
        LexicalError: For an unterminated string, regex or char literal
    """
    return Tokenizer(source).tokenize()
