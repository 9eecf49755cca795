"""Tokenizer for catalog text.

Produces names, quoted strings, numbers and the punctuation used by the
catalog grammar. Comments run from ``#`` to the end of the line.
"""

from enum import Enum
from typing import Optional, TextIO, Union

from solarsys.core.errors import CatalogSyntaxError


class TokenType(Enum):
    """Token kinds produced by the tokenizer."""

    BEGIN = "begin"
    NAME = "name"
    STRING = "string"
    NUMBER = "number"
    BEGIN_GROUP = "{"
    END_GROUP = "}"
    BEGIN_ARRAY = "["
    END_ARRAY = "]"
    EQUALS = "="
    BAR = "|"
    BEGIN_UNITS = "<"
    END_UNITS = ">"
    END = "end"


_PUNCTUATION = {
    "{": TokenType.BEGIN_GROUP,
    "}": TokenType.END_GROUP,
    "[": TokenType.BEGIN_ARRAY,
    "]": TokenType.END_ARRAY,
    "=": TokenType.EQUALS,
    "|": TokenType.BAR,
    "<": TokenType.BEGIN_UNITS,
    ">": TokenType.END_UNITS,
}

_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


class Tokenizer:
    """Pull tokenizer over a catalog source."""

    def __init__(self, source: Union[str, TextIO]):
        text = source if isinstance(source, str) else source.read()
        self._text = text
        self._pos = 0
        self._line = 1
        self._pushed_back = False
        self.token_type = TokenType.BEGIN
        self._value: Optional[Union[str, float]] = None

    @property
    def line_number(self) -> int:
        return self._line

    @property
    def name_value(self) -> str:
        return self._value if self.token_type == TokenType.NAME else ""

    @property
    def string_value(self) -> str:
        return self._value if self.token_type == TokenType.STRING else ""

    @property
    def number_value(self) -> float:
        return self._value if self.token_type == TokenType.NUMBER else 0.0

    def push_back(self) -> None:
        """Return the current token on the next call to next_token()."""
        self._pushed_back = True

    def next_token(self) -> TokenType:
        if self._pushed_back:
            self._pushed_back = False
            return self.token_type

        self._skip_whitespace_and_comments()

        if self._pos >= len(self._text):
            self.token_type = TokenType.END
            self._value = None
            return self.token_type

        ch = self._text[self._pos]
        if ch.isalpha() or ch == "_":
            self._read_name()
        elif ch == '"':
            self._read_string()
        elif ch.isdigit() or ch in "+-." and self._starts_number():
            self._read_number()
        elif ch in _PUNCTUATION:
            self._pos += 1
            self.token_type = _PUNCTUATION[ch]
            self._value = ch
        else:
            raise CatalogSyntaxError(f"unexpected character '{ch}'", self._line)

        return self.token_type

    def _skip_whitespace_and_comments(self) -> None:
        text = self._text
        while self._pos < len(text):
            ch = text[self._pos]
            if ch == "\n":
                self._line += 1
                self._pos += 1
            elif ch.isspace():
                self._pos += 1
            elif ch == "#":
                while self._pos < len(text) and text[self._pos] != "\n":
                    self._pos += 1
            else:
                break

    def _starts_number(self) -> bool:
        rest = self._text[self._pos + 1:self._pos + 3]
        if not rest:
            return False
        if rest[0].isdigit():
            return True
        return rest[0] == "." and len(rest) > 1 and rest[1].isdigit()

    def _read_name(self) -> None:
        start = self._pos
        text = self._text
        while self._pos < len(text) and (text[self._pos].isalnum() or text[self._pos] == "_"):
            self._pos += 1
        self.token_type = TokenType.NAME
        self._value = text[start:self._pos]

    def _read_string(self) -> None:
        text = self._text
        start_line = self._line
        self._pos += 1
        chars = []
        while True:
            if self._pos >= len(text):
                raise CatalogSyntaxError("unterminated string", start_line)
            ch = text[self._pos]
            if ch == '"':
                self._pos += 1
                break
            if ch == "\\" and self._pos + 1 < len(text):
                escaped = text[self._pos + 1]
                if escaped not in _ESCAPES:
                    raise CatalogSyntaxError(f"unknown escape sequence '\\{escaped}'", self._line)
                chars.append(_ESCAPES[escaped])
                self._pos += 2
                continue
            if ch == "\n":
                self._line += 1
            chars.append(ch)
            self._pos += 1
        self.token_type = TokenType.STRING
        self._value = "".join(chars)

    def _read_number(self) -> None:
        text = self._text
        start = self._pos
        if text[self._pos] in "+-":
            self._pos += 1
        while self._pos < len(text) and (text[self._pos].isdigit() or text[self._pos] == "."):
            self._pos += 1
        if self._pos < len(text) and text[self._pos] in "eE":
            exp = self._pos + 1
            if exp < len(text) and text[exp] in "+-":
                exp += 1
            if exp < len(text) and text[exp].isdigit():
                self._pos = exp
                while self._pos < len(text) and text[self._pos].isdigit():
                    self._pos += 1
        literal = text[start:self._pos]
        try:
            self._value = float(literal)
        except ValueError:
            raise CatalogSyntaxError(f"bad number '{literal}'", self._line) from None
        self.token_type = TokenType.NUMBER
