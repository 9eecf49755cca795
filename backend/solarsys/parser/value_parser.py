"""Generic value parser.

Turns the token stream into a tree of plain Python values:

    number            -> float
    "string"          -> str
    true / false      -> bool
    [ v1 v2 ... ]     -> list
    { Key value ... } -> dict (keys keep their insertion order)
"""

from typing import Any, Dict, List

from solarsys.core.errors import CatalogSyntaxError

from .tokenizer import Tokenizer, TokenType


class ValueParser:
    """Reads one value at a time from a Tokenizer."""

    def __init__(self, tokenizer: Tokenizer):
        self.tokenizer = tokenizer

    def read_value(self) -> Any:
        """
        Read the value starting at the next token.

        Raises:
            CatalogSyntaxError: If the tokens do not form a value
        """
        tok = self.tokenizer
        token = tok.next_token()

        if token == TokenType.NUMBER:
            return tok.number_value
        if token == TokenType.STRING:
            return tok.string_value
        if token == TokenType.NAME:
            if tok.name_value == "true":
                return True
            if tok.name_value == "false":
                return False
            raise CatalogSyntaxError(f"unexpected name '{tok.name_value}'", tok.line_number)
        if token == TokenType.BEGIN_ARRAY:
            return self._read_array()
        if token == TokenType.BEGIN_GROUP:
            return self._read_hash()

        raise CatalogSyntaxError(f"value expected, found '{token.value}'", tok.line_number)

    def _read_array(self) -> List[Any]:
        tok = self.tokenizer
        values = []
        while tok.next_token() != TokenType.END_ARRAY:
            if tok.token_type == TokenType.END:
                raise CatalogSyntaxError("unterminated array", tok.line_number)
            tok.push_back()
            values.append(self.read_value())
        return values

    def _read_hash(self) -> Dict[str, Any]:
        tok = self.tokenizer
        values = {}
        while tok.next_token() != TokenType.END_GROUP:
            if tok.token_type != TokenType.NAME:
                raise CatalogSyntaxError("property name expected", tok.line_number)
            key = tok.name_value
            values[key] = self.read_value()
        return values
