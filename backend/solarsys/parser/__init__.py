"""Tokenizer and generic value parser for catalog text."""

from .tokenizer import Tokenizer, TokenType
from .value_parser import ValueParser

__all__ = ["Tokenizer", "TokenType", "ValueParser"]
