"""
Bindery CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .arity import Arity, IndexRange
from .binder import Binder
from .command_spec import CommandSpec
from .converters import Converter, ConverterRegistry
from .option_spec import OptionSpec
from .parse_result import (
    HelpRequested,
    OptionMatch,
    ParseError,
    ParseErrorKind,
    ParseFailed,
    ParseOutcome,
    Parsed,
    ParseResult,
    PositionalMatch,
    VersionRequested,
)
from .positional_spec import PositionalParamSpec
from .tokenizer import Token, Tokenizer, TokenKind
from .value_type import ValueKind, ValueType

__all__ = [
    "Arity",
    "Binder",
    "CommandSpec",
    "Converter",
    "ConverterRegistry",
    "HelpRequested",
    "IndexRange",
    "OptionMatch",
    "OptionSpec",
    "ParseError",
    "ParseErrorKind",
    "ParseFailed",
    "ParseOutcome",
    "Parsed",
    "ParseResult",
    "PositionalMatch",
    "PositionalParamSpec",
    "Token",
    "TokenKind",
    "Tokenizer",
    "ValueKind",
    "ValueType",
    "VersionRequested",
]
