# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Splits a raw argument vector into a normalized stream of `Token`s.

The tokenizer is a single-pass iterator. It never looks at shell quoting: the
argument vector is assumed to already be split into logical arguments.

Normalization rules:
- `--name=VALUE` becomes an OPTION token `--name` with the attached value `VALUE`.
- POSIX-style bundles of single-character flags are expanded: `-abc` -> `-a -b -c`.
  When a flag in the bundle takes a value, the remainder of the bundle is that
  value: `-cVALUE`, `-abcVALUE`, `-c=VALUE`.
- `--` yields an END_OF_OPTIONS token. Every later argument is an ARGUMENT.
- A lone `-` and negative numbers (`-5`, `-2.5`) are ARGUMENTs unless an option
  with that exact name exists.

Option values are not tokenized: the binder pulls them straight from the raw
vector with `peek_raw()` / `next_raw()`, so `--pair -a -b` can bind `-a` and `-b`
literally.
"""
from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from bindery.parser.command_spec import CommandSpec

END_OF_OPTIONS = "--"
NEGATIVE_NUMBER = re.compile(r"^-\d+(\.\d+)?([eE][-+]?\d+)?$|^-\.\d+$")


class TokenKind(Enum):
    OPTION = "option"
    ARGUMENT = "argument"
    END_OF_OPTIONS = "end_of_options"


@dataclass(frozen=True)
class Token:
    """
    A lexical token.

    Attributes:
        kind (TokenKind): What the token is.
        text (str): Option name (for OPTION) or the argument itself.
        raw (str): The original argument the token came from.
        attached (str | None): Value attached with `=` or inside a short bundle.
    """

    kind: TokenKind
    text: str
    raw: str
    attached: str | None = None

    @property
    def from_bundle(self) -> bool:
        return self.kind is TokenKind.OPTION and self.text != self.raw and not (
            self.raw.startswith(f"{self.text}=")
        )


class Tokenizer:
    """
    Iterator over the tokens of one argument vector.

    `spec` is the command level tokens are interpreted against; the binder
    reassigns it when a subcommand is entered.
    """

    def __init__(
        self,
        args: Iterable[str],
        spec: CommandSpec,
        posix_clustering: bool = True,
    ) -> None:
        self.spec: CommandSpec = spec
        self.posix_clustering: bool = posix_clustering
        self.end_of_options: bool = False
        self._args: deque[str] = deque(args)
        self._bundle: deque[tuple[str, str]] = deque()

    def __iter__(self) -> Tokenizer:
        return self

    def __next__(self) -> Token:
        if self._bundle:
            remainder, origin = self._bundle.popleft()
            return self._split_bundle(remainder, origin)
        if not self._args:
            raise StopIteration
        raw = self._args.popleft()
        return self._classify(raw)

    def peek_raw(self) -> str | None:
        """Next unread raw argument, or None if exhausted or mid-bundle."""
        if self._bundle or not self._args:
            return None
        return self._args[0]

    def next_raw(self) -> str:
        """Consume the next raw argument without interpreting it."""
        if self._bundle:
            raise IndexError("Cannot read a raw argument while expanding a bundle")
        return self._args.popleft()

    def remaining(self) -> int:
        return len(self._args)

    def _classify(self, raw: str) -> Token:
        if self.end_of_options:
            return Token(TokenKind.ARGUMENT, raw, raw)
        if raw == END_OF_OPTIONS:
            self.end_of_options = True
            return Token(TokenKind.END_OF_OPTIONS, raw, raw)
        if self.spec.lookup(raw):
            return Token(TokenKind.OPTION, raw, raw)
        if not raw.startswith("-") or raw == "-" or NEGATIVE_NUMBER.match(raw):
            return Token(TokenKind.ARGUMENT, raw, raw)
        if raw.startswith("--"):
            name, sep, value = raw.partition("=")
            return Token(TokenKind.OPTION, name, raw, value if sep else None)
        return self._split_bundle(raw, raw)

    def _split_bundle(self, remainder: str, origin: str) -> Token:
        """Expand a POSIX-style bundle such as `-abc` or `-cVALUE`."""
        head, rest = remainder[:2], remainder[2:]
        match = self.spec.lookup(head)
        if match is None:
            if rest.startswith("="):
                return Token(TokenKind.OPTION, head, origin, rest[1:])
            return Token(TokenKind.OPTION, remainder, origin)
        option, _ = match
        if not rest:
            return Token(TokenKind.OPTION, head, origin)
        if rest.startswith("="):
            return Token(TokenKind.OPTION, head, origin, rest[1:])
        if not option.is_flag:
            return Token(TokenKind.OPTION, head, origin, rest)
        if not self.posix_clustering:
            return Token(TokenKind.OPTION, remainder, origin)
        self._bundle.append((f"-{rest}", origin))
        return Token(TokenKind.OPTION, head, origin)
