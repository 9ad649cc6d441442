# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements the `Binder`, which matches a token stream against a
validated `CommandSpec` and binds converted values into a `ParseResult`.

Matching rules:
- Exact option names always win. With `abbreviated_options` enabled, a `--` token
  may also resolve to a unique prefix of one option's long names; a prefix shared
  by several options is reported as ambiguous.
- A fixed-arity option consumes exactly that many following raw arguments,
  whatever they look like (`--pair -a -b` binds `-a` and `-b`).
- A variable-arity option consumes greedily, stopping at its maximum, at `--`, at
  a token naming a known option, or at a subcommand name.
- Collection targets accumulate values across occurrences; scalar targets keep
  the last occurrence.
- Non-option tokens are bound to the positional parameter whose index range
  covers the running positional index.
- A subcommand name switches matching to the nested command level.

Problems are collected as `ParseError` records instead of raised. A bad token
only aborts its own processing; parsing continues so that every failure class
present in the input is reported. After the stream is exhausted each entered
level is checked for missing required options and positional shortfalls.

Example Usage:
    binder = Binder(spec, settings=ParserSettings(abbreviated_options=True))
    outcome = binder.parse(["--tree", "-L", "2", "src"])
    if isinstance(outcome, Parsed):
        outcome.result.value_of("--level")
"""
from __future__ import annotations

from typing import Any, Iterable

from bindery.exceptions import ConversionError, UnsupportedTypeError
from bindery.logger import logger
from bindery.parser.command_spec import CommandSpec, ParamSpec
from bindery.parser.converters import Converter, ConverterRegistry, convert_bool
from bindery.parser.option_spec import OptionSpec
from bindery.parser.parse_result import (
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
from bindery.parser.tokenizer import END_OF_OPTIONS, Token, Tokenizer, TokenKind
from bindery.settings import ParserSettings


class _LevelState:
    """Per-level bookkeeping while the token stream is consumed."""

    def __init__(self, spec: CommandSpec, result: ParseResult) -> None:
        self.spec = spec
        self.result = result
        self.positional_index = 0
        self.positional_counts: dict[ParamSpec, int] = {}


class Binder:
    """
    Parses argument vectors against one validated `CommandSpec`.

    Converters for every option and positional (including those of nested
    subcommands) are resolved once, when the binder is created. A binder holds no
    per-parse state and can be shared by concurrent, independent parses.
    """

    def __init__(
        self,
        spec: CommandSpec,
        registry: ConverterRegistry | None = None,
        settings: ParserSettings | None = None,
    ) -> None:
        self.spec: CommandSpec = spec.validate()
        self.registry: ConverterRegistry = registry or ConverterRegistry()
        self.settings: ParserSettings = settings or ParserSettings()
        self._converters: dict[ParamSpec, Converter | UnsupportedTypeError] = {}
        self._resolve_converters(self.spec)

    def _resolve_converters(self, spec: CommandSpec) -> None:
        for param in (*spec.options, *spec.positionals):
            if isinstance(param, OptionSpec) and param.is_flag and param.converter is None:
                continue
            try:
                self._converters[param] = self.registry.resolve(
                    param.value_type, param.converter
                )
            except UnsupportedTypeError as error:
                logger.debug("No converter for '%s': %s", param, error)
                self._converters[param] = error
        for subcommand in spec.subcommands.values():
            self._resolve_converters(subcommand)

    def parse(self, args: Iterable[str]) -> ParseOutcome:
        """
        Parse an argument vector.

        Args:
            args (Iterable[str]): The already-split argument vector.

        Returns:
            ParseOutcome: `HelpRequested`, `VersionRequested`, `ParseFailed`, or `Parsed`.
        """
        args = list(args)
        logger.debug("Parsing %d argument(s) for '%s': %s", len(args), self.spec.name, args)
        root = ParseResult(self.spec)
        level = _LevelState(self.spec, root)
        levels = [level]
        tokens = Tokenizer(args, self.spec, posix_clustering=self.settings.posix_clustering)

        for token in tokens:
            if token.kind is TokenKind.END_OF_OPTIONS:
                continue
            if token.kind is TokenKind.ARGUMENT:
                subcommand = None
                if not tokens.end_of_options:
                    subcommand = level.spec.subcommand(token.text)
                if subcommand is not None:
                    level = self._enter_subcommand(level, subcommand, tokens)
                    levels.append(level)
                    continue
                self._bind_positional(level, token)
                continue
            self._bind_option(level, token, tokens)

        for state in levels:
            self._check_requirements(state)
        root.complete()
        return self._outcome(root)

    def _enter_subcommand(
        self, level: _LevelState, subcommand: CommandSpec, tokens: Tokenizer
    ) -> _LevelState:
        logger.debug("Entering subcommand '%s' of '%s'", subcommand.name, level.spec.name)
        child = ParseResult(subcommand, parent=level.result)
        level.result.attach_subcommand(child)
        tokens.spec = subcommand
        return _LevelState(subcommand, child)

    def _error(
        self,
        level: _LevelState,
        kind: ParseErrorKind,
        message: str,
        token: str | None = None,
        candidates: Iterable[str] = (),
    ) -> None:
        error = ParseError(
            kind=kind,
            message=message,
            command_path=level.result.command_path,
            token=token,
            candidates=tuple(candidates),
        )
        logger.debug("Parse error in '%s': %s", error.command_path, message)
        level.result.add_error(error)

    def _resolve_option(
        self, level: _LevelState, token: Token
    ) -> tuple[OptionSpec, bool] | None:
        """Resolve a token to `(option, negated)`, recording failures."""
        exact = level.spec.lookup(token.text)
        if exact is not None:
            return exact

        if self.settings.abbreviated_options:
            candidates = level.spec.prefix_candidates(token.text)
            options = {id(option): (option, negated) for _, option, negated in candidates}
            if len(options) == 1:
                return next(iter(options.values()))
            if len(options) > 1:
                names = [name for name, _, _ in candidates]
                self._error(
                    level,
                    ParseErrorKind.AMBIGUOUS_OPTION,
                    f"Option '{token.text}' is ambiguous: it matches {', '.join(names)}",
                    token=token.raw,
                    candidates=names,
                )
                return None

        if self.settings.allow_unmatched:
            unmatched = token.text if token.from_bundle else token.raw
            logger.debug("Unmatched option '%s' kept as leftover", unmatched)
            level.result.add_unmatched(unmatched)
            return None
        context = f" (while processing '{token.raw}')" if token.from_bundle else ""
        self._error(
            level,
            ParseErrorKind.UNKNOWN_OPTION,
            f"Unknown option: '{token.text}'{context}",
            token=token.raw,
            candidates=self._suggestions(level, token.text),
        )
        return None

    def _suggestions(self, level: _LevelState, text: str) -> list[str]:
        name = text.partition("=")[0]
        return [
            candidate
            for option in level.spec.options
            if not option.hidden
            for candidate in option.all_names()
            if len(name) > 2 and candidate.startswith(name)
        ]

    def _stops_consumption(self, level: _LevelState, raw: str) -> bool:
        return (
            raw == END_OF_OPTIONS
            or level.spec.looks_like_option(raw, self.settings.abbreviated_options)
            or level.spec.subcommand(raw) is not None
        )

    def _consume_values(
        self, level: _LevelState, option: OptionSpec, token: Token, tokens: Tokenizer
    ) -> list[str]:
        arity = option.arity
        values = [token.attached] if token.attached is not None else []
        if arity.is_fixed:
            while len(values) < arity.min and tokens.peek_raw() is not None:
                values.append(tokens.next_raw())
            return values
        while arity.allows_more(len(values)):
            raw = tokens.peek_raw()
            if raw is None or self._stops_consumption(level, raw):
                break
            values.append(tokens.next_raw())
        return values

    def _convert(
        self, level: _LevelState, param: ParamSpec, raw: str, owner: str
    ) -> tuple[bool, Any]:
        converter = self._converters.get(param)
        if isinstance(converter, UnsupportedTypeError) or converter is None:
            self._error(
                level,
                ParseErrorKind.UNSUPPORTED_TYPE,
                f"Cannot convert value for {owner}: no converter for type "
                f"'{param.value_type.element_type.display_name}'",
                token=raw,
            )
            return False, None
        try:
            return True, converter.convert(raw)
        except ConversionError as error:
            self._error(
                level,
                ParseErrorKind.CONVERSION_ERROR,
                f"Invalid value for {owner}: {error}",
                token=raw,
                candidates=error.candidates,
            )
            return False, None

    def _bind_option(self, level: _LevelState, token: Token, tokens: Tokenizer) -> None:
        resolved = self._resolve_option(level, token)
        if resolved is None:
            return
        option, negated = resolved
        owner = f"option '{token.text}'"

        if option.is_flag:
            self._bind_flag(level, option, negated, token, owner)
            return

        values = self._consume_values(level, option, token, tokens)
        if len(values) < option.arity.min:
            level.result.mark_seen(option)
            self._error(
                level,
                ParseErrorKind.ARITY_VIOLATION,
                f"Option '{token.text}' requires {self._describe_arity(option)} "
                f"but got {len(values)}",
                token=token.raw,
            )
            return

        typed: list[Any] = []
        for raw in values:
            ok, value = self._convert(level, option, raw, owner)
            if not ok:
                level.result.mark_seen(option)
                return
            typed.append(value)

        if option.value_type.is_collection:
            bound: Any = typed
        elif typed:
            bound = typed[0]
        else:
            bound = self._fallback(option)
        level.result.add_option_match(
            OptionMatch(option=option, name=token.text, raw=tuple(values), value=bound)
        )

    def _bind_flag(
        self,
        level: _LevelState,
        option: OptionSpec,
        negated: bool,
        token: Token,
        owner: str,
    ) -> None:
        raw: tuple[str, ...] = ()
        if token.attached is not None:
            raw = (token.attached,)
            if option.converter is not None:
                ok, value = self._convert(level, option, token.attached, owner)
            else:
                try:
                    ok, value = True, convert_bool(token.attached)
                except ValueError:
                    ok, value = False, None
                    self._error(
                        level,
                        ParseErrorKind.CONVERSION_ERROR,
                        f"Invalid value for {owner}: '{token.attached}' is not a valid bool",
                        token=token.raw,
                        candidates=("true", "false"),
                    )
            if not ok:
                level.result.mark_seen(option)
                return
        else:
            value = True
        if negated:
            value = not value
        bound = [value] if option.value_type.is_collection else value
        level.result.add_option_match(
            OptionMatch(option=option, name=token.text, raw=raw, value=bound)
        )

    def _fallback(self, option: OptionSpec) -> Any:
        if option.fallback_value is not None:
            return option.fallback_value
        if option.value_type.is_boolean:
            return True
        return None

    def _describe_arity(self, param: ParamSpec) -> str:
        arity = param.arity
        if arity.is_fixed:
            return f"{arity.min} value{'s' if arity.min != 1 else ''}"
        if arity.max is None:
            return f"at least {arity.min} value{'s' if arity.min != 1 else ''}"
        return f"{arity.min} to {arity.max} values"

    def _bind_positional(self, level: _LevelState, token: Token) -> None:
        index = level.positional_index
        level.positional_index += 1
        param = level.spec.positional_at(index)
        if param is not None:
            count = level.positional_counts.get(param, 0)
            if not param.arity.allows_more(count):
                param = None
        if param is None:
            if self.settings.allow_unmatched:
                level.result.add_unmatched(token.raw)
                return
            self._error(
                level,
                ParseErrorKind.UNMATCHED_ARGUMENT,
                f"Unmatched argument at index {index}: '{token.raw}'",
                token=token.raw,
            )
            return
        level.positional_counts[param] = level.positional_counts.get(param, 0) + 1
        ok, value = self._convert(
            level, param, token.raw, f"positional parameter '{param.display_label}'"
        )
        if ok:
            level.result.add_positional_match(
                PositionalMatch(param=param, index=index, raw=token.raw, value=value)
            )

    def _check_requirements(self, level: _LevelState) -> None:
        result = level.result
        for option in level.spec.options:
            if option.required and not result.has_option(option):
                label = "" if option.is_flag else f"={option.label}"
                self._error(
                    level,
                    ParseErrorKind.MISSING_REQUIRED_OPTION,
                    f"Missing required option: '{option.display_name}{label}'",
                    candidates=option.names,
                )
        for positional in level.spec.positionals:
            count = level.positional_counts.get(positional, 0)
            if count >= positional.arity.min:
                continue
            if count == 0:
                message = f"Missing required parameter: '{positional.display_label}'"
            else:
                message = (
                    f"Positional parameter '{positional.display_label}' requires "
                    f"{self._describe_arity(positional)} but got {count}"
                )
            self._error(level, ParseErrorKind.ARITY_VIOLATION, message)
        spec = level.spec
        if spec.subcommands and spec.handler is None and result.subcommand is None:
            names = list(spec.subcommands)
            self._error(
                level,
                ParseErrorKind.MISSING_SUBCOMMAND,
                f"Missing required subcommand for '{result.command_path}': "
                f"expected one of {', '.join(names)}",
                candidates=names,
            )

    def _outcome(self, root: ParseResult) -> ParseOutcome:
        levels = root.levels()
        for level in levels:
            if any(match.option.usage_help for match in level.matched_options):
                logger.debug("Usage help requested for '%s'", level.command_path)
                return HelpRequested(result=root, level=level)
        for level in levels:
            if any(match.option.version_help for match in level.matched_options):
                logger.debug("Version help requested for '%s'", level.command_path)
                return VersionRequested(result=root, level=level)
        if root.errors:
            return ParseFailed(result=root, errors=root.errors)
        return Parsed(result=root)
