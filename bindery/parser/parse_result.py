# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Parse results and outcomes produced by the `Binder`.

Contents:
- `ParseErrorKind` / `ParseError`: Recoverable parse problems, collected rather than raised.
- `OptionMatch` / `PositionalMatch`: One bound occurrence with its raw tokens and value.
- `ParseResult`: The queryable outcome of parsing one command level. A result is
  filled by the binder and becomes read-only once parsing completes.
- `Parsed`, `HelpRequested`, `VersionRequested`, `ParseFailed`: The tagged parse
  outcome consumed by `CommandLine`.

Querying a completed result never mutates it:

    result.has_option("--verbose")
    result.value_of("--level")      # by any name, dest, label, or spec object
    result.positional_values        # ordered converted positionals
    result.unmatched                # leftovers, when unmatched arguments are allowed
    result.errors                   # ParseError records, shared by all levels
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from bindery.exceptions import BinderyError
from bindery.parser.option_spec import OptionSpec
from bindery.parser.positional_spec import PositionalParamSpec

if TYPE_CHECKING:
    from bindery.parser.command_spec import CommandSpec, ParamSpec

_UNSET = object()


class ParseErrorKind(Enum):
    UNKNOWN_OPTION = "unknown_option"
    AMBIGUOUS_OPTION = "ambiguous_option"
    MISSING_REQUIRED_OPTION = "missing_required_option"
    ARITY_VIOLATION = "arity_violation"
    CONVERSION_ERROR = "conversion_error"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNMATCHED_ARGUMENT = "unmatched_argument"
    MISSING_SUBCOMMAND = "missing_subcommand"


@dataclass(frozen=True)
class ParseError:
    """
    A recoverable problem found while parsing.

    Attributes:
        kind (ParseErrorKind): The failure class.
        message (str): User-facing message.
        command_path (str): The command level the problem was found at.
        token (str | None): The offending raw token, when there is one.
        candidates (tuple[str, ...]): Candidate names or values, when relevant.
    """

    kind: ParseErrorKind
    message: str
    command_path: str
    token: str | None = None
    candidates: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OptionMatch:
    """One matched occurrence of an option."""

    option: OptionSpec
    name: str
    raw: tuple[str, ...]
    value: Any


@dataclass(frozen=True)
class PositionalMatch:
    """One positional token bound to a parameter."""

    param: PositionalParamSpec
    index: int
    raw: str
    value: Any


class ParseResult:
    """
    Outcome of parsing one command level.

    The root result owns the error list; subcommand results share it so that
    `errors` on any level reports every problem found in the invocation.
    """

    def __init__(
        self,
        spec: CommandSpec,
        parent: ParseResult | None = None,
    ) -> None:
        self.spec: CommandSpec = spec
        self.parent: ParseResult | None = parent
        self.subcommand: ParseResult | None = None
        self._values: list[Any] = [_UNSET] * spec.slot_count
        self._option_matches: list[OptionMatch] = []
        self._positional_matches: list[PositionalMatch] = []
        self._unmatched: list[str] = []
        self._errors: list[ParseError] = parent._errors if parent else []
        self._seen: set[OptionSpec] = set()
        self._complete: bool = False

    def _ensure_open(self) -> None:
        if self._complete:
            raise BinderyError("ParseResult is read-only once parsing completes")

    def add_option_match(self, match: OptionMatch) -> None:
        self._ensure_open()
        option = match.option
        slot = self.spec.slot_of(option)
        if option.value_type.is_collection:
            current = self._values[slot]
            if current is _UNSET:
                current = []
            current.extend(match.value)
            self._values[slot] = current
        else:
            self._values[slot] = match.value
        self._option_matches.append(match)
        self._seen.add(option)

    def mark_seen(self, option: OptionSpec) -> None:
        """Record an occurrence that could not be bound (e.g. too few values)."""
        self._ensure_open()
        self._seen.add(option)

    def add_positional_match(self, match: PositionalMatch) -> None:
        self._ensure_open()
        param = match.param
        slot = self.spec.slot_of(param)
        if param.value_type.is_collection:
            current = self._values[slot]
            if current is _UNSET:
                current = []
            current.append(match.value)
            self._values[slot] = current
        else:
            self._values[slot] = match.value
        self._positional_matches.append(match)

    def add_unmatched(self, token: str) -> None:
        self._ensure_open()
        self._unmatched.append(token)

    def add_error(self, error: ParseError) -> None:
        self._ensure_open()
        self._errors.append(error)

    def attach_subcommand(self, child: ParseResult) -> None:
        self._ensure_open()
        self.subcommand = child

    def complete(self) -> None:
        """Freeze this result and every subcommand result."""
        self._complete = True
        if self.subcommand:
            self.subcommand.complete()

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def command_path(self) -> str:
        if self.parent is None:
            return self.spec.name
        return f"{self.parent.command_path} {self.spec.name}"

    @property
    def leaf(self) -> ParseResult:
        """The deepest subcommand result that was entered."""
        result = self
        while result.subcommand is not None:
            result = result.subcommand
        return result

    def levels(self) -> list[ParseResult]:
        """This result followed by every nested subcommand result."""
        levels = [self]
        while levels[-1].subcommand is not None:
            levels.append(levels[-1].subcommand)  # type: ignore[arg-type]
        return levels

    def _resolve(self, key: str | OptionSpec | PositionalParamSpec) -> ParamSpec:
        if isinstance(key, (OptionSpec, PositionalParamSpec)):
            return key
        param = self.spec.find_param(key)
        if param is None:
            raise KeyError(f"No option or positional '{key}' in command '{self.spec.name}'")
        return param

    def has_option(self, key: str | OptionSpec) -> bool:
        """True if the option was matched at least once."""
        param = self._resolve(key)
        return isinstance(param, OptionSpec) and param in self._seen

    def is_bound(self, key: str | OptionSpec | PositionalParamSpec) -> bool:
        param = self._resolve(key)
        return self._values[self.spec.slot_of(param)] is not _UNSET

    def value_of(self, key: str | OptionSpec | PositionalParamSpec, default: Any = _UNSET) -> Any:
        """
        The converted value bound to an option or positional.

        Collections aggregate every occurrence in encounter order; scalars report
        the last occurrence. Unbound parameters report `default` when given,
        otherwise the parameter's own default.
        """
        param = self._resolve(key)
        value = self._values[self.spec.slot_of(param)]
        if value is not _UNSET:
            if isinstance(value, list):
                return list(value)
            return value
        if default is not _UNSET:
            return default
        return param.initial_value()

    def matches_for(self, key: str | OptionSpec) -> tuple[OptionMatch, ...]:
        param = self._resolve(key)
        return tuple(match for match in self._option_matches if match.option is param)

    @property
    def matched_options(self) -> tuple[OptionMatch, ...]:
        return tuple(self._option_matches)

    @property
    def positional_matches(self) -> tuple[PositionalMatch, ...]:
        return tuple(self._positional_matches)

    @property
    def positional_values(self) -> tuple[Any, ...]:
        return tuple(match.value for match in self._positional_matches)

    @property
    def unmatched(self) -> tuple[str, ...]:
        return tuple(self._unmatched)

    @property
    def errors(self) -> tuple[ParseError, ...]:
        return tuple(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def as_kwargs(self) -> dict[str, Any]:
        """Bound values keyed by dest, excluding help and version options."""
        kwargs: dict[str, Any] = {}
        for option in self.spec.options:
            if option.is_help_option:
                continue
            kwargs[option.dest] = self.value_of(option)
        for positional in self.spec.positionals:
            kwargs[positional.dest] = self.value_of(positional)
        return kwargs

    def __str__(self) -> str:
        return (
            f"ParseResult(command={self.command_path!r}, "
            f"options={len(self._option_matches)}, "
            f"positionals={len(self._positional_matches)}, "
            f"unmatched={len(self._unmatched)}, errors={len(self._errors)})"
        )

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class Parsed:
    """Parsing succeeded; the result is ready for execution."""

    result: ParseResult


@dataclass(frozen=True)
class HelpRequested:
    """A usage-help option was matched at `level`."""

    result: ParseResult
    level: ParseResult


@dataclass(frozen=True)
class VersionRequested:
    """A version-help option was matched at `level`."""

    result: ParseResult
    level: ParseResult


@dataclass(frozen=True)
class ParseFailed:
    """Parsing produced at least one error."""

    result: ParseResult
    errors: tuple[ParseError, ...] = field(default=())


ParseOutcome = Parsed | HelpRequested | VersionRequested | ParseFailed
