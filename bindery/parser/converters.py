# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Type conversion registry for Bindery argument binding.

A converter is any object with a `convert(raw: str) -> Any` method. Plain callables
(`int`, `Path`, lambdas) are wrapped in `CallableConverter`, which turns
`ValueError`/`TypeError` into `ConversionError` carrying the offending token and
the target type.

Resolution order for a target type:
1. The per-option converter override.
2. A custom converter registered for the exact type.
3. A built-in converter.
4. `UnsupportedTypeError`.

Built-in converters:
- text, integer (decimal or 0x/0o/0b prefixed), floating point, Decimal, boolean
- `pathlib.Path`, `re.Pattern`, `datetime.timedelta` (durations), `datetime.datetime`
- `codecs.CodecInfo` (character sets), `urllib.parse.ParseResult` (URIs)
- `Enum` subclasses and symbolic choices, matched case-insensitively
- unions, tried member by member

Functions:
- convert_bool, convert_int, convert_duration, convert_pattern, convert_charset,
  convert_uri, convert_datetime, convert_path: the built-in scalar converters.
"""
from __future__ import annotations

import codecs
import re
import types
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import EnumMeta
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, Union, get_args, get_origin, runtime_checkable
from urllib.parse import ParseResult as URI
from urllib.parse import urlparse

from dateutil import parser as date_parser

from bindery.exceptions import ConversionError, UnsupportedTypeError
from bindery.logger import logger
from bindery.parser.value_type import ValueKind, ValueType

TRUE_VALUES = frozenset({"true", "t", "1", "yes", "y", "on"})
FALSE_VALUES = frozenset({"false", "f", "0", "no", "n", "off"})

_DURATION_UNITS = {
    "w": "weeks",
    "d": "days",
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
    "ms": "milliseconds",
    "us": "microseconds",
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|us|w|d|h|m|s)")
_NUMBER = r"(\d+(?:\.\d+)?)"
_ISO_DURATION = re.compile(
    rf"^P(?:{_NUMBER}W)?(?:{_NUMBER}D)?"
    rf"(?:T(?:{_NUMBER}H)?(?:{_NUMBER}M)?(?:{_NUMBER}S)?)?$",
    re.IGNORECASE,
)


@runtime_checkable
class Converter(Protocol):
    """Anything that can turn one raw token into a typed value."""

    def convert(self, raw: str) -> Any: ...


def type_name(target: Any) -> str:
    """Human readable name of a conversion target."""
    if isinstance(target, ValueType):
        return target.display_name
    if isinstance(target, types.UnionType) or get_origin(target) is Union:
        return " | ".join(type_name(arg) for arg in get_args(target))
    return getattr(target, "__name__", None) or str(target)


class CallableConverter:
    """Adapts a plain `str -> value` callable to the `Converter` protocol."""

    def __init__(self, function: Callable[[str], Any], target: str) -> None:
        if not callable(function):
            raise TypeError(f"{function!r} is not callable")
        self.function = function
        self.target = target

    def convert(self, raw: str) -> Any:
        try:
            return self.function(raw)
        except ConversionError:
            raise
        except (ValueError, TypeError, ArithmeticError) as error:
            raise ConversionError(raw, self.target, reason=str(error) or None) from error

    def __repr__(self) -> str:
        return f"CallableConverter({self.target})"


class EnumConverter:
    """Resolves an Enum member by name (case-insensitive) or by value."""

    def __init__(self, enum_type: EnumMeta) -> None:
        self.enum_type = enum_type
        self.candidates = tuple(member.name for member in enum_type)  # type: ignore[attr-defined]

    def convert(self, raw: str) -> Any:
        if isinstance(raw, self.enum_type):
            return raw
        lowered = raw.strip().lower()
        for member in self.enum_type:  # type: ignore[attr-defined]
            if member.name.lower() == lowered:
                return member
        for member in self.enum_type:  # type: ignore[attr-defined]
            if str(member.value).lower() == lowered:
                return member
        raise ConversionError(raw, self.enum_type.__name__, self.candidates)


class ChoiceConverter:
    """Matches one of a fixed set of symbolic values, case-insensitively."""

    def __init__(self, choices: tuple[str, ...]) -> None:
        self.candidates = choices
        self._lookup = {choice.lower(): choice for choice in choices}

    def convert(self, raw: str) -> str:
        try:
            return self._lookup[raw.strip().lower()]
        except KeyError:
            raise ConversionError(raw, "choice", self.candidates) from None


class UnionConverter:
    """Tries each member converter in order and returns the first success."""

    def __init__(self, members: list[Converter], target: str) -> None:
        self.members = members
        self.target = target

    def convert(self, raw: str) -> Any:
        for member in self.members:
            try:
                return member.convert(raw)
            except ConversionError:
                continue
        raise ConversionError(raw, self.target)


def convert_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts truthy and falsy spellings such as 'true', 'yes', 'on', '1', 'false',
    'no', 'off', '0'.
    """
    if isinstance(value, bool):
        return value
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError("expected one of true/false, yes/no, on/off, 1/0")


def convert_int(value: str) -> int:
    """Decimal integers, or 0x/0o/0b prefixed literals."""
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        return int(text, 0)


def convert_decimal(value: str) -> Decimal:
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        raise ValueError("not a decimal number") from None


def convert_path(value: str) -> Path:
    if not value:
        raise ValueError("path must not be empty")
    return Path(value)


def convert_pattern(value: str) -> re.Pattern:
    try:
        return re.compile(value)
    except re.error as error:
        raise ValueError(str(error)) from error


def convert_duration(value: str) -> timedelta:
    """
    Convert a duration string to a `timedelta`.

    Accepted forms:
        "90" or "1.5"        seconds
        "1h30m", "2d", "500ms", "1w2d"
        "PT1H30M", "P2DT3H"  ISO-8601 durations
    """
    text = value.strip()
    if not text:
        raise ValueError("duration must not be empty")
    try:
        return timedelta(seconds=float(text))
    except OverflowError as error:
        raise ValueError(str(error)) from error
    except ValueError:
        pass

    iso = _ISO_DURATION.match(text)
    if iso and any(iso.groups()) and not text.upper().endswith("T"):
        weeks, days, hours, minutes, seconds = (float(part or 0) for part in iso.groups())
        return timedelta(
            weeks=weeks, days=days, hours=hours, minutes=minutes, seconds=seconds
        )

    lowered = text.lower()
    parts = _DURATION_PART.findall(lowered)
    if not parts or "".join(number + unit for number, unit in parts) != lowered:
        raise ValueError("expected seconds, a duration like 1h30m, or ISO-8601 PT1H30M")
    amounts: dict[str, float] = {}
    for number, unit in parts:
        key = _DURATION_UNITS[unit]
        amounts[key] = amounts.get(key, 0.0) + float(number)
    return timedelta(**amounts)


def convert_charset(value: str) -> codecs.CodecInfo:
    try:
        return codecs.lookup(value.strip())
    except LookupError:
        raise ValueError("unknown character set") from None


def convert_uri(value: str) -> URI:
    text = value.strip()
    if not text or any(char.isspace() for char in text):
        raise ValueError("URI must be non-empty and contain no whitespace")
    uri = urlparse(text)
    uri.port  # raises ValueError for an out-of-range or non-numeric port
    return uri


def convert_datetime(value: str) -> datetime:
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError) as error:
        raise ValueError("could not be parsed as a datetime") from error


BUILTIN_CONVERTERS: dict[Any, Converter] = {
    str: CallableConverter(str, "str"),
    int: CallableConverter(convert_int, "int"),
    float: CallableConverter(float, "float"),
    Decimal: CallableConverter(convert_decimal, "Decimal"),
    bool: CallableConverter(convert_bool, "bool"),
    Path: CallableConverter(convert_path, "Path"),
    re.Pattern: CallableConverter(convert_pattern, "Pattern"),
    timedelta: CallableConverter(convert_duration, "duration"),
    datetime: CallableConverter(convert_datetime, "datetime"),
    codecs.CodecInfo: CallableConverter(convert_charset, "charset"),
    URI: CallableConverter(convert_uri, "URI"),
}


def as_converter(converter: Any, target: str) -> Converter:
    """Return `converter` if it implements `convert`, else wrap a callable."""
    if isinstance(converter, Converter):
        return converter
    return CallableConverter(converter, target)


class ConverterRegistry:
    """
    Maps target types to converters.

    Custom converters registered here take precedence over the built-ins for the
    exact type they are registered for.

    Example:
        registry = ConverterRegistry()
        registry.register(Version, Version.parse)
        converter = registry.resolve(ValueType.of(Version))
        converter.convert("1.2.3")
    """

    def __init__(self, converters: Mapping[Any, Any] | None = None) -> None:
        self._custom: dict[Any, Converter] = {}
        for target, converter in (converters or {}).items():
            self.register(target, converter)

    def register(self, target: Any, converter: Any) -> None:
        """Register a converter (object or callable) for an exact target type."""
        self._custom[target] = as_converter(converter, type_name(target))
        logger.debug("Registered converter for '%s'", type_name(target))

    def is_registered(self, target: Any) -> bool:
        return target in self._custom

    def resolve(self, value_type: ValueType | Any, override: Any = None) -> Converter:
        """
        Resolve the per-token converter for a value type.

        For collection types this is the element converter.

        Raises:
            UnsupportedTypeError: If no converter applies to the target type.
        """
        element = ValueType.of(value_type).element_type
        if override is not None:
            return as_converter(override, element.display_name)
        if element.kind is ValueKind.ENUM:
            if element.target is None:
                return ChoiceConverter(element.choices)
            if element.target in self._custom:
                return self._custom[element.target]
            return EnumConverter(element.target)
        return self._resolve_scalar(element.target)

    def _resolve_scalar(self, target: Any) -> Converter:
        if target in self._custom:
            return self._custom[target]
        if target in BUILTIN_CONVERTERS:
            return BUILTIN_CONVERTERS[target]
        if isinstance(target, types.UnionType) or get_origin(target) is Union:
            members = [
                self.resolve(ValueType.of(arg))
                for arg in get_args(target)
                if arg is not type(None)
            ]
            return UnionConverter(members, type_name(target))
        if isinstance(target, EnumMeta):
            return EnumConverter(target)
        raise UnsupportedTypeError(target)

    def convert(self, raw: str, value_type: ValueType | Any) -> Any:
        """Convert one raw token, mainly for ad-hoc use and tests."""
        return self.resolve(value_type).convert(raw)
