# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Range types used by the spec model: `Arity` and `IndexRange`.

Both are closed integer ranges whose upper bound may be unbounded (`None`).
They are parsed from the same compact notation:

    "2"     -> 2..2
    "0..1"  -> 0..1
    "1..*"  -> 1..unbounded
    "*"     -> 0..unbounded

`Arity.parse` additionally accepts the argparse-style shorthands `"?"`, `"*"`
and `"+"`.

Bounds are not checked on construction. `CommandSpec.validate()` calls
`check()` so malformed ranges surface together with other definition errors.
"""
from __future__ import annotations

from dataclasses import dataclass

from bindery.exceptions import InvalidArityError

NARGS_SHORTHANDS = {
    "?": (0, 1),
    "*": (0, None),
    "+": (1, None),
}


def _parse_bound(text: str, original: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise InvalidArityError(f"Invalid range '{original}': '{text}' is not an integer")


def _parse_range(value: str) -> tuple[int, int | None]:
    text = value.strip()
    if not text:
        raise InvalidArityError("Range must not be empty")
    if ".." not in text:
        if text == "*":
            return 0, None
        number = _parse_bound(text, value)
        return number, number
    low, _, high = text.partition("..")
    minimum = _parse_bound(low, value)
    if high == "*":
        return minimum, None
    return minimum, _parse_bound(high, value)


@dataclass(frozen=True)
class Arity:
    """Minimum and maximum number of raw tokens consumed per occurrence."""

    min: int
    max: int | None

    @classmethod
    def parse(cls, value: Arity | int | str) -> Arity:
        """Build an Arity from an int, a range string, or an nargs shorthand."""
        if isinstance(value, Arity):
            return value
        if isinstance(value, bool):
            raise InvalidArityError(f"Invalid arity: {value!r}")
        if isinstance(value, int):
            return cls(value, value)
        if not isinstance(value, str):
            raise InvalidArityError(f"Arity must be an int or a string, got {value!r}")
        if value.strip() in NARGS_SHORTHANDS:
            minimum, maximum = NARGS_SHORTHANDS[value.strip()]
            return cls(minimum, maximum)
        minimum, maximum = _parse_range(value)
        return cls(minimum, maximum)

    @classmethod
    def fixed(cls, count: int) -> Arity:
        return cls(count, count)

    def check(self, owner: str) -> None:
        """Raise `InvalidArityError` unless `0 <= min <= max`."""
        if self.min < 0:
            raise InvalidArityError(f"Arity of '{owner}' must not be negative: {self}")
        if self.max is not None and self.max < self.min:
            raise InvalidArityError(
                f"Arity of '{owner}' has max below min: {self}"
            )

    @property
    def is_fixed(self) -> bool:
        return self.max is not None and self.min == self.max

    @property
    def is_unbounded(self) -> bool:
        return self.max is None

    def allows_more(self, count: int) -> bool:
        """True if `count` values still leave room for another one."""
        return self.max is None or count < self.max

    def __str__(self) -> str:
        if self.max is None:
            return f"{self.min}..*"
        if self.min == self.max:
            return str(self.min)
        return f"{self.min}..{self.max}"


@dataclass(frozen=True)
class IndexRange:
    """Positional index range: a single index, `m..n`, or an open-ended `m..*` tail."""

    start: int
    end: int | None

    @classmethod
    def parse(cls, value: IndexRange | int | str) -> IndexRange:
        if isinstance(value, IndexRange):
            return value
        if isinstance(value, bool):
            raise InvalidArityError(f"Invalid index: {value!r}")
        if isinstance(value, int):
            return cls(value, value)
        start, end = _parse_range(value)
        return cls(start, end)

    def check(self, owner: str) -> None:
        if self.start < 0:
            raise InvalidArityError(f"Index of '{owner}' must not be negative: {self}")
        if self.end is not None and self.end < self.start:
            raise InvalidArityError(f"Index of '{owner}' has end before start: {self}")

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    @property
    def size(self) -> int | None:
        if self.end is None:
            return None
        return self.end - self.start + 1

    def contains(self, index: int) -> bool:
        return index >= self.start and (self.end is None or index <= self.end)

    def overlaps(self, other: IndexRange) -> bool:
        if self.end is not None and self.end < other.start:
            return False
        if other.end is not None and other.end < self.start:
            return False
        return True

    def __str__(self) -> str:
        if self.end is None:
            return f"{self.start}..*"
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}..{self.end}"
