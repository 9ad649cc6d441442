# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used in the Bindery CLI framework.

Spec definition problems are raised eagerly from `CommandSpec.validate()` and are
never recovered. Conversion problems are raised by converters and turned into
`ParseError` records by the binder. Failures raised by business handlers are
wrapped in `BusinessError` by `CommandLine`.

All exceptions inherit from `BinderyError`, the base exception for the framework.

Exception Hierarchy:
- BinderyError
    ├── SpecDefinitionError
    │   ├── DuplicateNameError
    │   ├── InvalidArityError
    │   └── OverlappingPositionalError
    ├── ConversionError
    ├── UnsupportedTypeError
    └── BusinessError
"""
from __future__ import annotations

from typing import Any, Sequence


class BinderyError(Exception):
    """Base exception for the Bindery framework."""


class SpecDefinitionError(BinderyError):
    """Raised when a command specification is malformed or mutated after validation."""


class DuplicateNameError(SpecDefinitionError):
    """Raised when an option name, dest, or subcommand name is defined twice."""


class InvalidArityError(SpecDefinitionError):
    """Raised when arity bounds are malformed."""


class OverlappingPositionalError(SpecDefinitionError):
    """Raised when positional index ranges conflict."""


class ConversionError(BinderyError):
    """
    Raised when a raw token cannot be converted to its target type.

    Attributes:
        token (str): The offending raw token.
        target (str): Human readable name of the target type.
        candidates (tuple[str, ...]): Valid values, for enumerated targets.
    """

    def __init__(
        self,
        token: str,
        target: str,
        candidates: Sequence[str] | None = None,
        reason: str | None = None,
    ) -> None:
        self.token = token
        self.target = target
        self.candidates: tuple[str, ...] = tuple(candidates or ())
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if self.candidates:
            return (
                f"'{self.token}' is not a valid {self.target}, "
                f"expected one of: {', '.join(self.candidates)}"
            )
        message = f"'{self.token}' is not a valid {self.target}"
        if self.reason:
            message = f"{message} ({self.reason})"
        return message


class UnsupportedTypeError(BinderyError):
    """Raised when no converter can be resolved for a target type."""

    def __init__(self, target: Any) -> None:
        self.target = target
        name = getattr(target, "__name__", repr(target))
        super().__init__(f"No converter registered for type '{name}'")


class BusinessError(BinderyError):
    """
    Wraps a failure raised by a business handler with the command path that
    was active when it was raised.
    """

    def __init__(self, command_path: str, cause: BaseException) -> None:
        self.command_path = command_path
        self.cause = cause
        super().__init__(f"['{command_path}'] {cause}")
