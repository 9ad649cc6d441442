# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
This module implements `CommandSpec`, the immutable description of a command's
options, positional parameters, and subcommands.

A spec is built once at startup through its registration API, validated once, and
then shared read-only by every parse. Options and positionals are assigned a slot
index when they are registered; a `ParseResult` stores converted values in a list
indexed by those slots rather than setting attributes on user objects.

Public Interface:
- `add_option(spec)` / `option(*names, ...)`: Register a named option.
- `add_positional(spec)` / `positional(label, ...)`: Register a positional parameter.
- `add_subcommand(name, spec)`: Register a nested command level.
- `validate()`: Check names, arity, and positional ranges, then freeze the spec.

Example Usage:
    spec = CommandSpec("tree", "Print a directory tree.", version="1.0.0")
    spec.option("-L", "--level", type=int, help="Descend at most LEVEL directories.")
    spec.option("-a", "--all", type=bool, help="Include hidden files.")
    spec.positional("directory", type=Path, required=False)
    spec.validate()
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from bindery.exceptions import (
    DuplicateNameError,
    OverlappingPositionalError,
    SpecDefinitionError,
)
from bindery.logger import logger
from bindery.parser.arity import Arity, IndexRange
from bindery.parser.option_spec import OptionSpec
from bindery.parser.positional_spec import PositionalParamSpec

ParamSpec = OptionSpec | PositionalParamSpec

PUBLIC_FIELDS = frozenset(
    {"name", "description", "aliases", "version", "handler", "help_epilog"}
)


class CommandSpec:
    """
    Describes one command level: its options, positional parameters, and
    subcommands.

    Mutating a spec after `validate()` (which the binder calls before the first
    parse) raises `SpecDefinitionError`.
    """

    def __init__(
        self,
        name: str,
        description: str = "",
        *,
        aliases: Iterable[str] | None = None,
        version: str | Iterable[str] | None = None,
        handler: Callable[..., Any] | None = None,
        help_epilog: str = "",
        standard_help: bool = True,
    ) -> None:
        self.name: str = name
        self.description: str = description
        self.aliases: tuple[str, ...] = tuple(aliases or ())
        if isinstance(version, str):
            version = (version,)
        self.version: tuple[str, ...] = tuple(version or ())
        self.handler: Callable[..., Any] | None = handler
        self.help_epilog: str = help_epilog
        self._options: list[OptionSpec] = []
        self._positionals: list[PositionalParamSpec] = []
        self._subcommands: dict[str, CommandSpec] = {}
        self._slots: list[ParamSpec] = []
        self._slot_index: dict[ParamSpec, int] = {}
        self._name_map: dict[str, tuple[OptionSpec, bool]] = {}
        self._command_map: dict[str, CommandSpec] = {}
        self._frozen: bool = False
        if standard_help:
            self._add_standard_help()

    def _add_standard_help(self) -> None:
        """Add `-h/--help` and, when a version is set, `-V/--version`."""
        self.option(
            "-h",
            "--help",
            type=bool,
            usage_help=True,
            help="Show this help message and exit.",
        )
        if self.version:
            self.option(
                "-V",
                "--version",
                type=bool,
                version_help=True,
                help="Print version information and exit.",
            )

    def __setattr__(self, key: str, value: Any) -> None:
        if key in PUBLIC_FIELDS and getattr(self, "_frozen", False):
            self._ensure_mutable()
        super().__setattr__(key, value)

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise SpecDefinitionError(
                f"Command '{self.name}' is already validated and can no longer be modified"
            )

    def _add_slot(self, param: ParamSpec) -> None:
        self._slot_index[param] = len(self._slots)
        self._slots.append(param)

    def add_option(self, option: OptionSpec) -> OptionSpec:
        """Register an option. Name conflicts are reported by `validate()`."""
        self._ensure_mutable()
        if not isinstance(option, OptionSpec):
            raise SpecDefinitionError(f"Expected an OptionSpec, got {option!r}")
        self._options.append(option)
        self._add_slot(option)
        return option

    def option(self, *names: str, type: Any = str, **kwargs: Any) -> OptionSpec:
        """
        Create and register an option.

        Args:
            *names (str): The option aliases (e.g., "-v", "--verbose").
            type (Any): Target type, annotation, or `ValueType`.
            **kwargs: Any other `OptionSpec` field (arity, required, default, ...).

        Returns:
            OptionSpec: The registered option.
        """
        return self.add_option(OptionSpec(names=tuple(names), value_type=type, **kwargs))

    def add_positional(self, positional: PositionalParamSpec) -> PositionalParamSpec:
        self._ensure_mutable()
        if not isinstance(positional, PositionalParamSpec):
            raise SpecDefinitionError(
                f"Expected a PositionalParamSpec, got {positional!r}"
            )
        self._positionals.append(positional)
        self._add_slot(positional)
        return positional

    def positional(
        self,
        label: str,
        *,
        index: IndexRange | int | str | None = None,
        type: Any = str,
        **kwargs: Any,
    ) -> PositionalParamSpec:
        """
        Create and register a positional parameter.

        When `index` is omitted the parameter takes the next free index, widened
        to fit its arity: `arity="1..3"` claims three indexes and an unbounded
        arity (`"*"`, `"+"`, `"N..*"`) claims the open-ended tail.
        """
        if index is None:
            index = self._next_positional_index()
            if kwargs.get("arity") is not None:
                arity = Arity.parse(kwargs["arity"])
                if arity.max is None:
                    index = f"{index}..*"
                elif arity.max > 1:
                    index = f"{index}..{index + arity.max - 1}"
        return self.add_positional(
            PositionalParamSpec(label=label, index=index, value_type=type, **kwargs)
        )

    def _next_positional_index(self) -> int:
        next_index = 0
        for positional in self._positionals:
            if positional.index.end is None:
                raise OverlappingPositionalError(
                    f"Cannot add a positional after open-ended '{positional.display_label}'"
                )
            next_index = max(next_index, positional.index.end + 1)
        return next_index

    def add_subcommand(self, name: str, spec: CommandSpec) -> CommandSpec:
        """
        Register a nested command level under `name`.

        The child is renamed to `name`. A validated child can only be
        registered under the name it already has.
        """
        self._ensure_mutable()
        if not isinstance(spec, CommandSpec):
            raise SpecDefinitionError(f"Expected a CommandSpec, got {spec!r}")
        if name in self._subcommands:
            raise DuplicateNameError(
                f"Subcommand '{name}' is already defined on '{self.name}'"
            )
        if spec.name != name:
            spec._ensure_mutable()
            spec.name = name
        self._subcommands[name] = spec
        return spec

    def validate(self) -> CommandSpec:
        """
        Validate this spec and every subcommand, then freeze them.

        Raises:
            DuplicateNameError: If an option name, dest, or subcommand name collides.
            InvalidArityError: If arity or index bounds are malformed.
            OverlappingPositionalError: If positional index ranges conflict.
        """
        if self._frozen:
            return self
        name_map: dict[str, tuple[OptionSpec, bool]] = {}
        dests: dict[str, ParamSpec] = {}

        for option in self._options:
            option.check()
            for name, negated in [(n, False) for n in option.names] + [
                (n, True) for n in option.negated_names
            ]:
                if name in name_map:
                    existing = name_map[name][0]
                    raise DuplicateNameError(
                        f"Option name '{name}' of '{option.display_name}' is already "
                        f"used by '{existing.display_name}' in command '{self.name}'"
                    )
                name_map[name] = (option, negated)
            self._check_dest(option.dest, option, dests)

        for positional in self._positionals:
            positional.check()
            self._check_dest(positional.dest, positional, dests)
        self._check_positional_ranges()

        command_map: dict[str, CommandSpec] = {}
        for name, subcommand in self._subcommands.items():
            for alias in (name, *subcommand.aliases):
                if alias in command_map:
                    raise DuplicateNameError(
                        f"Subcommand name '{alias}' is defined twice in '{self.name}'"
                    )
                command_map[alias] = subcommand
            subcommand.validate()

        self._name_map = name_map
        self._command_map = command_map
        self._frozen = True
        logger.debug(
            "Validated command '%s': %d option(s), %d positional(s), %d subcommand(s)",
            self.name,
            len(self._options),
            len(self._positionals),
            len(self._subcommands),
        )
        return self

    def _check_dest(
        self, dest: str, param: ParamSpec, dests: dict[str, ParamSpec]
    ) -> None:
        if dest in dests:
            raise DuplicateNameError(
                f"Destination '{dest}' is already defined in command '{self.name}'. "
                "Define a unique 'dest' for each option and positional."
            )
        dests[dest] = param

    def _check_positional_ranges(self) -> None:
        ordered = sorted(self._positionals, key=lambda p: p.index.start)
        for position, positional in enumerate(ordered):
            if positional.index.is_open_ended and position != len(ordered) - 1:
                raise OverlappingPositionalError(
                    f"Open-ended positional '{positional.display_label}' must be the "
                    "last positional parameter"
                )
            for other in ordered[position + 1 :]:
                if positional.index.overlaps(other.index):
                    raise OverlappingPositionalError(
                        f"Positional '{positional.display_label}' (index "
                        f"{positional.index}) overlaps '{other.display_label}' "
                        f"(index {other.index})"
                    )

    @property
    def is_validated(self) -> bool:
        return self._frozen

    @property
    def options(self) -> tuple[OptionSpec, ...]:
        return tuple(self._options)

    @property
    def positionals(self) -> tuple[PositionalParamSpec, ...]:
        return tuple(self._positionals)

    @property
    def subcommands(self) -> Mapping[str, CommandSpec]:
        return MappingProxyType(self._subcommands)

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    def slot_of(self, param: ParamSpec) -> int:
        try:
            return self._slot_index[param]
        except KeyError:
            raise SpecDefinitionError(
                f"{param} is not registered on command '{self.name}'"
            ) from None

    def slot(self, index: int) -> ParamSpec:
        return self._slots[index]

    def lookup(self, name: str) -> tuple[OptionSpec, bool] | None:
        """Return `(option, negated)` for an exact option name, or None."""
        return self._name_map.get(name)

    def prefix_candidates(self, prefix: str) -> list[tuple[str, OptionSpec, bool]]:
        """Long option names starting with `prefix`, in declaration order."""
        if not prefix.startswith("--") or len(prefix) <= 2:
            return []
        return [
            (name, option, negated)
            for name, (option, negated) in self._name_map.items()
            if name.startswith("--") and name.startswith(prefix)
        ]

    def looks_like_option(self, raw: str, abbreviated: bool = False) -> bool:
        """True if `raw` would resolve to a known option of this command."""
        if raw in self._name_map:
            return True
        if not raw.startswith("-") or raw in ("-", "--"):
            return False
        name, sep, _ = raw.partition("=")
        if sep and name in self._name_map:
            return True
        if not raw.startswith("--") and raw[:2] in self._name_map:
            return True
        if abbreviated and self.prefix_candidates(name):
            return True
        return False

    def positional_at(self, index: int) -> PositionalParamSpec | None:
        """The positional parameter whose index range contains `index`."""
        return next((p for p in self._positionals if p.index.contains(index)), None)

    def subcommand(self, name: str) -> CommandSpec | None:
        """Resolve a subcommand by name or alias."""
        if self._frozen:
            return self._command_map.get(name)
        if name in self._subcommands:
            return self._subcommands[name]
        return next(
            (spec for spec in self._subcommands.values() if name in spec.aliases), None
        )

    def find_param(self, key: str) -> ParamSpec | None:
        """Find an option by any name or dest, or a positional by label or dest."""
        if key in self._name_map:
            return self._name_map[key][0]
        for option in self._options:
            if key in option.names or key == option.dest:
                return option
        for positional in self._positionals:
            if key in (positional.label, positional.display_label, positional.dest):
                return positional
        return None

    def __str__(self) -> str:
        required = sum(option.required for option in self._options)
        return (
            f"CommandSpec(name={self.name!r}, options={len(self._options)}, "
            f"positionals={len(self._positionals)}, required={required}, "
            f"subcommands={list(self._subcommands)})"
        )

    def __repr__(self) -> str:
        return str(self)
