# Bindery CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `ValueType`, the target type descriptor attached to options and
positional parameters.

A descriptor is one of:
- SCALAR: a single value of a Python type (`int`, `Path`, `int | float`, ...)
- ENUM: an `Enum` subclass, or a fixed tuple of symbolic choices
- COLLECTION: an ordered list whose elements are described by another ValueType

Descriptors can be built explicitly or inferred from type annotations:

    ValueType.of(int)
    ValueType.enum(Color)
    ValueType.choice("fast", "slow")
    ValueType.list_of(Path)
    ValueType.from_annotation(list[int])        # COLLECTION of int
    ValueType.from_annotation(Literal["a", "b"]) # ENUM choice
"""
from __future__ import annotations

import collections.abc
import types
from dataclasses import dataclass
from enum import Enum, EnumMeta
from typing import Any, Literal, Union, get_args, get_origin

_COLLECTION_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.Iterable,
)


class ValueKind(Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    COLLECTION = "collection"


@dataclass(frozen=True)
class ValueType:
    """Describes the Python value an option or positional binds to."""

    kind: ValueKind
    target: Any = str
    choices: tuple[str, ...] = ()
    element: ValueType | None = None

    @classmethod
    def of(cls, target: Any) -> ValueType:
        """Descriptor for a type, or pass an existing descriptor through."""
        if isinstance(target, ValueType):
            return target
        return cls.from_annotation(target)

    @classmethod
    def scalar(cls, target: Any) -> ValueType:
        return cls(ValueKind.SCALAR, target)

    @classmethod
    def enum(cls, enum_type: EnumMeta) -> ValueType:
        return cls(
            ValueKind.ENUM,
            enum_type,
            choices=tuple(member.name for member in enum_type),  # type: ignore[attr-defined]
        )

    @classmethod
    def choice(cls, *choices: str) -> ValueType:
        return cls(ValueKind.ENUM, None, choices=tuple(str(choice) for choice in choices))

    @classmethod
    def list_of(cls, element: Any = str) -> ValueType:
        return cls(ValueKind.COLLECTION, None, element=cls.of(element))

    @classmethod
    def from_annotation(cls, annotation: Any) -> ValueType:
        """Infer a descriptor from a Python type annotation."""
        origin = get_origin(annotation)
        args = get_args(annotation)

        if origin is Literal:
            return cls.choice(*args)

        if origin is Union or isinstance(annotation, types.UnionType):
            members = tuple(arg for arg in args if arg is not type(None))
            if len(members) == 1:
                return cls.from_annotation(members[0])
            if not members:
                return cls.scalar(str)
            return cls.scalar(Union[members])  # type: ignore[valid-type]

        if origin in _COLLECTION_ORIGINS:
            element = next((arg for arg in args if arg is not Ellipsis), str)
            return cls.list_of(element)

        if annotation in (list, tuple, set, frozenset):
            return cls.list_of(str)

        if isinstance(annotation, EnumMeta):
            return cls.enum(annotation)

        return cls.scalar(annotation)

    @property
    def is_collection(self) -> bool:
        return self.kind is ValueKind.COLLECTION

    @property
    def element_type(self) -> ValueType:
        """The per-token descriptor: the element for collections, else self."""
        if self.kind is ValueKind.COLLECTION:
            assert self.element is not None, "collection must have an element type"
            return self.element
        return self

    @property
    def is_boolean(self) -> bool:
        element = self.element_type
        return element.kind is ValueKind.SCALAR and element.target is bool

    @property
    def display_name(self) -> str:
        if self.kind is ValueKind.COLLECTION:
            return f"list[{self.element_type.display_name}]"
        if self.kind is ValueKind.ENUM and self.target is None:
            return "choice"
        return getattr(self.target, "__name__", None) or str(self.target)

    def __str__(self) -> str:
        return self.display_name
