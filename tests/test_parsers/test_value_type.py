from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from bindery.parser import ValueKind, ValueType


class Color(Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


def test_scalar_from_type():
    value_type = ValueType.of(int)
    assert value_type.kind is ValueKind.SCALAR
    assert value_type.target is int
    assert value_type.display_name == "int"
    assert not value_type.is_collection


def test_collection_from_annotation():
    value_type = ValueType.from_annotation(list[Path])
    assert value_type.is_collection
    assert value_type.element_type.target is Path
    assert value_type.display_name == "list[Path]"

    bare = ValueType.from_annotation(list)
    assert bare.element_type.target is str


def test_optional_is_unwrapped():
    assert ValueType.from_annotation(Optional[int]) == ValueType.scalar(int)
    assert ValueType.from_annotation(int | None) == ValueType.scalar(int)


def test_literal_becomes_choice():
    value_type = ValueType.from_annotation(Literal["fast", "slow"])
    assert value_type.kind is ValueKind.ENUM
    assert value_type.choices == ("fast", "slow")
    assert value_type.display_name == "choice"


def test_enum_choices_are_member_names():
    value_type = ValueType.of(Color)
    assert value_type.kind is ValueKind.ENUM
    assert value_type.choices == ("RED", "GREEN", "BLUE")


def test_is_boolean():
    assert ValueType.of(bool).is_boolean
    assert ValueType.list_of(bool).is_boolean
    assert not ValueType.of(str).is_boolean


def test_of_passes_descriptor_through():
    value_type = ValueType.choice("a", "b")
    assert ValueType.of(value_type) is value_type
