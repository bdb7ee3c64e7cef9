# tests/conftest.py
"""
Shared fixtures for better-casts tests: sample enumerations, a small class
hierarchy for pointer up-casts, and commonly used type descriptors.
"""

import enum

import pytest

from better_casts import CType


class Color(enum.Enum):
    RED = 0
    GREEN = 1
    BLUE = 2


class Gapped(enum.IntEnum):
    VALUE1 = 1
    VALUE2 = 2
    VALUE3 = 3
    # gap
    VALUE5 = 5


class Small(enum.IntEnum):
    LOW = 0
    HIGH = 200


class Perm(enum.IntFlag):
    X = 1
    W = 2
    R = 4


class Shape:
    pass


class Circle(Shape):
    pass


class Unrelated:
    pass


@pytest.fixture
def i8():
    return CType.fixed(8)


@pytest.fixture
def u8():
    return CType.fixed(8, signed=False)


@pytest.fixture
def i32():
    return CType.fixed(32)


@pytest.fixture
def u32():
    return CType.fixed(32, signed=False)


@pytest.fixture
def small_t():
    """``enum Small : uint8_t``"""
    return CType.enum_type(Small, CType.fixed(8, signed=False))


@pytest.fixture
def shape_ptr():
    return CType.ptr(CType.record(Shape))


@pytest.fixture
def circle_ptr():
    return CType.ptr(CType.record(Circle))
