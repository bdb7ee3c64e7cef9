# tests/test_up_void_cast.py
"""
Tests for up_cast and void_cast: the categories that never fail at runtime.
"""

import pytest

from better_casts.engine import up_cast, void_cast
from better_casts.errors import CastDefinitionError
from better_casts.type_model import CType
from conftest import Circle, Shape


class TestUpCast:

    def test_integer_widening(self):
        assert up_cast("int32_t", "int16_t", -5) == -5
        assert up_cast("uint64_t", "uint8_t", 255) == 255

    def test_unsigned_to_wider_signed(self):
        assert up_cast("int64_t", "uint32_t", 2 ** 32 - 1) == 2 ** 32 - 1

    def test_bool_to_integer(self):
        result = up_cast("int", "bool", True)
        assert result == 1
        assert type(result) is int

    def test_float_widening(self):
        result = up_cast("double", "float", 0.5)
        assert result == 0.5
        assert type(result) is float

    def test_derived_to_base_pointer(self, shape_ptr, circle_ptr):
        circle = Circle()
        assert up_cast(shape_ptr, circle_ptr, circle) is circle

    def test_derived_to_base_reference(self):
        circle = Circle()
        shape_ref = CType.ref(CType.record(Shape))
        assert up_cast(shape_ref, CType.ref(CType.record(Circle)), circle) is circle

    def test_narrowing_pair_rejected(self):
        with pytest.raises(CastDefinitionError, match="up_cast is not defined"):
            up_cast("int8_t", "int32_t", 1)

    def test_base_to_derived_rejected(self, shape_ptr, circle_ptr):
        with pytest.raises(CastDefinitionError):
            up_cast(circle_ptr, shape_ptr, Shape())


class TestVoidCast:

    def test_erase(self):
        assert void_cast("void*", "int*", 0x1000) == 0x1000

    def test_recover(self):
        handle = object()
        assert void_cast("int*", "void*", handle) is handle

    def test_const_erase(self):
        assert void_cast("const void*", "const char*", 0x20) == 0x20

    def test_nullptr(self):
        assert void_cast("void*", "std::nullptr_t", None) is None

    def test_const_mismatch_rejected(self):
        with pytest.raises(CastDefinitionError):
            void_cast("void*", "const int*", 0x1000)

    def test_non_pointer_rejected(self):
        with pytest.raises(CastDefinitionError):
            void_cast("void*", "size_t", 0)
