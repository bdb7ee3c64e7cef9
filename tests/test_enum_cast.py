# tests/test_enum_cast.py
"""
Tests for enum_cast_checked / enum_cast_unchecked.
"""

import pytest

from better_casts.engine import enum_cast_checked, enum_cast_unchecked
from better_casts.errors import CastDefinitionError, CastType, EnumCastError
from conftest import Color, Gapped, Perm, Small


class TestToEnumChecked:

    def test_member_value(self):
        assert enum_cast_checked(Color, "int", 1) is Color.GREEN

    def test_value_outside_enum(self):
        with pytest.raises(EnumCastError, match="not contained within enum") as excinfo:
            enum_cast_checked(Color, "int", 7)
        assert excinfo.value.value == 7
        assert excinfo.value.category is CastType.ENUM_CAST

    @pytest.mark.parametrize("value, member", [
        (1, Gapped.VALUE1),
        (2, Gapped.VALUE2),
        (3, Gapped.VALUE3),
        (5, Gapped.VALUE5),
    ])
    def test_gapped_members(self, value, member):
        assert enum_cast_checked(Gapped, "int", value) is member

    @pytest.mark.parametrize("value", [0, 4, 6, 11, -1])
    def test_gap_values_rejected(self, value):
        with pytest.raises(EnumCastError):
            enum_cast_checked(Gapped, "int", value)

    def test_declared_underlying(self, small_t):
        assert enum_cast_checked(small_t, "uint8_t", 200) is Small.HIGH
        with pytest.raises(EnumCastError):
            enum_cast_checked(small_t, "uint8_t", 201)


class TestFromEnumChecked:

    def test_member(self):
        assert enum_cast_checked("int", Color, Color.BLUE) == 2
        assert enum_cast_checked("int64_t", Gapped, Gapped.VALUE5) == 5

    def test_raw_representation(self):
        assert enum_cast_checked("int", Gapped, 3) == 3
        with pytest.raises(EnumCastError):
            enum_cast_checked("int", Gapped, 4)

    def test_member_of_other_enum(self):
        with pytest.raises(TypeError):
            enum_cast_checked("int", Color, Gapped.VALUE1)

    def test_declared_underlying(self, small_t):
        assert enum_cast_checked("unsigned int", small_t, Small.HIGH) == 200


class TestFlagEnums:

    def test_single_flag(self):
        assert enum_cast_checked(Perm, "int", 4) is Perm.R

    def test_combination(self):
        assert enum_cast_checked(Perm, "int", 6) == Perm.R | Perm.W

    def test_empty_combination(self):
        assert enum_cast_checked(Perm, "int", 0) == Perm(0)

    @pytest.mark.parametrize("value", [8, 9, -1])
    def test_undeclared_bits(self, value):
        with pytest.raises(EnumCastError):
            enum_cast_checked(Perm, "int", value)

    def test_combination_to_integer(self):
        assert enum_cast_checked("int", Perm, Perm.R | Perm.X) == 5


class TestEnumUnchecked:

    def test_member(self):
        assert enum_cast_unchecked(Gapped, "int", 2) is Gapped.VALUE2

    def test_no_member_returns_representation(self):
        result = enum_cast_unchecked(Gapped, "int", 4)
        assert result == 4
        assert not isinstance(result, Gapped)

    def test_wraps_to_underlying(self, small_t):
        assert enum_cast_unchecked(small_t, "uint8_t", 456) is Small.HIGH

    def test_from_enum(self):
        assert enum_cast_unchecked("int", Gapped, Gapped.VALUE3) == 3
        assert enum_cast_unchecked("int", Color, Color.RED) == 0


class TestEnumDefinition:

    def test_storage_too_small(self):
        with pytest.raises(CastDefinitionError):
            enum_cast_checked(Color, "long", 1)

    def test_signedness_mismatch(self, small_t):
        with pytest.raises(CastDefinitionError):
            enum_cast_checked("int", small_t, Small.LOW)
