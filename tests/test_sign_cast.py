# tests/test_sign_cast.py
"""
Tests for sign_cast_checked / sign_cast_unchecked.
"""

import pytest

from better_casts.engine import sign_cast_checked, sign_cast_unchecked, up_cast
from better_casts.errors import CastDefinitionError, SignCastError


class TestSignChecked:

    def test_positive_to_unsigned(self, u32, i32):
        assert sign_cast_checked(u32, i32, 5) == 5

    def test_negative_to_unsigned(self, u32, i32):
        with pytest.raises(SignCastError, match="negative number to unsigned"):
            sign_cast_checked(u32, i32, -1)

    def test_unsigned_above_signed_max(self, i8, u8):
        with pytest.raises(SignCastError, match="exceeded max value"):
            sign_cast_checked(i8, u8, 128)
        assert sign_cast_checked(i8, u8, 127) == 127

    def test_to_wider_unsigned(self):
        assert sign_cast_checked("uint64_t", "int32_t", 7) == 7
        with pytest.raises(SignCastError):
            sign_cast_checked("uint64_t", "int32_t", -1)

    def test_unsigned_to_wider_signed_is_up_cast(self):
        assert up_cast("int16_t", "uint8_t", 128) == 128
        with pytest.raises(CastDefinitionError):
            sign_cast_checked("int16_t", "uint8_t", 128)

    def test_narrowing_sign_change_undefined(self):
        with pytest.raises(CastDefinitionError):
            sign_cast_checked("int8_t", "uint32_t", 1)

    def test_error_fields(self, u32, i32):
        with pytest.raises(SignCastError) as excinfo:
            sign_cast_checked(u32, i32, -42)
        assert excinfo.value.value == -42
        assert excinfo.value.to_type == u32


class TestSignUnchecked:

    def test_negative_wraps(self, u32, i32):
        assert sign_cast_unchecked(u32, i32, -1) == 2 ** 32 - 1

    def test_high_bit_becomes_negative(self, i8, u8):
        assert sign_cast_unchecked(i8, u8, 200) == -56

    def test_sign_extends_to_wider(self):
        assert sign_cast_unchecked("uint64_t", "int32_t", -1) == 2 ** 64 - 1

    def test_in_range_matches_checked(self, u32, i32):
        for value in (0, 1, 2 ** 31 - 1):
            assert sign_cast_unchecked(u32, i32, value) == sign_cast_checked(u32, i32, value)
