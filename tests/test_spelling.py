# tests/test_spelling.py
"""
Tests for the C type spelling grammar and its CType visitor.
"""

import pytest
from parsimonious.exceptions import ParseError

from better_casts.spelling import (
    TYPE_GRAMMAR,
    TypeSpellingError,
    parse_type,
    split_types,
)
from better_casts.type_model import LLP64, CType, TypeKind
from conftest import Color


@pytest.fixture(scope="module")
def grammar():
    return TYPE_GRAMMAR


class TestGrammarCompilation:

    def test_grammar_has_root(self, grammar):
        assert "spelling" in grammar

    def test_grammar_has_key_rules(self, grammar):
        for rule in ("base_type", "int_spec", "declarator", "qualifier"):
            assert rule in grammar, f"missing rule: {rule}"


class TestGrammarRules:

    def test_int_spec_multiword(self, grammar):
        node = grammar["int_spec"].parse("unsigned long long ")
        first, rest = node.children
        assert first.text == "unsigned "
        assert len(rest.children) == 2

    def test_int_spec_accepts_interleaved_qualifier(self, grammar):
        node = grammar["int_spec"].parse("unsigned const int")
        assert node.text == "unsigned const int"

    def test_fixed_name_with_namespace(self, grammar):
        node = grammar["fixed_name"].parse("std::uint16_t")
        assert node.children[0].match.group(3) == "16"

    def test_qualifier_needs_word_boundary(self, grammar):
        with pytest.raises(ParseError):
            grammar["qualifier"].parse("constant")

    def test_declarator(self, grammar):
        node = grammar["declarator"].parse("* const ")
        assert node.text == "* const "


class TestBuiltinSpellings:

    @pytest.mark.parametrize("text, expected", [
        ("int", CType.int_type()),
        ("signed", CType.int_type()),
        ("unsigned", CType.int_type(signed=False)),
        ("unsigned int", CType.int_type(signed=False)),
        ("short", CType.short_type()),
        ("unsigned short int", CType.short_type(signed=False)),
        ("long", CType.long_type()),
        ("long int", CType.long_type()),
        ("long long", CType.long_long_type()),
        ("unsigned long long int", CType.long_long_type(signed=False)),
        ("char", CType.char_type()),
        ("signed char", CType.char_type(signed=True)),
        ("unsigned char", CType.char_type(signed=False)),
        ("bool", CType.bool_type()),
        ("_Bool", CType.bool_type()),
        ("float", CType.float_type()),
        ("double", CType.double_type()),
        ("void", CType.void()),
    ])
    def test_builtin(self, text, expected):
        assert parse_type(text) == expected

    def test_fixed_width(self):
        t = parse_type("uint8_t")
        assert t == CType.fixed(8, signed=False)
        assert t.kind == TypeKind.UCHAR
        assert str(t) == "uint8_t"

    def test_fixed_width_std_namespace(self):
        assert parse_type("std::int64_t") == CType.long_type()

    def test_size_t(self):
        t = parse_type("size_t")
        assert t == CType.fixed(64, signed=False)
        assert str(t) == "size_t"

    def test_ptrdiff_t_is_signed(self):
        assert parse_type("std::ptrdiff_t").is_signed

    def test_nullptr_t(self):
        assert parse_type("std::nullptr_t").is_nullptr

    def test_surrounding_whitespace(self):
        assert parse_type("  unsigned   short  ") == CType.short_type(signed=False)

    def test_explicit_data_model(self):
        assert parse_type("long", model=LLP64).bits == 32
        assert parse_type("int64_t", model=LLP64).kind == TypeKind.LONG_LONG


class TestDeclarators:

    def test_pointer_to_const(self):
        t = parse_type("const void*")
        assert t == CType.ptr(CType.void().const())

    def test_east_const(self):
        assert parse_type("char const*") == parse_type("const char*")

    @pytest.mark.parametrize("text", [
        "unsigned const int",
        "const unsigned int",
        "unsigned int const",
    ])
    def test_qualifier_between_specifiers(self, text):
        assert parse_type(text) == CType.int_type(signed=False).const()

    def test_interleaved_qualifier_with_pointer(self):
        assert parse_type("long const long*") == CType.ptr(CType.long_long_type().const())

    def test_const_pointer(self):
        t = parse_type("int* const")
        assert t.is_pointer and t.is_const
        assert not t.pointee.is_const

    def test_pointer_to_pointer(self):
        t = parse_type("char **")
        assert t.pointee.is_pointer
        assert t.pointee.pointee == CType.char_type()

    def test_reference(self):
        t = parse_type("int&")
        assert t.is_reference
        assert t.pointee == CType.int_type()

    def test_reference_to_pointer(self):
        t = parse_type("int*&")
        assert t.is_reference and t.pointee.is_pointer


class TestNamedTypes:

    def test_registry_lookup(self):
        color = CType.enum_type(Color)
        assert parse_type("Color", registry={"Color": color}) == color

    def test_registry_lookup_with_keyword(self):
        color = CType.enum_type(Color)
        assert parse_type("enum Color", registry={"Color": color}) == color

    def test_pointer_to_registered(self):
        color = CType.enum_type(Color)
        t = parse_type("const Color*", registry={"Color": color})
        assert t == CType.ptr(color.const())

    def test_unknown_name(self):
        with pytest.raises(TypeSpellingError, match="unknown type name"):
            parse_type("Color")


class TestRejectedSpellings:

    @pytest.mark.parametrize("text", [
        "",
        "long double",
        "signed unsigned int",
        "long long long",
        "short long",
        "short char",
        "int int",
        "int&*",
        "int& &",
        "const",
        "int[4]",
    ])
    def test_rejected(self, text):
        with pytest.raises(TypeSpellingError):
            parse_type(text)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_type("long double")


class TestSplitTypes:

    def test_arrow(self):
        assert split_types("int8_t <- int") == ("int8_t", "int")

    def test_comma(self):
        assert split_types("uint8_t,int") == ("uint8_t", "int")

    def test_missing_separator(self):
        with pytest.raises(TypeSpellingError):
            split_types("int")
