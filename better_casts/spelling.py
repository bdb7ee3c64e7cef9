"""
better_casts/spelling.py
════════════════════════

Parse C type spellings into ``CType`` descriptors.

    >>> parse_type("const unsigned long*")
    CType(const unsigned long*)
    >>> parse_type("int8_t")
    CType(int8_t)

Supported: ``void``, ``bool``/``_Bool``, every combination of
``signed``/``unsigned``/``short``/``long``/``int``/``char`` that C allows
(qualifiers may sit between the words, as in ``unsigned const int``),
``float``, ``double``, the ``<stdint.h>`` fixed-width names, ``size_t``,
``ptrdiff_t``, ``intptr_t``, ``uintptr_t``, ``nullptr_t``, ``const`` /
``volatile`` qualifiers, and any number of ``*`` declarators followed by
at most one ``&``.  Enumerations and records are looked up by name in an
optional registry, since their meaning comes from Python classes.

Dependencies:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import functools
import logging
from collections import Counter
from dataclasses import replace
from typing import Any, List, Mapping, Optional, Tuple

from parsimonious.exceptions import ParseError, VisitationError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from better_casts.type_model import CType, DataModel, Qualifier

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — GRAMMAR
# ═══════════════════════════════════════════════════════════════════

TYPE_GRAMMAR = Grammar(r'''
    spelling        = _ qualifier* base_type qualifier* declarator* _

    base_type       = nullptr_name / fixed_name / alias_name / float_name
                    / void_name / bool_name / int_spec / named_type

    int_spec        = int_word int_part*
    int_part        = int_word / qualifier
    int_word        = ~r"(unsigned|signed|short|long|int|char)\b" _

    float_name      = ~r"(float|double)\b" _
    void_name       = ~r"void\b" _
    bool_name       = ~r"(bool|_Bool)\b" _
    fixed_name      = ~r"(std::)?(u?)int(8|16|32|64)_t\b" _
    alias_name      = ~r"(std::)?(size_t|ptrdiff_t|intptr_t|uintptr_t)\b" _
    nullptr_name    = ~r"(std::)?nullptr_t\b" _
    named_type      = ~r"((enum|struct|class)\s+)?[A-Za-z_][A-Za-z0-9_]*" _

    declarator      = sigil _ qualifier*
    sigil           = "*" / "&"
    qualifier       = ~r"(const|volatile)\b" _

    _               = ~r"\s*"
''')


class TypeSpellingError(ValueError):
    """The text is not a supported C type spelling."""


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — PARSE TREE → CType
# ═══════════════════════════════════════════════════════════════════

def _items(visited: Any) -> List[Any]:
    """Visited results of a repetition, without raw parse nodes."""
    if isinstance(visited, list):
        return [v for v in visited if not isinstance(v, Node)]
    return []


def _int_from_words(words: List[str], model: DataModel) -> CType:
    counts = Counter(words)
    spelled = " ".join(words)
    if counts["signed"] and counts["unsigned"]:
        raise TypeSpellingError(f"{spelled!r}: both signed and unsigned")
    for word, n in counts.items():
        if n > (2 if word == "long" else 1):
            raise TypeSpellingError(f"{spelled!r}: repeated {word!r}")

    signed: Optional[bool] = None
    if counts["unsigned"]:
        signed = False
    elif counts["signed"]:
        signed = True

    if counts["char"]:
        if counts["short"] or counts["long"] or counts["int"]:
            raise TypeSpellingError(f"{spelled!r}: invalid char specifiers")
        return CType.char_type(signed, model=model)
    if counts["short"] and counts["long"]:
        raise TypeSpellingError(f"{spelled!r}: both short and long")

    is_signed = signed is not False
    if counts["short"]:
        return CType.short_type(is_signed, model=model)
    if counts["long"] == 2:
        return CType.long_long_type(is_signed, model=model)
    if counts["long"] == 1:
        return CType.long_type(is_signed, model=model)
    return CType.int_type(is_signed, model=model)


class TypeSpellingVisitor(NodeVisitor):
    """Transforms a parsimonious parse tree into a ``CType``."""

    unwrapped_exceptions = (TypeSpellingError,)

    def __init__(
        self,
        model: DataModel,
        registry: Optional[Mapping[str, CType]] = None,
    ) -> None:
        self.model = model
        self.registry = registry or {}

    def generic_visit(self, node, visited_children):
        return visited_children or node

    def visit_spelling(self, node, visited_children):
        _, leading, base, trailing, declarators, _ = visited_children
        quals = _items(leading) + _items(trailing)
        result: CType = base.with_qualifiers(*quals) if quals else base

        seen_ref = False
        for sigil, ptr_quals in _items(declarators):
            if seen_ref:
                raise TypeSpellingError(f"{node.text.strip()!r}: declarator after '&'")
            if sigil == "&":
                result = CType.ref(result)
                seen_ref = True
            else:
                result = CType.ptr(result, model=self.model)
            if ptr_quals:
                result = result.with_qualifiers(*ptr_quals)
        return result

    def visit_base_type(self, node, visited_children):
        return visited_children[0]

    def visit_int_spec(self, node, visited_children):
        first, rest = visited_children
        words, quals = [first], []
        for item in _items(rest):
            (quals if isinstance(item, Qualifier) else words).append(item)
        result = _int_from_words(words, self.model)
        return result.with_qualifiers(*quals) if quals else result

    def visit_int_part(self, node, visited_children):
        return visited_children[0]

    def visit_int_word(self, node, visited_children):
        return node.children[0].text

    def visit_float_name(self, node, visited_children):
        if node.children[0].text == "float":
            return CType.float_type()
        return CType.double_type()

    def visit_void_name(self, node, visited_children):
        return CType.void()

    def visit_bool_name(self, node, visited_children):
        return CType.bool_type(model=self.model)

    def visit_fixed_name(self, node, visited_children):
        match = node.children[0].match
        return CType.fixed(int(match.group(3)), signed=not match.group(2), model=self.model)

    def visit_alias_name(self, node, visited_children):
        name = node.children[0].match.group(2)
        signed = name in ("ptrdiff_t", "intptr_t")
        base = CType.fixed(self.model.pointer_bits, signed=signed, model=self.model)
        return replace(base, name=name)

    def visit_nullptr_name(self, node, visited_children):
        return CType.nullptr(model=self.model)

    def visit_named_type(self, node, visited_children):
        text = node.children[0].text
        name = text.split()[-1]
        for key in (text, name):
            if key in self.registry:
                return self.registry[key]
        raise TypeSpellingError(f"unknown type name {name!r}")

    def visit_declarator(self, node, visited_children):
        sigil, _, quals = visited_children
        return (sigil, _items(quals))

    def visit_sigil(self, node, visited_children):
        return node.text

    def visit_qualifier(self, node, visited_children):
        return Qualifier[node.children[0].text.upper()]


# ═══════════════════════════════════════════════════════════════════
#  PART 3 — PUBLIC API
# ═══════════════════════════════════════════════════════════════════

def _parse(
    text: str,
    model: DataModel,
    registry: Optional[Mapping[str, CType]],
) -> CType:
    try:
        tree = TYPE_GRAMMAR.parse(text)
        return TypeSpellingVisitor(model, registry).visit(tree)
    except ParseError as exc:
        logger.debug("type spelling %r rejected: %s", text, exc)
        raise TypeSpellingError(f"not a C type spelling: {text!r}") from exc
    except VisitationError as exc:
        raise TypeSpellingError(f"cannot interpret {text!r}: {exc}") from exc


@functools.lru_cache(maxsize=256)
def _parse_cached(text: str, model: DataModel) -> CType:
    return _parse(text, model, None)


def parse_type(
    text: str,
    model: Optional[DataModel] = None,
    registry: Optional[Mapping[str, CType]] = None,
) -> CType:
    """Parse a C type spelling.

    Parameters
    ----------
    text:
        The spelling, e.g. ``"unsigned long long"`` or ``"const void*"``.
    model:
        Data model fixing integer widths; defaults to the configured one.
    registry:
        Named enumerations / records, keyed by ``"Color"`` or
        ``"enum Color"``.
    """
    if model is None:
        from better_casts import config
        model = config.DATA_MODEL
    if registry:
        return _parse(text, model, registry)
    return _parse_cached(text, model)


def split_types(text: str) -> Tuple[str, ...]:
    """Split ``"int8_t <- int"`` or ``"int8_t,int"`` into two spellings."""
    for sep in ("<-", ","):
        if sep in text:
            left, right = text.split(sep, 1)
            return left.strip(), right.strip()
    raise TypeSpellingError(f"expected 'TO <- FROM' or 'TO,FROM', got {text!r}")


__all__ = [
    "TYPE_GRAMMAR",
    "TypeSpellingError",
    "TypeSpellingVisitor",
    "parse_type",
    "split_types",
]
