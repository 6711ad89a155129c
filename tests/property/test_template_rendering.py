"""Property-based tests for template rendering.

Tests literal output, presence-driven conditionals, loop joining and the
trim invariant.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from stencil_core.template import (
    Chunk,
    Context,
    Escaped,
    Found,
    For,
    Ident,
    If,
    Template,
    TemplateEvaluator,
    TrimL,
    TrimR,
    chain,
    const_field,
    list_field,
    make_template,
    path_field,
    read_template,
)
from stencil_core.template.item import Item

# =============================================================================
# Strategies
# =============================================================================

# Text without template syntax
plain_text = st.text(alphabet=st.characters(blacklist_characters="$"), max_size=30)

literal_elements = st.lists(
    st.one_of(plain_text.map(Chunk), st.just(Escaped())),
    max_size=10,
)

identifiers = st.from_regex(r"[a-z][a-z0-9/]{0,10}\.md", fullmatch=True)

# Whitespace-heavy chunks for trimming
spaced_text = st.text(alphabet=" \n\tab", max_size=10)

trimmable_elements = st.lists(
    st.one_of(spaced_text.map(Chunk), st.just(TrimL()), st.just(TrimR())),
    max_size=12,
)


def make_item(identifier: str = "posts/a.md") -> Item:
    return Item(identifier=identifier, body="")


def untouchable() -> Context:
    def lookup(key, args, item):
        raise AssertionError(f"context consulted for {key!r}")

    return Context(lookup)


def contains_markers(elements) -> bool:
    for element in elements:
        if isinstance(element, (TrimL, TrimR)):
            return True
        if isinstance(element, If) and (
            contains_markers(element.then) or contains_markers(element.else_ or ())
        ):
            return True
        if isinstance(element, For) and (
            contains_markers(element.body) or contains_markers(element.sep or ())
        ):
            return True
    return False


# =============================================================================
# Test Classes
# =============================================================================


@pytest.mark.property
class TestLiteralRendering:
    """Templates without expressions never consult the context."""

    @given(literal_elements)
    @settings(max_examples=100)
    def test_literals_concatenate(self, elements):
        template = Template(tuple(elements), "t")
        expected = "".join("$" if isinstance(e, Escaped) else e.text for e in elements)
        outcome = TemplateEvaluator().evaluate(template, untouchable(), make_item())
        assert outcome == Found(expected)

    @given(plain_text)
    @settings(max_examples=50)
    def test_escaped_source(self, text):
        template = read_template(text + "$$")
        outcome = TemplateEvaluator().evaluate(template, untouchable(), make_item())
        assert outcome == Found(text + "$")


@pytest.mark.property
class TestConditionals:
    """Presence, not content, selects the branch."""

    @given(st.text(max_size=20))
    @settings(max_examples=50)
    def test_any_present_value_is_true(self, value):
        template = read_template("$if(k)$A$else$B$endif$")
        outcome = TemplateEvaluator().evaluate(template, const_field("k", value), make_item())
        assert outcome == Found("A")

    @given(st.from_regex(r"[a-z]{1,8}", fullmatch=True))
    @settings(max_examples=50)
    def test_absent_key_is_false(self, key):
        template = read_template(f"$if({key})$A$else$B$endif$")
        outcome = TemplateEvaluator().evaluate(template, Context(), make_item())
        assert outcome == Found("B")


@pytest.mark.property
class TestLoops:
    """Loop output is the separator-joined item outputs."""

    @given(st.lists(identifiers, max_size=8), st.text(alphabet="-,; ", max_size=3))
    @settings(max_examples=100)
    def test_join(self, ids, glue):
        items = [make_item(identifier) for identifier in ids]
        ctx = chain(list_field("xs", path_field("p"), items), const_field("glue", glue))
        template = read_template("$for(xs)$[$p$]$sep$$glue$$endfor$")
        outcome = TemplateEvaluator().evaluate(template, ctx, make_item("index.md"))
        assert outcome == Found(glue.join(f"[{identifier}]" for identifier in ids))


@pytest.mark.property
class TestTrimInvariant:
    """make_template() never leaves markers behind."""

    @given(trimmable_elements, trimmable_elements)
    @settings(max_examples=200)
    def test_no_markers(self, outer, inner):
        elements = [*outer, If(Ident("k"), tuple(inner), tuple(inner)), *outer]
        template = make_template("t", elements)
        assert not contains_markers(template.elements)

    @given(trimmable_elements)
    @settings(max_examples=200)
    def test_renders_without_violation(self, elements):
        template = make_template("t", elements)
        outcome = TemplateEvaluator().evaluate(template, untouchable(), make_item())
        assert isinstance(outcome, Found)

    @given(trimmable_elements)
    @settings(max_examples=100)
    def test_no_empty_chunks(self, elements):
        template = make_template("t", elements)
        assert all(e.text for e in template.elements if isinstance(e, Chunk))
