"""Unit tests for Context composition and field constructors."""

import pytest

from stencil_core.errors import create_error
from stencil_core.template import (
    NOT_FOUND,
    Context,
    EmptyField,
    Failed,
    Found,
    LexicalListField,
    ListField,
    NotFound,
    StringField,
    body_field,
    bool_field,
    chain,
    const_field,
    default_context,
    field,
    function_field,
    lexical_list_field,
    list_field,
    map_context,
    mapping_context,
    metadata_field,
    missing_field,
    path_field,
    title_field,
)
from stencil_core.template.outcome import failed


def failing(key: str, message: str = "boom") -> Context:
    return Context(lambda k, args, item: failed(message) if k == key else NOT_FOUND)


class TestOutcome:
    """Tests for Failed breadcrumbs and softness."""

    def test_breadcrumb_is_prepended(self):
        outcome = failed("inner").with_breadcrumb("middle").with_breadcrumb("outer")
        assert outcome.messages == ("outer", "middle", "inner")

    def test_breadcrumb_keeps_code(self):
        outcome = Failed(("x",), "TYPE_MISMATCH").with_breadcrumb("In expr '$x$'")
        assert outcome.code == "TYPE_MISMATCH"

    def test_missing_field_failure_is_soft(self, make_item):
        outcome = missing_field().lookup("title", [], make_item())
        assert isinstance(outcome, Failed)
        assert outcome.is_soft
        assert outcome.messages == ("Missing field 'title' in context",)

    def test_provider_failure_is_hard(self):
        assert not failed("boom").is_soft


class TestChain:
    """Ordered fallback across providers."""

    def test_first_found_wins(self, make_item):
        ctx = chain(const_field("k", "a"), const_field("k", "b"))
        assert ctx.lookup("k", [], make_item()) == Found(StringField("a"))

    def test_not_found_falls_through(self, make_item):
        ctx = chain(const_field("other", "x"), const_field("k", "b"))
        assert ctx.lookup("k", [], make_item()) == Found(StringField("b"))

    def test_failed_is_not_shadowed(self, make_item):
        ctx = chain(failing("k"), const_field("k", "b"))
        assert ctx.lookup("k", [], make_item()) == failed("boom")

    def test_empty_chain_is_not_found(self, make_item):
        assert chain().lookup("k", [], make_item()) == NOT_FOUND

    def test_all_declining_is_not_found(self, make_item):
        outcome = chain(const_field("a", "1")).lookup("k", [], make_item())
        assert isinstance(outcome, NotFound)

    def test_missing_field_terminates(self, make_item):
        ctx = chain(const_field("a", "1"), missing_field(), const_field("k", "never"))
        outcome = ctx.lookup("k", [], make_item())
        assert isinstance(outcome, Failed)
        assert outcome.code == "FIELD_NOT_FOUND"

    def test_add_operator(self, make_item):
        ctx = const_field("a", "1") + const_field("b", "2")
        assert len(ctx.providers) == 2
        assert ctx.lookup("b", [], make_item()) == Found(StringField("2"))

    def test_add_rejects_non_context(self):
        with pytest.raises(TypeError):
            const_field("a", "1") + "b"

    def test_chain_is_associative(self, make_item):
        a, b, c = failing("x"), const_field("x", "b"), const_field("y", "c")
        item = make_item()
        for key in ("x", "y", "z"):
            assert chain(chain(a, b), c).lookup(key, [], item) == chain(
                a, chain(b, c)
            ).lookup(key, [], item)


class TestFieldConstructors:
    """Tests for the individual field constructors."""

    def test_field_computes_from_item(self, make_item):
        ctx = field("upper", lambda item: item.identifier.upper())
        assert ctx.lookup("upper", [], make_item("a.md")) == Found(StringField("A.MD"))

    def test_field_returning_none_is_not_found(self, make_item):
        assert field("k", lambda item: None).lookup("k", [], make_item()) == NOT_FOUND

    def test_field_raising_becomes_failed(self, make_item):
        def compute(item):
            raise create_error("CONTEXT_FAILURE", message="no date in metadata")

        outcome = field("date", compute).lookup("date", [], make_item())
        assert isinstance(outcome, Failed)
        assert outcome.code == "CONTEXT_FAILURE"
        assert outcome.messages[0].startswith("no date in metadata")
        assert not outcome.is_soft

    def test_bool_field(self, make_item):
        ctx = bool_field("draft", lambda item: item.metadata.get("draft") == "yes")
        assert ctx.lookup("draft", [], make_item(draft="yes")) == Found(EmptyField())
        assert ctx.lookup("draft", [], make_item(draft="no")) == NOT_FOUND

    def test_function_field_receives_args(self, make_item):
        ctx = function_field("join", lambda args, item: "+".join(args))
        assert ctx.lookup("join", ["a", "b"], make_item()) == Found(StringField("a+b"))

    def test_list_field(self, make_item):
        items = [make_item("a.md"), make_item("b.md")]
        sub = const_field("x", "1")
        outcome = list_field("posts", sub, items).lookup("posts", [], make_item())
        assert isinstance(outcome, Found)
        assert isinstance(outcome.value, ListField)
        assert outcome.value.context is sub
        assert [i.identifier for i in outcome.value.items] == ["a.md", "b.md"]

    def test_lexical_list_field(self, make_item):
        outcome = lexical_list_field(
            "tags", lambda tag: const_field("tag", tag), ["a", "b"]
        ).lookup("tags", [], make_item())
        assert isinstance(outcome.value, LexicalListField)
        assert outcome.value.values == ("a", "b")

    def test_map_context_transforms_strings(self, make_item):
        ctx = map_context(str.upper, const_field("k", "abc"))
        assert ctx.lookup("k", [], make_item()) == Found(StringField("ABC"))

    def test_map_context_passes_empty_fields(self, make_item):
        ctx = map_context(str.upper, bool_field("b", lambda item: True))
        assert ctx.lookup("b", [], make_item()) == Found(EmptyField())

    def test_map_context_fails_on_lists(self, make_item):
        ctx = map_context(str.upper, list_field("xs", const_field("a", "1"), []))
        outcome = ctx.lookup("xs", [], make_item())
        assert isinstance(outcome, Failed)
        assert "can't map over list field 'xs'" in outcome.messages[0]

    def test_map_context_keeps_not_found(self, make_item):
        ctx = map_context(str.upper, const_field("k", "abc"))
        assert ctx.lookup("other", [], make_item()) == NOT_FOUND


class TestItemFields:
    """Fields read from the item."""

    def test_body_field(self, make_item):
        assert body_field().lookup("body", [], make_item(body="hi")) == Found(StringField("hi"))

    def test_path_field(self, make_item):
        outcome = path_field().lookup("path", [], make_item("posts/a.md"))
        assert outcome == Found(StringField("posts/a.md"))

    def test_title_field(self, make_item):
        outcome = title_field().lookup("title", [], make_item("posts/hello-world.md"))
        assert outcome == Found(StringField("hello-world"))

    def test_metadata_conversion(self, make_item):
        item = make_item(
            author="Ann",
            year=2024,
            published=True,
            draft=False,
            series=None,
            tags=["a", "b"],
            extra={"x": 1},
        )
        ctx = metadata_field()
        assert ctx.lookup("author", [], item) == Found(StringField("Ann"))
        assert ctx.lookup("year", [], item) == Found(StringField("2024"))
        assert ctx.lookup("published", [], item) == Found(EmptyField())
        assert ctx.lookup("draft", [], item) == NOT_FOUND
        assert ctx.lookup("series", [], item) == NOT_FOUND
        assert ctx.lookup("extra", [], item) == Found(EmptyField())
        assert ctx.lookup("unknown", [], item) == NOT_FOUND
        tags = ctx.lookup("tags", [], item)
        assert isinstance(tags.value, LexicalListField)

    def test_mapping_context(self, make_item):
        ctx = mapping_context({"site": "Example", "nav": [{"href": "/"}]})
        assert ctx.lookup("site", [], make_item()) == Found(StringField("Example"))
        assert isinstance(ctx.lookup("nav", [], make_item()).value, LexicalListField)

    def test_default_context_prefers_metadata_over_title(self, make_item):
        ctx = default_context()
        item = make_item("posts/a.md", body="B", title="Real title")
        assert ctx.lookup("title", [], item) == Found(StringField("Real title"))
        assert ctx.lookup("body", [], item) == Found(StringField("B"))
        assert ctx.lookup("title", [], make_item("posts/a.md")) == Found(StringField("a"))
