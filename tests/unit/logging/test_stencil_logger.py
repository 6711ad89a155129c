"""Unit tests for StencilLogger."""

import io
import json

from stencil_core.logging import RED, RESET, LogConfig, StencilLogger
from stencil_core.types import LogFormat, LogLevel


def make_logger(**kwargs) -> tuple[StencilLogger, io.StringIO]:
    output = io.StringIO()
    return StencilLogger(LogConfig(output=output, **kwargs)), output


class TestLevels:
    """Level and component filtering."""

    def test_debug_hidden_at_info(self):
        logger, output = make_logger(level=LogLevel.INFO)
        logger.render("t", "i").started()
        assert output.getvalue() == ""

    def test_info_shown_at_info(self):
        logger, output = make_logger(level=LogLevel.INFO)
        logger.render("t", "i").completed(12, 40)
        assert "Template 't' applied to 'i' (40 chars, 0.012s)" in output.getvalue()

    def test_component_switch(self):
        logger, output = make_logger(
            level=LogLevel.DEBUG, components={"render": True, "store": False}
        )
        logger.store().missing("x.html")
        assert output.getvalue() == ""
        logger.render("t", "i").started()
        assert output.getvalue() != ""

    def test_default_components(self):
        assert LogConfig().components == {"render": True, "store": True, "config": True}

    def test_configure(self):
        logger, output = make_logger(level=LogLevel.ERROR)
        logger.store().missing("x.html")
        assert output.getvalue() == ""
        logger.configure(LogConfig(level=LogLevel.WARN, output=output))
        logger.store().missing("x.html")
        assert "Template 'x.html' not found" in output.getvalue()


class TestFormats:
    """Colored and JSON output."""

    def test_json_entry(self):
        logger, output = make_logger(level=LogLevel.DEBUG, format=LogFormat.JSON)
        logger.render("post.html", "a.md").including("footer.html", 2)
        entry = json.loads(output.getvalue())
        assert entry["level"] == "DEBUG"
        assert entry["component"] == "render"
        assert entry["message"] == "Including partial 'footer.html'"
        assert entry["template"] == "post.html"
        assert entry["item"] == "a.md"
        assert entry["depth"] == 2
        assert entry["timestamp"].endswith("Z")

    def test_colored_entry(self):
        logger, output = make_logger(level=LogLevel.INFO)
        logger.render("t", "i").failed(ValueError("boom"))
        line = output.getvalue()
        assert "[RENDER]" in line
        assert f"{RED}Template 't' failed on 'i': boom{RESET}" in line

    def test_context_truncated(self):
        logger, output = make_logger(level=LogLevel.DEBUG, truncate_at=20)
        logger.store().loaded("a" * 50, "/tmp/x")
        assert "..." in output.getvalue()

    def test_context_hidden(self):
        logger, output = make_logger(level=LogLevel.DEBUG, show_params=False)
        logger.store().cache_hit("a.html")
        assert "template_cache_hit" not in output.getvalue()


class TestRenderLogger:
    """Render diagnostics."""

    def test_condition_error(self):
        logger, output = make_logger(level=LogLevel.DEBUG, format=LogFormat.JSON)
        logger.render("t", "i").condition_error("date", ["In expr '$date$'", "bad date"])
        entry = json.loads(output.getvalue())
        assert entry["message"] == (
            "[ERROR] in 'if' condition on expr 'date':\n  In expr '$date$'\n  bad date"
        )
        assert entry["trail"] == ["In expr '$date$'", "bad date"]
