from __future__ import annotations

import pytest

from proto_emitter.codegen.core.templates import TemplateError
from proto_emitter.codegen.languages.go import GoGenerator


def test_comment_filter_keeps_text_verbatim() -> None:
    rendered = GoGenerator().render_template(
        "comments.go.j2", {"detached": [" one\n  two\n"], "leading": ""}
    )
    assert rendered == "// one\n//  two\n\n"


def test_leading_comment_follows_detached_ones() -> None:
    rendered = GoGenerator().render_template(
        "comments.go.j2", {"detached": [" first\n"], "leading": " second\n"}
    )
    assert rendered == "// first\n\n// second\n\n"


def test_missing_variables_are_errors() -> None:
    with pytest.raises(TemplateError, match="comments.go.j2"):
        GoGenerator().render_template("comments.go.j2", {"detached": []})


def test_unknown_template_is_an_error() -> None:
    with pytest.raises(TemplateError, match="nope.go.j2"):
        GoGenerator().render_template("nope.go.j2", {})
