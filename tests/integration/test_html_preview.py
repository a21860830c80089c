"""Integration tests for the HTML preview page."""

from dataclasses import replace

import pytest

from resumex.contexts.document.presets import default_resume
from resumex.contexts.templating.html import css_declarations, render_html
from resumex.contexts.templating.page import render_document
from resumex.contexts.templating.tree import Node, el


@pytest.mark.integration
def test_preview_page_contains_document():
    """Test the preview is a complete page showing the résumé content."""
    document = default_resume()
    html = render_html(render_document(document), title="李明_简历")

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>李明_简历</title>" in html
    assert 'lang="zh-CN"' in html
    assert "李明" in html
    assert 'data-key="exp-1"' in html
    assert 'data-role="section"' in html
    assert 'class="resume-page"' in html


@pytest.mark.integration
def test_preview_escapes_user_text():
    """Test user-entered text is escaped, never interpreted as markup."""
    document = default_resume()
    hostile = replace(document, profile=replace(document.profile, name="<script>alert(1)</script>"))
    html = render_html(render_document(hostile))

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


@pytest.mark.integration
def test_void_elements_and_layout_styles():
    """Test img nodes are void and row/flow layouts map to flexbox."""
    tree = el(
        "div",
        Node(tag="img", attrs={"src": "avatar.png", "alt": "李明"}),
        style={"display": "row", "justify": "space-between"},
    )
    html = render_html(tree)

    assert '<img src="avatar.png" alt="李明">' in html
    assert "</img>" not in html
    assert "display: flex; justify-content: space-between" in html


@pytest.mark.integration
def test_flow_display_wraps():
    """Test flow containers wrap their children."""
    assert css_declarations({"display": "flow", "gap": "8px"}) == "display: flex; flex-wrap: wrap; gap: 8px"
