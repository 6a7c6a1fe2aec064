from __future__ import annotations

from docpager.document.builder import (
    bold,
    code_block,
    details,
    heading,
    horizontal_rule,
    line_break,
    link,
    list_item,
    ordered_list,
    paragraph,
    root,
    span,
    summary,
    unordered_list,
)
from docpager.render import render_document


def _html(*children) -> str:
    return render_document(root(*children)).html


def test_paragraphs() -> None:
    assert _html(paragraph("hello"), paragraph("world")) == "<p>hello</p><p>world</p>"


def test_text_and_attributes_are_escaped() -> None:
    assert _html(paragraph("<script>&\"")) == "<p>&lt;script&gt;&amp;&quot;</p>"
    assert _html(paragraph(link("x", href='https://e.org/?a=1&b="2"'))) == (
        '<p><a href="https://e.org/?a=1&amp;b=&quot;2&quot;">x</a></p>'
    )


def test_headings_and_void_elements() -> None:
    assert _html(heading("T", level=3), horizontal_rule()) == "<h3>T</h3><hr/>"
    assert _html(paragraph("a", line_break(), "b")) == "<p>a<br/>b</p>"


def test_lists() -> None:
    assert _html(unordered_list(list_item(bold("x")))) == "<ul><li><b>x</b></li></ul>"
    assert _html(ordered_list(list_item("x"))) == "<ol><li>x</li></ol>"
    assert _html(ordered_list(list_item("x"), start=4)) == (
        '<ol start="4"><li>x</li></ol>'
    )


def test_code_block_language_class() -> None:
    assert _html(code_block("a < b", language="py")) == (
        '<pre><code class="language-py">a &lt; b</code></pre>'
    )
    assert _html(code_block("x")) == "<pre><code>x</code></pre>"


def test_span_keeps_only_matrix_attributes() -> None:
    tree = span("s", **{"data-mx-color": "#ff0000", "onclick": "evil()"})

    assert _html(tree) == '<span data-mx-color="#ff0000">s</span>'


def test_details_and_summary() -> None:
    assert _html(details(summary("more"), "body")) == (
        "<details><summary>more</summary>body</details>"
    )
