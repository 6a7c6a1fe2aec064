from __future__ import annotations

import json
from pathlib import Path

import pytest

from docpager.document.loader import (
    DocumentLoadError,
    load_document,
    load_document_file,
)
from docpager.document.nodes import DocumentNode, NodeTag, TextNode, text_content


def test_list_is_wrapped_in_root() -> None:
    tree = load_document(
        [
            {"tag": "heading", "level": 2, "children": "Title"},
            {"tag": "paragraph", "children": ["see ", {"tag": "bold", "children": "this"}]},
            "tail",
        ]
    )

    assert tree.tag is NodeTag.ROOT
    heading, para, tail = tree.children
    assert isinstance(heading, DocumentNode)
    assert heading.tag is NodeTag.HEADING
    assert heading.get("level") == 2
    assert isinstance(para, DocumentNode)
    assert [child.tag for child in para.children] == [NodeTag.TEXT, NodeTag.BOLD]
    assert isinstance(tail, TextNode)
    assert text_content(tree) == "Titlesee thistail"


def test_explicit_root_mapping_is_kept() -> None:
    tree = load_document({"tag": "ROOT", "children": {"tag": "paragraph", "children": 42}})

    assert tree.tag is NodeTag.ROOT
    assert text_content(tree) == "42"


def test_text_mapping_uses_text_key() -> None:
    tree = load_document([{"tag": "text", "text": "plain"}])

    leaf = tree.children[0]
    assert isinstance(leaf, TextNode)
    assert leaf.data == "plain"


@pytest.mark.parametrize(
    ("data", "message"),
    [
        ([{"children": "x"}], "missing a string 'tag'"),
        ([{"tag": "marquee"}], "unknown tag"),
        ([None], "unexpected value"),
        ([True], "unexpected value"),
        ([{"tag": "line_break", "children": "x"}], "cannot have children"),
        ([{"tag": "paragraph", "children": [{"tag": "root"}]}], "root node"),
        ([{"tag": "text", "text": ["x"]}], "needs a string 'text'"),
    ],
)
def test_invalid_data_is_rejected(data: object, message: str) -> None:
    with pytest.raises(DocumentLoadError, match=message):
        load_document(data)


def test_load_yaml_and_json_files(tmp_path: Path) -> None:
    yaml_path = tmp_path / "doc.yml"
    yaml_path.write_text(
        "- tag: paragraph\n  children: hello\n- tag: paragraph\n  children: world\n",
        encoding="utf-8",
    )
    json_path = tmp_path / "doc.json"
    json_path.write_text(
        json.dumps([{"tag": "paragraph", "children": "hello"}]), encoding="utf-8"
    )

    assert text_content(load_document_file(yaml_path)) == "helloworld"
    assert text_content(load_document_file(json_path)) == "hello"


def test_load_file_errors(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(DocumentLoadError, match="Unable to parse"):
        load_document_file(broken)
    with pytest.raises(DocumentLoadError, match="Unable to read"):
        load_document_file(tmp_path / "missing.yml")
