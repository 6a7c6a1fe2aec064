"""Build document trees from plain YAML/JSON data.

Shape:

- a string is a text leaf;
- a list is a sequence of sibling nodes;
- a mapping has a ``tag`` (a ``NodeTag`` value), optional ``children`` (a
  string, a list or a single mapping) and any other keys as attributes.

A top-level value that is not a ``root`` mapping is wrapped in one.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, cast

import yaml

from ..core.exceptions import DocumentStructureError, PermanentError
from .nodes import AbstractNode, DocumentNode, NodeTag, TextNode


class DocumentLoadError(PermanentError):
    """Raised when document data cannot be turned into a tree."""


def _load_children(value: Any, path: str) -> list[AbstractNode]:
    if value is None:
        return []
    if isinstance(value, list):
        return [_load_node(item, f"{path}[{index}]") for index, item in enumerate(value)]
    return [_load_node(value, path)]


def _load_node(value: Any, path: str) -> AbstractNode:
    if isinstance(value, str):
        return TextNode(value)
    if isinstance(value, bool) or value is None:
        raise DocumentLoadError(f"{path}: unexpected value {value!r}")
    if isinstance(value, (int, float)):
        return TextNode(str(value))
    if not isinstance(value, dict):
        raise DocumentLoadError(
            f"{path}: expected a string or mapping, got {type(value).__name__}"
        )
    raw_tag = value.get("tag")
    if not isinstance(raw_tag, str):
        raise DocumentLoadError(f"{path}: mapping is missing a string 'tag'")
    try:
        tag = NodeTag(raw_tag.strip().lower())
    except ValueError as exc:
        raise DocumentLoadError(f"{path}: unknown tag {raw_tag!r}") from exc
    if tag is NodeTag.TEXT:
        data = value.get("text", value.get("children", ""))
        if not isinstance(data, (str, int, float)) or isinstance(data, bool):
            raise DocumentLoadError(f"{path}: text node needs a string 'text'")
        return TextNode(str(data))
    attributes = {
        str(key): item for key, item in value.items() if key not in ("tag", "children")
    }
    node = DocumentNode(tag, attributes)
    try:
        for child in _load_children(value.get("children"), f"{path}.{tag.value}"):
            node.add_child(child)
    except DocumentStructureError as exc:
        raise DocumentLoadError(f"{path}: {exc}") from exc
    return node


def load_document(data: Any) -> DocumentNode:
    """Turn parsed YAML/JSON data into a tree rooted at a ``root`` node."""
    if isinstance(data, dict) and str(data.get("tag", "")).lower() == NodeTag.ROOT.value:
        return cast(DocumentNode, _load_node(data, "$"))
    root = DocumentNode(NodeTag.ROOT)
    try:
        for child in _load_children(data, "$"):
            root.add_child(child)
    except DocumentStructureError as exc:
        raise DocumentLoadError(f"$: {exc}") from exc
    return root


def load_document_file(path: Path) -> DocumentNode:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Unable to read {path}: {exc}") from exc
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentLoadError(f"Unable to parse {path}: {exc}") from exc
    return load_document(data)
