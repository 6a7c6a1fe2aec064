"""Document tree model.

A document is a tree of typed nodes. Containers (``DocumentNode``) own an
ordered list of children; ``TextNode`` is the only leaf kind and carries a
literal payload. Insertion order is rendering order.

The ``parent`` link is navigational only: it is held weakly so the parent
remains the sole owner of its children.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..core.exceptions import DocumentStructureError


class NodeTag(str, Enum):
    ROOT = "root"
    FRAGMENT = "fragment"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    UNORDERED_LIST = "unordered_list"
    ORDERED_LIST = "ordered_list"
    LIST_ITEM = "list_item"
    BOLD = "bold"
    ITALIC = "italic"
    CODE = "code"
    CODE_BLOCK = "code_block"
    LINK = "link"
    LINE_BREAK = "line_break"
    HORIZONTAL_RULE = "horizontal_rule"
    DETAILS = "details"
    SUMMARY = "summary"
    SPAN = "span"
    TEXT = "text"

    @property
    def is_leaf(self) -> bool:
        return self in _LEAF_TAGS

    @property
    def is_void(self) -> bool:
        """Containers that render markup but never take children."""
        return self in _VOID_TAGS

    @property
    def is_splittable(self) -> bool:
        """Whether a page may be cut while a node with this tag is still open."""
        return self in _SPLITTABLE_TAGS


_LEAF_TAGS = frozenset({NodeTag.TEXT})
_VOID_TAGS = frozenset({NodeTag.LINE_BREAK, NodeTag.HORIZONTAL_RULE})
_SPLITTABLE_TAGS = frozenset(
    {
        NodeTag.ROOT,
        NodeTag.FRAGMENT,
        NodeTag.UNORDERED_LIST,
        NodeTag.ORDERED_LIST,
        NodeTag.LIST_ITEM,
        NodeTag.DETAILS,
    }
)
LIST_TAGS = frozenset({NodeTag.UNORDERED_LIST, NodeTag.ORDERED_LIST})


class AbstractNode:
    """Behaviour shared by containers and leaves."""

    tag: NodeTag
    _parent_ref: Optional[weakref.ReferenceType[DocumentNode]]

    @property
    def parent(self) -> Optional[DocumentNode]:
        ref = self._parent_ref
        return ref() if ref is not None else None

    @property
    def is_leaf(self) -> bool:
        return self.tag.is_leaf

    def _attach(self, parent: DocumentNode) -> None:
        self._parent_ref = weakref.ref(parent)

    def _detach(self) -> None:
        self._parent_ref = None


@dataclass(eq=False)
class DocumentNode(AbstractNode):
    """A container node. Compared by identity, never by value."""

    tag: NodeTag
    attributes: dict[str, Any] = field(default_factory=dict)
    children: list[AbstractNode] = field(default_factory=list, init=False)
    _parent_ref: Optional[weakref.ReferenceType[DocumentNode]] = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if self.tag.is_leaf:
            raise DocumentStructureError(
                f"{self.tag.value!r} is a leaf tag and cannot be a container"
            )

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def add_child(self, child: AbstractNode) -> AbstractNode:
        """Attach ``child`` as the last child and return it for chaining."""
        if self.tag.is_void:
            raise DocumentStructureError(
                f"{self.tag.value!r} nodes cannot have children"
            )
        if child.tag is NodeTag.ROOT:
            raise DocumentStructureError("A root node cannot be attached as a child")
        if child.parent is not None:
            raise DocumentStructureError(
                f"{child.tag.value!r} node already belongs to another parent"
            )
        if child is self or any(ancestor is child for ancestor in ancestors(self)):
            raise DocumentStructureError("Attaching this node would create a cycle")
        child._attach(self)
        self.children.append(child)
        return child

    def extend(self, children: list[AbstractNode]) -> DocumentNode:
        for child in children:
            self.add_child(child)
        return self

    def remove_child(self, child: AbstractNode) -> None:
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                child._detach()
                return
        raise DocumentStructureError("Node is not a child of this parent")

    @property
    def first_child(self) -> Optional[AbstractNode]:
        return self.children[0] if self.children else None


@dataclass(eq=False)
class TextNode(AbstractNode):
    """Literal text leaf."""

    data: str
    tag: NodeTag = field(default=NodeTag.TEXT, init=False)
    _parent_ref: Optional[weakref.ReferenceType[DocumentNode]] = field(
        default=None, init=False, repr=False
    )


def make_document_node(
    tag: NodeTag,
    parent: Optional[DocumentNode] = None,
    attributes: Optional[Mapping[str, Any]] = None,
) -> DocumentNode:
    node = DocumentNode(tag, dict(attributes or {}))
    if parent is not None:
        parent.add_child(node)
    return node


def make_text_node(data: str, parent: Optional[DocumentNode] = None) -> TextNode:
    node = TextNode(data)
    if parent is not None:
        parent.add_child(node)
    return node


def ancestors(node: AbstractNode) -> Iterator[DocumentNode]:
    """Yield the parent chain of ``node``, nearest first."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def sibling_index(node: AbstractNode) -> int:
    parent = node.parent
    if parent is None:
        return 0
    for index, child in enumerate(parent.children):
        if child is node:
            return index
    raise DocumentStructureError("Node is not listed among its parent's children")


def is_last_child(node: AbstractNode) -> bool:
    parent = node.parent
    if parent is None:
        return True
    return bool(parent.children) and parent.children[-1] is node


def depth_first(node: AbstractNode) -> Iterator[AbstractNode]:
    """Traverse depth-first, yielding ``node`` before its children."""
    yield node
    if isinstance(node, DocumentNode):
        for child in node.children:
            yield from depth_first(child)


def text_content(node: AbstractNode) -> str:
    """Concatenate every text payload beneath ``node``."""
    return "".join(
        item.data for item in depth_first(node) if isinstance(item, TextNode)
    )
