"""Incremental depth-first traversal of a document tree.

``FringeWalker`` visits the fringe of the tree one event at a time: entering a
container (``PRE``), leaving it (``POST``) or visiting a text leaf (``LEAF``,
where entry and exit are a single event). Every call to ``increment`` does the
work for exactly one event, which lets two walkers driven by different
renderers be advanced in alternation and compared after every step.

The phase sequence depends only on the tree, never on the renderer, so any
two walkers over the same tree agree on it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, cast

from ..core.exceptions import WalkerExhaustedError
from .nodes import AbstractNode, DocumentNode

if TYPE_CHECKING:
    from ..renderers.base import FringeRenderer


class FringeType(str, Enum):
    PRE = "pre"
    POST = "post"
    LEAF = "leaf"


class OutputSink(Protocol):
    def append(self, text: str) -> None: ...

    def commit(self, node: Optional[AbstractNode]) -> None: ...


CommitHook = Callable[[AbstractNode, Any], None]


def commit_to_output(node: AbstractNode, context: Any) -> None:
    context.output.commit(node)


@dataclass
class _Frame:
    node: DocumentNode
    next_child: int = 0


class FringeWalker:
    def __init__(
        self,
        root: AbstractNode,
        context: Any,
        renderer: FringeRenderer,
        commit_hook: CommitHook = commit_to_output,
    ) -> None:
        self.root = root
        self.context = context
        self.renderer = renderer
        self._commit_hook = commit_hook
        # Open containers, outermost first.
        self._stack: list[_Frame] = []
        self._next: Optional[tuple[FringeType, AbstractNode]] = (
            _entry_type(root),
            root,
        )
        self._finished = False
        self.last_fringe_type: Optional[FringeType] = None

    @property
    def finished(self) -> bool:
        return self._finished

    def increment(self) -> Optional[AbstractNode]:
        """Process the next fringe event and return its node.

        Returns ``None`` once the root has been left; calling again after that
        raises ``WalkerExhaustedError``.
        """
        if self._finished:
            raise WalkerExhaustedError(
                f"{self.renderer!r} walker has already finished traversing the tree"
            )
        if self._next is None:
            self._finished = True
            self.last_fringe_type = None
            return None
        fringe_type, node = self._next
        output = self.context.output
        if fringe_type is FringeType.PRE:
            output.append(self.renderer.enter(node))
            self._stack.append(_Frame(cast(DocumentNode, node)))
        elif fringe_type is FringeType.LEAF:
            output.append(self.renderer.enter(node))
            self._maybe_commit(node)
        else:
            output.append(self.renderer.leave(node))
            self._maybe_commit(node)
        self.last_fringe_type = fringe_type
        self._next = self._advance()
        return node

    def _maybe_commit(self, node: AbstractNode) -> None:
        # ``_stack`` holds only the still-open ancestors here.
        if all(frame.node.tag.is_splittable for frame in self._stack):
            self._commit_hook(node, self.context)

    def _advance(self) -> Optional[tuple[FringeType, AbstractNode]]:
        if not self._stack:
            return None
        frame = self._stack[-1]
        children = frame.node.children
        if frame.next_child < len(children):
            child = children[frame.next_child]
            frame.next_child += 1
            return _entry_type(child), child
        self._stack.pop()
        return FringeType.POST, frame.node


def _entry_type(node: AbstractNode) -> FringeType:
    return FringeType.LEAF if node.is_leaf else FringeType.PRE


class TextSink:
    """Unpaged sink collecting everything appended to it."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, text: str) -> None:
        if text:
            self._parts.append(text)

    def commit(self, node: Optional[AbstractNode]) -> None:
        del node

    def getvalue(self) -> str:
        return "".join(self._parts)


@dataclass
class WalkerContext:
    output: Any


def render_text(root: AbstractNode, renderer: FringeRenderer) -> str:
    """Render ``root`` in one pass without pagination."""
    sink = TextSink()
    walker = FringeWalker(root, WalkerContext(sink), renderer)
    while walker.increment() is not None:
        pass
    return sink.getvalue()
