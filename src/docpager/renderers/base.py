"""Renderer contract shared by every output format.

A renderer is a table from ``NodeTag`` to a ``TagRenderer``: an optional
producer for the fragment emitted when a node is entered and another for when
it is left. Text leaves are visited in a single event and only use ``enter``.

Tables are checked for exhaustiveness when constructed, so a tag added to the
tree model fails loudly in every renderer that has not been taught about it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import RendererCoverageError
from ..document.nodes import AbstractNode, NodeTag

FragmentProducer = Callable[[AbstractNode], str]


@dataclass(frozen=True)
class TagRenderer:
    enter: Optional[FragmentProducer] = None
    leave: Optional[FragmentProducer] = None


def static(fragment: str) -> FragmentProducer:
    """Producer that always emits ``fragment``."""

    def _produce(_node: AbstractNode) -> str:
        return fragment

    return _produce


def wrap(opening: str, closing: Optional[str] = None) -> TagRenderer:
    return TagRenderer(static(opening), static(opening if closing is None else closing))


EMIT_NOTHING = TagRenderer()


class FringeRenderer:
    """Per-tag fragment table for one output format."""

    def __init__(self, name: str, table: Mapping[NodeTag, TagRenderer]) -> None:
        missing = [tag.value for tag in NodeTag if tag not in table]
        if missing:
            raise RendererCoverageError(
                f"Renderer {name!r} has no entry for tags: {', '.join(missing)}"
            )
        for tag, entry in table.items():
            if tag.is_leaf and entry.leave is not None:
                raise RendererCoverageError(
                    f"Renderer {name!r} declares an exit fragment for leaf tag "
                    f"{tag.value!r}; leaves render on entry only"
                )
        self.name = name
        self._table = dict(table)

    def __repr__(self) -> str:
        return f"FringeRenderer({self.name!r})"

    def enter(self, node: AbstractNode) -> str:
        producer = self._table[node.tag].enter
        return producer(node) if producer is not None else ""

    def leave(self, node: AbstractNode) -> str:
        producer = self._table[node.tag].leave
        return producer(node) if producer is not None else ""
