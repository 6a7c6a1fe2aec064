"""Size-bounded output buffer that only splits at committed boundaries.

Renderer output is appended to a pending buffer. ``commit`` moves the pending
text into the committed region and records the boundary as a place where a
page may end. Pages are cut at the furthest boundary that keeps the page
within ``max_page_size``; a single committed unit that is larger than the
limit becomes an oversize page of its own rather than being split.

Boundaries are counted, not just measured, so that two streams fed by lockstep
walkers (which commit at the same nodes) can be told to cut after the same
number of commits even though their text lengths differ.
"""

from __future__ import annotations

from collections import deque
from typing import Optional

from .nodes import AbstractNode


class PagedDuplexStream:
    def __init__(self, max_page_size: int) -> None:
        if isinstance(max_page_size, bool) or not isinstance(max_page_size, int):
            raise ValueError("max_page_size must be an integer")
        if max_page_size <= 0:
            raise ValueError("max_page_size must be positive")
        self.max_page_size = max_page_size
        self._pending: list[str] = []
        self._committed = ""
        # Offsets into ``_committed`` just after each commit since the last cut.
        self._boundaries: list[int] = []
        self._pages: deque[str] = deque()
        self.last_committed_node: Optional[AbstractNode] = None

    def __repr__(self) -> str:
        return (
            f"PagedDuplexStream(max_page_size={self.max_page_size}, "
            f"committed={len(self._committed)}, pending={self.pending_size}, "
            f"pages={len(self._pages)})"
        )

    @property
    def pending_size(self) -> int:
        return sum(len(chunk) for chunk in self._pending)

    @property
    def committed_size(self) -> int:
        return len(self._committed)

    @property
    def commit_count(self) -> int:
        return len(self._boundaries)

    def append(self, text: str) -> None:
        if text:
            self._pending.append(text)

    def commit(self, node: Optional[AbstractNode]) -> None:
        """Mark the current end of the buffer as a safe place to end a page."""
        if self._pending:
            self._committed += "".join(self._pending)
            self._pending.clear()
        self._boundaries.append(len(self._committed))
        self.last_committed_node = node

    def _is_full(self) -> bool:
        return len(self._committed) >= self.max_page_size

    def peek_page(self) -> bool:
        """True if a page is ready to be read."""
        return bool(self._pages) or self._is_full()

    def cut_point(self) -> int:
        """Number of commits the next page would hold if cut now."""
        best = 0
        for index, offset in enumerate(self._boundaries, start=1):
            if offset > self.max_page_size:
                break
            best = index
        if best and self._boundaries[best - 1] > 0:
            return best
        # Nothing fits: the first non-empty committed unit goes out whole.
        for index, offset in enumerate(self._boundaries, start=1):
            if offset > 0:
                return index
        return best

    def ensure_new_page(self, commits: Optional[int] = None) -> None:
        """Force buffered content into a page.

        With ``commits`` the page ends after that many commit boundaries.
        Without it every committed and pending character is flushed, which is
        how the tail of a document is sent. Nothing is queued when the range
        is empty.
        """
        if commits is None:
            if self._pending:
                self._committed += "".join(self._pending)
                self._pending.clear()
            end = len(self._committed)
            remaining: list[int] = []
        else:
            if commits < 0 or commits > len(self._boundaries):
                raise ValueError(
                    f"cannot cut after {commits} commits; only "
                    f"{len(self._boundaries)} recorded"
                )
            end = self._boundaries[commits - 1] if commits else 0
            remaining = [offset - end for offset in self._boundaries[commits:]]
        page = self._committed[:end]
        self._committed = self._committed[end:]
        self._boundaries = remaining
        if page:
            self._pages.append(page)

    def read_page(self, *, cut: bool = True) -> Optional[str]:
        """Remove and return the oldest ready page, or ``None``.

        When no page has been forced yet and the committed region is full, a
        page is cut at ``cut_point()`` first unless ``cut`` is false.
        """
        if cut and not self._pages and self._is_full():
            self.ensure_new_page(self.cut_point())
        if not self._pages:
            return None
        return self._pages.popleft()
