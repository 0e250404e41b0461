"""Priority cursor used by a single dispatch pass."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable

_EXHAUSTED = -1


class IterationCursor:
    """Explicit position within an ordered list of priorities.

    The list is owned by the cursor and may be replaced wholesale by
    :meth:`rebase` while the pass that owns the cursor is suspended. Moving
    past either end puts the cursor in the exhausted state, which is distinct
    from being positioned on the first element.
    """

    __slots__ = ("priorities", "_index")

    def __init__(self, priorities: Iterable[int] = ()) -> None:
        self.priorities: list[int] = list(priorities)
        self._index = 0 if self.priorities else _EXHAUSTED

    def __repr__(self) -> str:
        return f"IterationCursor(priorities={self.priorities!r}, current={self.current()!r})"

    @property
    def exhausted(self) -> bool:
        return self._index == _EXHAUSTED

    def current(self) -> int | None:
        if self.exhausted:
            return None
        return self.priorities[self._index]

    def advance(self) -> int | None:
        if self.exhausted:
            return None
        self._index += 1
        if self._index >= len(self.priorities):
            self._index = _EXHAUSTED
        return self.current()

    def step_back(self) -> int | None:
        if self.exhausted:
            return None
        self._index -= 1
        if self._index < 0:
            self._index = _EXHAUSTED
        return self.current()

    def reset(self) -> int | None:
        self._index = 0 if self.priorities else _EXHAUSTED
        return self.current()

    def seek_end(self) -> int | None:
        self._index = len(self.priorities) - 1 if self.priorities else _EXHAUSTED
        return self.current()

    def clear(self) -> None:
        self.priorities = []
        self._index = _EXHAUSTED

    def rebase(self, priorities: Iterable[int], current: int) -> None:
        """Replace the backing list and stay positioned on ``current``.

        When ``current`` is no longer part of ``priorities`` it is kept as a
        placeholder at its sorted position, so the next :meth:`advance` lands
        on its successor. A ``current`` below the new minimum therefore ends up
        prepended to the list.
        """
        ordered = list(priorities)
        position = bisect_left(ordered, current)
        if position == len(ordered) or ordered[position] != current:
            ordered.insert(position, current)
        self.priorities = ordered
        self._index = position
