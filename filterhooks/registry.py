"""Per-tag callback storage and re-entrant pass machinery."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from filterhooks.cursor import IterationCursor
from filterhooks.identity import DEFAULT_RESOLVER, IdentityResolver
from filterhooks.models import CallbackEntry, RegistrySnapshot

logger = logging.getLogger(__name__)


class CallbackRegistry:
    """Priority-ordered callbacks for a single tag.

    A pass over the registry may be suspended on the call stack while a
    callback registers more callbacks or starts a nested pass. Every pass owns
    an :class:`IterationCursor` keyed by its nesting level, and every
    registration that happens while a pass is in flight resyncs all of those
    cursors against the new set of priorities.
    """

    def __init__(self, tag: str, resolver: IdentityResolver | None = None) -> None:
        self.tag = tag
        self._resolver = resolver or DEFAULT_RESOLVER
        self._buckets: dict[int, dict[str, CallbackEntry]] = {}
        self._priority_of: dict[str, int] = {}
        self._iterations: dict[int, IterationCursor] = {}
        self._current_priority: dict[int, int] = {}
        self._nesting_level = 0
        # bumped whenever a bucket gains or loses a key
        self._revision = 0

    def __bool__(self) -> bool:
        return bool(self._buckets)

    def __len__(self) -> int:
        return len(self._priority_of)

    @property
    def nesting_level(self) -> int:
        return self._nesting_level

    @property
    def priorities(self) -> list[int]:
        return list(self._buckets)

    def entries(self) -> list[CallbackEntry]:
        return [entry for bucket in self._buckets.values() for entry in bucket.values()]

    def add(self, target: Callable[..., Any], priority: int, accepted_args: int) -> CallbackEntry:
        identity = self._resolver.resolve(self.tag, target, priority)
        if identity is None:
            raise ValueError(f"Could not resolve an identity for {target!r} on {self.tag}")

        previous = self._priority_of.get(identity)
        priority_existed = priority in self._buckets
        entry = CallbackEntry(identity=identity, target=target, priority=priority, accepted_args=accepted_args)
        bucket = self._buckets.setdefault(priority, {})
        if identity not in bucket:
            self._revision += 1
        bucket[identity] = entry
        self._priority_of[identity] = priority

        if not priority_existed and len(self._buckets) > 1:
            self._buckets = dict(sorted(self._buckets.items()))

        # one identity, one priority
        if previous is not None and previous != priority:
            self._discard(identity, previous)

        logger.debug("Registered %s on %s at priority %s", identity, self.tag, priority)
        if self._nesting_level > 0:
            self._resort_active_iterations(priority, priority_existed)
        return entry

    def priority_of(self, target: Callable[..., Any] | str) -> int | None:
        identity = self._resolver.resolve(self.tag, target, None)
        if identity is None:
            return None
        return self._priority_of.get(identity)

    def _discard(self, identity: str, priority: int) -> None:
        bucket = self._buckets[priority]
        del bucket[identity]
        self._revision += 1
        if not bucket:
            del self._buckets[priority]
        logger.debug("Moved %s on %s away from priority %s", identity, self.tag, priority)

    def _resort_active_iterations(self, new_priority: int | None = None, priority_existed: bool = False) -> None:
        new_priorities = list(self._buckets)

        if not new_priorities:
            for cursor in self._iterations.values():
                cursor.clear()
            return

        for level, cursor in self._iterations.items():
            current = cursor.current()
            # a finished level must not be reawakened
            if current is None:
                continue

            cursor.rebase(new_priorities, current)

            if new_priority is None or priority_existed:
                continue
            if new_priority != self._current_priority.get(level):
                continue

            # the new priority is the one this level believes it is running,
            # so it has to stay on it rather than move past it
            if cursor.exhausted:
                previous = cursor.seek_end()
            else:
                previous = cursor.step_back()
            if previous is None:
                cursor.reset()
            elif previous != new_priority:
                cursor.advance()

        logger.debug("Resynced %s active pass(es) on %s", len(self._iterations), self.tag)

    def _bucket_entries(self, priority: int) -> Iterator[CallbackEntry]:
        # walks a snapshot of the keys, refreshed only when the registry changed
        # shape, so entries added mid-walk are seen and none is invoked twice
        invoked: set[str] = set()
        keys: list[str] = []
        position = 0
        revision: int | None = None
        last: str | None = None

        while True:
            bucket = self._buckets.get(priority)
            if not bucket:
                return

            if revision != self._revision:
                revision = self._revision
                keys = list(bucket)
                # appends keep the position valid; removals may shift it
                if last is not None and not (0 < position <= len(keys) and keys[position - 1] == last):
                    position = keys.index(last) + 1 if last in bucket else 0

            while position < len(keys) and keys[position] in invoked:
                position += 1
            if position >= len(keys):
                return

            last = keys[position]
            position += 1
            invoked.add(last)
            yield bucket[last]

    def _run(self, value: Any, args: Sequence[Any], *, thread_value: bool, honor_arity: bool = True) -> Any:
        level = self._nesting_level
        self._nesting_level += 1
        cursor = IterationCursor(self._buckets)
        self._iterations[level] = cursor
        args = list(args)
        num_args = len(args)

        try:
            priority = cursor.current()
            while priority is not None:
                self._current_priority[level] = priority
                for entry in self._bucket_entries(priority):
                    if not honor_arity:
                        entry.target(*args)
                    elif thread_value:
                        if args:
                            args[0] = value
                        value = entry(args, num_args)
                    else:
                        entry(args, num_args)
                priority = cursor.advance()
        finally:
            # also runs when a callback raises
            del self._iterations[level]
            self._current_priority.pop(level, None)
            self._nesting_level -= 1

        return value

    def apply(self, value: Any, args: Sequence[Any]) -> Any:
        """Run a filtering pass and return the final value.

        Argument slot 0 always carries the value returned by the previous
        callback. Returns ``value`` untouched when nothing is registered.
        """
        if not self._buckets:
            return value
        logger.debug("Applying %s (level=%s)", self.tag, self._nesting_level)
        return self._run(value, args, thread_value=True)

    def fire(self, args: Sequence[Any]) -> None:
        """Run an action pass: callbacks get ``args`` cut to their arity, results are dropped."""
        if not self._buckets:
            return
        logger.debug("Firing %s (level=%s)", self.tag, self._nesting_level)
        self._run(None, args, thread_value=False)

    def fire_all(self, args: Sequence[Any]) -> None:
        """Run the catch-all notification pass with the full argument list."""
        if not self._buckets:
            return
        logger.debug("Firing catch-all %s (level=%s)", self.tag, self._nesting_level)
        self._run(None, args, thread_value=False, honor_arity=False)

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            tag=self.tag,
            priorities=self.priorities,
            callbacks=[entry.describe() for entry in self.entries()],
            nesting_level=self._nesting_level,
        )
