"""Stable deduplication keys for registered callbacks."""

from __future__ import annotations

import inspect
import logging
import weakref
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


def _static_name(target: Any) -> str | None:
    """Dotted name for targets that are not bound to an object instance."""
    if inspect.isfunction(target):
        qualname = target.__qualname__
        if "<lambda>" in qualname or "<locals>" in qualname:
            return None
        return f"{target.__module__}.{qualname}"

    if inspect.ismethod(target) or inspect.isbuiltin(target):
        owner = target.__self__
        if owner is None or inspect.ismodule(owner):
            return f"{target.__module__ or 'builtins'}.{target.__qualname__}"
        if inspect.isclass(owner):
            return f"{owner.__module__}.{owner.__qualname__}::{target.__name__}"
        return None

    if inspect.ismethoddescriptor(target):
        owner = getattr(target, "__objclass__", None)
        if owner is not None:
            return f"{owner.__module__}.{owner.__qualname__}::{target.__name__}"
    return None


class IdentityResolver:
    """Computes the key under which a callback is stored in a priority bucket.

    Named functions and static references map to their dotted name. Anything
    bound to an object instance (bound methods, lambdas, closures, callable
    objects) maps to ``ClassName.methodName#counter``, where the counter is
    handed out once per owning object from a monotonically increasing sequence.
    The counter lives in an external table keyed by ``id()`` and is dropped
    when the owner is garbage collected; the resolver never holds a strong
    reference to the owner.

    The sequence is process-wide state: it starts at zero when the resolver is
    created and is never reset.
    """

    def __init__(self) -> None:
        self._next_id = 0
        self._ids: dict[int, int] = {}

    @property
    def assigned(self) -> int:
        return self._next_id

    def resolve(self, tag: str, target: Callable[..., Any] | str, priority: int | None) -> str | None:
        """Return the identity for ``target``.

        ``priority=None`` is the existence-check mode: an object that has never
        been assigned a counter resolves to ``None`` instead of being assigned
        one.
        """
        if isinstance(target, str):
            return target

        name = _static_name(target)
        if name is not None:
            return name

        if inspect.ismethod(target) or inspect.isbuiltin(target):
            owner = target.__self__
            method_name = target.__name__
        else:
            owner = target
            method_name = ""

        counter = self._ids.get(id(owner))
        if counter is None:
            if priority is None:
                return None
            counter = self._assign(tag, owner)
        # separators cannot appear in identifiers, so parts never run together
        return f"{type(owner).__qualname__}.{method_name}#{counter}"

    def _assign(self, tag: str, owner: Any) -> int:
        counter = self._next_id
        self._next_id += 1
        key = id(owner)
        self._ids[key] = counter
        try:
            weakref.finalize(owner, self._ids.pop, key, None)
        except TypeError:
            # not weak-referenceable: the entry lives as long as the resolver
            logger.debug("%s does not support weak references; keeping identity %s", type(owner).__qualname__, counter)
        logger.debug("Assigned identity counter %s to %s (tag=%s)", counter, type(owner).__qualname__, tag)
        return counter


DEFAULT_RESOLVER = IdentityResolver()
