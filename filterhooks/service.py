"""Tag multiplexer: registration, filtering dispatch and the catch-all hook."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from filterhooks.config import HooksConfig
from filterhooks.identity import DEFAULT_RESOLVER, IdentityResolver
from filterhooks.models import ServiceSnapshot
from filterhooks.registry import CallbackRegistry

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class HookService:
    """In-process filter and action hooks with deterministic priority ordering.

    Callbacks registered under the catch-all tag (``"all"`` unless configured
    otherwise) run before every dispatch, whether or not the dispatched tag has
    callbacks of its own, and receive ``(tag, value, *extra_args)``.
    """

    def __init__(self, config: HooksConfig | None = None, resolver: IdentityResolver | None = None) -> None:
        self.config = config or HooksConfig()
        self._resolver = resolver or DEFAULT_RESOLVER
        self._registries: dict[str, CallbackRegistry] = {}
        self._tag_stack: list[str] = []

    @property
    def all_tag(self) -> str:
        return self.config.all_tag

    def register(
        self,
        tag: str,
        target: Callable[..., Any],
        priority: int | None = None,
        accepted_args: int | None = None,
    ) -> bool:
        """Hook ``target`` onto ``tag``.

        Lower priorities run first; equal priorities run in registration order.
        Registering the same callback again replaces the earlier registration.
        """
        if priority is None:
            priority = self.config.default_priority
        if accepted_args is None:
            accepted_args = self.config.default_accepted_args

        registry = self._registries.get(tag)
        if registry is None:
            registry = CallbackRegistry(tag, resolver=self._resolver)
            self._registries[tag] = registry
        registry.add(target, priority, accepted_args)
        return True

    def hook(self, tag: str, priority: int | None = None, accepted_args: int | None = None) -> Callable[[F], F]:
        """Decorator form of :meth:`register`."""

        def decorator(fn: F) -> F:
            self.register(tag, fn, priority=priority, accepted_args=accepted_args)
            return fn

        return decorator

    def dispatch(self, tag: str, value: Any, *extra_args: Any) -> Any:
        """Pass ``value`` through every callback on ``tag`` and return the result.

        Each callback receives the value returned by the previous one as its
        first argument, followed by ``extra_args`` up to its accepted arity.
        Unknown tags return ``value`` unchanged.
        """
        all_registry = self._registries.get(self.all_tag)
        if all_registry is None and tag not in self._registries:
            return value

        self._tag_stack.append(tag)
        try:
            if all_registry is not None:
                all_registry.fire_all([tag, value, *extra_args])

            registry = self._registries.get(tag)
            if registry is None:
                return value
            return registry.apply(value, [value, *extra_args])
        finally:
            self._tag_stack.pop()

    def trigger(self, tag: str, *args: Any) -> None:
        """Run every callback on ``tag`` for its side effects."""
        all_registry = self._registries.get(self.all_tag)
        if all_registry is None and tag not in self._registries:
            return

        self._tag_stack.append(tag)
        try:
            if all_registry is not None:
                all_registry.fire_all([tag, *args])

            registry = self._registries.get(tag)
            if registry is not None:
                registry.fire(list(args))
        finally:
            self._tag_stack.pop()

    @property
    def current_tag(self) -> str | None:
        return self._tag_stack[-1] if self._tag_stack else None

    @property
    def tag_stack(self) -> tuple[str, ...]:
        return tuple(self._tag_stack)

    def is_dispatching(self, tag: str | None = None) -> bool:
        if tag is None:
            return bool(self._tag_stack)
        return tag in self._tag_stack

    def priority_of(self, tag: str, target: Callable[..., Any] | str) -> int | None:
        registry = self._registries.get(tag)
        if registry is None:
            return None
        return registry.priority_of(target)

    def has(self, tag: str, target: Callable[..., Any] | str | None = None) -> bool:
        """Whether ``tag`` has any callbacks, or has ``target`` specifically."""
        if target is None:
            return bool(self._registries.get(tag))
        return self.priority_of(tag, target) is not None

    def tags(self) -> list[str]:
        return sorted(tag for tag, registry in self._registries.items() if registry)

    def snapshot(self) -> ServiceSnapshot:
        return ServiceSnapshot(
            all_tag=self.all_tag,
            tag_stack=list(self._tag_stack),
            registries=[self._registries[tag].snapshot() for tag in self.tags()],
        )
