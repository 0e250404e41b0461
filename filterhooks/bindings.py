"""Build a HookService from configuration-declared bindings."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterable
from typing import Any

from filterhooks.config import BindingConfig, HooksConfig
from filterhooks.service import HookService

logger = logging.getLogger(__name__)


def resolve_target(path: str) -> Callable[..., Any]:
    """Import ``package.module:Qualified.name`` and return the attribute."""
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Binding target must look like 'package.module:attribute', got {path!r}")

    target: Any = importlib.import_module(module_name)
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ValueError(f"Binding target {path!r} has no attribute {part!r}") from exc
    return target


def apply_bindings(service: HookService, bindings: Iterable[BindingConfig]) -> int:
    count = 0
    for binding in bindings:
        target = resolve_target(binding.target)
        service.register(binding.tag, target, priority=binding.priority, accepted_args=binding.accepted_args)
        count += 1
    logger.debug("Applied %s binding(s)", count)
    return count


def build_service(config: HooksConfig) -> HookService:
    service = HookService(config=config)
    applied = apply_bindings(service, config.bindings)
    logger.info("Hook service ready: bindings=%s tags=%s", applied, len(service.tags()))
    return service
