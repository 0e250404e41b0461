"""In-process filter and action hooks with re-entrant, mutation-safe dispatch."""

from .config import BindingConfig, HooksConfig, load_effective_config
from .identity import DEFAULT_RESOLVER, IdentityResolver
from .registry import CallbackRegistry
from .service import HookService

__all__ = [
    "BindingConfig",
    "CallbackRegistry",
    "DEFAULT_RESOLVER",
    "HookService",
    "HooksConfig",
    "IdentityResolver",
    "load_effective_config",
]
