"""Callback entries and Pydantic introspection models for filterhooks."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class CallbackEntry:
    identity: str
    target: Callable[..., Any]
    priority: int
    accepted_args: int

    def __call__(self, args: Sequence[Any], num_args: int) -> Any:
        if self.accepted_args == 0:
            return self.target()
        if self.accepted_args >= num_args:
            return self.target(*args)
        return self.target(*args[: self.accepted_args])

    def describe(self) -> CallbackInfo:
        return CallbackInfo(
            identity=self.identity,
            target=_target_name(self.target),
            priority=self.priority,
            accepted_args=self.accepted_args,
        )


def _target_name(target: Any) -> str:
    if isinstance(target, str):
        return target
    name = getattr(target, "__qualname__", None) or type(target).__qualname__
    module = getattr(target, "__module__", None)
    return f"{module}.{name}" if module else name


class CallbackInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    identity: str
    target: str
    priority: int
    accepted_args: int


class RegistrySnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tag: str
    priorities: list[int] = Field(default_factory=list)
    callbacks: list[CallbackInfo] = Field(default_factory=list)
    nesting_level: int = 0

    @property
    def callback_count(self) -> int:
        return len(self.callbacks)


class ServiceSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    all_tag: str
    tag_stack: list[str] = Field(default_factory=list)
    registries: list[RegistrySnapshot] = Field(default_factory=list)
