import pytest

from filterhooks.bindings import apply_bindings, build_service, resolve_target
from filterhooks.config import BindingConfig, HooksConfig
from filterhooks.service import HookService


def test_resolve_target_walks_attribute_path() -> None:
    assert resolve_target("builtins:str.upper") is str.upper
    assert resolve_target("builtins:sorted") is sorted


@pytest.mark.parametrize("path", ["builtins", "builtins:", ":sorted", "builtins:str.no_such_method"])
def test_resolve_target_rejects_bad_paths(path: str) -> None:
    with pytest.raises(ValueError):
        resolve_target(path)


def test_build_service_registers_bindings_with_defaults() -> None:
    config = HooksConfig(
        default_priority=20,
        bindings=[
            BindingConfig(tag="title", target="builtins:str.strip"),
            BindingConfig(tag="title", target="builtins:str.upper", priority=5),
        ],
    )

    service = build_service(config)

    assert service.priority_of("title", str.strip) == 20
    assert service.priority_of("title", str.upper) == 5
    assert service.dispatch("title", "  hi  ") == "HI"


def test_apply_bindings_counts_registrations() -> None:
    service = HookService()
    count = apply_bindings(
        service,
        [
            BindingConfig(tag="a", target="builtins:str.lower"),
            BindingConfig(tag="b", target="builtins:str.title", accepted_args=1),
        ],
    )

    assert count == 2
    assert service.tags() == ["a", "b"]
