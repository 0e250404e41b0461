from pathlib import Path

import pytest
from pydantic import ValidationError

from filterhooks.config import HooksConfig, load_effective_config


def test_config_precedence(tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()

    (project / ".filterhooks.yaml").write_text(
        """
default_priority: 50
all_tag: everything
"""
    )

    system = {"default_priority": 1, "default_accepted_args": 3, "all_tag": "system-all"}
    runtime = {"all_tag": "runtime-all"}

    cfg = load_effective_config(project, system_defaults=system, runtime_override=runtime)

    assert cfg.default_priority == 50
    assert cfg.default_accepted_args == 3
    assert cfg.all_tag == "runtime-all"


def test_missing_project_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_effective_config(tmp_path)
    assert cfg == HooksConfig()
    assert cfg.default_priority == 10
    assert cfg.default_accepted_args == 1
    assert cfg.all_tag == "all"


def test_bindings_are_parsed(tmp_path: Path) -> None:
    (tmp_path / ".filterhooks.yaml").write_text(
        """
bindings:
  - tag: title
    target: builtins:str.upper
    priority: 5
"""
    )

    cfg = load_effective_config(tmp_path)

    assert len(cfg.bindings) == 1
    assert cfg.bindings[0].target == "builtins:str.upper"
    assert cfg.bindings[0].accepted_args is None


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".filterhooks.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_effective_config(tmp_path)


def test_unknown_keys_and_negative_arity_are_rejected() -> None:
    with pytest.raises(ValidationError):
        HooksConfig.model_validate({"default_priorty": 3})
    with pytest.raises(ValidationError):
        HooksConfig.model_validate({"default_accepted_args": -1})
