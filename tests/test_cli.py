import json
from pathlib import Path

import pytest

from filterhooks import cli


def _write_project(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    (project / ".filterhooks.yaml").write_text(
        """
bindings:
  - tag: title
    target: builtins:str.upper
    priority: 20
  - tag: title
    target: builtins:str.strip
    priority: 10
  - tag: items
    target: builtins:sorted
"""
    )
    return project


def test_cli_parser_requires_command() -> None:
    parser = cli.build_parser()
    parsed = parser.parse_args(["dispatch", "--tag", "t", "--value", "v"])
    assert parsed.command == "dispatch"
    assert parsed.arg == []

    with pytest.raises(SystemExit):
        parser.parse_args([])


def test_dispatch_command_prints_filtered_value(tmp_path: Path, capsys) -> None:
    project = _write_project(tmp_path)

    exit_code = cli.main(["dispatch", "--tag", "title", "--value", "  hello ", "--project-path", str(project)])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == "HELLO"


def test_dispatch_command_decodes_json_values(tmp_path: Path, capsys) -> None:
    project = _write_project(tmp_path)

    exit_code = cli.main(
        ["dispatch", "--tag", "items", "--value", "[3, 1, 2]", "--json-values", "--project-path", str(project)]
    )

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == [1, 2, 3]


def test_dispatch_unknown_tag_echoes_value(tmp_path: Path, capsys) -> None:
    exit_code = cli.main(["dispatch", "--tag", "missing", "--value", "same", "--project-path", str(tmp_path)])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == "same"


def test_inspect_command_lists_registries(tmp_path: Path, capsys) -> None:
    project = _write_project(tmp_path)
    override = tmp_path / "override.yaml"
    override.write_text("all_tag: '*'\n")

    exit_code = cli.main(["inspect", "--project-path", str(project), "--runtime-override", str(override)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["all_tag"] == "*"
    assert [registry["tag"] for registry in payload["registries"]] == ["items", "title"]
    title = payload["registries"][1]
    assert title["priorities"] == [10, 20]
    assert [callback["identity"] for callback in title["callbacks"]] == ["builtins.str::strip", "builtins.str::upper"]


def test_invalid_json_value_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        cli.main(["dispatch", "--tag", "t", "--value", "{nope", "--json-values", "--project-path", str(tmp_path)])
