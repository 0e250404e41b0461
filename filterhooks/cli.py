"""CLI entrypoint for dispatching and inspecting configured hooks."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from filterhooks.bindings import build_service
from filterhooks.config import HooksConfig, load_effective_config
from filterhooks.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def _load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    data = yaml.safe_load(Path(path).read_text())
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def _load_config(args: argparse.Namespace) -> HooksConfig:
    return load_effective_config(
        project_path=args.project_path,
        system_defaults=_load_yaml_dict(args.system_config),
        runtime_override=_load_yaml_dict(args.runtime_override),
    )


def _decode(raw: str, as_json: bool) -> Any:
    if not as_json:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Value is not valid JSON: {raw!r}") from exc


def _add_common_config_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--project-path", default=".", help="Directory holding .filterhooks.yaml")
    cmd.add_argument("--system-config", help="Optional system defaults YAML")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="filterhooks dispatch engine")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")

    sub = parser.add_subparsers(dest="command", required=True)

    dispatch = sub.add_parser("dispatch", help="Filter a value through the callbacks bound to a tag")
    dispatch.add_argument("--tag", required=True, help="Tag to dispatch")
    dispatch.add_argument("--value", required=True, help="Value to filter")
    dispatch.add_argument("--arg", action="append", default=[], help="Extra argument passed to callbacks (repeatable)")
    dispatch.add_argument(
        "--json-values",
        action="store_true",
        help="Decode --value and every --arg as JSON instead of passing raw strings",
    )
    _add_common_config_flags(dispatch)

    inspect_cmd = sub.add_parser("inspect", help="Print the registered callbacks per tag as JSON")
    _add_common_config_flags(inspect_cmd)

    return parser


def _run_dispatch(args: argparse.Namespace) -> int:
    service = build_service(_load_config(args))
    value = _decode(args.value, args.json_values)
    extra = [_decode(raw, args.json_values) for raw in args.arg]

    result = service.dispatch(args.tag, value, *extra)
    logger.info("Dispatch complete: tag=%s registered=%s", args.tag, service.has(args.tag))
    print(json.dumps(result, default=str))
    return 0


def _run_inspect(args: argparse.Namespace) -> int:
    service = build_service(_load_config(args))
    print(json.dumps(service.snapshot().model_dump(mode="json"), indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "dispatch":
        return _run_dispatch(args)
    if args.command == "inspect":
        return _run_inspect(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
