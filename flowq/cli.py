"""
Command-line entry point for the flow compiler.

Usage:
    flowq validate manifest.json [--json]
    flowq normalize manifest.json [--remap] [-o normalized.json]

Exit codes:
    0: Manifest valid (validate) / written (normalize)
    1: Validation found errors
    2: Input could not be read or parsed
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from flowq import __version__
from flowq.flows.errors import FlowError
from flowq.flows.models import FlowManifest, ValidationResult
from flowq.flows.pipeline import normalize_generated_manifest, prepare_for_persistence
from flowq.flows.validate import validate_flow
from flowq.infrastructure.env import ensure_env_loaded

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_INPUT_ERROR = 2


def load_manifest(path: Path) -> FlowManifest:
    """Read a manifest JSON file. Accepts a bare manifest or {"manifest": {...}}."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "manifest" in payload and "nodes" not in payload:
        payload = payload["manifest"]
    return FlowManifest.model_validate(payload)


def format_issues(result: ValidationResult) -> str:
    """Human-readable issue list, one line per issue."""
    if not result.issues:
        return "OK: no issues"

    lines = []
    for issue in result.issues:
        where = f" [{issue.node_id}]" if issue.node_id else ""
        lines.append(f"{issue.severity.upper():7}{where} {issue.message}")
    lines.append("OK" if result.ok else "FAILED")
    return "\n".join(lines)


def _cmd_validate(args: argparse.Namespace) -> int:
    manifest = load_manifest(args.path)
    result = validate_flow(manifest)

    if args.json:
        print(result.model_dump_json(by_alias=True, exclude_none=True, indent=2))
    else:
        print(format_issues(result))
    return EXIT_OK if result.ok else EXIT_INVALID


def _cmd_normalize(args: argparse.Namespace) -> int:
    manifest = normalize_generated_manifest(load_manifest(args.path))
    if args.remap:
        manifest = prepare_for_persistence(manifest)

    output = json.dumps(manifest.to_wire(), indent=2)
    if args.output:
        args.output.write_text(output + "\n", encoding="utf-8")
    else:
        print(output)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowq",
        description="Normalize and validate marketing automation flow manifests",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Check a manifest before activation")
    validate_parser.add_argument("path", type=Path, help="Manifest JSON file")
    validate_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    validate_parser.set_defaults(handler=_cmd_validate)

    normalize_parser = subparsers.add_parser(
        "normalize", help="Run positions, consent injection, layout and pruning"
    )
    normalize_parser.add_argument("path", type=Path, help="Manifest JSON file")
    normalize_parser.add_argument(
        "--remap", action="store_true", help="Also regenerate node/edge ids for persistence"
    )
    normalize_parser.add_argument("-o", "--output", type=Path, help="Write to file instead of stdout")
    normalize_parser.set_defaults(handler=_cmd_normalize)

    return parser


def main(argv: list[str] | None = None) -> int:
    ensure_env_loaded()
    args = build_parser().parse_args(argv)

    try:
        return args.handler(args)
    except (OSError, json.JSONDecodeError, ValidationError, FlowError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR


if __name__ == "__main__":
    sys.exit(main())
