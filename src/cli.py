"""Command-line interface for vapordoc."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.write import build_registry, generate_all_artifacts
from contract.validation import validate_artifacts
from resolve.document import document_to_json, generate_document
from resolve.errors import DocsError, MissingCriticalEndpointInformation
from rules.config import ConfigError, load_config, resolve_input_dirs
from scan.structure import SourceStructureError
from verify.verify import verify_determinism

logger = logging.getLogger("vapordoc")


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Swift project root (default: .)",
    )
    parser.add_argument(
        "--input",
        action="append",
        dest="inputs",
        default=None,
        help="Source directory to scan; repeatable (default: config inputs)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vapordoc")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate", help="Generate type metadata and the OpenAPI document"
    )
    _add_common_paths(generate_parser)
    generate_parser.add_argument(
        "--out-dir",
        default=None,
        help="Output directory for generated artifacts (default: config output dir)",
    )
    generate_parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Skip endpoints that cannot be resolved instead of failing",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the OpenAPI document instead of writing artifacts",
    )

    validate_parser = subparsers.add_parser("validate", help="Validate artifacts")
    validate_parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Swift project root (default: .)",
    )
    validate_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify determinism of artifacts"
    )
    _add_common_paths(verify_parser)
    verify_parser.add_argument(
        "--artifacts-dir",
        default=None,
        help="Artifacts directory (default: config output dir)",
    )

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbosity > 1 else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_input_dirs(root: Path, inputs: list[str] | None) -> list[Path] | None:
    if inputs is None:
        return None
    return resolve_input_dirs(root, inputs)


def _resolve_artifacts_dir(root: Path, artifacts_dir: str | None) -> Path:
    if artifacts_dir is None:
        config = load_config(root)
        return (root / config.output_dir).resolve()
    return Path(artifacts_dir).expanduser().resolve()


def _handle_generate(
    root: Path,
    out_dir: str | None,
    inputs: list[str] | None,
    *,
    keep_going: bool,
    to_stdout: bool,
) -> int:
    config = load_config(root)
    input_dirs = _resolve_input_dirs(root, inputs)
    skipped: list[MissingCriticalEndpointInformation] = []

    def _report_skipped(error: MissingCriticalEndpointInformation) -> None:
        skipped.append(error)
        sys.stderr.write(f"warning: skipped endpoint: {error}\n")

    on_error = _report_skipped if keep_going else None

    if to_stdout:
        registry = build_registry(root, config, input_dirs=input_dirs)
        document = generate_document(registry, config, on_error=on_error)
        sys.stdout.write(document_to_json(document).decode("utf-8") + "\n")
        return 1 if skipped else 0

    resolved_out_dir = None
    if out_dir is not None:
        resolved_out_dir = Path(out_dir).expanduser().resolve()
    summary = generate_all_artifacts(
        root=root,
        out_dir=resolved_out_dir,
        config=config,
        input_dirs=input_dirs,
        on_error=on_error,
    )
    logger.info(
        "Wrote %s types and %s operations",
        summary.get("type_count"),
        summary.get("operation_count"),
    )
    return 1 if skipped else 0


def _handle_validate(root: Path, artifacts_dir: str | None) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    result = validate_artifacts(resolved_artifacts_dir)
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(
    root: Path, artifacts_dir: str | None, inputs: list[str] | None
) -> int:
    resolved_artifacts_dir = _resolve_artifacts_dir(root, artifacts_dir)
    try:
        result = verify_determinism(
            root=root,
            artifacts_dir=resolved_artifacts_dir,
            input_dirs=_resolve_input_dirs(root, inputs),
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        sys.stderr.write(f"artifacts-dir: {resolved_artifacts_dir}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    if not result.ok:
        for label, paths in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for path in paths:
                sys.stderr.write(f"{label}: {path}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "generate":
            return _handle_generate(
                root,
                args.out_dir,
                args.inputs,
                keep_going=args.keep_going,
                to_stdout=args.stdout,
            )

        if args.command == "validate":
            return _handle_validate(root, args.artifacts_dir)

        if args.command == "verify":
            return _handle_verify(root, args.artifacts_dir, args.inputs)
    except (ConfigError, DocsError, SourceStructureError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
