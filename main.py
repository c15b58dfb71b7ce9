# ABOUTME: Command line entry point for the lodash chaining and path-style linter
# ABOUTME: Resolves configuration, lints JavaScript files and optionally writes fixes

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from analysis.grammar import JavaScriptGrammar
from analysis.linter import Linter
from models import (
    SUPPORTED_LODASH_VERSIONS,
    ChainMode,
    ConfigurationError,
    Diagnostic,
    LintConfig,
    PathStyle,
    RuleName,
)
from parsers.version import VersionResolutionError, detect_lodash_version

logger = logging.getLogger(__name__)

ENV_VERSION = "LODASH_LINT_VERSION"
ENV_PRAGMA = "LODASH_LINT_PRAGMA"


def collect_files(paths: Sequence[str]) -> List[Path]:
    """Expand directories into the lintable files they contain"""
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if "node_modules" in candidate.parts:
                    continue
                if candidate.is_file() and JavaScriptGrammar.is_lintable(candidate):
                    files.append(candidate)
        else:
            files.append(path)
    return files


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def build_config(args: argparse.Namespace, environ: Optional[Dict[str, str]] = None) -> LintConfig:
    """
    Resolve configuration.

    Precedence: command line > config file > environment > package.json > defaults.
    """
    environ = environ if environ is not None else dict(os.environ)
    data: Dict[str, Any] = {}

    detected = None
    if args.files:
        try:
            detected = detect_lodash_version(Path(args.files[0]))
        except VersionResolutionError as e:
            logger.warning(f"Ignoring lodash version from package.json: {e}")
    if detected in SUPPORTED_LODASH_VERSIONS:
        data = _merge(data, {"settings": {"version": detected}})
    elif detected is not None:
        logger.warning(f"package.json declares unsupported lodash major {detected}")

    env_settings: Dict[str, Any] = {}
    if environ.get(ENV_VERSION):
        env_settings["version"] = environ[ENV_VERSION]
    if ENV_PRAGMA in environ:
        env_settings["pragma"] = environ[ENV_PRAGMA] or None
    if env_settings:
        data = _merge(data, {"settings": env_settings})

    if args.config:
        file_config = LintConfig.from_file(args.config)
        data = _merge(data, file_config.model_dump(mode="json", exclude_unset=True))

    cli: Dict[str, Any] = {}
    if args.lodash_version is not None:
        cli.setdefault("settings", {})["version"] = args.lodash_version
    if args.pragma is not None:
        cli.setdefault("settings", {})["pragma"] = args.pragma or None
    if args.chaining_mode is not None:
        cli.setdefault("chaining", {})["mode"] = args.chaining_mode
    if args.chaining_depth is not None:
        cli.setdefault("chaining", {})["depth"] = args.chaining_depth
    if args.path_style is not None:
        cli.setdefault("path_style", {})["style"] = args.path_style
    if args.rule:
        cli["rules"] = args.rule
    data = _merge(data, cli)

    return LintConfig.from_dict(data)


def format_diagnostics(diagnostics: List[Diagnostic], output_format: str) -> str:
    if output_format == "json":
        return json.dumps(
            [
                {**d.model_dump(mode="json"), "message": d.message}
                for d in diagnostics
            ],
            indent=2,
        )
    lines = [d.format() for d in diagnostics]
    if diagnostics:
        fixable = sum(1 for d in diagnostics if d.fixable)
        lines.append("")
        lines.append(f"{len(diagnostics)} problems ({fixable} fixable with --fix)")
    return "\n".join(lines)


def lint_paths(linter: Linter, files: List[Path], fix: bool) -> Tuple[List[Diagnostic], int]:
    """Lint files, returning (diagnostics, failed file count)"""
    diagnostics: List[Diagnostic] = []
    failures = 0

    for file_path in files:
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {file_path}: {e}")
            failures += 1
            continue

        if fix:
            result = linter.fix_source(source, str(file_path))
            if result.changed:
                with open(file_path, "w", encoding="utf-8") as f:
                    f.write(result.output)
                logger.info(f"Applied {len(result.applied)} fixes to {file_path}")
            source = result.output

        diagnostics.extend(linter.lint_source(source, str(file_path)))

    return diagnostics, failures


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lodash-lint",
        description="Check lodash chaining and property path style in JavaScript files",
    )
    parser.add_argument("files", nargs="+", help="Files or directories to lint")
    parser.add_argument("--config", type=Path, help="JSON configuration file")
    parser.add_argument(
        "--chaining-mode",
        choices=[mode.value for mode in ChainMode],
        help="Preferred chaining policy (default: never)",
    )
    parser.add_argument(
        "--chaining-depth",
        type=int,
        help="Nesting depth at which composition should become a chain (default: 3)",
    )
    parser.add_argument(
        "--path-style",
        choices=[style.value for style in PathStyle],
        help="Preferred property path notation (default: as-needed)",
    )
    parser.add_argument("--lodash-version", type=int, help="Major lodash version (3 or 4)")
    parser.add_argument("--pragma", help="Identifier bound to lodash (default: _)")
    parser.add_argument(
        "--rule",
        action="append",
        choices=[rule.value for rule in RuleName],
        help="Only run the given rule (repeatable)",
    )
    parser.add_argument("--fix", action="store_true", help="Write automatic fixes to disk")
    parser.add_argument(
        "--format", choices=["text", "json"], default="text", help="Output format"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point"""
    load_dotenv()

    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    linter = Linter(config)
    files = collect_files(args.files)
    diagnostics, failures = lint_paths(linter, files, args.fix)

    output = format_diagnostics(diagnostics, args.format)
    if output:
        print(output)

    if failures:
        print(f"ERROR: {failures} files could not be read", file=sys.stderr)
        return 2
    return 1 if diagnostics else 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
