"""Conformance runner: lex every fixture under a directory and track coverage.

Each ``.js``/``.ts`` file is one case. A case passes when it lexes without
diagnostics, fails when it produces any, and crashes when the lexer raises.
The summary is written as JSON next to a list of passing cases so the next
run can report the coverage delta.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tomllib
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TextIO

from jslex.cli import load_config
from jslex.lexer import lex

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".js", ".ts")
DEFAULT_NAME = "lexer"
DEFAULT_SUMMARY_DIR = Path("summary")


class CaseResult(Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    CRASH = "CRASH"


@dataclass(frozen=True, slots=True)
class Case:
    """One fixture file."""

    path: Path

    def run(self) -> CaseResult:
        try:
            source = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("cannot read %s", self.path, exc_info=True)
            return CaseResult.CRASH
        source = source.removeprefix("\ufeff")

        try:
            _, errors = lex(source)
        except Exception:
            logger.debug("lexer raised on %s", self.path, exc_info=True)
            return CaseResult.CRASH
        return CaseResult.FAIL if errors else CaseResult.PASS


@dataclass(frozen=True, slots=True)
class SuiteSummary:
    """Pass/fail/crash counts for one suite run."""

    name: str
    total: int
    success: int
    failure: int
    crash: int

    @property
    def coverage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.success / self.total * 100.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["coverage"] = self.coverage
        return data

    def format(self, previous_coverage: float = 0.0) -> str:
        delta = self.coverage - previous_coverage
        return (
            f"{self.name}: {self.success} / {self.total} "
            f"({self.coverage:.2f}% {delta:+.2f}%)"
        )


def discover(root: Path, extensions: tuple[str, ...] = DEFAULT_EXTENSIONS) -> list[Path]:
    """Return every fixture file under root, sorted for stable output."""
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix in extensions)


def run_suite(
    root: Path,
    name: str = DEFAULT_NAME,
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
) -> tuple[SuiteSummary, list[Path]]:
    """Run every case under root; return the summary and the passing paths."""
    paths = discover(root, extensions)
    if not paths:
        raise ValueError(f"no test cases found under {root}")

    counts = {result: 0 for result in CaseResult}
    passed: list[Path] = []
    for path in paths:
        result = Case(path).run()
        counts[result] += 1
        logger.info("%s: %s", result.value, path)
        if result is CaseResult.PASS:
            passed.append(path)

    summary = SuiteSummary(
        name=name,
        total=len(paths),
        success=counts[CaseResult.PASS],
        failure=counts[CaseResult.FAIL],
        crash=counts[CaseResult.CRASH],
    )
    return summary, passed


def read_previous_coverage(summary_dir: Path, name: str) -> float:
    """Return the coverage recorded by the last run, or 0.0 when there is none."""
    path = summary_dir / f"{name}.json"
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return 0.0
    coverage = data.get("coverage") if isinstance(data, dict) else None
    if isinstance(coverage, (int, float)):
        return float(coverage)
    return 0.0


def write_summary(
    summary: SuiteSummary, passed: list[Path], summary_dir: Path, root: Path
) -> None:
    """Write ``<name>.json`` and ``<name>.success.txt`` into summary_dir."""
    summary_dir.mkdir(parents=True, exist_ok=True)
    (summary_dir / f"{summary.name}.json").write_text(
        json.dumps(summary.to_dict(), indent=2) + "\n", encoding="utf-8"
    )
    lines = "".join(f"{p.relative_to(root).as_posix()}\n" for p in passed)
    (summary_dir / f"{summary.name}.success.txt").write_text(lines, encoding="utf-8")


def show_and_write_summary(
    summary: SuiteSummary,
    passed: list[Path],
    summary_dir: Path,
    root: Path,
    *,
    file: TextIO | None = None,
) -> None:
    out = file if file is not None else sys.stdout
    previous = read_previous_coverage(summary_dir, summary.name)
    out.write(summary.format(previous) + "\n")
    write_summary(summary, passed, summary_dir, root)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="jslex-suite",
        description="Run the lexer over a directory of fixtures and record coverage",
    )
    p.add_argument("root", help="Fixture directory")
    p.add_argument("--name", default=None, help=f"Suite name (default: {DEFAULT_NAME})")
    p.add_argument(
        "--summary-dir",
        default=None,
        metavar="DIR",
        help=f"Where summaries are written (default: {DEFAULT_SUMMARY_DIR})",
    )
    p.add_argument(
        "--ext",
        action="append",
        default=[],
        metavar="EXT",
        help="Fixture file extension (repeatable, default: .js and .ts)",
    )
    p.add_argument("--config", metavar="FILE", help="Config file (default: ROOT/jslex.toml)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every case")
    return p


def main(argv: list[str] | None = None) -> int:
    """Suite entry point. Returns exit code (0 ran, 2 usage error)."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(message)s",
    )

    root = Path(args.root)
    if not root.is_dir():
        print(f"error: not a directory: {root}", file=sys.stderr)
        return 2

    try:
        config = load_config(Path(args.config) if args.config else None, root)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    extensions = DEFAULT_EXTENSIONS
    summary_dir = DEFAULT_SUMMARY_DIR
    cfg_suite = config.get("suite")
    if isinstance(cfg_suite, dict):
        cfg_ext = cfg_suite.get("extensions")
        if isinstance(cfg_ext, list):
            extensions = tuple(str(e) for e in cfg_ext)
        cfg_dir = cfg_suite.get("summary_dir")
        if isinstance(cfg_dir, str):
            summary_dir = Path(cfg_dir)
    if args.ext:
        extensions = tuple(args.ext)
    if args.summary_dir:
        summary_dir = Path(args.summary_dir)

    try:
        summary, passed = run_suite(root, args.name or DEFAULT_NAME, extensions)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    show_and_write_summary(summary, passed, summary_dir, root)
    return 0
