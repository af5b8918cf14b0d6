"""Command-line interface for jslex: dump the tokens of a source file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jslex.tokens import Token, TokenKind

OUTPUT_FORMATS = ("text", "json")
CONFIG_NAME = "jslex.toml"

_COMMENT_KINDS = frozenset({TokenKind.SINGLE_LINE_COMMENT, TokenKind.MULTI_LINE_COMMENT})


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    output_format: str
    comments: bool
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="jslex",
        description="Tokenize a JavaScript/TypeScript source file",
    )
    p.add_argument("input", help="Input .js or .ts file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Token output format (default: text)",
    )
    p.add_argument(
        "--no-comments",
        action="store_true",
        default=None,
        help="Leave comment tokens out of the output",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-lex")
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    output_format = "text"
    comments = True
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in OUTPUT_FORMATS:
                raise argparse.ArgumentTypeError(
                    f"invalid output format in config (expected text or json): {cfg_format}"
                )
            output_format = cfg_format
        cfg_comments = cfg_output.get("comments")
        if isinstance(cfg_comments, bool):
            comments = cfg_comments

    if args.format is not None:
        output_format = args.format
    if args.no_comments:
        comments = False

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        comments=comments,
        watch=args.watch,
        debug=args.debug,
    )


def render_tokens(tokens: list[Token], output_format: str) -> str:
    """Render tokens as one line each, or as a JSON array."""
    from jslex.debug import format_token, token_to_dict

    if output_format == "json":
        return json.dumps([token_to_dict(t) for t in tokens], indent=2, allow_nan=False) + "\n"
    return "".join(f"{format_token(t)}\n" for t in tokens)


def lex_file(options: CliOptions) -> tuple[str, list[str]]:
    """Read and lex a file; return the rendered tokens and rendered diagnostics."""
    from jslex.debug import dump_tokens
    from jslex.lexer import lex

    source = options.input_file.read_text(encoding="utf-8")
    tokens, errors = lex(source)

    if not options.comments:
        tokens = [t for t in tokens if t.kind not in _COMMENT_KINDS]

    if options.debug:
        dump_tokens(tokens)

    reports = [e.format(source, str(options.input_file)) for e in errors]
    return render_tokens(tokens, options.output_format), reports


def _emit(options: CliOptions, output: str) -> None:
    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-lex on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    output, reports = lex_file(options)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
                else:
                    _emit(options, output)
                    for report in reports:
                        print(report, file=sys.stderr)
                    print(f"Lexed {options.input_file}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        output, reports = lex_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
        return 2

    _emit(options, output)
    for report in reports:
        print(report, file=sys.stderr)

    return 1 if reports else 0
