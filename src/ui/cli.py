"""CLI shell over the bidirectional line reader: read, head, tail."""
from __future__ import annotations

import argparse
import logging
import time
from collections import deque
from pathlib import Path
from typing import Callable, List, Optional

from common.config import error_mode_from_policy, load_runtime_config, options_from_profile
from common.errors import BackendError
from common.models import RuntimeConfig, TraversalProgress
from common.progress import ProgressLogger
from common.text import decode_separator
from core.reading import LineReaderEngine, open_reader

LineWriter = Callable[[str], None]


def render_line(text: str) -> None:
    print(text)


def open_from_args(args: argparse.Namespace, runtime: RuntimeConfig, **extra) -> LineReaderEngine:
    separator = args.separator
    if separator is not None and not args.regex:
        # re handles its own escapes
        separator = decode_separator(separator)
    pattern = True if args.regex else (False if separator is not None else None)
    options = options_from_profile(
        runtime,
        separator=separator,
        pattern=pattern,
        binmode=True if args.binmode else None,
        block_size=args.block_size,
        **extra,
    )
    return open_reader(Path(args.file), options=options)


def command_read(args: argparse.Namespace, writer: LineWriter = render_line) -> None:
    runtime = load_runtime_config(profile=args.profile, config_path=_config_path(args))
    errors = error_mode_from_policy(runtime.global_settings.error_policy)
    started = time.perf_counter()
    reader = open_from_args(args, runtime, mode=args.mode, origin=args.origin)
    lines_read = 0
    try:
        while args.limit is None or lines_read < args.limit:
            if args.switch_after is not None and lines_read == args.switch_after:
                reader.switch()
            raw = reader.readline()
            if raw is None:
                break
            lines_read += 1
            text = raw.decode(runtime.global_settings.encoding, errors=errors)
            writer(f"{reader.line_num}\t{text}" if args.number else text)
    finally:
        _emit_progress(args, reader, lines_read, time.perf_counter() - started)
        reader.close()


def command_head(args: argparse.Namespace, writer: LineWriter = render_line) -> None:
    runtime = load_runtime_config(profile=args.profile, config_path=_config_path(args))
    errors = error_mode_from_policy(runtime.global_settings.error_policy)
    started = time.perf_counter()
    reader = open_from_args(args, runtime, mode="forward")
    lines_read = 0
    try:
        while lines_read < args.lines:
            raw = reader.readline()
            if raw is None:
                break
            lines_read += 1
            writer(raw.decode(runtime.global_settings.encoding, errors=errors))
    finally:
        _emit_progress(args, reader, lines_read, time.perf_counter() - started)
        reader.close()


def command_tail(args: argparse.Namespace, writer: LineWriter = render_line) -> None:
    runtime = load_runtime_config(profile=args.profile, config_path=_config_path(args))
    errors = error_mode_from_policy(runtime.global_settings.error_policy)
    started = time.perf_counter()
    reader = open_from_args(args, runtime, mode="backward")
    collected: deque[bytes] = deque()
    try:
        while len(collected) < args.lines:
            raw = reader.readline()
            if raw is None:
                break
            collected.appendleft(raw)
    finally:
        _emit_progress(args, reader, len(collected), time.perf_counter() - started)
        reader.close()
    for raw in collected:
        writer(raw.decode(runtime.global_settings.encoding, errors=errors))


def _add_reader_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("file", help="File to read")
    sub.add_argument(
        "--profile",
        default="default",
        help="Profile from config/defaults.json (e.g., default, low_memory, bulk, crlf)",
    )
    sub.add_argument("--config", help="Alternative configuration JSON")
    sub.add_argument(
        "--separator",
        help="Line separator; backslash escapes such as \\r\\n are expanded unless --regex is given",
    )
    sub.add_argument("--regex", action="store_true", help="Treat --separator as a regular expression")
    sub.add_argument("--binmode", action="store_true", help="Return lines without line-ending normalization")
    sub.add_argument("--block-size", type=int, help="Bytes read per window growth step")
    sub.add_argument("--progress-log", help="Path to JSONL file for a traversal summary")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bidilines", description="Read lines of large files forward, backward, or both"
    )
    parser.add_argument("--verbose", action="store_true", help="Log window activity to stderr")
    subparsers = parser.add_subparsers(dest="command")

    read = subparsers.add_parser("read", help="Stream lines in a chosen direction")
    _add_reader_arguments(read)
    read.add_argument(
        "--mode",
        default="forward",
        choices=["forward", "backward", "bidirectional"],
        help="Traversal mode",
    )
    read.add_argument("--origin", choices=["head", "tail"], help="Start point (bidirectional only)")
    read.add_argument("--limit", type=int, help="Stop after this many lines")
    read.add_argument("--number", action="store_true", help="Prefix each line with its line number")
    read.add_argument(
        "--switch-after",
        type=int,
        metavar="N",
        help="Reverse direction after N lines (bidirectional only)",
    )
    read.set_defaults(func=command_read)

    head = subparsers.add_parser("head", help="Print the first N lines")
    _add_reader_arguments(head)
    head.add_argument("-n", "--lines", type=int, default=10, help="Number of lines")
    head.set_defaults(func=command_head)

    tail = subparsers.add_parser("tail", help="Print the last N lines, reading from the end")
    _add_reader_arguments(tail)
    tail.add_argument("-n", "--lines", type=int, default=10, help="Number of lines")
    tail.set_defaults(func=command_tail)

    return parser


def _config_path(args: argparse.Namespace) -> Optional[Path]:
    return Path(args.config) if getattr(args, "config", None) else None


def _emit_progress(args: argparse.Namespace, reader: LineReaderEngine, lines_read: int, elapsed: float) -> None:
    if not args.progress_log:
        return
    ProgressLogger(Path(args.progress_log)).emit(
        TraversalProgress(
            file_path=Path(args.file),
            mode=reader.mode.value,
            direction=reader.direction().value,
            lines_read=lines_read,
            cursor=reader.tell(),
            line_num=reader.line_num,
            file_size=reader.file_size,
            peak_window_bytes=reader.window.peak_bytes,
            elapsed_seconds=elapsed,
        )
    )


def main(argv: List[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except BackendError as exc:
        raise SystemExit(str(exc)) from exc
    except OSError as exc:
        raise SystemExit(f"[IO_ERROR] {args.file}: {exc.strerror or exc}") from exc


if __name__ == "__main__":
    main()
