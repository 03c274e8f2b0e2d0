from __future__ import annotations

import json
from pathlib import Path

import pytest

from ui import cli


def write_sample(tmp_path: Path) -> Path:
    path = tmp_path / "app.log"
    path.write_bytes(b"one\ntwo\nthree\nfour\n")
    return path


def test_read_forward_with_numbers(tmp_path, capsys) -> None:
    path = write_sample(tmp_path)
    cli.main(["read", str(path), "--number", "--limit", "2"])
    assert capsys.readouterr().out.splitlines() == ["1\tone", "2\ttwo"]


def test_read_bidirectional_switch_after(tmp_path, capsys) -> None:
    path = write_sample(tmp_path)
    cli.main(["read", str(path), "--mode", "bidirectional", "--switch-after", "3", "--block-size", "2"])
    assert capsys.readouterr().out.splitlines() == ["one", "two", "three", "three", "two", "one"]


def test_tail_returns_last_lines_in_file_order(tmp_path, capsys) -> None:
    path = write_sample(tmp_path)
    cli.main(["tail", str(path), "-n", "2", "--block-size", "1"])
    assert capsys.readouterr().out.splitlines() == ["three", "four"]


def test_head_with_custom_separator(tmp_path, capsys) -> None:
    path = tmp_path / "records.txt"
    path.write_bytes(b"a\r\nb\r\nc")
    cli.main(["head", str(path), "-n", "5", "--separator", r"\r\n"])
    assert capsys.readouterr().out.splitlines() == ["a", "b", "c"]


def test_regex_separator_keeps_pattern_escapes(tmp_path, capsys) -> None:
    path = tmp_path / "words.txt"
    path.write_bytes(b"x-AND-yANDz")
    cli.main(["head", str(path), "--regex", "--separator", r"\bAND\b"])
    assert capsys.readouterr().out.splitlines() == ["x-", "-yANDz"]


def test_progress_log_records_traversal(tmp_path) -> None:
    path = write_sample(tmp_path)
    log_path = tmp_path / "logs" / "progress.jsonl"
    cli.main(["read", str(path), "--mode", "backward", "--progress-log", str(log_path)])
    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert len(events) == 1
    assert events[0]["lines_read"] == 4
    assert events[0]["line_num"] == -4
    assert events[0]["cursor"] == 0
    assert events[0]["direction"] == "backward"


def test_errors_exit_with_message(tmp_path) -> None:
    path = write_sample(tmp_path)
    with pytest.raises(SystemExit) as exc:
        cli.main(["read", str(path), "--switch-after", "1"])
    assert "INVALID_OPERATION" in str(exc.value)
    with pytest.raises(SystemExit) as exc:
        cli.main(["read", str(tmp_path / "missing.log")])
    assert "IO_ERROR" in str(exc.value)
    with pytest.raises(SystemExit) as exc:
        cli.main(["read", str(path), "--origin", "tail"])
    assert "CONFIG_ERROR" in str(exc.value)


def test_main_dispatches_to_command(monkeypatch, tmp_path) -> None:
    invoked: dict[str, str] = {}

    def fake_command(args) -> None:  # type: ignore[override]
        invoked["file"] = args.file

    monkeypatch.setattr(cli, "command_tail", fake_command)
    cli.main(["tail", str(tmp_path / "x.log")])
    assert invoked == {"file": str(tmp_path / "x.log")}
