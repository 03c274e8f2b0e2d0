from __future__ import annotations

from core.reading import BlockSource, LineBoundaryScanner, LiteralSeparator, ScanResult, SlidingWindow


def build_scanner(tmp_path, payload: bytes, block_size: int = 4, anchor: int = 0) -> LineBoundaryScanner:
    path = tmp_path / "scan.txt"
    path.write_bytes(payload)
    window = SlidingWindow(BlockSource.open(path), block_size, anchor=anchor)
    return LineBoundaryScanner(window, LiteralSeparator(b"\n"))


def test_forward_scan_returns_line_and_next_cursor(tmp_path) -> None:
    scanner = build_scanner(tmp_path, b"alpha\nbravo")
    assert scanner.scan_forward(0) == ScanResult(b"alpha", 6)
    assert scanner.scan_forward(6) == ScanResult(b"bravo", 11)
    assert scanner.scan_forward(11) is None


def test_backward_scan_strips_terminator_at_cursor(tmp_path) -> None:
    scanner = build_scanner(tmp_path, b"alpha\nbravo\n", anchor=12)
    assert scanner.scan_backward(12) == ScanResult(b"bravo", 6)
    assert scanner.scan_backward(6) == ScanResult(b"alpha", 0)
    assert scanner.scan_backward(0) is None


def test_backward_scan_from_arbitrary_cursor(tmp_path) -> None:
    scanner = build_scanner(tmp_path, b"alpha\nbravo\n", block_size=2)
    # a cursor inside a line is treated as the end of an unterminated segment
    assert scanner.scan_backward(9) == ScanResult(b"bra", 6)


def test_scan_grows_window_only_as_needed(tmp_path) -> None:
    scanner = build_scanner(tmp_path, b"ab\n" + b"c" * 100, block_size=4)
    scanner.scan_forward(0)
    assert scanner.window.end == 4


def test_forward_scan_reuses_loaded_bytes(tmp_path) -> None:
    scanner = build_scanner(tmp_path, b"a\nb\nc\n" + b"d" * 100, block_size=8)
    assert scanner.scan_forward(0) == ScanResult(b"a", 2)
    assert scanner.window.end == 8
    assert scanner.scan_forward(2) == ScanResult(b"b", 4)
    assert scanner.scan_forward(4) == ScanResult(b"c", 6)
    assert scanner.window.end == 8
