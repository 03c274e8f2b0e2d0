from __future__ import annotations

import re

from core.reading import LiteralSeparator, PatternSeparator, build_separator


def test_literal_finds_first_and_last_occurrence() -> None:
    sep = LiteralSeparator(b"::")
    buf = bytearray(b"a::b::c")
    assert sep.find_forward(buf, 0, final=False) == (1, 3)
    assert sep.find_forward(buf, 2, final=False) == (4, 6)
    assert sep.find_backward(buf, len(buf), final=False) == (4, 6)
    assert sep.find_backward(buf, 5, final=False) == (1, 3)
    assert sep.find_forward(buf, 5, final=True) is None
    assert sep.overlap == 1


def test_pattern_match_near_open_edge_is_inconclusive() -> None:
    sep = PatternSeparator(re.compile(rb"\n+"), horizon=2)
    buf = bytearray(b"ab\n\n")
    assert sep.find_forward(buf, 0, final=False) is None
    assert sep.find_forward(buf, 0, final=True) == (2, 4)
    buf = bytearray(b"ab\n\ncd")
    assert sep.find_forward(buf, 0, final=False) == (2, 4)
    assert sep.find_backward(bytearray(b"\n\nab"), 4, final=False) is None
    assert sep.find_backward(bytearray(b"xy\nab"), 5, final=False) == (2, 3)


def test_pattern_backward_tie_break() -> None:
    buf = bytearray(b"a\r\nb")
    longest = PatternSeparator(re.compile(rb"\r?\n"))
    shortest = PatternSeparator(re.compile(rb"\r?\n"), tie_break="shortest")
    assert shortest.find_backward(buf, 4, final=True) == (2, 3)
    assert longest.find_backward(buf, 4, final=True) == (1, 3)


def test_pattern_prefers_greatest_end_over_earlier_start() -> None:
    sep = PatternSeparator(re.compile(rb"xyz|y"), tie_break="longest")
    buf = bytearray(b"--xyz--")
    assert sep.find_backward(buf, 4, final=True) == (3, 4)
    assert sep.find_backward(buf, 7, final=True) == (2, 5)


def test_zero_length_matches_are_skipped() -> None:
    sep = PatternSeparator(re.compile(rb"(?=;)|\n"))
    buf = bytearray(b"a;b\nc")
    assert sep.find_forward(buf, 0, final=True) == (3, 4)
    assert sep.find_backward(buf, 5, final=True) == (3, 4)


def test_build_separator_dispatches_on_type() -> None:
    assert isinstance(build_separator(b"\n"), LiteralSeparator)
    pattern = build_separator(re.compile(rb";"), horizon=4, tie_break="longest")
    assert isinstance(pattern, PatternSeparator)
    assert pattern.horizon == 4
    assert pattern.overlap is None
