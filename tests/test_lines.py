"""Tests for logical line reading and line classification."""

from __future__ import annotations

import io

import pytest

from shallowconf.parser.lines import (
	LogicalLine,
	classify_line,
	iter_logical_lines,
	split_assignment,
)


def _lines(text: str):
	return list(iter_logical_lines(io.StringIO(text)))


def test_continuation_is_joined_without_separator():
	assert _lines("a\\\nb\n") == [LogicalLine("ab", 1)]


def test_continuation_across_several_lines_keeps_first_line_number():
	text = "\n\nKey = one \\\n  two\\\nthree\nOther=1\n"
	assert _lines(text) == [
		LogicalLine("Key = one   twothree", 3),
		LogicalLine("Other=1", 6),
	]


def test_escaped_backslash_does_not_continue():
	assert _lines("Path = C:\\\\\nNext = 1\n") == [
		LogicalLine("Path = C:\\\\", 1),
		LogicalLine("Next = 1", 2),
	]


def test_eof_inside_continuation_yields_partial_line():
	assert _lines("Key = value \\") == [LogicalLine("Key = value", 1)]


@pytest.mark.parametrize("comment", ["# note", "; note", "   # indented", "\t;tab", "#", ";"])
def test_comment_lines_are_dropped(comment: str):
	assert _lines(f"{comment}\nKey=1\n") == [LogicalLine("Key=1", 2)]


def test_comment_with_trailing_backslash_does_not_continue():
	assert _lines("# comment \\\nKey=1\n") == [LogicalLine("Key=1", 2)]


def test_comment_inside_continuation_is_skipped():
	assert _lines("Key = a \\\n# skipped\nb\n") == [LogicalLine("Key = a b", 1)]


def test_blank_and_whitespace_lines_are_dropped():
	assert _lines("\n   \n\t\nKey=1\r\n\n") == [LogicalLine("Key=1", 4)]


def test_crlf_terminators_are_removed_before_continuation_check():
	assert _lines("a\\\r\nb\r\n") == [LogicalLine("ab", 1)]


@pytest.mark.parametrize(
	("text", "expected"),
	[
		("[Main]", ("header", "Main")),
		("[Section With Space]", ("header", "Section With Space")),
		("[a[b]", ("header", "a[b")),
		("[]", ("malformed", None)),
		("[Main", ("malformed", None)),
		("[Ma]in]", ("malformed", None)),
		("Key=[x]", ("body", None)),
		("Key", ("body", None)),
	],
)
def test_classify_line(text, expected):
	assert classify_line(text) == expected


@pytest.mark.parametrize(
	("text", "expected"),
	[
		("Key=Value", ("Key", "Value")),
		("  Key  =   spaced value  ", ("Key", "spaced value")),
		("Key=a=b", ("Key", "a=b")),
		("Key=", ("Key", "")),
		("Key=   ", ("Key", "")),
		("Ke\\=y = v", ("Ke\\=y", "v")),
		("=v", ("", "v")),
		("no separator", None),
		("only\\=escaped", None),
	],
)
def test_split_assignment(text, expected):
	assert split_assignment(text) == expected
