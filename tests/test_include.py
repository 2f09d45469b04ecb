"""Tests for the ``.include`` directive."""

from __future__ import annotations

import errno
import io
import logging

import pytest

from conftest import Recorder
from shallowconf.parser import FatalParseError, IncludeError, TableItem, TableLookup, parse_one


@pytest.fixture()
def recorder() -> Recorder:
	return Recorder()


@pytest.fixture()
def lookup(recorder) -> TableLookup:
	return TableLookup([
		TableItem("Main", "Key", recorder),
		TableItem(None, "Key", recorder),
		TableItem(None, ".include", recorder),
	])


def test_include_both_forms_relative_to_including_file(write, recorder, lookup):
	write("conf/parts/a.conf", "Key = from-a\n")
	write("conf/parts/b.conf", "[Main]\nKey = from-b\n")
	main = write("conf/parts/main.conf", "[Main]\nKey = before\n.include a.conf\n.include = b.conf\nKey = after\n")

	parse_one(None, main, lookup=lookup, allow_include=True)

	assert recorder.values == ["before", "from-a", "from-b", "after"]
	# the outer section resumes after the included file
	assert recorder.calls[-1].section == "Main"
	assert recorder.calls[1].section is None
	assert recorder.calls[1].filename.endswith("a.conf")


def test_include_absolute_path(write, tmp_path, recorder, lookup):
	target = write("elsewhere/target.conf", "Key = absolute\n")
	main = write("main.conf", f".include {target}\n")
	parse_one(None, main, lookup=lookup, allow_include=True)
	assert recorder.values == ["absolute"]


def test_include_ignored_when_not_allowed(write, recorder, lookup):
	write("a.conf", "Key = from-a\n")
	main = write("main.conf", ".include = a.conf\n")

	parse_one(None, main, lookup=lookup, allow_include=False)

	# without includes the key is an ordinary schema key
	assert recorder.values == ["a.conf"]


def test_missing_include_is_fatal_when_strict(write, lookup):
	main = write("main.conf", ".include missing.conf\n")
	with pytest.raises(IncludeError) as excinfo:
		parse_one(None, main, lookup=lookup, allow_include=True)
	assert excinfo.value.errno == errno.ENOENT
	assert excinfo.value.line == 1


def test_missing_include_is_a_warning_when_relaxed(write, caplog, recorder, lookup):
	main = write("main.conf", ".include missing.conf\nKey = still-parsed\n")

	parse_one(None, main, lookup=lookup, allow_include=True, relaxed=True)

	assert recorder.values == ["still-parsed"]
	records = [r for r in caplog.records if "missing.conf" in r.getMessage()]
	assert [r.levelno for r in records] == [logging.WARNING]


@pytest.mark.parametrize("relaxed", [True, False])
def test_self_include_is_reported_not_recursed(write, caplog, recorder, lookup, relaxed):
	main = write("loop.conf", "Key = once\n.include loop.conf\n")

	if relaxed:
		parse_one(None, main, lookup=lookup, allow_include=True, relaxed=True)
	else:
		with pytest.raises(IncludeError) as excinfo:
			parse_one(None, main, lookup=lookup, allow_include=True)
		assert excinfo.value.errno == errno.ELOOP

	assert recorder.values == ["once"]
	assert any("Include loop" in r.getMessage() for r in caplog.records)


def test_indirect_include_cycle(write, recorder, lookup):
	write("a.conf", "Key = a\n.include b.conf\n")
	write("b.conf", "Key = b\n.include a.conf\n")

	with pytest.raises(IncludeError):
		parse_one(None, write("start.conf", ".include a.conf\n"), lookup=lookup, allow_include=True)
	assert recorder.values == ["a", "b"]


def test_include_depth_is_bounded(write, caplog, recorder, lookup):
	for i in range(5):
		write(f"level{i}.conf", f"Key = {i}\n.include level{i + 1}.conf\n")
	write("level5.conf", "Key = 5\n")

	parse_one(None, write("root.conf", ".include level0.conf\n"), lookup=lookup,
	          allow_include=True, relaxed=True, max_include_depth=3)

	assert recorder.values == ["0", "1", "2"]
	assert any("Maximum include depth 3" in r.getMessage() for r in caplog.records)


def test_include_from_stream_resolves_against_cwd(tmp_path, monkeypatch, recorder, lookup):
	(tmp_path / "part.conf").write_text("Key = from-cwd\n", encoding="utf-8")
	monkeypatch.chdir(tmp_path)

	parse_one(None, None, io.StringIO(".include part.conf\n"), lookup=lookup, allow_include=True)

	assert recorder.values == ["from-cwd"]


def test_fatal_error_inside_include_propagates(write, lookup):
	failing = Recorder(result=-errno.EIO)
	write("inner.conf", "[Main]\nKey = boom\n")
	main = write("outer.conf", ".include inner.conf\n")

	with pytest.raises(FatalParseError) as excinfo:
		parse_one(None, main, lookup=TableLookup([TableItem("Main", "Key", failing)]), allow_include=True)
	assert excinfo.value.errno == errno.EIO
	assert excinfo.value.filename.endswith("inner.conf")
