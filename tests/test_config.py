"""Tests for the ShallowConfig facade, path helpers and skeleton rendering."""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from conftest import PERF_ITEMS, Protocol, table_items
from shallowconf import ShallowConfig
from shallowconf.parser import (
	FatalParseError,
	PerfectHashLookup,
	TableLookup,
	dropin_dirs,
	render_skeleton,
	resolve_config_path,
	write_skeleton,
)


def test_facade_parse_many_with_perfect_hash(write, tmp_path, settings):
	main = write("svc.conf", "[Main]\nName = base\nEnabled = no\n[Net]\nProtocols = udp\n")
	write("svc.conf.d/10.conf", "[Net]\nProtocols = tcp quic tcp\n")
	write("svc.conf.d/20.conf", "[Main]\nName = override\n[Unknown]\nKey = 1\n")

	with ShallowConfig(PerfectHashLookup(PERF_ITEMS), sections=["Main", "Net"], userdata=settings) as cfg:
		cfg.parse_many(main, [tmp_path / "svc.conf.d"])

	assert settings.name == "override"
	assert settings.enabled is False
	assert settings.protocols == [Protocol.TCP, Protocol.QUIC]


def test_facade_parse_text_stream_and_file(write, settings):
	cfg = ShallowConfig(TableLookup(table_items(settings)), unit="demo")

	cfg.parse_text("[Main]\nName = text\n")
	assert settings.name == "text"

	cfg.parse_stream(io.StringIO("[Main]\nEnabled = on\n"), filename="inline.conf")
	assert settings.enabled is True

	cfg.parse_file(write("file.conf", "[Net]\nProtocol = quic\n"))
	assert settings.protocol is Protocol.QUIC

	assert cfg.parse_file(Path("/definitely/not/here.conf")) is cfg


def test_facade_logs_and_reraises_exceptions(caplog, settings):
	with pytest.raises(FatalParseError):
		with ShallowConfig(TableLookup(table_items(settings)), allow_include=True) as cfg:
			cfg.parse_text(".include /definitely/not/here.conf\n", filename="x.conf")
	assert any("Exception inside ShallowConfig context" in r.getMessage() for r in caplog.records)


def test_facade_repr(settings):
	cfg = ShallowConfig(TableLookup(table_items(settings)), sections=["Net", "Main"])
	assert repr(cfg) == "ShallowConfig(lookup=TableLookup(items=5), sections=['Main', 'Net'])"


def test_render_skeleton_from_table_and_perfect_hash(settings):
	defaults = {"Main.Enabled": True, "Net.Protocols": [Protocol.UDP, Protocol.TCP], "Level": "info"}

	expected = (
		"# Defaults shipped with demo\n"
		"\n"
		"#Level=info\n"
		"\n"
		"[Main]\n"
		"#Name=\n"
		"#Enabled=yes\n"
		"\n"
		"[Net]\n"
		"#Protocol=\n"
		"#Protocols=udp tcp\n"
	)
	assert render_skeleton(TableLookup(table_items(settings)), defaults,
	                       header_comment="Defaults shipped with demo") == expected

	hashed = render_skeleton(PerfectHashLookup(PERF_ITEMS), defaults)
	assert hashed.splitlines() == [
		"#Level=info", "",
		"[Main]", "#Enabled=yes", "#Name=", "",
		"[Net]", "#Protocol=", "#Protocols=udp tcp",
	]


def test_skeleton_round_trips_through_the_parser(tmp_path, settings):
	dest = write_skeleton(TableLookup(table_items(settings)), tmp_path / "out" / "skel.conf")
	assert dest.exists()

	with pytest.raises(FileExistsError):
		write_skeleton(TableLookup(table_items(settings)), dest)

	before = vars(settings).copy()
	ShallowConfig(TableLookup(table_items(settings))).parse_file(dest)
	assert vars(settings) == before


def test_resolve_config_path_precedence(monkeypatch, tmp_path):
	monkeypatch.setenv("SHALLOWCONF_TEST_CONF", str(tmp_path / "override.conf"))
	assert resolve_config_path("app.conf", env_var="SHALLOWCONF_TEST_CONF") == (tmp_path / "override.conf").resolve()

	monkeypatch.delenv("SHALLOWCONF_TEST_CONF")
	assert resolve_config_path("app.conf", env_var="SHALLOWCONF_TEST_CONF") == Path("/etc/app.conf")

	monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
	if os.name == "nt":
		pytest.skip("POSIX only")
	assert resolve_config_path("app.conf", prefer="user", app="demo") == (tmp_path / "xdg" / "demo").resolve() / "app.conf"

	with pytest.raises(ValueError):
		resolve_config_path("app.conf", prefer="project")


def test_dropin_dirs():
	assert dropin_dirs("myapp/daemon.conf", roots=["/etc", "/usr/lib"]) == [
		Path("/etc/myapp/daemon.conf.d"),
		Path("/usr/lib/myapp/daemon.conf.d"),
	]
	assert dropin_dirs("x.conf")[0] == Path("/etc/x.conf.d")
