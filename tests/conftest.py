# tests/conftest.py

from __future__ import annotations

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from shallowconf.parser import (  # noqa: E402
	Assignment,
	PerfItem,
	TableItem,
	define_enum_parser,
	define_enum_set_parser,
	parse_bool,
	parse_string,
)
from shallowconf.parser.storage import AttrRef  # noqa: E402


class Protocol(Enum):
	UDP = "udp"
	TCP = "tcp"
	QUIC = "quic"


parse_protocol = define_enum_parser(Protocol, "Failed to parse protocol")
parse_protocols = define_enum_set_parser(Protocol, "Failed to parse protocol")


class Settings:
	"""Plain configuration object written to by the callbacks under test."""
	def __init__(self) -> None:
		self.name: Optional[str] = "default"
		self.enabled: bool = False
		self.protocol: Protocol = Protocol.UDP
		self.protocols: List[Protocol] = []
		self.level: Optional[str] = None


def table_items(settings: Settings) -> List[TableItem]:
	return [
		TableItem("Main", "Name", parse_string, data=AttrRef(settings, "name")),
		TableItem("Main", "Enabled", parse_bool, data=AttrRef(settings, "enabled")),
		TableItem("Net", "Protocol", parse_protocol, data=AttrRef(settings, "protocol")),
		TableItem("Net", "Protocols", parse_protocols, data=AttrRef(settings, "protocols")),
		TableItem(None, "Level", parse_string, data=AttrRef(settings, "level")),
	]


PERF_ITEMS = [
	PerfItem("Main.Name", parse_string, field="name"),
	PerfItem("Main.Enabled", parse_bool, field="enabled"),
	PerfItem("Net.Protocol", parse_protocol, field="protocol"),
	PerfItem("Net.Protocols", parse_protocols, field="protocols"),
	PerfItem("Level", parse_string, field="level"),
]


class Recorder:
	"""Callback that remembers every assignment it was called with."""
	def __init__(self, result: Optional[int] = 0) -> None:
		self.calls: List[Assignment] = []
		self.result = result

	def __call__(self, assignment: Assignment) -> Optional[int]:
		self.calls.append(assignment)
		return self.result

	@property
	def values(self) -> List[str]:
		return [a.value for a in self.calls]


@pytest.fixture()
def settings() -> Settings:
	return Settings()


@pytest.fixture()
def write(tmp_path: Path) -> Callable[..., Path]:
	def _write(name: str, text: str) -> Path:
		path = tmp_path / name
		path.parent.mkdir(parents=True, exist_ok=True)
		path.write_text(text, encoding="utf-8")
		return path
	return _write


@pytest.fixture()
def debug_logs(caplog):
	caplog.set_level(logging.DEBUG, logger="shallowconf")
	return caplog
