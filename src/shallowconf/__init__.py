"""
shallowconf: parser for shallow, section based configuration files.

Top-level API keeps imports lazy:

    from shallowconf import ShallowConfig, TableLookup, TableItem, Box, parse_string
    level = Box()
    cfg = ShallowConfig(TableLookup([TableItem("Log", "Level", parse_string, data=level)]))
    cfg.parse_many("/etc/myapp.conf", ["/etc/myapp.conf.d"])

    from shallowconf import configure_logging
    configure_logging(console_level="DEBUG")
"""

from importlib import import_module
from importlib.metadata import version, PackageNotFoundError as _PNF
from typing import TYPE_CHECKING

try:
	__version__ = version("shallowconf")
except _PNF:
	__version__ = "0.0.0+local"

_PARSER_EXPORTS = {
	"ShallowConfig",
	"ConfigError", "FatalParseError", "IncludeError",
	"Assignment",
	"AttrRef", "Box", "ItemRef",
	"TableItem", "PerfItem", "TableLookup", "PerfectHashLookup",
	"parse_one", "parse_many",
	"parse_string", "parse_bool", "define_enum_parser", "define_enum_set_parser",
}

__all__ = [
	"__version__",
	"configure_logging",
	# namespaces
	"parser", "logutil",
	*sorted(_PARSER_EXPORTS),
]


def __getattr__(name: str):
	if name == "configure_logging":
		return import_module("shallowconf.logutil").configure_logging

	# --- namespaces (lazy) ---
	if name == "parser":
		return import_module("shallowconf.parser")
	if name == "logutil":
		return import_module("shallowconf.logutil")

	if name in _PARSER_EXPORTS:
		return getattr(import_module("shallowconf.parser"), name)

	raise AttributeError(f"module 'shallowconf' has no attribute {name!r}")


# Help type-checkers without eager imports
if TYPE_CHECKING:
	from . import parser, logutil  # noqa: F401
	from .logutil import configure_logging  # noqa: F401
	from .parser import (  # noqa: F401
		ShallowConfig, ConfigError, FatalParseError, IncludeError, Assignment,
		AttrRef, Box, ItemRef, TableItem, PerfItem, TableLookup, PerfectHashLookup,
		parse_one, parse_many, parse_string, parse_bool, define_enum_parser, define_enum_set_parser,
	)
