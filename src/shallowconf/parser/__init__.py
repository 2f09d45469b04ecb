from .errors import ConfigError, FatalParseError, IncludeError
from .context import Assignment, ParseContext
from .storage import AttrRef, Box, ItemRef, field_ref
from .schema import INCLUDE_KEY, PerfectHashLookup, PerfItem, Resolved, TableItem, TableLookup
from .perfhash import PerfectHashTable
from .lines import LogicalLine, iter_logical_lines
from .engine import MAX_INCLUDE_DEPTH, parse_one
from .merge import parse_many
from .callbacks import (
	define_enum_parser,
	define_enum_set_parser,
	parse_bool,
	parse_boolean,
	parse_string,
)
from .store import dropin_dirs, list_fragments, resolve_config_path
from .templates import render_skeleton, write_skeleton
from .config import ShallowConfig

__all__ = [
	"ShallowConfig",
	"ConfigError", "FatalParseError", "IncludeError",
	"Assignment", "ParseContext",
	"AttrRef", "Box", "ItemRef", "field_ref",
	"INCLUDE_KEY", "TableItem", "PerfItem", "Resolved", "TableLookup", "PerfectHashLookup",
	"PerfectHashTable",
	"LogicalLine", "iter_logical_lines",
	"MAX_INCLUDE_DEPTH", "parse_one", "parse_many",
	"parse_boolean", "parse_string", "parse_bool", "define_enum_parser", "define_enum_set_parser",
	"dropin_dirs", "list_fragments", "resolve_config_path",
	"render_skeleton", "write_skeleton",
]
