# src/shallowconf/parser/store.py

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Union

from .errors import ConfigError

LOG = logging.getLogger(__name__)

PathLike = Union[str, Path]
Ordering = Literal["directory", "basename"]

SYSTEM_CONFIG_ROOTS: Sequence[str] = ("/etc", "/run", "/usr/local/lib", "/usr/lib")


# --- Directory resolution
def user_config_dir(app: str = "shallowconf") -> Path:
	"""
	Return a per-user configuration directory.

	On Windows this is ``%APPDATA%/<app>``, on POSIX ``$XDG_CONFIG_HOME/<app>`` or ``~/.config/<app>``.

	:param app: Application namespace directory name.
	:return: Absolute path to the user config directory (not guaranteed to exist).
	"""
	if os.name == "nt":
		base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
	else:
		base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
	return (base / app).resolve()


def resolve_config_path(
		name: str,
		*,
		prefer: Literal["system", "user"] = "system",
		env_var: Optional[str] = None,
		app: str = "shallowconf",
) -> Path:
	"""
	Resolve the primary configuration file *name* with a clear precedence.

	Precedence:
		1) If ``env_var`` is provided and the environment variable is set → use that path.
		2) If ``prefer == 'system'`` → ``/etc/<name>``.
		3) Otherwise → ``user_config_dir(app)/name``.

	:param name: File name, possibly with subdirectories (e.g., ``"myapp/daemon.conf"``).
	:param prefer: Either ``'system'`` or ``'user'``.
	:param env_var: Optional environment variable that can override the path.
	:param app: Application namespace directory for the user location.
	:return: The absolute path (may or may not exist).
	:raises ValueError: If ``prefer`` is not ``'system'`` or ``'user'``.
	"""
	if env_var:
		override_var = os.getenv(env_var)
		if override_var:
			return Path(override_var).expanduser().resolve()

	if prefer == "system":
		return Path(SYSTEM_CONFIG_ROOTS[0]) / name
	if prefer == "user":
		return user_config_dir(app) / name

	raise ValueError(f"prefer must be 'system' or 'user', not {prefer}")


def dropin_dirs(name: str, *, roots: Optional[Iterable[PathLike]] = None) -> List[Path]:
	"""
	Return the drop-in directories ``<root>/<name>.d`` in precedence order.

	:param name: Primary file name relative to a root (e.g., ``"myapp/daemon.conf"``).
	:param roots: Search roots; defaults to :data:`SYSTEM_CONFIG_ROOTS`.
	:return: Directories (not guaranteed to exist).
	"""
	return [Path(root) / f"{name}.d" for root in (roots if roots is not None else SYSTEM_CONFIG_ROOTS)]


# --- Fragment discovery
def _is_masked(path: Path) -> bool:
	"""A fragment symlinked to the null device masks same-named fragments without being parsed."""
	return path.is_symlink() and os.path.realpath(path) == os.path.realpath(os.devnull)


def _fragments_in(directory: Path, suffix: str) -> List[Path]:
	try:
		entries = list(directory.iterdir())
	except FileNotFoundError:
		LOG.debug("Drop-in directory %s does not exist, skipping.", directory)
		return []
	except NotADirectoryError:
		LOG.debug("Drop-in path %s is not a directory, skipping.", directory)
		return []
	return sorted(
		(p for p in entries if p.name.endswith(suffix) and not p.name.startswith(".") and (p.is_file() or _is_masked(p))),
		key=lambda p: p.name,
	)


def list_fragments(
		directories: Iterable[PathLike],
		*,
		suffix: str = ".conf",
		ordering: Ordering = "directory",
) -> List[Path]:
	"""
	List drop-in fragments to parse, in parse order.

	``ordering="directory"``: directories in the given order, fragments of each sorted by
	name. ``ordering="basename"``: all fragments sorted by file name across directories;
	a name found in an earlier directory hides the same name in later ones, and a
	fragment symlinked to ``/dev/null`` hides it without being returned.

	Missing directories are skipped silently.

	:param directories: Drop-in directories in precedence order.
	:param suffix: Only names ending in *suffix* are fragments.
	:param ordering: ``"directory"`` or ``"basename"``.
	:return: Fragment paths.
	:raises ConfigError: On an unknown *ordering*.
	"""
	dirs = [Path(d) for d in directories]

	if ordering == "directory":
		out: List[Path] = []
		for directory in dirs:
			out.extend(p for p in _fragments_in(directory, suffix) if not _is_masked(p))
		return out

	if ordering == "basename":
		chosen: Dict[str, Path] = {}
		for directory in dirs:
			for p in _fragments_in(directory, suffix):
				chosen.setdefault(p.name, p)
		return [chosen[name] for name in sorted(chosen) if not _is_masked(chosen[name])]

	raise ConfigError(f"ordering must be 'directory' or 'basename', not {ordering!r}")


# --- Low-level atomic I/O
def atomic_write_text(dest: Path, text: str, *, encoding: str = "utf-8") -> None:
	"""
	Atomically write *text* to *dest*.

	Strategy:
		- write to a temporary file in the same directory,
		- flush + fsync,
		- os.replace(temp, dest) (atomic on POSIX/NTFS).

	:param dest: Destination file path.
	:param text: Text content to write.
	:param encoding: Target encoding.
	:raises OSError: On I/O errors.
	"""
	dest.parent.mkdir(parents=True, exist_ok=True)
	tmp_fd, tmp_path = tempfile.mkstemp(prefix=dest.name + ".", dir=str(dest.parent))
	try:
		with os.fdopen(tmp_fd, "w", encoding=encoding, newline="\n") as fh:
			fh.write(text)
			fh.flush()
			os.fsync(fh.fileno())
		os.replace(tmp_path, dest)
	except BaseException:
		if os.path.exists(tmp_path):
			os.remove(tmp_path)
		raise


__all__ = [
	"PathLike",
	"SYSTEM_CONFIG_ROOTS",
	"user_config_dir",
	"resolve_config_path",
	"dropin_dirs",
	"list_fragments",
	"atomic_write_text",
]
