# src/propconf/store.py
from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Literal, Optional, Union

from .logutil import get_logger

LOG = get_logger(__name__)

PathLike = Union[str, Path]

DEFAULT_APP = "propconf"


# --- Directory resolution
def user_config_dir(app: str = DEFAULT_APP) -> Path:
	"""
	Per-user configuration directory.

	Windows: ``%APPDATA%/<app>``; elsewhere ``$XDG_CONFIG_HOME/<app>`` or ``~/.config/<app>``.

	:param app: Application directory name.
	:return: Absolute path (not guaranteed to exist).
	"""
	if os.name == "nt":
		base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
	else:
		base = Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
	return (base / app).resolve()


def project_config_dir(project_root: Optional[PathLike] = None, app: str = DEFAULT_APP) -> Path:
	"""Project-local directory ``<project_root>/<app>/configs`` (``project_root`` defaults to cwd)."""
	root = Path(project_root) if project_root is not None else Path.cwd()
	return (root / app / "configs").resolve()


def resolve_config_path(
		name: str,
		*,
		prefer: Literal["user", "project"] = "user",
		project_root: Optional[PathLike] = None,
		env_var: Optional[str] = None,
		app: str = DEFAULT_APP,
) -> Path:
	"""
	Resolve where the config file *name* lives.

	Precedence:
		1) ``env_var`` is given and set in the environment: that path;
		2) ``prefer == 'project'``: ``project_config_dir(project_root, app) / name``;
		3) otherwise ``user_config_dir(app) / name``.

	:param name: File name, e.g. ``"app.properties"``.
	:param prefer: ``'user'`` or ``'project'``.
	:param project_root: Project root for project-local resolution.
	:param env_var: Environment variable that overrides the whole path.
	:param app: Application directory name.
	:return: Absolute path (may not exist yet).
	:raises ValueError: For an unknown *prefer* value.
	"""
	if env_var:
		override = os.getenv(env_var)
		if override:
			return Path(override).expanduser().resolve()

	if prefer == "project":
		return project_config_dir(project_root, app) / name
	if prefer == "user":
		return user_config_dir(app) / name

	raise ValueError(f"prefer must be 'user' or 'project', not {prefer!r}")


# --- Atomic I/O
def backup_path(dest: Path, backup_ext: str) -> Path:
	"""``app.properties`` -> ``app.properties.bak``"""
	return dest.with_name(dest.name + backup_ext)


def _atomic_write_text(dest: Path, text: str, *, encoding: str = "utf-8", backup_ext: Optional[str] = None) -> None:
	"""
	Replace *dest* with *text* so that readers see either the old or the new file.

	The text goes to a temporary file in the destination directory, is flushed
	and fsynced, the previous file is copied to the backup (when requested) and
	the temporary file is moved over *dest* with :func:`os.replace`.

	:raises OSError: On I/O errors; *dest* is left untouched and the temporary file removed.
	"""
	dest.parent.mkdir(parents=True, exist_ok=True)
	tmp_fd, tmp_name = tempfile.mkstemp(prefix=dest.name + ".", suffix=".tmp", dir=str(dest.parent))
	try:
		with os.fdopen(tmp_fd, "w", encoding=encoding, newline="\n") as fh:
			fh.write(text)
			fh.flush()
			os.fsync(fh.fileno())

		if backup_ext and dest.exists():
			shutil.copy2(dest, backup_path(dest, backup_ext))

		os.replace(tmp_name, dest)
	except BaseException:
		with contextlib.suppress(FileNotFoundError):
			os.remove(tmp_name)
		raise


def read_lines(path: PathLike, *, encoding: str = "utf-8") -> List[str]:
	"""
	Read a text file into lines without terminators.

	:raises FileNotFoundError: If the file does not exist.
	:raises OSError: On other I/O errors.
	"""
	p = Path(path).expanduser()
	with p.open("r", encoding=encoding) as fh:
		return fh.read().splitlines()


def write_text(
		path: PathLike,
		text: str,
		*,
		encoding: str = "utf-8",
		overwrite: bool = True,
		backup_ext: Optional[str] = ".bak"
) -> Path:
	"""
	Atomically write *text* to *path*, optionally keeping the previous version.

	:param path: Destination.
	:param text: Full new content.
	:param encoding: Target encoding.
	:param overwrite: When ``False`` and the file exists, raise ``FileExistsError``.
	:param backup_ext: Suffix for the copy of the previous file; ``None`` disables it.
	:return: Absolute path written.
	:raises FileExistsError: Destination exists and ``overwrite=False``.
	:raises OSError: On I/O errors.
	"""
	dest = Path(path).expanduser().resolve()
	if dest.exists() and not overwrite:
		raise FileExistsError(f"Destination file already exists at {dest}")
	_atomic_write_text(dest, text, encoding=encoding, backup_ext=backup_ext)
	LOG.info("Wrote %s", dest)
	return dest


__all__ = [
	"PathLike",
	"DEFAULT_APP",
	"user_config_dir",
	"project_config_dir",
	"resolve_config_path",
	"backup_path",
	"read_lines",
	"write_text",
]
