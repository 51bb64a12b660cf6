# src/propconf/templates.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Union

from .catalog import FieldCatalog
from .codec import encode_line, encode_value
from .loader import COMMENT_PREFIX, is_blank, is_comment
from .logutil import get_logger
from . import store

LOG = get_logger(__name__)
PathLike = Union[str, Path]


# --- Internal helpers
def _comment_lines(comments: Sequence[str]) -> List[str]:
	"""``# text`` per comment line, a bare blank line for blank ones."""
	lines: List[str] = []
	for text in comments:
		for piece in text.splitlines() or [""]:
			lines.append(f"{COMMENT_PREFIX} {piece}" if piece.strip() else "")
	return lines


def _field_block(field, catalog: FieldCatalog) -> List[str]:
	return _comment_lines(field.comments) + [encode_line(field, catalog)]


# --- Public API: full rendering
def render_lines(catalog: FieldCatalog) -> List[str]:
	"""
	Render the whole file for *catalog*, in declaration order.

	Layout:
		1) type-level comments, then one blank line (only when there are any);
		2) per field: its comments, then ``name=value``.

	Ignored fields and, without an instance, instance fields are skipped.
	Nothing is written on failure, so a broken field aborts the whole render.

	:param catalog: Source catalog.
	:return: Lines without terminators.
	:raises FieldAccessError: A field cannot be read.
	:raises UnsupportedTypeError: A written field has an unsupported type.
	:raises TypeMismatchError: A field holds a value that does not fit its type.
	"""
	lines: List[str] = []
	header = catalog.type_comments()
	if header:
		lines.extend(_comment_lines(header))
		lines.append("")

	for field in catalog:
		if not catalog.is_serializable(field):
			LOG.debug("Not writing %s (%s)", field.name, "ignored" if field.ignored else "no instance")
			continue
		lines.extend(_field_block(field, catalog))
	return lines


def render_text(catalog: FieldCatalog) -> str:
	return "\n".join(render_lines(catalog)) + "\n"


def write_properties(
		path: PathLike,
		catalog: FieldCatalog,
		*,
		encoding: str = "utf-8",
		backup_ext: Optional[str] = ".bak"
) -> Path:
	"""
	Serialize *catalog* to *path*, replacing the file atomically.

	The text is rendered completely before the file is touched.

	:param path: Destination file.
	:param catalog: Source catalog.
	:param encoding: File encoding.
	:param backup_ext: Keep the previous file under this suffix; ``None`` to disable.
	:return: Absolute path written.
	"""
	text = render_text(catalog)
	return store.write_text(path, text, encoding=encoding, backup_ext=backup_ext)


# --- Public API: in-place update
def _replace_value(line: str, encoded: str) -> str:
	"""Keep everything up to the first ``=`` and the spacing after it."""
	head, _sep, tail = line.partition("=")
	pad = tail[: len(tail) - len(tail.lstrip())]
	return f"{head}={pad}{encoded}"


def update_lines(lines: Iterable[str], catalog: FieldCatalog) -> List[str]:
	"""
	Refresh the values in existing *lines* from *catalog*.

	Comments, blank lines and entries that do not name a writable field are kept
	verbatim. Writable fields that never appear are appended at the end, with
	their comments.

	:param lines: Current file lines.
	:param catalog: Source catalog.
	:return: Updated lines without terminators.
	"""
	writable = {f.name: f for f in catalog if catalog.is_serializable(f)}
	seen: Set[str] = set()
	out: List[str] = []

	for raw in lines:
		line = raw.rstrip("\r\n")
		if is_blank(line) or is_comment(line):
			out.append(line)
			continue

		name, sep, _value = line.partition("=")
		field = writable.get(name.strip()) if sep else None
		if field is None:
			LOG.warning("Keeping unrecognised config line as is: %s", line)
			out.append(line)
			continue

		out.append(_replace_value(line, encode_value(field, catalog.get_value(field))))
		seen.add(field.name)

	missing = [f for name, f in writable.items() if name not in seen]
	if missing:
		if out and not is_blank(out[-1]):
			out.append("")
		for field in missing:
			LOG.info("Appending missing config entry %s", field.name)
			out.extend(_field_block(field, catalog))
	return out


def update_file(
		path: PathLike,
		catalog: FieldCatalog,
		*,
		encoding: str = "utf-8",
		backup_ext: Optional[str] = ".bak"
) -> Path:
	"""
	Rewrite the values of an existing file in place, keeping its layout.

	:raises FileNotFoundError: If *path* does not exist.
	"""
	lines = update_lines(store.read_lines(path, encoding=encoding), catalog)
	return store.write_text(path, "\n".join(lines) + "\n", encoding=encoding, backup_ext=backup_ext)


__all__ = [
	"render_lines",
	"render_text",
	"write_properties",
	"update_lines",
	"update_file",
]
