# src/propconf/loader.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

from .catalog import FieldCatalog
from .codec import decode_line
from .errors import ContentError, FieldAccessError, TypeMismatchError
from .logutil import get_logger

LOG = get_logger(__name__)

PathLike = Union[str, Path]

COMMENT_PREFIX = "#"


@dataclass
class DeserializationResult:
	"""
	Outcome of one load.

	:param created: The file did not exist and was written from the current values.
	:param failures: Exact number of entry lines that could not be applied.
	:param applied: Names of the fields that were set, in file order.
	"""
	created: bool = False
	failures: int = 0
	applied: List[str] = field(default_factory=list)

	@property
	def clean(self) -> bool:
		return self.failures == 0

	def __str__(self) -> str:
		if self.created:
			return "created from current values"
		return f"{len(self.applied)} applied, {self.failures} failed"


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------
def is_blank(line: str) -> bool:
	return not line.strip()


def is_comment(line: str) -> bool:
	return line.strip().startswith(COMMENT_PREFIX)


def iter_entries(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
	"""
	Yield ``(lineno, line)`` for entry lines, skipping comments and blank lines.

	Line terminators are removed; line numbers are 1-based and count every line.
	"""
	for lineno, raw in enumerate(lines, start=1):
		line = raw.rstrip("\r\n")
		if is_blank(line) or is_comment(line):
			continue
		yield lineno, line


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------
def _log_rejected(exc: ContentError) -> None:
	LOG.warning(
		"Skipping line %s (%s): %s",
		exc.lineno, exc.kind, exc.line,
		extra={"config_line": exc.line, "config_field": exc.field, "error_kind": exc.kind}
	)


def deserialize_lines(
		lines: Iterable[str],
		catalog: FieldCatalog,
		*,
		fail_fast: bool = False
) -> DeserializationResult:
	"""
	Apply every entry line of *lines* to *catalog*, in order.

	Nothing is rolled back: fields set before a failure keep their new value.

	Fail-fast mode raises the first content error (with ``lineno`` and ``line``
	set) and never looks at later lines. Best-effort mode logs each content
	error, keeps going and reports the count in the result.

	:param lines: Source lines (with or without line terminators).
	:param catalog: Target catalog.
	:param fail_fast: Stop at the first content error.
	:return: The result; ``created`` is always ``False`` here.
	:raises ContentError: Fail-fast mode only.
	:raises FieldAccessError: In both modes, the class itself is misconfigured.
	:raises TypeMismatchError: In both modes.
	"""
	result = DeserializationResult()
	for lineno, line in iter_entries(lines):
		try:
			name, _value = decode_line(line, catalog)
		except ContentError as exc:
			exc.lineno = lineno
			if fail_fast:
				LOG.error("Stopping at line %d (%s): %s", lineno, exc.kind, line)
				raise
			result.failures += 1
			_log_rejected(exc)
			continue
		except (FieldAccessError, TypeMismatchError):
			LOG.error("Aborting at line %d, field cannot be set: %s", lineno, line)
			raise
		result.applied.append(name)

	if result.failures:
		LOG.warning("%d config line(s) could not be applied", result.failures)
	return result


def deserialize_file(
		path: PathLike,
		catalog: FieldCatalog,
		*,
		fail_fast: bool = False,
		encoding: str = "utf-8"
) -> DeserializationResult:
	"""
	Read *path* and apply it to *catalog*.

	:param path: Properties file.
	:param catalog: Target catalog.
	:param fail_fast: See :func:`deserialize_lines`.
	:param encoding: File encoding.
	:return: The result of :func:`deserialize_lines`.
	:raises OSError: On read errors (propagated unchanged).
	"""
	p = Path(path)
	with p.open("r", encoding=encoding) as fh:
		result = deserialize_lines(fh, catalog, fail_fast=fail_fast)
	LOG.info("Loaded %s: %s", p, result)
	return result


__all__ = [
	"COMMENT_PREFIX",
	"DeserializationResult",
	"is_blank",
	"is_comment",
	"iter_entries",
	"deserialize_lines",
	"deserialize_file",
]
