# src/propconf/errors.py
from __future__ import annotations

from typing import Optional

__all__ = [
	"ConfigError",
	"ContentError",
	"MalformedEntryError",
	"UnknownFieldError",
	"NumberFormatError",
	"UnsupportedTypeError",
	"MissingInstanceError",
	"FieldAccessError",
	"TypeMismatchError",
]


class ConfigError(Exception):
	"""Base class for every error raised by propconf."""


class ContentError(ConfigError):
	"""
	A problem with the *content* of one configuration line.

	Content errors are recoverable: best-effort deserialization counts them and
	moves on, fail-fast deserialization raises the first one.

	:param message: Human-readable description.
	:param line: The raw offending line (filled in by the codec when known).
	:param lineno: 1-based line number in the source file (filled in by the loader).
	:param field: Name of the field involved, when one was matched.
	"""
	kind = "content error"

	def __init__(
			self,
			message: str,
			*,
			line: Optional[str] = None,
			lineno: Optional[int] = None,
			field: Optional[str] = None
	) -> None:
		super().__init__(message)
		self.message = message
		self.line = line
		self.lineno = lineno
		self.field = field

	def __str__(self) -> str:
		where = f"line {self.lineno}: " if self.lineno is not None else ""
		if self.line is not None:
			return f"{where}{self.message} ({self.line!r})"
		return f"{where}{self.message}"


class MalformedEntryError(ContentError, ValueError):
	"""Entry line lacks a usable ``name=value`` split."""
	kind = "malformed entry"

	def __init__(self, line: str, **kwargs) -> None:
		kwargs.setdefault("line", line)
		super().__init__("Malformed config entry", **kwargs)


class UnknownFieldError(ContentError):
	"""No (non-ignored) catalog field carries the entry's name."""
	kind = "unknown field"

	def __init__(self, name: str, **kwargs) -> None:
		kwargs.setdefault("field", name)
		super().__init__(f"No matching field found for config entry {name!r}", **kwargs)
		self.name = name


class NumberFormatError(ContentError, ValueError):
	"""Numeric token does not parse for the declared type or width."""
	kind = "number format"

	def __init__(self, token: str, type_name: str, reason: str = "invalid number", **kwargs) -> None:
		super().__init__(f"Cannot parse {token!r} as {type_name}: {reason}", **kwargs)
		self.token = token
		self.type_name = type_name


class UnsupportedTypeError(ContentError, TypeError):
	"""The field's declared type is not a supported scalar or list type."""
	kind = "unsupported type"

	def __init__(self, name: str, declared: str, **kwargs) -> None:
		kwargs.setdefault("field", name)
		super().__init__(f"Unrecognised data type {declared} for field {name!r}", **kwargs)
		self.declared = declared


class MissingInstanceError(ContentError):
	"""An instance field was addressed while no instance is attached."""
	kind = "missing instance"

	def __init__(self, name: str, **kwargs) -> None:
		kwargs.setdefault("field", name)
		super().__init__(f"Field {name!r} is an instance field but no instance was supplied", **kwargs)


class FieldAccessError(ConfigError):
	"""
	The field exists but cannot be read or written (read-only property,
	frozen instance, missing value, ...). This points at a defect in the
	configuration class, so it is never counted as bad input.
	"""

	def __init__(self, name: str, reason: str) -> None:
		super().__init__(f"Cannot access field {name!r}: {reason}")
		self.field = name
		self.reason = reason


class TypeMismatchError(ConfigError, TypeError):
	"""A value handed to the accessor disagrees with the field's type tag."""

	def __init__(self, name: str, expected: str, value: object) -> None:
		super().__init__(
			f"Field {name!r} expects {expected}, got {type(value).__name__} ({value!r})"
		)
		self.field = name
		self.expected = expected
		self.value = value
