# src/propconf/codec.py
"""
Line codec: one ``name=value`` line <-> one typed field value.

Decoding rules:
	* the line is split on the first ``=``, both sides trimmed and non-blank;
	* ``Int16``/``Int32`` accept a decimal signed literal, or ``0x`` + hex digits
	  read as the unsigned bit pattern of the declared width (``0xFFFF`` is -1
	  for ``Int16``);
	* floats follow the plain decimal grammar (sign, digits, fraction, exponent);
	  ``Float32`` values are rounded to single precision;
	* booleans are ``true``/``false`` in any case, every other token is ``False``;
	* lists drop every ``[``, ``]`` and whitespace character, then split on ``,``.

Encoding writes ``Int16`` as upper-case hex with at least two digits, floats
with six decimals and lists as ``[a, b, c]``.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, List, Tuple

import numpy as np

from .errors import ContentError, MalformedEntryError, NumberFormatError, UnknownFieldError, UnsupportedTypeError
from .fields import ConfigField, ElementType, TypeTag, coerce_value

if TYPE_CHECKING:
	from .catalog import FieldCatalog

__all__ = [
	"HEX_PREFIX",
	"split_entry",
	"parse_int",
	"parse_float",
	"parse_bool",
	"parse_list",
	"decode_value",
	"decode_line",
	"format_int16",
	"format_float",
	"encode_value",
	"encode_field",
	"encode_line",
]

HEX_PREFIX = "0x"

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")
_HEX_DIGITS_RE = re.compile(r"[0-9A-Fa-f]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_LIST_NOISE_RE = re.compile(r"[\[\]\s]")

# signed dtype, unsigned dtype with the same width
_INT_DTYPES = {
	TypeTag.INT16: (np.int16, np.uint16),
	TypeTag.INT32: (np.int32, np.uint32),
}


# --- decode -----------------------------------------------------------------
def split_entry(line: str) -> Tuple[str, str]:
	"""
	Split an entry line into trimmed ``(name, value)``.

	Everything after the first ``=`` belongs to the value.

	:raises MalformedEntryError: No ``=``, or a blank name or value.
	"""
	name, sep, value = line.partition("=")
	name = name.strip()
	value = value.strip()
	if not sep or not name or not value:
		raise MalformedEntryError(line)
	return name, value


def parse_int(token: str, tag: TypeTag = TypeTag.INT32) -> int:
	"""
	Parse an integer literal for a 16- or 32-bit field.

	:param token: Trimmed literal, decimal or ``0x``-prefixed hex.
	:param tag: ``TypeTag.INT16`` or ``TypeTag.INT32``.
	:return: Signed value within the width.
	:raises NumberFormatError: Invalid digits or out of range.
	"""
	signed, unsigned = _INT_DTYPES[tag]
	if token.startswith(HEX_PREFIX):
		digits = token[len(HEX_PREFIX):]
		if not _HEX_DIGITS_RE.fullmatch(digits):
			raise NumberFormatError(token, tag.value, "invalid hex digits")
		raw = int(digits, 16)
		if raw > np.iinfo(unsigned).max:
			raise NumberFormatError(token, tag.value, "out of range")
		return int(unsigned(raw).astype(signed))

	if not _DECIMAL_RE.fullmatch(token):
		raise NumberFormatError(token, tag.value)
	value = int(token)
	info = np.iinfo(signed)
	if not info.min <= value <= info.max:
		raise NumberFormatError(token, tag.value, "out of range")
	return value


def parse_float(token: str, tag: TypeTag = TypeTag.FLOAT64) -> float:
	"""
	Parse a decimal float literal.

	:param token: Trimmed literal.
	:param tag: ``TypeTag.FLOAT32`` rounds to single precision.
	:raises NumberFormatError: Invalid syntax or not representable.
	"""
	if not _FLOAT_RE.fullmatch(token):
		raise NumberFormatError(token, tag.value)

	value = float(token)
	if tag is TypeTag.FLOAT32:
		with np.errstate(over="ignore"):
			single = np.float32(value)
		if not np.isfinite(single):
			raise NumberFormatError(token, tag.value, "out of range")
		return float(single)

	if not np.isfinite(value):
		raise NumberFormatError(token, tag.value, "out of range")
	return value


def parse_bool(token: str) -> bool:
	return token.lower() == "true"


def _parse_element(token: str, element: ElementType) -> Any:
	if element is ElementType.INT32:
		return parse_int(token, TypeTag.INT32)
	if element is ElementType.FLOAT32:
		return parse_float(token, TypeTag.FLOAT32)
	return token


def parse_list(value: str, element: ElementType) -> List[Any]:
	"""
	Parse ``[a, b, c]`` (brackets optional) into a list of *element* values.

	Whitespace is removed everywhere, including inside string elements. Nothing
	left after stripping means an empty list.
	"""
	stripped = _LIST_NOISE_RE.sub("", value)
	if not stripped:
		return []
	return [_parse_element(token, element) for token in stripped.split(",")]


def decode_value(field: ConfigField, token: str) -> Any:
	"""
	Convert the textual value of an entry according to *field*'s type tag.

	:raises NumberFormatError: For unparsable numbers.
	:raises UnsupportedTypeError: For unsupported fields.
	"""
	tag = field.type_tag
	if tag in _INT_DTYPES:
		return parse_int(token, tag)
	if tag in (TypeTag.FLOAT32, TypeTag.FLOAT64):
		return parse_float(token, tag)
	if tag is TypeTag.BOOL:
		return parse_bool(token)
	if tag is TypeTag.LIST:
		return parse_list(token, field.element_type)
	raise UnsupportedTypeError(field.name, field.declared_name)


def decode_line(line: str, catalog: "FieldCatalog") -> Tuple[str, Any]:
	"""
	Decode one entry line and apply it to *catalog*.

	Ignored fields are treated exactly like absent ones.

	:param line: Entry line (not a comment or blank line).
	:param catalog: Catalog to look the name up in and write through.
	:return: ``(field_name, applied_value)``.
	:raises ContentError: Malformed entry, unknown field, bad number, unsupported
		type or missing instance; ``line`` and ``field`` are filled in.
	:raises FieldAccessError: The field cannot be written.
	"""
	name = None
	try:
		name, token = split_entry(line)
		field = catalog.lookup(name)
		if field is None or field.ignored:
			raise UnknownFieldError(name)
		value = decode_value(field, token)
		catalog.set_value(field, value)
	except ContentError as exc:
		if exc.line is None:
			exc.line = line
		if exc.field is None:
			exc.field = name
		raise
	return name, value


# --- encode -----------------------------------------------------------------
def format_int16(value: int) -> str:
	"""``0x`` + the 16-bit two's complement pattern, upper-case, at least two digits."""
	return f"{HEX_PREFIX}{value & 0xFFFF:02X}"


def format_float(value: float) -> str:
	return f"{value:.6f}"


def _format_element(value: Any, element: ElementType) -> str:
	if element is ElementType.FLOAT32:
		return format_float(value)
	return str(value)


def encode_value(field: ConfigField, value: Any) -> str:
	"""
	Render *value* as the textual value part of *field*'s entry.

	:raises TypeMismatchError: *value* does not fit the field's type tag.
	:raises UnsupportedTypeError: The field's type is not supported.
	"""
	value = coerce_value(field, value)
	tag = field.type_tag
	if tag is TypeTag.INT16:
		return format_int16(value)
	if tag is TypeTag.INT32:
		return str(value)
	if tag in (TypeTag.FLOAT32, TypeTag.FLOAT64):
		return format_float(value)
	if tag is TypeTag.BOOL:
		return "true" if value else "false"
	items = ", ".join(_format_element(item, field.element_type) for item in value)
	return f"[{items}]"


def encode_field(field: ConfigField, catalog: "FieldCatalog") -> str:
	"""Read *field* through *catalog* and render its value."""
	return encode_value(field, catalog.get_value(field))


def encode_line(field: ConfigField, catalog: "FieldCatalog") -> str:
	"""``name=value`` for *field*, without a line terminator."""
	return f"{field.name}={encode_field(field, catalog)}"
