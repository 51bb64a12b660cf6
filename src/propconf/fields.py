# src/propconf/fields.py
"""
Field model: how a configuration class declares its settings.

Settings are plain annotated attributes. ``ClassVar[...]`` marks a static
(class-level) setting, anything else is an instance setting. Per-field
metadata rides along in ``typing.Annotated``::

	@config_comments("Settings for the demo app.")
	class Settings:
		PORT: ClassVar[Annotated[int, Comment("Listening port.")]] = 8080
		MASK: ClassVar[Int16] = 0xFF
		GAIN: ClassVar[Float32] = 0.5
		TOKEN: ClassVar[Annotated[str, Ignore]] = "secret"
		retries: List[int] = [1, 2, 4]
"""
from __future__ import annotations

import enum
import math
import typing
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, List, NewType, Optional, Tuple, TypeVar

import numpy as np

from .errors import ConfigError, TypeMismatchError, UnsupportedTypeError

__all__ = [
	"Int16",
	"Float32",
	"TypeTag",
	"ElementType",
	"Comment",
	"Ignore",
	"ConfigField",
	"config_comments",
	"type_comments",
	"resolve_type",
	"enumerate_fields",
	"coerce_value",
	"int_bounds",
]

#: 16-bit signed integer setting, written to disk as ``0x``-prefixed hex.
Int16 = NewType("Int16", int)
#: Single-precision float setting.
Float32 = NewType("Float32", float)

T = TypeVar("T", bound=type)

_TYPE_COMMENTS_ATTR = "__config_comments__"


class TypeTag(enum.Enum):
	INT16 = "Int16"
	INT32 = "Int32"
	FLOAT32 = "Float32"
	FLOAT64 = "Float64"
	BOOL = "Bool"
	LIST = "List"
	UNSUPPORTED = "Unsupported"


class ElementType(enum.Enum):
	INT32 = "Int32"
	FLOAT32 = "Float32"
	STRING = "String"


_SCALAR_TAGS: Dict[Any, TypeTag] = {
	Int16: TypeTag.INT16,
	int: TypeTag.INT32,
	Float32: TypeTag.FLOAT32,
	float: TypeTag.FLOAT64,
	bool: TypeTag.BOOL,
}

_ELEMENT_TYPES: Dict[Any, ElementType] = {
	int: ElementType.INT32,
	float: ElementType.FLOAT32,
	Float32: ElementType.FLOAT32,
	str: ElementType.STRING,
}

_INT_BITS: Dict[TypeTag, int] = {TypeTag.INT16: 16, TypeTag.INT32: 32}


@dataclass(frozen=True)
class Comment:
	"""One comment line attached to a field via ``Annotated[..., Comment("...")]``."""
	text: str


class Ignore:
	"""
	Marker excluding a field from both directions.

	Use the class itself or an instance: ``Annotated[str, Ignore]``.
	"""


@dataclass(frozen=True)
class ConfigField:
	"""
	Read-only description of one configurable field.

	:param name: Attribute name; the case-sensitive key in the file.
	:param type_tag: Scalar/list classification.
	:param element_type: Element type for ``TypeTag.LIST`` fields, else ``None``.
	:param comments: Comment lines emitted above the entry (blank ones render as blank lines).
	:param ignored: Skip the field when serializing and treat it as unknown when reading.
	:param is_static: Field lives on the class rather than on an instance.
	:param declared: The annotation as written, kept for error messages.
	"""
	name: str
	type_tag: TypeTag
	element_type: Optional[ElementType] = None
	comments: Tuple[str, ...] = ()
	ignored: bool = False
	is_static: bool = False
	declared: Any = None

	def __post_init__(self) -> None:
		if (self.type_tag is TypeTag.LIST) != (self.element_type is not None):
			raise ValueError("element_type must be set for list fields and only for them")

	@property
	def type_name(self) -> str:
		"""``Int32``, ``List[String]``, ..."""
		if self.type_tag is TypeTag.LIST:
			return f"List[{self.element_type.value}]"
		return self.type_tag.value

	@property
	def declared_name(self) -> str:
		declared = self.declared
		if isinstance(declared, type):
			return declared.__qualname__
		return repr(declared)


def config_comments(*lines: str) -> Callable[[T], T]:
	"""
	Class decorator attaching type-level comment lines.

	They are written once at the top of a serialized file, followed by a blank line.

	:param lines: Comment lines in output order.
	:return: Decorator returning the class unchanged apart from the metadata.
	"""
	def _decorate(cls: T) -> T:
		setattr(cls, _TYPE_COMMENTS_ATTR, tuple(str(line) for line in lines))
		return cls
	return _decorate


def type_comments(config_class: type) -> Tuple[str, ...]:
	"""Return the type-level comments declared directly on *config_class*."""
	return tuple(vars(config_class).get(_TYPE_COMMENTS_ATTR, ()))


def _unwrap(annotation: Any) -> Tuple[Any, bool, List[Any]]:
	"""Peel ``ClassVar`` and ``Annotated`` layers (in either order)."""
	is_static = False
	metadata: List[Any] = []
	tp = annotation
	while True:
		if tp is ClassVar:
			return Any, True, metadata
		origin = typing.get_origin(tp)
		if origin is ClassVar:
			is_static = True
			args = typing.get_args(tp)
			tp = args[0] if args else Any
		elif origin is typing.Annotated:
			args = typing.get_args(tp)
			metadata.extend(args[1:])
			tp = args[0]
		else:
			return tp, is_static, metadata


def _lookup(table: Dict[Any, Any], tp: Any) -> Any:
	try:
		return table.get(tp)
	except TypeError:
		# unhashable annotation objects are simply unsupported
		return None


def resolve_type(tp: Any) -> Tuple[TypeTag, Optional[ElementType]]:
	"""
	Map a (``ClassVar``/``Annotated``-free) type to its tag.

	:param tp: The type, e.g. ``int``, ``Int16`` or ``List[str]``.
	:return: ``(type_tag, element_type)``; element type only for lists.
	"""
	tag = _lookup(_SCALAR_TAGS, tp)
	if tag is not None:
		return tag, None

	if typing.get_origin(tp) is list:
		args = typing.get_args(tp)
		if len(args) == 1:
			element = _lookup(_ELEMENT_TYPES, args[0])
			if element is not None:
				return TypeTag.LIST, element

	return TypeTag.UNSUPPORTED, None


def enumerate_fields(config_class: type) -> List[ConfigField]:
	"""
	Enumerate the configurable fields of *config_class* in declaration order.

	Base-class fields come first. Names starting with ``_`` are not part of the
	catalog.

	:param config_class: The configuration class.
	:return: One :class:`ConfigField` per public annotated attribute.
	:raises TypeError: If *config_class* is not a class.
	:raises ConfigError: If the annotations cannot be resolved.
	"""
	if not isinstance(config_class, type):
		raise TypeError(f"Expected a class, got {type(config_class).__name__}")

	try:
		hints = typing.get_type_hints(config_class, include_extras=True)
	except (NameError, TypeError, SyntaxError) as exc:
		raise ConfigError(
			f"Cannot resolve annotations of {config_class.__qualname__}: {exc}"
		) from exc

	fields: List[ConfigField] = []
	for name, annotation in hints.items():
		if name.startswith("_"):
			continue
		tp, is_static, metadata = _unwrap(annotation)
		tag, element = resolve_type(tp)
		fields.append(ConfigField(
			name=name,
			type_tag=tag,
			element_type=element,
			comments=tuple(m.text for m in metadata if isinstance(m, Comment)),
			ignored=any(m is Ignore or isinstance(m, Ignore) for m in metadata),
			is_static=is_static,
			declared=tp,
		))
	return fields


def int_bounds(tag: TypeTag) -> Tuple[int, int]:
	"""Inclusive signed range of an integer tag."""
	bits = _INT_BITS[tag]
	return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _is_int(value: Any) -> bool:
	return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
	return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(value: Any, *, single: bool) -> Optional[float]:
	"""Finite ``float`` (rounded to single precision if asked), ``None`` when not representable."""
	if not _is_number(value):
		return None
	try:
		number = float(value)
	except OverflowError:
		return None
	if not math.isfinite(number):
		return None
	if single:
		with np.errstate(over="ignore"):
			number32 = np.float32(number)
		if not np.isfinite(number32):
			return None
		return float(number32)
	return number


def _coerce_element(field: ConfigField, value: Any) -> Any:
	element = field.element_type
	if element is ElementType.INT32:
		lo, hi = int_bounds(TypeTag.INT32)
		if _is_int(value) and lo <= value <= hi:
			return value
	elif element is ElementType.FLOAT32:
		number = _to_float(value, single=True)
		if number is not None:
			return number
	elif isinstance(value, str):
		return value
	raise TypeMismatchError(field.name, field.type_name, value)


def coerce_value(field: ConfigField, value: Any) -> Any:
	"""
	Check *value* against the field's tag and normalise it.

	Integers must fit the declared width, floats accept ``int`` values but must
	be finite, booleans are never accepted where a number is expected.
	``Float32`` values are rounded to single precision and must fit its range.

	:param field: Target field.
	:param value: Candidate value.
	:return: The value to store (floats as ``float``, lists copied).
	:raises TypeMismatchError: On a runtime type or width mismatch.
	:raises UnsupportedTypeError: For unsupported fields.
	"""
	tag = field.type_tag
	if tag in _INT_BITS:
		lo, hi = int_bounds(tag)
		if _is_int(value) and lo <= value <= hi:
			return value
	elif tag in (TypeTag.FLOAT32, TypeTag.FLOAT64):
		number = _to_float(value, single=tag is TypeTag.FLOAT32)
		if number is not None:
			return number
	elif tag is TypeTag.BOOL:
		if isinstance(value, bool):
			return value
	elif tag is TypeTag.LIST:
		if isinstance(value, (list, tuple)):
			return [_coerce_element(field, item) for item in value]
	else:
		raise UnsupportedTypeError(field.name, field.declared_name)
	raise TypeMismatchError(field.name, field.type_name, value)
