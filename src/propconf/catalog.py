# src/propconf/catalog.py

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .errors import FieldAccessError, MissingInstanceError
from .fields import ConfigField, coerce_value, enumerate_fields, type_comments
from .logutil import get_logger

LOG = get_logger(__name__)

__all__ = ["FieldCatalog"]


class FieldCatalog:
	"""
	Typed read/write access to the configurable fields of a class.

	Static fields are read from and written to the class itself, instance fields
	to *instance*. The field list is enumerated once, when the catalog is built;
	build a new catalog for every load or save so that it reflects the class as
	it currently is.

	:param config_class: Class declaring the settings.
	:param instance: Optional instance of *config_class* holding instance settings.
	:raises TypeError: If *instance* is not an instance of *config_class*.
	"""
	def __init__(self, config_class: type, instance: Optional[Any] = None) -> None:
		if instance is not None and not isinstance(instance, config_class):
			raise TypeError(
				f"instance must be a {config_class.__qualname__}, got {type(instance).__qualname__}"
			)
		self.config_class = config_class
		self.instance = instance
		self._fields: Tuple[ConfigField, ...] = tuple(enumerate_fields(config_class))
		self._by_name: Dict[str, ConfigField] = {f.name: f for f in self._fields}

	def __repr__(self) -> str:
		mode = "instance" if self.instance is not None else "static"
		return f"{self.__class__.__name__}({self.config_class.__qualname__}, mode={mode}, fields={len(self._fields)})"

	def __len__(self) -> int:
		return len(self._fields)

	def __iter__(self):
		return iter(self._fields)

	@property
	def fields(self) -> List[ConfigField]:
		"""Fields in declaration order (ignored ones included)."""
		return list(self._fields)

	@property
	def has_instance(self) -> bool:
		return self.instance is not None

	def type_comments(self) -> Tuple[str, ...]:
		return type_comments(self.config_class)

	def lookup(self, name: str) -> Optional[ConfigField]:
		"""Exact, case-sensitive lookup; ``None`` when nothing matches."""
		return self._by_name.get(name)

	def is_serializable(self, field: ConfigField) -> bool:
		"""Ignored fields, and instance fields without an instance, are never written."""
		return not field.ignored and (field.is_static or self.has_instance)

	def _owner(self, field: ConfigField) -> Any:
		if field.is_static:
			return self.config_class
		if self.instance is None:
			raise MissingInstanceError(field.name)
		return self.instance

	def get_value(self, field: ConfigField) -> Any:
		"""
		Read the current value of *field*.

		:raises MissingInstanceError: Instance field without an instance.
		:raises FieldAccessError: The attribute cannot be read.
		"""
		owner = self._owner(field)
		try:
			return getattr(owner, field.name)
		except AttributeError as exc:
			raise FieldAccessError(field.name, f"cannot read: {exc}") from exc

	def set_value(self, field: ConfigField, value: Any) -> None:
		"""
		Write *value* into *field*.

		:raises MissingInstanceError: Instance field without an instance.
		:raises TypeMismatchError: *value* does not match the field's type tag.
		:raises UnsupportedTypeError: The field's type is not supported.
		:raises FieldAccessError: The attribute cannot be written.
		"""
		owner = self._owner(field)
		stored = coerce_value(field, value)
		try:
			setattr(owner, field.name, stored)
		except (AttributeError, TypeError) as exc:
			raise FieldAccessError(field.name, f"cannot write: {exc}") from exc
		LOG.debug("Set %s to %r", field.name, stored)
