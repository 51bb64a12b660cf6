from __future__ import annotations

from pathlib import Path
from typing import Any, List, Literal, Optional, Union
from types import TracebackType

from . import bootstrap, loader, store, templates
from .catalog import FieldCatalog
from .codec import encode_value
from .errors import ConfigError
from .loader import DeserializationResult
from .logutil import get_logger

LOG = get_logger(__name__)
PathLike = Union[str, Path]


class ConfigManager:
	"""
	Keeps one properties file and the fields of one configuration class in sync.

	Static settings (``ClassVar``) are read from and written to the class,
	instance settings to *instance* when one is given.

	Typical flow:
		mgr = ConfigManager("app.properties", Settings)
		mgr.deserialize_or_create()    # load, or write the defaults on first run
		...
		mgr.serialize()                # at shutdown

	Or let the context manager save on the way out:
		with ConfigManager("app.properties", Settings, save_on_exit=True) as mgr:
			mgr.deserialize_or_create()
			...

	:param path: The properties file.
	:param config_class: Class declaring the settings.
	:param instance: Instance holding the instance settings, if any.
	:param encoding: File encoding.
	:param backup_ext: Suffix for the copy of the previous file kept on save; ``None`` disables it.
	:param save_on_exit: Serialize when a ``with`` block exits without an exception.
	:param fail_fast: Default loading mode: raise the first content error instead of counting failures.
	:raises TypeError: If *instance* is not an instance of *config_class*.
	:raises ConfigError: If the class annotations cannot be resolved.
	"""
	def __init__(
			self,
			path: PathLike,
			config_class: type,
			instance: Optional[Any] = None,
			*,
			encoding: str = "utf-8",
			backup_ext: Optional[str] = ".bak",
			save_on_exit: bool = False,
			fail_fast: bool = False
	) -> None:
		self.path = Path(path).expanduser().resolve()
		self.config_class = config_class
		self.instance = instance
		self.encoding = encoding
		self.backup_ext = backup_ext
		self.save_on_exit = save_on_exit
		self.fail_fast = fail_fast
		# fail early on a bad class/instance pair
		self.catalog()

	@classmethod
	def for_app(
			cls,
			app: str,
			file_name: str,
			config_class: type,
			instance: Optional[Any] = None,
			*,
			prefer: Literal["user", "project"] = "user",
			project_root: Optional[PathLike] = None,
			env_var: Optional[str] = None,
			**kwargs: Any
	) -> "ConfigManager":
		"""
		Build a manager whose file lives in the application's config directory.

		See :func:`propconf.store.resolve_config_path` for the lookup order.

		:param app: Application name (directory name).
		:param file_name: File name, e.g. ``"app.properties"``.
		:param config_class: Class declaring the settings.
		:param instance: Optional instance.
		:param prefer: ``'user'`` or ``'project'`` directory.
		:param project_root: Root for ``prefer='project'``.
		:param env_var: Environment variable overriding the full path.
		:param kwargs: Passed on to the constructor.
		"""
		path = store.resolve_config_path(
			file_name,
			prefer=prefer,
			project_root=project_root,
			env_var=env_var,
			app=app
		)
		return cls(path, config_class, instance, **kwargs)

	def __repr__(self) -> str:
		mode = "instance" if self.instance is not None else "static"
		return f"{self.__class__.__name__}(path={str(self.path)!r}, class={self.config_class.__qualname__}, mode={mode})"

	def __str__(self) -> str:
		state = "exists" if self.exists() else "missing"
		return f"ConfigManager for {self.config_class.__qualname__}: {self.path} ({state})"

	def __enter__(self) -> "ConfigManager":
		return self

	def __exit__(
			self,
			exc_type: Optional[type[BaseException]],
			exc_val: Optional[BaseException],
			exc_tb: Optional[TracebackType]
	) -> bool:
		"""
		Save when ``save_on_exit`` is set and the block finished cleanly.
		Exceptions raised inside the block are logged and never suppressed.
		"""
		if exc_type is not None:
			LOG.error("Exception inside ConfigManager context: %s", exc_type, exc_info=(exc_type, exc_val, exc_tb))
			return False
		if self.save_on_exit:
			self.serialize()
		return False

	# --- catalog ---
	def catalog(self) -> FieldCatalog:
		"""A fresh catalog of the configuration class (and instance)."""
		return FieldCatalog(self.config_class, self.instance)

	def exists(self) -> bool:
		return self.path.is_file()

	# --- load ---
	def deserialize(self, *, fail_fast: Optional[bool] = None) -> DeserializationResult:
		"""
		Load the file into the fields.

		:param fail_fast: Raise the first content error instead of counting failures;
			``None`` uses the manager's ``fail_fast`` setting.
		:return: Result with the exact failure count.
		:raises ContentError: Fail-fast mode, first bad line.
		:raises FieldAccessError: A field cannot be written (both modes).
		:raises OSError: On read errors, including a missing file.
		"""
		return loader.deserialize_file(
			self.path,
			self.catalog(),
			fail_fast=self.fail_fast if fail_fast is None else fail_fast,
			encoding=self.encoding
		)

	def deserialize_or_create(self) -> DeserializationResult:
		"""
		Load the file (best-effort unless the manager is ``fail_fast``); when it
		does not exist, write it from the current field values instead.

		:return: ``created=True`` when the file was written, otherwise the load result.
		:raises ContentError: Fail-fast managers, first bad line.
		"""
		if not self.exists():
			LOG.info("Config file %s not found, creating it from current values", self.path)
			self.serialize()
			return DeserializationResult(created=True)

		result = self.deserialize()
		if not result.clean:
			LOG.warning("%s: %d line(s) could not be applied", self.path, result.failures)
		return result

	def deserialize_or_bootstrap(self, package: str, resource: Optional[str] = None) -> DeserializationResult:
		"""
		Like :meth:`deserialize_or_create`, but a missing file is first copied
		from a default file bundled in *package* and then loaded.

		Without such a resource the file is created from the current values.

		:param package: Package holding the default file.
		:param resource: Resource name; defaults to the config file's name.
		:return: The load result; ``created=True`` whenever the file was missing.
		"""
		if self.exists():
			return self.deserialize_or_create()

		name = resource or self.path.name
		if not bootstrap.resource_exists(package, name):
			LOG.info("No bundled default %s in %s", name, package)
			return self.deserialize_or_create()

		LOG.info("Config file %s not found, copying bundled default %s", self.path, name)
		bootstrap.copy_resource_to_path(package, name, self.path, encoding=self.encoding)
		result = self.deserialize()
		result.created = True
		return result

	# --- save ---
	def render(self) -> str:
		"""The file content :meth:`serialize` would write."""
		return templates.render_text(self.catalog())

	def serialize(self) -> Path:
		"""
		Write every serializable field, in declaration order, replacing the file.

		:return: The path written.
		:raises FieldAccessError: A field cannot be read.
		:raises UnsupportedTypeError: A written field has an unsupported type.
		:raises OSError: On write errors (the previous file stays intact).
		"""
		backup = self.backup_ext if self.exists() else None
		return templates.write_properties(
			self.path,
			self.catalog(),
			encoding=self.encoding,
			backup_ext=backup
		)

	def update_in_place(self) -> Path:
		"""
		Refresh the values of the existing file, keeping its comments, blank
		lines, ordering and unknown entries. Creates the file when missing.
		"""
		if not self.exists():
			return self.serialize()
		return templates.update_file(
			self.path,
			self.catalog(),
			encoding=self.encoding,
			backup_ext=self.backup_ext
		)

	# --- diagnostics ---
	def describe(self) -> str:
		"""
		List every catalog field with its type and current value.

		Meant for quick diagnostics; fields that cannot be rendered are shown
		with the reason instead of a value.
		"""
		catalog = self.catalog()
		lines: List[str] = [f"{self.config_class.__qualname__} -> {self.path}"]
		for field in catalog:
			scope = "static" if field.is_static else "instance"
			label = f"  {field.name} ({field.type_name}, {scope})"
			if field.ignored:
				lines.append(f"{label}: ignored")
			elif not catalog.is_serializable(field):
				lines.append(f"{label}: no instance")
			else:
				try:
					lines.append(f"{label} = {encode_value(field, catalog.get_value(field))}")
				except ConfigError as exc:
					lines.append(f"{label}: {exc}")
		return "\n".join(lines)
