from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Union

from . import store
from .logutil import get_logger

LOG = get_logger(__name__)
PathLike = Union[str, Path]


def _resource(package: str, name: str):
	return resources.files(package).joinpath(name)


def resource_exists(package: str, name: str) -> bool:
	"""
	Whether *package* ships a data file called *name*.

	A package that cannot be imported has no resources.

	:param package: Dotted package name, e.g. ``"myapp.defaults"``.
	:param name: File name inside the package.
	"""
	try:
		return _resource(package, name).is_file()
	except ModuleNotFoundError:
		LOG.debug("Resource package %s is not importable", package)
		return False


def copy_resource_to_path(
		package: str,
		name: str,
		dest: PathLike,
		*,
		overwrite: bool = False,
		encoding: str = "utf-8"
) -> Path:
	"""
	Copy the bundled default file *name* from *package* to *dest*.

	- If *dest* exists and ``overwrite=False`` (default), nothing is changed.
	- Otherwise it is written atomically; an existing file is kept as ``.bak``.

	:param package: Package holding the resource.
	:param name: Resource file name.
	:param dest: Target path.
	:param overwrite: Replace an existing file.
	:param encoding: Encoding of both the resource and the written file.
	:return: Absolute path to the (existing or created) file.
	:raises FileNotFoundError: The resource does not exist.
	"""
	target = Path(dest).expanduser().resolve()
	if target.exists() and not overwrite:
		LOG.info("Config already exists, keeping it: %s", target)
		return target

	if not resource_exists(package, name):
		raise FileNotFoundError(f"No resource {name!r} in package {package!r}")

	text = _resource(package, name).read_text(encoding=encoding)
	existed = target.exists()
	store.write_text(target, text, encoding=encoding, backup_ext=".bak" if existed else None)
	LOG.info("%s %s from bundled %s:%s", "Overwrote" if existed else "Created", target, package, name)
	return target


__all__ = ["resource_exists", "copy_resource_to_path"]
