"""
propconf: keep a ``key=value`` properties file and a configuration class in sync.

Top-level API keeps imports lazy:

    from typing import Annotated, ClassVar, List
    from propconf import ConfigManager, Comment, Ignore, Int16, Float32, config_comments

    @config_comments("Demo settings")
    class Settings:
        PORT: ClassVar[Annotated[int, Comment("Listening port")]] = 8080
        MASK: ClassVar[Int16] = 0xFF
        NAMES: ClassVar[List[str]] = ["a", "b"]

    mgr = ConfigManager("demo.properties", Settings)
    mgr.deserialize_or_create()
"""

from importlib import import_module
from importlib.metadata import version, PackageNotFoundError as _PNF
from typing import TYPE_CHECKING

try:
	__version__ = version("propconf")
except _PNF:
	__version__ = "0.0.0+local"

# Map: public name -> "module_path:attr_name"
_MAP = {
	# facade
	"ConfigManager":          "propconf.config:ConfigManager",
	"DeserializationResult":  "propconf.loader:DeserializationResult",
	# declaring fields
	"Int16":                  "propconf.fields:Int16",
	"Float32":                "propconf.fields:Float32",
	"Comment":                "propconf.fields:Comment",
	"Ignore":                 "propconf.fields:Ignore",
	"config_comments":        "propconf.fields:config_comments",
	"ConfigField":            "propconf.fields:ConfigField",
	"TypeTag":                "propconf.fields:TypeTag",
	"ElementType":            "propconf.fields:ElementType",
	# lower level
	"FieldCatalog":           "propconf.catalog:FieldCatalog",
	"decode_line":            "propconf.codec:decode_line",
	"encode_value":           "propconf.codec:encode_value",
	"deserialize_file":       "propconf.loader:deserialize_file",
	"write_properties":       "propconf.templates:write_properties",
	"configure_logging":      "propconf.logutil:configure_logging",
	# errors
	"ConfigError":            "propconf.errors:ConfigError",
	"ContentError":           "propconf.errors:ContentError",
	"MalformedEntryError":    "propconf.errors:MalformedEntryError",
	"UnknownFieldError":      "propconf.errors:UnknownFieldError",
	"NumberFormatError":      "propconf.errors:NumberFormatError",
	"UnsupportedTypeError":   "propconf.errors:UnsupportedTypeError",
	"MissingInstanceError":   "propconf.errors:MissingInstanceError",
	"FieldAccessError":       "propconf.errors:FieldAccessError",
	"TypeMismatchError":      "propconf.errors:TypeMismatchError",
}

__all__ = ["__version__", *_MAP.keys()]


def __getattr__(name: str):
	try:
		spec = _MAP[name]
	except KeyError as exc:
		raise AttributeError(f"module 'propconf' has no attribute {name!r}") from exc

	mod_path, _, attr = spec.partition(":")
	return getattr(import_module(mod_path), attr)


# Help type-checkers without eager imports
if TYPE_CHECKING:
	from .config import ConfigManager  # noqa: F401
	from .loader import DeserializationResult, deserialize_file  # noqa: F401
	from .fields import (  # noqa: F401
		Int16, Float32, Comment, Ignore, config_comments, ConfigField, TypeTag, ElementType,
	)
	from .catalog import FieldCatalog  # noqa: F401
	from .codec import decode_line, encode_value  # noqa: F401
	from .templates import write_properties  # noqa: F401
	from .logutil import configure_logging  # noqa: F401
	from .errors import (  # noqa: F401
		ConfigError, ContentError, MalformedEntryError, UnknownFieldError, NumberFormatError,
		UnsupportedTypeError, MissingInstanceError, FieldAccessError, TypeMismatchError,
	)
