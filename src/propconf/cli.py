from __future__ import annotations

import argparse
import sys
from importlib import import_module
from pathlib import Path
from typing import List, Optional

from .config import ConfigManager
from .errors import ConfigError
from .logutil import configure_logging, get_logger

LOG = get_logger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIG_ERROR = 2
EXIT_LINES_FAILED = 3


def load_target(target: str) -> type:
	"""
	Import the configuration class named by ``package.module:ClassName``.

	:param target: Import path; nested classes are allowed (``mod:Outer.Inner``).
	:return: The class.
	:raises ConfigError: For a malformed target or something that is not a class.
	:raises ImportError: If the module cannot be imported.
	"""
	module_name, sep, qualname = target.partition(":")
	if not sep or not module_name or not qualname:
		raise ConfigError(f"Target must look like 'package.module:ClassName', got {target!r}")

	obj = import_module(module_name)
	for part in qualname.split("."):
		try:
			obj = getattr(obj, part)
		except AttributeError as exc:
			raise ConfigError(f"{module_name!r} has no attribute {qualname!r}") from exc
	if not isinstance(obj, type):
		raise ConfigError(f"{target!r} is not a class")
	return obj


def _build_arg_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser for the CLI.
	"""
	p = argparse.ArgumentParser(
		prog="propconf",
		description="Load a properties file into a configuration class, creating it from defaults when missing."
	)
	p.add_argument(
		"target", help="Configuration class as 'package.module:ClassName'."
	)
	p.add_argument(
		"config", help="Path to the properties file."
	)
	p.add_argument(
		"--describe", action="store_true", help="Print every field with its current value."
	)
	p.add_argument(
		"--dump", action="store_true", help="Print the file as it would be written now."
	)
	p.add_argument(
		"--fail-fast", action="store_true",
		help="Stop at the first bad line instead of counting failures."
	)
	p.add_argument(
		"--instance", action="store_true",
		help="Instantiate the class without arguments so instance fields take part too."
	)
	p.add_argument(
		"--log-file", default=None, help="Also write logs to this file."
	)
	p.add_argument(
		"--log-level", choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
		default="WARNING", help="Console log level (default WARNING)."
	)
	p.add_argument(
		"--rewrite", action="store_true",
		help="After loading, write the values back in place (layout and comments kept)."
	)
	p.add_argument(
		"-s", "--search-path", action="append", default=[],
		help="Directory prepended to sys.path before importing the target (may repeat)."
	)
	return p


def main(argv: Optional[List[str]] = None) -> int:
	"""
	Entrypoint for the command-line interface.

	:param argv: Optional argv list for testing; defaults to ``sys.argv[1:]``.
	:return: Exit code: 0 clean, 1 unexpected error, 2 configuration error,
		3 loaded with failing lines.
	"""
	args = _build_arg_parser().parse_args(argv)
	configure_logging(console_level=args.log_level, file_path=args.log_file)

	for directory in reversed(args.search_path):
		sys.path.insert(0, str(Path(directory).resolve()))

	try:
		config_class = load_target(args.target)
		instance = config_class() if args.instance else None
		mgr = ConfigManager(args.config, config_class, instance, fail_fast=args.fail_fast)
		result = mgr.deserialize_or_create()

		if result.created:
			print(f"Created {mgr.path}")
		else:
			print(f"Loaded {mgr.path}: {result}")
			if args.rewrite:
				mgr.update_in_place()
				print(f"Rewrote {mgr.path}")

		if args.describe:
			print(mgr.describe())
		if args.dump:
			print(mgr.render(), end="")

		return EXIT_LINES_FAILED if result.failures else EXIT_OK

	except ConfigError as exc:
		LOG.error("Configuration error: %s", exc)
		print(f"error: {exc}", file=sys.stderr)
		return EXIT_CONFIG_ERROR
	except Exception as exc:
		LOG.exception("Unexpected error: %s", exc)
		return EXIT_UNEXPECTED


if __name__ == "__main__":
	raise SystemExit(main())
