# src/propconf/logutil.py

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal, Optional, Union

PathLike = Union[str, Path]

PACKAGE_LOGGER = "propconf"

ConsoleLevelName = Literal[
	"CRITICAL",
	"ERROR",
	"WARNING",
	"INFO",
	"DEBUG",
	"NOTSET",
]

LevelLike = Union[int, str]

_CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _to_level(value: LevelLike, *, param_name: str) -> int:
	if isinstance(value, int):
		return value

	resolved = logging.getLevelName(str(value).upper())
	if isinstance(resolved, int):
		return resolved

	raise ValueError(f"Unknown logging level name for {param_name}: {value}")


def _package_logger() -> logging.Logger:
	log = logging.getLogger(PACKAGE_LOGGER)
	if not log.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
		log.addHandler(handler)
		if log.level == logging.NOTSET:
			log.setLevel(logging.INFO)
	return log


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
	"""
	Return a package logger.

	The ``propconf`` logger gets one console handler the first time any module
	asks for a logger; module loggers (``propconf.loader`` ...) carry no handlers
	and propagate to it.

	:param name: Logger name, normally the calling module's ``__name__``.
	:return: The logger.
	"""
	root = _package_logger()
	if name == PACKAGE_LOGGER:
		return root
	return logging.getLogger(name)


def configure_logging(
		*,
		console_level: LevelLike = "INFO",
		file_path: Optional[PathLike] = None,
		file_level: Optional[LevelLike] = None,
		mode: str = "a",
		rotate: bool = False,
		max_bytes: int = 1_000_000,
		backup_count: int = 3,
		propagate: bool = True
) -> logging.Logger:
	"""
	Configure the package logger for applications and the command line.

	Load/save diagnostics (one event per rejected line, created/updated files)
	are emitted under ``propconf.*``; this routes them to the console and,
	optionally, to a log file.

	:param console_level: Console handler level (int or level name).
	:param file_path: Optional log file; parent directories are created.
	:param file_level: File handler level, defaults to *console_level*.
	:param mode: File mode, ``'a'`` to append or ``'w'`` to truncate.
	:param rotate: Use :class:`RotatingFileHandler` instead of a plain file handler.
	:param max_bytes: Rotation threshold per file.
	:param backup_count: Number of rotated files to keep.
	:param propagate: Whether records also reach the root logger.
	:return: The configured ``propconf`` logger.
	"""
	console_value = _to_level(console_level, param_name="console_level")
	file_value = (
		_to_level(file_level, param_name="file_level")
		if file_level is not None
		else console_value
	)

	log = _package_logger()
	log.setLevel(min(console_value, file_value) if file_path else console_value)
	log.propagate = propagate

	for handler in log.handlers:
		if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
			handler.setLevel(console_value)

	if file_path:
		path = Path(file_path).expanduser().resolve()
		already = any(
			getattr(handler, "baseFilename", None) == str(path)
			for handler in log.handlers
		)
		if not already:
			path.parent.mkdir(parents=True, exist_ok=True)
			file_handler: logging.Handler
			if rotate:
				file_handler = RotatingFileHandler(
					path,
					mode=mode,
					maxBytes=max_bytes,
					backupCount=backup_count,
					encoding="utf-8"
				)
			else:
				file_handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
			file_handler.setLevel(file_value)
			file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
			log.addHandler(file_handler)

	return log
