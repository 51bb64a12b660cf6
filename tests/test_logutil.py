from __future__ import annotations

import logging

import pytest

from propconf.logutil import PACKAGE_LOGGER, configure_logging, get_logger


@pytest.fixture()
def package_logger():
	log = logging.getLogger(PACKAGE_LOGGER)
	level, handlers = log.level, list(log.handlers)
	yield log
	for handler in log.handlers:
		if handler not in handlers:
			log.removeHandler(handler)
			handler.close()
	log.setLevel(level)


def test_package_logger_has_one_console_handler(package_logger):
	get_logger()
	get_logger("propconf.loader")
	consoles = [h for h in package_logger.handlers if type(h) is logging.StreamHandler]
	assert len(consoles) == 1
	assert get_logger("propconf.loader").handlers == []


def test_file_handler_added_once(tmp_path, package_logger):
	path = tmp_path / "logs" / "run.log"
	configure_logging(console_level="ERROR", file_path=path, file_level="DEBUG")
	configure_logging(console_level="ERROR", file_path=path, file_level="DEBUG")

	files = [h for h in package_logger.handlers if isinstance(h, logging.FileHandler)]
	assert len(files) == 1
	assert package_logger.level == logging.DEBUG

	get_logger("propconf.demo").debug("hello file")
	files[0].flush()
	assert "hello file" in path.read_text(encoding="utf-8")


def test_rotating_handler(tmp_path, package_logger):
	configure_logging(file_path=tmp_path / "r.log", rotate=True, backup_count=1)
	assert any(type(h).__name__ == "RotatingFileHandler" for h in package_logger.handlers)


def test_unknown_level_name():
	with pytest.raises(ValueError):
		configure_logging(console_level="LOUD")
