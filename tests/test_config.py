"""End-to-end behaviour of :class:`propconf.config.ConfigManager`."""

from __future__ import annotations

import math
import sys

import pytest

from propconf.config import ConfigManager
from propconf.errors import MalformedEntryError, NumberFormatError, UnknownFieldError
from tests.conftest import INSTANCE_CONTENTS, STATIC_CONTENTS

MODIFIED_STATIC = """\
# This is a top-level
# multiline comment.

# This is a field-level single-line comment.
STATIC_INT=67
# This is a field-level
# multi-line comment.
STATIC_SHORT=0xFF
STATIC_FLOAT=2.718000
STATIC_DOUBLE=2.236068
STATIC_BOOL=false
STATIC_INT_ARRAYLIST=[4, 2, 5, 12, 56]
STATIC_STRING_ARRAYLIST=[a, rfge, aebfu]
"""


def _tail(path, skip: int) -> str:
	return "".join(path.read_text(encoding="utf-8").splitlines(keepends=True)[skip:])


def test_static_serialisation(tmp_path, configurations):
	path = tmp_path / "static.properties"
	mgr = ConfigManager(path, configurations)

	result = mgr.deserialize_or_create()
	assert result.created
	assert path.read_text(encoding="utf-8") == STATIC_CONTENTS

	configurations.STATIC_INT = 67
	configurations.STATIC_SHORT = 0xFF
	configurations.STATIC_FLOAT = 2.718
	configurations.STATIC_DOUBLE = math.sqrt(5)
	configurations.STATIC_BOOL = not configurations.STATIC_BOOL
	configurations.STATIC_INT_ARRAYLIST = [4, 2, 5, 12, 56]
	configurations.STATIC_STRING_ARRAYLIST = ["a", "rfge", "aebfu"]
	mgr.serialize()

	assert path.read_text(encoding="utf-8") == MODIFIED_STATIC
	assert (tmp_path / "static.properties.bak").read_text(encoding="utf-8") == STATIC_CONTENTS


def test_instance_serialisation(tmp_path, configurations):
	path = tmp_path / "instance.properties"
	instance = configurations()
	mgr = ConfigManager(path, configurations, instance)

	assert mgr.deserialize_or_create().created
	assert _tail(path, 13) == INSTANCE_CONTENTS

	instance.instanceInt = 214
	instance.instanceShort = 0x20
	instance.instanceFloat = 2.718
	instance.instanceDouble = math.sqrt(3)
	instance.instanceBool = not instance.instanceBool
	instance.instanceIntArrayList = [6, 35, 35, 725, 7801]
	instance.instanceStringArrayList = ["aeth", "vxcioub", "uhdgx"]
	mgr.serialize()

	assert _tail(path, 13) == (
		"# This is a field-level single-line comment.\n"
		"instanceInt=214\n"
		"instanceShort=0x20\n"
		"instanceFloat=2.718000\n"
		"instanceDouble=1.732051\n"
		"instanceBool=false\n"
		"instanceIntArrayList=[6, 35, 35, 725, 7801]\n"
		"instanceStringArrayList=[aeth, vxcioub, uhdgx]\n"
	)


def test_static_deserialisation(tmp_path, configurations):
	path = tmp_path / "static.properties"
	path.write_text(MODIFIED_STATIC, encoding="utf-8")
	mgr = ConfigManager(path, configurations)

	result = mgr.deserialize_or_create()
	assert not result.created
	assert result.clean
	assert path.read_text(encoding="utf-8") == MODIFIED_STATIC
	assert not (tmp_path / "static.properties.bak").exists()

	assert configurations.STATIC_INT == 67
	assert configurations.STATIC_SHORT == 0xFF
	assert configurations.STATIC_FLOAT == pytest.approx(2.718)
	assert configurations.STATIC_DOUBLE == pytest.approx(math.sqrt(5), abs=1e-6)
	assert configurations.STATIC_BOOL is False
	assert configurations.STATIC_INT_ARRAYLIST == [4, 2, 5, 12, 56]
	assert configurations.STATIC_STRING_ARRAYLIST == ["a", "rfge", "aebfu"]


def test_instance_deserialisation(tmp_path, configurations):
	path = tmp_path / "instance.properties"
	path.write_text(
		"# This is a field-level single-line comment.\n"
		"instanceInt=214\n"
		"instanceShort=0x20\n"
		"instanceFloat=2.718000\n"
		"instanceDouble=1.732051\n"
		"instanceBool=false\n"
		"instanceIntArrayList=[6, 35, 335, 725, 7801]\n"
		"instanceStringArrayList=[aeth, vxcioub, uhdgx]\n",
		encoding="utf-8"
	)
	instance = configurations()
	result = ConfigManager(path, configurations, instance).deserialize_or_create()

	assert not result.created
	assert result.failures == 0
	assert instance.instanceInt == 214
	assert instance.instanceShort == 0x20
	assert instance.instanceFloat == pytest.approx(2.718)
	assert instance.instanceDouble == pytest.approx(math.sqrt(3), abs=1e-6)
	assert instance.instanceBool is False
	assert instance.instanceIntArrayList == [6, 35, 335, 725, 7801]
	assert instance.instanceStringArrayList == ["aeth", "vxcioub", "uhdgx"]
	# the class defaults are untouched
	assert configurations.instanceInt == 42


def test_fail_fast_modes(tmp_path, plain):
	path = tmp_path / "plain.properties"
	mgr = ConfigManager(path, plain)

	path.write_text("STATIC_INT=42\nSTATIC_SHORT=notanumber\nSTATIC_BOOL=false\n", encoding="utf-8")
	with pytest.raises(NumberFormatError):
		mgr.deserialize(fail_fast=True)
	assert plain.STATIC_BOOL is True

	path.write_text("STATIC_INT=7\nSTATIC_SHORT=\nSTATIC_BOOL=false\n", encoding="utf-8")
	with pytest.raises(MalformedEntryError):
		mgr.deserialize(fail_fast=True)
	assert plain.STATIC_INT == 7
	assert plain.STATIC_BOOL is True

	result = mgr.deserialize()
	assert result.failures == 1
	assert plain.STATIC_BOOL is False


def test_fail_fast_manager_default(tmp_path, plain):
	path = tmp_path / "plain.properties"
	path.write_text("STATIC_INT=8\nNOPE=1\nSTATIC_BOOL=false\n", encoding="utf-8")
	mgr = ConfigManager(path, plain, fail_fast=True)

	with pytest.raises(UnknownFieldError):
		mgr.deserialize_or_create()
	assert plain.STATIC_INT == 8
	assert plain.STATIC_BOOL is True

	with pytest.raises(UnknownFieldError):
		mgr.deserialize_or_bootstrap("package_that_does_not_exist")

	# an explicit argument still wins
	result = mgr.deserialize(fail_fast=False)
	assert result.failures == 1
	assert plain.STATIC_BOOL is False


def test_fail_fast_manager_still_creates_missing_file(tmp_path, plain):
	path = tmp_path / "plain.properties"
	assert ConfigManager(path, plain, fail_fast=True).deserialize_or_create().created
	assert path.exists()


def test_deserialize_missing_file_raises(tmp_path, plain):
	with pytest.raises(FileNotFoundError):
		ConfigManager(tmp_path / "nope.properties", plain).deserialize()


def test_update_in_place(tmp_path, plain):
	path = tmp_path / "plain.properties"
	path.write_text("# keep me\nSTATIC_INT = 1\nOTHER=x\n", encoding="utf-8")
	mgr = ConfigManager(path, plain)
	mgr.deserialize()
	plain.STATIC_INT = 99

	mgr.update_in_place()
	lines = path.read_text(encoding="utf-8").splitlines()
	assert lines[:3] == ["# keep me", "STATIC_INT = 99", "OTHER=x"]
	assert "STATIC_SHORT=0x04" in lines
	assert (tmp_path / "plain.properties.bak").read_text(encoding="utf-8").startswith("# keep me")


def test_save_on_exit(tmp_path, plain):
	path = tmp_path / "plain.properties"
	with ConfigManager(path, plain, save_on_exit=True) as mgr:
		mgr.deserialize_or_create()
		plain.STATIC_INT = 5
	assert "STATIC_INT=5" in path.read_text(encoding="utf-8").splitlines()


def test_no_save_when_block_raises(tmp_path, plain):
	path = tmp_path / "plain.properties"
	with pytest.raises(RuntimeError):
		with ConfigManager(path, plain, save_on_exit=True):
			raise RuntimeError("boom")
	assert not path.exists()


def test_bootstrap_from_bundled_resource(tmp_path, monkeypatch, plain):
	package = tmp_path / "pkgroot" / "demo_defaults"
	package.mkdir(parents=True)
	(package / "__init__.py").write_text("", encoding="utf-8")
	(package / "plain.properties").write_text("STATIC_INT=11\nSTATIC_BOOL=false\n", encoding="utf-8")
	monkeypatch.syspath_prepend(str(tmp_path / "pkgroot"))
	monkeypatch.delitem(sys.modules, "demo_defaults", raising=False)

	path = tmp_path / "conf" / "plain.properties"
	result = ConfigManager(path, plain).deserialize_or_bootstrap("demo_defaults")

	assert result.created
	assert result.applied == ["STATIC_INT", "STATIC_BOOL"]
	assert plain.STATIC_INT == 11
	assert path.read_text(encoding="utf-8") == "STATIC_INT=11\nSTATIC_BOOL=false\n"


def test_bootstrap_without_resource_creates_from_fields(tmp_path, plain):
	path = tmp_path / "plain.properties"
	result = ConfigManager(path, plain).deserialize_or_bootstrap("package_that_does_not_exist")
	assert result.created
	assert path.read_text(encoding="utf-8").startswith("STATIC_INT=42\n")


def test_for_app_uses_env_override(tmp_path, monkeypatch, plain):
	target = tmp_path / "custom" / "app.properties"
	monkeypatch.setenv("PLAIN_CONFIG", str(target))
	mgr = ConfigManager.for_app("demo", "app.properties", plain, env_var="PLAIN_CONFIG")
	assert mgr.path == target.resolve()

	mgr.deserialize_or_create()
	assert target.exists()


def test_for_app_project_directory(tmp_path, plain):
	mgr = ConfigManager.for_app("demo", "app.properties", plain, prefer="project", project_root=tmp_path)
	assert mgr.path == (tmp_path / "demo" / "configs" / "app.properties").resolve()


def test_describe_and_repr(tmp_path, configurations):
	mgr = ConfigManager(tmp_path / "c.properties", configurations)
	text = mgr.describe()
	assert "STATIC_SHORT (Int16, static) = 0x04" in text
	assert "IGNORED_FIELD (Unsupported, static): ignored" in text
	assert "instanceInt (Int32, instance): no instance" in text
	assert "mode=static" in repr(mgr)
	assert "missing" in str(mgr)


def test_rejects_foreign_instance(tmp_path, configurations, plain):
	with pytest.raises(TypeError):
		ConfigManager(tmp_path / "c.properties", configurations, plain())
