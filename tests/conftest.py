# tests/conftest.py

from __future__ import annotations

import math
from typing import Annotated, ClassVar, List

import pytest

from propconf.fields import Comment, Float32, Ignore, Int16, config_comments


def build_configurations() -> type:
	"""A fresh settings class, so every test mutates its own static fields."""

	@config_comments("This is a top-level", "multiline comment.")
	class Configurations:
		STATIC_INT: ClassVar[Annotated[int, Comment("This is a field-level single-line comment.")]] = 42
		STATIC_SHORT: ClassVar[Annotated[Int16, Comment("This is a field-level"), Comment("multi-line comment.")]] = 4
		STATIC_FLOAT: ClassVar[Float32] = 3.14
		STATIC_DOUBLE: ClassVar[float] = math.sqrt(2)
		STATIC_BOOL: ClassVar[bool] = True
		IGNORED_FIELD: ClassVar[Annotated[str, Ignore]] = ":O"
		STATIC_INT_ARRAYLIST: ClassVar[List[int]] = [2, 4, 6, 8, 10]
		STATIC_STRING_ARRAYLIST: ClassVar[List[str]] = ["hello", "world"]

		instanceInt: Annotated[int, Comment("This is a field-level single-line comment.")] = 42
		instanceShort: Int16 = 4
		instanceFloat: Float32 = 3.14
		instanceDouble: float = math.sqrt(2)
		instanceBool: bool = True
		instanceIgnoredField: Annotated[str, Ignore] = "hello"
		instanceIntArrayList: List[int] = [2, 4, 6, 8, 10]
		instanceStringArrayList: List[str] = ["hello", "beautiful", "world"]

	return Configurations


def build_plain() -> type:
	"""Static-only settings without any comments."""

	class Plain:
		STATIC_INT: ClassVar[int] = 42
		STATIC_SHORT: ClassVar[Int16] = 4
		STATIC_FLOAT: ClassVar[Float32] = 3.14
		STATIC_DOUBLE: ClassVar[float] = math.sqrt(2)
		STATIC_BOOL: ClassVar[bool] = True
		STATIC_INT_ARRAYLIST: ClassVar[List[int]] = [2, 4, 6, 8, 10]
		STATIC_STRING_ARRAYLIST: ClassVar[List[str]] = ["hello", "world"]

	return Plain


STATIC_CONTENTS = """\
# This is a top-level
# multiline comment.

# This is a field-level single-line comment.
STATIC_INT=42
# This is a field-level
# multi-line comment.
STATIC_SHORT=0x04
STATIC_FLOAT=3.140000
STATIC_DOUBLE=1.414214
STATIC_BOOL=true
STATIC_INT_ARRAYLIST=[2, 4, 6, 8, 10]
STATIC_STRING_ARRAYLIST=[hello, world]
"""

INSTANCE_CONTENTS = """\
# This is a field-level single-line comment.
instanceInt=42
instanceShort=0x04
instanceFloat=3.140000
instanceDouble=1.414214
instanceBool=true
instanceIntArrayList=[2, 4, 6, 8, 10]
instanceStringArrayList=[hello, beautiful, world]
"""


@pytest.fixture()
def configurations() -> type:
	return build_configurations()


@pytest.fixture()
def plain() -> type:
	return build_plain()
