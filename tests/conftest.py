"""Test configuration."""

import tempfile
from pathlib import Path

import pytest

from builders import METADATA_PATH, WHITELIST_PATH, class_file, metadata_json, write_jar


# Test fixtures
@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def string_property():
    return {
        "name": "a.b",
        "type": "java.lang.String",
        "sourceType": "com.example.AProperties",
        "description": "The A property.",
        "defaultValue": "hello",
    }


@pytest.fixture
def enum_property():
    return {
        "name": "c.d",
        "type": "com.example.MyEnum",
        "sourceType": "com.example.CProperties",
        "description": "The C property.",
    }


@pytest.fixture
def two_jar_classpath(temp_dir, string_property, enum_property):
    """Two dependency jars, each with one property and a names whitelist."""
    first = write_jar(temp_dir / "lib" / "first.jar", {
        METADATA_PATH: metadata_json(properties=[string_property]),
        WHITELIST_PATH: "configuration-properties.names=a.b\n",
    })
    second = write_jar(temp_dir / "lib" / "second.jar", {
        METADATA_PATH: metadata_json(properties=[enum_property]),
        WHITELIST_PATH: "configuration-properties.names=c.d\n",
        "com/example/MyEnum.class": class_file("com.example.MyEnum", ["A", "B", "C"]),
    })
    return [first, second]
