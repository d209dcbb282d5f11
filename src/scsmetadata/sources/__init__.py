"""Classpath sources for scs-metadata."""

from .base import ClasspathRoot, ClasspathResource, DirectoryRoot, ArchiveRoot
from .enumerator import (
    ClasspathEnumerator,
    METADATA_PATH,
    WHITELIST_PATH,
    LEGACY_WHITELIST_PATH,
)

__all__ = [
    "ClasspathRoot",
    "ClasspathResource",
    "DirectoryRoot",
    "ArchiveRoot",
    "ClasspathEnumerator",
    "METADATA_PATH",
    "WHITELIST_PATH",
    "LEGACY_WHITELIST_PATH",
]
