"""Enum hint discovery for scs-metadata."""

from .resolver import (
    EnumDescriptor,
    TypeResolver,
    MappingTypeResolver,
    ChainedTypeResolver,
    candidate_class_names,
)
from .classfile import ClassFileTypeResolver, ClassFileInfo, parse_class_file
from .augmenter import EnumHintAugmenter

__all__ = [
    "EnumDescriptor",
    "TypeResolver",
    "MappingTypeResolver",
    "ChainedTypeResolver",
    "candidate_class_names",
    "ClassFileTypeResolver",
    "ClassFileInfo",
    "parse_class_file",
    "EnumHintAugmenter",
]
