"""Enum discovery by reading JVM class files from the classpath."""

import logging
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from cachetools import LRUCache

from ..core.exceptions import MetadataError, TypeResolutionError
from ..sources.base import ArchiveRoot, ClasspathRoot
from .resolver import EnumDescriptor, TypeResolver, candidate_class_names


logger = logging.getLogger(__name__)

CLASS_MAGIC = 0xCAFEBABE
ACC_ENUM = 0x4000

# Constant pool tag -> size of the entry body in bytes (Utf8 is variable)
CONSTANT_UTF8 = 1
CONSTANT_LONG = 5
CONSTANT_DOUBLE = 6
CONSTANT_CLASS = 7
_CONSTANT_SIZES = {
    3: 4,   # Integer
    4: 4,   # Float
    5: 8,   # Long
    6: 8,   # Double
    7: 2,   # Class
    8: 2,   # String
    9: 4,   # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}


@dataclass
class ClassFileInfo:
    """The parts of a class file needed to recognize enums."""
    name: str
    access_flags: int
    super_name: Optional[str] = None
    enum_constants: List[str] = field(default_factory=list)

    @property
    def is_enum(self) -> bool:
        return bool(self.access_flags & ACC_ENUM)


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.offset = 0

    def unpack(self, fmt: str) -> Tuple:
        size = struct.calcsize(fmt)
        if self.offset + size > len(self.data):
            raise TypeResolutionError("Truncated class file")
        values = struct.unpack_from(fmt, self.data, self.offset)
        self.offset += size
        return values

    def u2(self) -> int:
        return self.unpack('>H')[0]

    def u4(self) -> int:
        return self.unpack('>I')[0]

    def skip(self, size: int) -> None:
        if self.offset + size > len(self.data):
            raise TypeResolutionError("Truncated class file")
        self.offset += size

    def take(self, size: int) -> bytes:
        start = self.offset
        self.skip(size)
        return self.data[start:self.offset]


def parse_class_file(data: bytes) -> ClassFileInfo:
    """Parse the header, constant pool and fields of a class file.

    Raises:
        TypeResolutionError: if ``data`` is not a valid class file.
    """
    reader = _Reader(data)
    if reader.u4() != CLASS_MAGIC:
        raise TypeResolutionError("Not a class file (bad magic number)")
    reader.skip(4)  # minor_version, major_version

    utf8: Dict[int, str] = {}
    class_refs: Dict[int, int] = {}
    pool_count = reader.u2()
    index = 1
    while index < pool_count:
        tag = reader.unpack('>B')[0]
        if tag == CONSTANT_UTF8:
            length = reader.u2()
            # Modified UTF-8; close enough for identifiers
            utf8[index] = reader.take(length).decode('utf-8', errors='replace')
        elif tag == CONSTANT_CLASS:
            class_refs[index] = reader.u2()
        elif tag in _CONSTANT_SIZES:
            reader.skip(_CONSTANT_SIZES[tag])
        else:
            raise TypeResolutionError(f"Unknown constant pool tag {tag} at index {index}")
        # Long and Double occupy two slots
        index += 2 if tag in (CONSTANT_LONG, CONSTANT_DOUBLE) else 1

    def class_name(class_index: int) -> Optional[str]:
        name_index = class_refs.get(class_index)
        if name_index is None:
            return None
        return utf8.get(name_index, '').replace('/', '.')

    access_flags = reader.u2()
    this_class = class_name(reader.u2())
    super_class = class_name(reader.u2())
    if this_class is None:
        raise TypeResolutionError("Class file has no this_class entry")

    reader.skip(2 * reader.u2())  # interfaces

    enum_constants = []
    for _ in range(reader.u2()):
        field_flags = reader.u2()
        name_index = reader.u2()
        reader.skip(2)  # descriptor_index
        for _ in range(reader.u2()):
            reader.skip(2)
            reader.skip(reader.u4())
        if field_flags & ACC_ENUM:
            enum_constants.append(utf8.get(name_index, ''))

    return ClassFileInfo(
        name=this_class,
        access_flags=access_flags,
        super_name=super_class,
        enum_constants=enum_constants,
    )


class ClassFileTypeResolver(TypeResolver):
    """Resolves enum types from ``.class`` files on the classpath.

    Archive listings are read once per run; each class file is read at most
    once thanks to a per-resolver cache.
    """

    def __init__(self, classpath: Iterable[Union[str, Path]], cache_size: int = 1024):
        self.classpath = [Path(element) for element in classpath]
        self.logger = logging.getLogger(__name__)
        self._cache: LRUCache = LRUCache(maxsize=cache_size)
        self._roots: Optional[List[Tuple[ClasspathRoot, Optional[Set[str]]]]] = None

    def _index(self) -> List[Tuple[ClasspathRoot, Optional[Set[str]]]]:
        if self._roots is None:
            roots = []
            for element in self.classpath:
                root = ClasspathRoot.for_path(element)
                if root is None:
                    continue
                try:
                    entries = root.entry_names() if isinstance(root, ArchiveRoot) else None
                except MetadataError as e:
                    self.logger.debug(f"Ignoring unreadable classpath element {element}: {e}")
                    continue
                roots.append((root, entries))
            self._roots = roots
        return self._roots

    def _read_class(self, class_name: str) -> Optional[bytes]:
        resource_path = class_name.replace('.', '/') + '.class'
        for root, entries in self._index():
            if entries is not None and resource_path not in entries:
                continue
            with root.open_resource(resource_path) as resource:
                if resource is not None:
                    return resource.read()
        return None

    def _load(self, class_name: str) -> Optional[EnumDescriptor]:
        try:
            data = self._read_class(class_name)
        except MetadataError as e:
            raise TypeResolutionError(f"Cannot read class {class_name}: {e}", type_name=class_name) from e
        if data is None:
            return None

        info = parse_class_file(data)
        if not info.is_enum:
            self.logger.debug(f"{class_name} is not an enum")
            return None
        return EnumDescriptor(type_name=info.name, constants=info.enum_constants)

    def resolve(self, type_name: str) -> Optional[EnumDescriptor]:
        if type_name in self._cache:
            return self._cache[type_name]

        descriptor = None
        for candidate in candidate_class_names(type_name):
            descriptor = self._load(candidate)
            if descriptor is not None:
                break
        self._cache[type_name] = descriptor
        return descriptor
