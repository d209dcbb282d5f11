"""Type resolution capability used to discover enum constants."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence


logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = frozenset([
    "boolean", "byte", "char", "short", "int", "long", "float", "double", "void",
])


@dataclass
class EnumDescriptor:
    """An enumeration type and its constant names in declaration order."""
    type_name: str
    constants: List[str] = field(default_factory=list)


class TypeResolver(ABC):
    """Answers whether a type name denotes an enum, and with which constants."""

    @abstractmethod
    def resolve(self, type_name: str) -> Optional[EnumDescriptor]:
        """Return the enum descriptor for ``type_name``, or ``None``.

        ``None`` covers unknown types and types that are not enums.
        Implementations may raise :class:`TypeResolutionError` when a type
        exists but cannot be introspected.
        """
        pass


def candidate_class_names(type_name: Optional[str]) -> List[str]:
    """Binary class names a declared type may refer to.

    Nested types may be written ``Outer.Inner`` or ``Outer$Inner``; the
    dotted form is tried as-is first, then with trailing dots turned into
    ``$`` one at a time, right to left. Generic, array and primitive types
    yield nothing.
    """
    if not type_name:
        return []
    name = type_name.strip()
    if not name or name in PRIMITIVE_TYPES or '<' in name or '[' in name:
        return []

    candidates = [name]
    current = name
    while '.' in current:
        head, _, tail = current.rpartition('.')
        current = f"{head}${tail}"
        candidates.append(current)
    return candidates


class MappingTypeResolver(TypeResolver):
    """Resolves enums from a precomputed ``type name -> constants`` index."""

    def __init__(self, enums: Optional[Dict[str, Sequence[str]]] = None):
        self.enums: Dict[str, List[str]] = {
            name: list(constants) for name, constants in (enums or {}).items()
        }

    def register(self, type_name: str, constants: Iterable[str]) -> None:
        self.enums[type_name] = list(constants)

    def resolve(self, type_name: str) -> Optional[EnumDescriptor]:
        for candidate in candidate_class_names(type_name):
            for name in (candidate, candidate.replace('$', '.')):
                if name in self.enums:
                    return EnumDescriptor(type_name=candidate, constants=list(self.enums[name]))
        return None


class ChainedTypeResolver(TypeResolver):
    """Returns the first answer given by a sequence of resolvers."""

    def __init__(self, resolvers: Iterable[TypeResolver]):
        self.resolvers = list(resolvers)

    def resolve(self, type_name: str) -> Optional[EnumDescriptor]:
        for resolver in self.resolvers:
            descriptor = resolver.resolve(type_name)
            if descriptor is not None:
                return descriptor
        return None
