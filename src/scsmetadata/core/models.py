"""Core data models for scs-metadata."""

from enum import Enum
from typing import List, Optional, Dict, Any, Set
from pydantic import BaseModel, Field


CONFIGURATION_PROPERTIES_CLASSES = "configuration-properties.classes"
CONFIGURATION_PROPERTIES_NAMES = "configuration-properties.names"

WHITELIST_KEYS = (CONFIGURATION_PROPERTIES_CLASSES, CONFIGURATION_PROPERTIES_NAMES)


class ItemType(str, Enum):
    """Kind of a configuration metadata item."""

    GROUP = "group"
    PROPERTY = "property"


class OutputFormat(str, Enum):
    """Output formats for the inspect command."""

    JSON = "json"
    TABLE = "table"


class ItemDeprecation(BaseModel):
    """Deprecation details of a property."""

    level: Optional[str] = None
    reason: Optional[str] = None
    replacement: Optional[str] = None


class ConfigurationItem(BaseModel):
    """A documented configuration property or group."""

    name: str
    type: Optional[str] = None
    source_type: Optional[str] = None
    description: Optional[str] = None
    default_value: Optional[Any] = None
    item_type: ItemType = ItemType.PROPERTY

    # Groups only
    source_method: Optional[str] = None

    # Properties only
    deprecation: Optional[ItemDeprecation] = None

    def is_property(self) -> bool:
        return self.item_type == ItemType.PROPERTY


class ValueHint(BaseModel):
    """A suggested literal value for a property."""

    value: Any
    description: Optional[str] = None


class ValueProvider(BaseModel):
    """A named value provider reference."""

    name: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class ItemHint(BaseModel):
    """Value hints and providers attached to a property name."""

    name: str
    values: List[ValueHint] = Field(default_factory=list)
    providers: List[ValueProvider] = Field(default_factory=list)


class ConfigurationMetadata(BaseModel):
    """Aggregate of configuration items and hints.

    Merging is append-only: items sharing a name across merged documents
    are kept side by side.
    """

    items: List[ConfigurationItem] = Field(default_factory=list)
    hints: List[ItemHint] = Field(default_factory=list)

    def add_item(self, item: ConfigurationItem) -> None:
        self.items.append(item)

    def add_hint(self, hint: ItemHint) -> None:
        self.hints.append(hint)

    def merge(self, other: "ConfigurationMetadata") -> None:
        """Append all items and hints of another document."""
        for item in other.items:
            self.add_item(item)
        for hint in other.hints:
            self.add_hint(hint)

    def groups(self) -> List[ConfigurationItem]:
        return [item for item in self.items if item.item_type == ItemType.GROUP]

    def properties(self) -> List[ConfigurationItem]:
        return [item for item in self.items if item.item_type == ItemType.PROPERTY]

    def item_names(self) -> List[str]:
        return [item.name for item in self.items]

    def hints_for(self, name: str) -> List[ItemHint]:
        return [hint for hint in self.hints if hint.name == name]

    def is_empty(self) -> bool:
        return not self.items and not self.hints


class Whitelist(BaseModel):
    """Whitelist properties, keyed as in the ``.properties`` file."""

    entries: Dict[str, str] = Field(default_factory=dict)

    @staticmethod
    def split_tokens(value: Optional[str]) -> List[str]:
        """Split a comma-delimited value into trimmed, non-empty, unique tokens."""
        tokens: List[str] = []
        if not value:
            return tokens
        for token in value.split(","):
            token = token.strip()
            if token and token not in tokens:
                tokens.append(token)
        return tokens

    def is_recognized(self) -> bool:
        """Whether at least one of the whitelist keys is present."""
        return any(key in self.entries for key in WHITELIST_KEYS)

    def tokens(self, key: str) -> Set[str]:
        return set(self.split_tokens(self.entries.get(key)))

    @property
    def classes(self) -> Set[str]:
        return self.tokens(CONFIGURATION_PROPERTIES_CLASSES)

    @property
    def names(self) -> Set[str]:
        return self.tokens(CONFIGURATION_PROPERTIES_NAMES)

    def __contains__(self, key: str) -> bool:
        return key in self.entries


class MetadataFilter(BaseModel):
    """Allow-lists used to narrow an aggregate.

    An item is kept when its name is in ``names`` or its source type is in
    ``source_types``.
    """

    names: Set[str] = Field(default_factory=set)
    source_types: Set[str] = Field(default_factory=set)

    def is_empty(self) -> bool:
        return not self.names and not self.source_types


class AggregationResult(BaseModel):
    """Metadata and whitelist gathered from one classpath."""

    metadata: ConfigurationMetadata = Field(default_factory=ConfigurationMetadata)
    whitelist: Whitelist = Field(default_factory=Whitelist)
    roots_scanned: int = 0
    metadata_documents: int = 0
    whitelist_documents: int = 0
