"""Reads and writes the Spring Boot configuration metadata JSON format."""

import json
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Union

from ..core.exceptions import MetadataParseError
from ..core.models import (
    ConfigurationItem,
    ConfigurationMetadata,
    ItemDeprecation,
    ItemHint,
    ItemType,
    ValueHint,
    ValueProvider,
)


logger = logging.getLogger(__name__)


class JsonMarshaller:
    """Converts between metadata JSON documents and :class:`ConfigurationMetadata`.

    The layout follows the Spring Boot schema: top-level ``groups``,
    ``properties`` and ``hints`` arrays with camelCase field names.
    """

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def read(self, source: Union[bytes, str, BinaryIO], origin: Optional[str] = None) -> ConfigurationMetadata:
        """Parse a metadata document.

        Raises:
            MetadataParseError: if the content is not a well-formed metadata document.
        """
        if hasattr(source, 'read'):
            source = source.read()
        if isinstance(source, bytes):
            try:
                source = source.decode('utf-8')
            except UnicodeDecodeError as e:
                raise MetadataParseError(f"Metadata is not valid UTF-8: {e}", source=origin) from e

        if not source.strip():
            raise MetadataParseError("Metadata document is empty", source=origin)

        try:
            data = json.loads(source)
        except json.JSONDecodeError as e:
            raise MetadataParseError(
                f"Failed to parse metadata as JSON: {e.msg}", source=origin, line_number=e.lineno
            ) from e

        if not isinstance(data, dict):
            raise MetadataParseError("Metadata document must be a JSON object", source=origin)

        metadata = ConfigurationMetadata()
        for entry in self._array(data, 'groups', origin):
            metadata.add_item(self._read_item(entry, ItemType.GROUP, origin))
        for entry in self._array(data, 'properties', origin):
            metadata.add_item(self._read_item(entry, ItemType.PROPERTY, origin))
        for entry in self._array(data, 'hints', origin):
            metadata.add_hint(self._read_hint(entry, origin))
        return metadata

    def write(self, metadata: ConfigurationMetadata) -> bytes:
        """Serialize metadata to UTF-8 encoded JSON."""
        document = {
            'groups': [self._item_to_json(item) for item in metadata.groups()],
            'properties': [self._item_to_json(item) for item in metadata.properties()],
            'hints': [self._hint_to_json(hint) for hint in metadata.hints],
        }
        return json.dumps(document, indent=self.indent, ensure_ascii=False).encode('utf-8')

    def _array(self, data: Dict[str, Any], key: str, origin: Optional[str]) -> List[Dict[str, Any]]:
        entries = data.get(key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            raise MetadataParseError(f"'{key}' must be a JSON array", source=origin)
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get('name'), str):
                raise MetadataParseError(f"Every entry of '{key}' must be an object with a name", source=origin)
        return entries

    def _read_item(self, entry: Dict[str, Any], item_type: ItemType, origin: Optional[str]) -> ConfigurationItem:
        deprecation = None
        if isinstance(entry.get('deprecation'), dict):
            deprecation = ItemDeprecation(
                level=entry['deprecation'].get('level'),
                reason=entry['deprecation'].get('reason'),
                replacement=entry['deprecation'].get('replacement'),
            )
        elif entry.get('deprecated') is True:
            deprecation = ItemDeprecation()

        return ConfigurationItem(
            name=entry['name'],
            type=entry.get('type'),
            source_type=entry.get('sourceType'),
            description=entry.get('description'),
            default_value=entry.get('defaultValue'),
            item_type=item_type,
            source_method=entry.get('sourceMethod'),
            deprecation=deprecation,
        )

    def _read_hint(self, entry: Dict[str, Any], origin: Optional[str]) -> ItemHint:
        values = []
        for value in entry.get('values') or []:
            if not isinstance(value, dict) or 'value' not in value:
                raise MetadataParseError(f"Invalid value hint for '{entry['name']}'", source=origin)
            values.append(ValueHint(value=value['value'], description=value.get('description')))

        providers = []
        for provider in entry.get('providers') or []:
            if not isinstance(provider, dict) or not isinstance(provider.get('name'), str):
                raise MetadataParseError(f"Invalid value provider for '{entry['name']}'", source=origin)
            providers.append(ValueProvider(name=provider['name'], parameters=provider.get('parameters') or {}))

        return ItemHint(name=entry['name'], values=values, providers=providers)

    def _item_to_json(self, item: ConfigurationItem) -> Dict[str, Any]:
        data: Dict[str, Any] = {'name': item.name}
        optional_fields = [
            ('type', item.type),
            ('description', item.description),
            ('sourceType', item.source_type),
            ('sourceMethod', item.source_method),
            ('defaultValue', item.default_value),
        ]
        for key, value in optional_fields:
            if value is not None:
                data[key] = value

        if item.deprecation is not None:
            data['deprecated'] = True
            deprecation = item.deprecation.model_dump(exclude_none=True)
            if deprecation:
                data['deprecation'] = deprecation
        return data

    def _hint_to_json(self, hint: ItemHint) -> Dict[str, Any]:
        data: Dict[str, Any] = {'name': hint.name}
        if hint.values:
            data['values'] = [value.model_dump(exclude_none=True) for value in hint.values]
        if hint.providers:
            providers = []
            for provider in hint.providers:
                provider_data: Dict[str, Any] = {'name': provider.name}
                if provider.parameters:
                    provider_data['parameters'] = provider.parameters
                providers.append(provider_data)
            data['providers'] = providers
        return data
