"""Narrows an aggregate down to allow-listed names and source types."""

import logging
from typing import Optional, Set

from ..core.models import ConfigurationMetadata, MetadataFilter


logger = logging.getLogger(__name__)


def filter_metadata(metadata: ConfigurationMetadata,
                    metadata_filter: Optional[MetadataFilter]) -> ConfigurationMetadata:
    """Keep the items whose name or source type is allow-listed.

    An absent or empty filter returns ``metadata`` itself. Hints are kept
    only for names of retained items.
    """
    if metadata_filter is None or metadata_filter.is_empty():
        return metadata

    filtered = ConfigurationMetadata()
    kept_names: Set[str] = set()

    for item in metadata.items:
        name_match = bool(item.name and item.name.strip()) and item.name in metadata_filter.names
        source_type_match = (
            bool(item.source_type and item.source_type.strip())
            and item.source_type in metadata_filter.source_types
        )
        if name_match or source_type_match:
            filtered.add_item(item)
            kept_names.add(item.name)

    for hint in metadata.hints:
        if hint.name in kept_names:
            filtered.add_hint(hint)

    logger.debug(
        f"Filtered metadata from {len(metadata.items)} to {len(filtered.items)} items "
        f"and {len(metadata.hints)} to {len(filtered.hints)} hints"
    )
    return filtered
