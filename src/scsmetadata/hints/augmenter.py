"""Adds value hints for enum-typed properties."""

import logging
from typing import Dict, List

from ..core.exceptions import TypeResolutionError
from ..core.models import ConfigurationMetadata, ItemHint, ValueHint, ValueProvider
from .resolver import TypeResolver


logger = logging.getLogger(__name__)


class EnumHintAugmenter:
    """Synthesizes an :class:`ItemHint` listing the constants of enum-typed properties.

    Every enum-typed property gets its own hint, in item order. Providers
    are accumulated once per type and each hint carries its own copy of
    them.
    """

    def __init__(self, resolver: TypeResolver):
        self.resolver = resolver
        self.logger = logging.getLogger(__name__)

    def augment(self, metadata: ConfigurationMetadata) -> ConfigurationMetadata:
        """Add enum hints to ``metadata`` in place and return it."""
        providers: Dict[str, List[ValueProvider]] = {}
        added = 0

        for item in metadata.properties():
            if not item.type:
                continue
            try:
                descriptor = self.resolver.resolve(item.type)
            except TypeResolutionError as e:
                self.logger.debug(f"Could not resolve type {item.type} of {item.name}: {e}")
                continue
            if descriptor is None:
                continue

            values = [ValueHint(value=constant) for constant in descriptor.constants]

            type_providers = providers.setdefault(item.type, [])
            # Dedup by name; provider equality also compares parameters
            if not any(provider.name == item.type for provider in type_providers):
                type_providers.append(ValueProvider(name=item.type))

            metadata.add_hint(ItemHint(
                name=item.name,
                values=values,
                providers=[provider.model_copy(deep=True) for provider in type_providers],
            ))
            added += 1

        if added:
            self.logger.info(f"Added {added} enum hint(s)")
        return metadata
