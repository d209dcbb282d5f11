"""Merges metadata documents from many classpath roots into one aggregate."""

import logging
from typing import Iterable, Optional

from ..core.models import ConfigurationMetadata
from ..sources.base import ClasspathResource
from .marshaller import JsonMarshaller


logger = logging.getLogger(__name__)


class MetadataMerger:
    """Appends every item and hint of each document, in input order."""

    def __init__(self, marshaller: Optional[JsonMarshaller] = None):
        self.marshaller = marshaller or JsonMarshaller()
        self.logger = logging.getLogger(__name__)
        self.documents_merged = 0

    def merge(self, aggregate: ConfigurationMetadata, resource: ClasspathResource) -> ConfigurationMetadata:
        """Parse one document and append it to ``aggregate``."""
        document = self.marshaller.read(resource.read(), origin=resource.location)
        self.logger.debug(
            f"Merging metadata from {resource.root} "
            f"({len(document.items)} items, {len(document.hints)} hints)"
        )
        aggregate.merge(document)
        self.documents_merged += 1
        return aggregate

    def merge_all(self, resources: Iterable[ClasspathResource],
                  aggregate: Optional[ConfigurationMetadata] = None) -> ConfigurationMetadata:
        """Merge documents sequentially, seeding with ``aggregate`` or an empty one."""
        if aggregate is None:
            aggregate = ConfigurationMetadata()
        for resource in resources:
            self.merge(aggregate, resource)
        return aggregate
