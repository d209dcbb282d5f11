"""Enumerates well-known resources across an ordered classpath."""

import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .base import ClasspathRoot, ClasspathResource


logger = logging.getLogger(__name__)

METADATA_PATH = "META-INF/spring-configuration-metadata.json"
WHITELIST_PATH = "META-INF/dataflow-configuration-metadata-whitelist.properties"
LEGACY_WHITELIST_PATH = "META-INF/spring-configuration-metadata-whitelist.properties"


class ClasspathEnumerator:
    """Walks classpath roots in order and yields the resources they hold.

    Each yielded resource is open only until the iteration advances, so at
    most one archive or file handle is held at any time.
    """

    def __init__(self, classpath: Iterable[Union[str, Path]]):
        self.classpath: List[Path] = [Path(element) for element in classpath]
        self.logger = logging.getLogger(__name__)

    def roots(self) -> Iterator[ClasspathRoot]:
        """Yield the roots that exist on disk, in classpath order."""
        for element in self.classpath:
            root = ClasspathRoot.for_path(element)
            if root is not None:
                yield root

    def iter_resources(self, *candidates: str) -> Iterator[ClasspathResource]:
        """Yield, per root, the first of ``candidates`` found in it.

        Later candidates are only probed in a root that lacks the earlier
        ones. Roots holding none of them are skipped.
        """
        for root in self.roots():
            with root.open_resource(*candidates) as resource:
                if resource is not None:
                    self.logger.debug(f"Found {resource.path} in {root.path}")
                    yield resource

    def metadata_resources(self) -> Iterator[ClasspathResource]:
        return self.iter_resources(METADATA_PATH)

    def whitelist_resources(self) -> Iterator[ClasspathResource]:
        return self.iter_resources(WHITELIST_PATH, LEGACY_WHITELIST_PATH)

    def find_first(self, resource_path: str) -> Optional[bytes]:
        """Return the content of the first root holding ``resource_path``."""
        for resource in self.iter_resources(resource_path):
            return resource.read()
        return None
