"""Merges whitelist property files with per-key token-set union."""

import logging
from typing import BinaryIO, Iterable, Optional, Union

import javaproperties

from ..core.models import Whitelist, WHITELIST_KEYS
from ..sources.base import ClasspathResource


logger = logging.getLogger(__name__)

WHITELIST_COMMENT = "Describes whitelisted properties for this app"


def load_whitelist(source: Union[bytes, str, BinaryIO]) -> Whitelist:
    """Parse ``.properties`` content (ISO-8859-1, as ``java.util.Properties``)."""
    if hasattr(source, 'read'):
        source = source.read()
    if isinstance(source, bytes):
        source = source.decode('latin-1')
    return Whitelist(entries=javaproperties.loads(source))


def dump_whitelist(whitelist: Whitelist, comment: Optional[str] = WHITELIST_COMMENT) -> bytes:
    """Serialize a whitelist to ``.properties`` bytes."""
    text = javaproperties.dumps(whitelist.entries, comments=comment, timestamp=False)
    return text.encode('latin-1')


def union_tokens(*values: Optional[str]) -> str:
    """Join the distinct tokens of comma-delimited values, first-seen first."""
    tokens = []
    for value in values:
        for token in Whitelist.split_tokens(value):
            if token not in tokens:
                tokens.append(token)
    return ",".join(tokens)


class WhitelistMerger:
    """Combines whitelist files found across the classpath.

    The file being merged is the base of the result: its recognized keys
    are unioned with the current ones and its other keys are kept verbatim.
    Unrecognized keys that only the current whitelist carries are dropped.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.documents_merged = 0
        self.documents_skipped = 0

    def merge(self, current: Whitelist, incoming: Whitelist, origin: Optional[str] = None) -> Whitelist:
        """Merge ``incoming`` into ``current`` and return the result."""
        if not incoming.is_recognized():
            self.logger.warning(
                f"Ignoring whitelist {origin or '<unknown>'}: it defines neither "
                f"{' nor '.join(WHITELIST_KEYS)}"
            )
            self.documents_skipped += 1
            return current

        entries = dict(incoming.entries)
        for key in WHITELIST_KEYS:
            if key in current.entries or key in incoming.entries:
                entries[key] = union_tokens(current.entries.get(key), incoming.entries.get(key))

        self.documents_merged += 1
        return Whitelist(entries=entries)

    def merge_resource(self, current: Whitelist, resource: ClasspathResource) -> Whitelist:
        self.logger.debug(f"Merging whitelist from {resource.root}")
        return self.merge(current, load_whitelist(resource.read()), origin=resource.location)

    def merge_all(self, resources: Iterable[ClasspathResource],
                  seed: Optional[Whitelist] = None) -> Whitelist:
        """Merge whitelist files pairwise in order, starting from ``seed`` or empty."""
        whitelist = seed if seed is not None else Whitelist()
        for resource in resources:
            whitelist = self.merge_resource(whitelist, resource)
        return whitelist
