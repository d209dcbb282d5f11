"""Merge engines for configuration metadata and whitelists."""

from .marshaller import JsonMarshaller
from .metadata import MetadataMerger
from .whitelist import WhitelistMerger, load_whitelist, dump_whitelist, union_tokens
from .filter import filter_metadata

__all__ = [
    "JsonMarshaller",
    "MetadataMerger",
    "WhitelistMerger",
    "load_whitelist",
    "dump_whitelist",
    "union_tokens",
    "filter_metadata",
]
