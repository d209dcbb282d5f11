"""
scs-metadata: configuration metadata tooling for Spring Cloud Stream apps.

This package gathers Spring Boot configuration metadata and whitelist files
from a build classpath, merges them into a single metadata artifact and
documents the resulting properties.
"""

__version__ = "0.1.0"

from .core.models import ConfigurationMetadata, ConfigurationItem, ItemHint, Whitelist, MetadataFilter
from .core.aggregator import MetadataAggregator
from .core.config import Config

# For convenient imports
from .cli.main import main as cli_main

__all__ = [
    "ConfigurationMetadata",
    "ConfigurationItem",
    "ItemHint",
    "Whitelist",
    "MetadataFilter",
    "MetadataAggregator",
    "Config",
    "cli_main",
]
