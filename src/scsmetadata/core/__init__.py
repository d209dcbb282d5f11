"""Core module for scs-metadata."""

from .models import (
    ItemType,
    OutputFormat,
    ItemDeprecation,
    ConfigurationItem,
    ValueHint,
    ValueProvider,
    ItemHint,
    ConfigurationMetadata,
    Whitelist,
    MetadataFilter,
    AggregationResult,
    CONFIGURATION_PROPERTIES_CLASSES,
    CONFIGURATION_PROPERTIES_NAMES,
)

from .exceptions import (
    MetadataError,
    ArchiveReadError,
    MetadataParseError,
    ArtifactWriteError,
    TypeResolutionError,
    DocumentationError,
    AggregationError,
)

from .config import (
    Config,
    AggregationConfig,
    FilterConfig,
    DocumentationConfig,
    OutputConfig,
)

from .aggregator import MetadataAggregator, AggregationReport

__all__ = [
    # Models
    "ItemType",
    "OutputFormat",
    "ItemDeprecation",
    "ConfigurationItem",
    "ValueHint",
    "ValueProvider",
    "ItemHint",
    "ConfigurationMetadata",
    "Whitelist",
    "MetadataFilter",
    "AggregationResult",
    "CONFIGURATION_PROPERTIES_CLASSES",
    "CONFIGURATION_PROPERTIES_NAMES",
    # Errors
    "MetadataError",
    "ArchiveReadError",
    "MetadataParseError",
    "ArtifactWriteError",
    "TypeResolutionError",
    "DocumentationError",
    "AggregationError",
    # Configuration
    "Config",
    "AggregationConfig",
    "FilterConfig",
    "DocumentationConfig",
    "OutputConfig",
    # Aggregator
    "MetadataAggregator",
    "AggregationReport",
]
