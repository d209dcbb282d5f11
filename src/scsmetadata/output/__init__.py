"""Output writers for scs-metadata."""

from .artifact import ArtifactEmitter, EmittedArtifact, ENCODED_METADATA_KEY
from .documentation import DocumentationGenerator, nice_type, nice_default, START_MARKER, END_MARKER

__all__ = [
    "ArtifactEmitter",
    "EmittedArtifact",
    "ENCODED_METADATA_KEY",
    "DocumentationGenerator",
    "nice_type",
    "nice_default",
    "START_MARKER",
    "END_MARKER",
]
