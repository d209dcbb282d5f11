"""Writes the aggregated metadata artifact."""

import base64
import logging
import os
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.exceptions import ArtifactWriteError
from ..core.models import AggregationResult, ConfigurationMetadata
from ..merging.marshaller import JsonMarshaller
from ..merging.whitelist import dump_whitelist
from ..sources.enumerator import LEGACY_WHITELIST_PATH, METADATA_PATH, WHITELIST_PATH


logger = logging.getLogger(__name__)

ENCODED_METADATA_KEY = "spring.configuration.metadata.encoded"


@dataclass
class EmittedArtifact:
    """Serialized content of an artifact, before it is written."""
    metadata_bytes: bytes
    whitelist_bytes: bytes

    def entries(self, include_legacy_whitelist: bool = True) -> List[Tuple[str, bytes]]:
        """Archive entries in write order: metadata, whitelist, legacy whitelist."""
        entries = [
            (METADATA_PATH, self.metadata_bytes),
            (WHITELIST_PATH, self.whitelist_bytes),
        ]
        if include_legacy_whitelist:
            entries.append((LEGACY_WHITELIST_PATH, self.whitelist_bytes))
        return entries


class ArtifactEmitter:
    """Serializes an aggregation result and writes it as a jar."""

    def __init__(self, marshaller: Optional[JsonMarshaller] = None,
                 write_legacy_whitelist: bool = True):
        self.marshaller = marshaller or JsonMarshaller()
        self.write_legacy_whitelist = write_legacy_whitelist
        self.logger = logging.getLogger(__name__)

    def emit(self, result: AggregationResult) -> EmittedArtifact:
        return EmittedArtifact(
            metadata_bytes=self.marshaller.write(result.metadata),
            whitelist_bytes=dump_whitelist(result.whitelist),
        )

    def write_archive(self, result: AggregationResult, output_path: Path) -> Path:
        """Write the metadata jar to ``output_path``.

        The archive is assembled next to its destination and moved into
        place once complete.
        """
        artifact = self.emit(result)
        entries = artifact.entries(self.write_legacy_whitelist)
        _write_atomically(output_path, lambda tmp: _write_zip(tmp, entries))
        self.logger.info(f"Wrote metadata artifact {output_path.resolve()}")
        return output_path

    def encode_metadata(self, metadata: ConfigurationMetadata) -> str:
        """Base64 text of the serialized metadata document."""
        return base64.b64encode(self.marshaller.write(metadata)).decode('ascii')

    def write_encoded_metadata(self, metadata: ConfigurationMetadata, output_path: Path) -> Path:
        """Write a properties file holding the base64 metadata on a single line."""
        line = f"{ENCODED_METADATA_KEY}={self.encode_metadata(metadata)}\n"
        _write_atomically(output_path, lambda tmp: tmp.write_bytes(line.encode('ascii')))
        self.logger.info(f"Wrote encoded metadata {output_path.resolve()}")
        return output_path


def _write_zip(path: Path, entries: List[Tuple[str, bytes]]) -> None:
    with zipfile.ZipFile(path, 'w', zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries:
            archive.writestr(name, content)


def _write_atomically(output_path: Path, writer) -> None:
    tmp = output_path.with_name(output_path.name + '.tmp')
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        writer(tmp)
        os.replace(tmp, output_path)
    except OSError as e:
        raise ArtifactWriteError(f"Error writing to file {output_path}: {e}", path=str(output_path)) from e
    finally:
        if tmp.exists():
            tmp.unlink()
