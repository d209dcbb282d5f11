"""Aggregation pipeline: gather, augment, filter and emit metadata."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import Config
from .exceptions import AggregationError, MetadataError
from .models import AggregationResult, ConfigurationMetadata
from ..hints import ChainedTypeResolver, ClassFileTypeResolver, EnumHintAugmenter, MappingTypeResolver, TypeResolver
from ..merging import JsonMarshaller, MetadataMerger, WhitelistMerger, filter_metadata
from ..output import ArtifactEmitter, DocumentationGenerator
from ..sources import ClasspathEnumerator


logger = logging.getLogger(__name__)


@dataclass
class AggregationReport:
    """What one aggregation run produced."""
    result: AggregationResult
    artifact_path: Path
    encoded_metadata_path: Optional[Path] = None


class MetadataAggregator:
    """Gathers configuration metadata and whitelists from a classpath and emits one artifact.

    Each call to :meth:`gather` starts from an empty aggregate; nothing is
    carried over between runs. Any failure surfaces as a single
    :class:`AggregationError`.
    """

    def __init__(self, config: Optional[Config] = None, resolver: Optional[TypeResolver] = None):
        self.config = config or Config.get_default_config()
        self.logger = logging.getLogger(__name__)

        config_issues = self.config.validate_config()
        if config_issues:
            self.logger.warning(f"Configuration issues: {config_issues}")

        self.classpath: List[Path] = self.config.aggregation.effective_classpath()
        self.marshaller = JsonMarshaller()
        self.resolver = resolver or self._build_resolver()
        self.emitter = ArtifactEmitter(
            marshaller=self.marshaller,
            write_legacy_whitelist=self.config.aggregation.write_legacy_whitelist,
        )

    def _build_resolver(self) -> TypeResolver:
        aggregation = self.config.aggregation
        return ChainedTypeResolver([
            MappingTypeResolver(aggregation.known_enums),
            ClassFileTypeResolver(self.classpath, cache_size=aggregation.type_cache_size),
        ])

    def gather(self) -> AggregationResult:
        """Read and merge all metadata and whitelists on the classpath."""
        enumerator = ClasspathEnumerator(self.classpath)
        metadata_merger = MetadataMerger(self.marshaller)
        whitelist_merger = WhitelistMerger()

        self.logger.info(f"Gathering metadata from {len(self.classpath)} classpath element(s)")
        try:
            metadata = metadata_merger.merge_all(enumerator.metadata_resources())
            whitelist = whitelist_merger.merge_all(enumerator.whitelist_resources())
        except MetadataError as e:
            raise AggregationError(
                f"Exception trying to read metadata from dependencies of project: {e.message}",
                details=e.details,
            ) from e

        result = AggregationResult(
            metadata=metadata,
            whitelist=whitelist,
            roots_scanned=len(self.classpath),
            metadata_documents=metadata_merger.documents_merged,
            whitelist_documents=whitelist_merger.documents_merged,
        )
        self.logger.info(
            f"Merged {result.metadata_documents} metadata document(s) with "
            f"{len(metadata.items)} items and {result.whitelist_documents} whitelist(s)"
        )
        return result

    def augment(self, result: AggregationResult) -> AggregationResult:
        """Add enum value hints when enabled."""
        if self.config.aggregation.enum_hints:
            EnumHintAugmenter(self.resolver).augment(result.metadata)
        return result

    def filtered_metadata(self, result: AggregationResult) -> ConfigurationMetadata:
        return filter_metadata(result.metadata, self.config.filter.to_filter())

    def collect(self) -> AggregationResult:
        """Gather and augment, without writing anything."""
        return self.augment(self.gather())

    def run(self) -> AggregationReport:
        """Run the full pipeline and write the artifact(s)."""
        aggregation = self.config.aggregation
        result = self.collect()

        artifact_path = aggregation.artifact_path()
        encoded_path = aggregation.encoded_metadata_path() if aggregation.container_image_metadata else None
        try:
            self.emitter.write_archive(result, artifact_path)
            if encoded_path is not None:
                try:
                    self.emitter.write_encoded_metadata(self.filtered_metadata(result), encoded_path)
                except MetadataError:
                    artifact_path.unlink(missing_ok=True)
                    raise
        except MetadataError as e:
            raise AggregationError(f"Error writing metadata artifact: {e.message}", details=e.details) from e

        return AggregationReport(result=result, artifact_path=artifact_path, encoded_metadata_path=encoded_path)

    def document(self, readme: Optional[Path] = None) -> Optional[int]:
        """Regenerate the configuration properties section of a README."""
        readme = readme or self.config.documentation.readme
        generator = DocumentationGenerator(
            resolver=self.resolver,
            whitelisted_only=self.config.documentation.whitelisted_only,
        )
        result = self.gather()
        try:
            return generator.document(readme, result)
        except MetadataError as e:
            raise AggregationError(f"Error generating documentation: {e.message}", details=e.details) from e
