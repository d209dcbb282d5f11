"""Configuration management for scs-metadata."""

import os
import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from .models import MetadataFilter, OutputFormat


def _classpath_from_env() -> List[Path]:
    value = os.getenv('SCSMETADATA_CLASSPATH')
    if not value:
        return []
    return [Path(element) for element in value.split(os.pathsep) if element]


class FilterConfig(BaseModel):
    """Allow-lists for the inlined (container image) metadata."""

    names: List[str] = Field(default_factory=list)
    source_types: List[str] = Field(default_factory=list)

    def to_filter(self) -> MetadataFilter:
        return MetadataFilter(names=set(self.names), source_types=set(self.source_types))


class AggregationConfig(BaseModel):
    """Configuration for metadata aggregation."""

    # Artifact naming
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    classifier: str = "metadata"
    output_directory: Path = Field(
        default_factory=lambda: Path(os.getenv('SCSMETADATA_OUTPUT_DIR', 'target'))
    )

    # Inputs, in lookup order; owned directories come first
    owned_directories: List[Path] = Field(default_factory=list)
    classpath: List[Path] = Field(default_factory=_classpath_from_env)

    # Emission
    write_legacy_whitelist: bool = True
    container_image_metadata: bool = False
    encoded_metadata_file: str = "spring-configuration-metadata-encoded.properties"

    # Enum hints
    enum_hints: bool = True
    known_enums: Dict[str, List[str]] = Field(default_factory=dict)
    type_cache_size: int = Field(default=1024, ge=16)

    @field_validator('classifier')
    @classmethod
    def validate_classifier(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("classifier must not be blank")
        return v.strip()

    def effective_classpath(self) -> List[Path]:
        return list(self.owned_directories) + list(self.classpath)

    def artifact_path(self) -> Path:
        if self.artifact_id:
            parts = [self.artifact_id, self.version, self.classifier]
            name = "-".join(part for part in parts if part)
        else:
            name = self.classifier
        return self.output_directory / f"{name}.jar"

    def encoded_metadata_path(self) -> Path:
        return self.output_directory / self.encoded_metadata_file


class DocumentationConfig(BaseModel):
    """Configuration for README documentation generation."""

    readme: Path = Path("README.adoc")
    whitelisted_only: bool = True


class OutputConfig(BaseModel):
    """Configuration for console output."""

    format: OutputFormat = OutputFormat.TABLE
    verbose: bool = False
    quiet: bool = False


class Config(BaseModel):
    """Main configuration class for scs-metadata."""

    # Sub-configurations
    aggregation: AggregationConfig = Field(default_factory=AggregationConfig)
    filter: FilterConfig = Field(default_factory=FilterConfig)
    documentation: DocumentationConfig = Field(default_factory=DocumentationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Global settings
    log_level: str = "INFO"

    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file or a pyproject.toml."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.name == "pyproject.toml":
            return cls.load_from_pyproject(config_path)

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def load_from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Load configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def get_default_config(cls) -> "Config":
        """Get default configuration."""
        # Load environment variables
        load_dotenv()
        return cls()

    @classmethod
    def find_config_file(cls, start_path: Optional[Path] = None) -> Optional[Path]:
        """Find configuration file in current directory or parent directories."""
        if start_path is None:
            start_path = Path.cwd()

        config_names = [
            ".scsmetadata.yaml",
            ".scsmetadata.yml",
            "scsmetadata.yaml",
            "scsmetadata.yml",
            "pyproject.toml"  # Look for [tool.scsmetadata] section
        ]

        current_path = start_path.resolve()

        # Search up the directory tree
        while current_path != current_path.parent:
            for config_name in config_names:
                config_file = current_path / config_name
                if config_file.exists():
                    if config_name == "pyproject.toml":
                        if cls._has_scsmetadata_config(config_file):
                            return config_file
                    else:
                        return config_file
            current_path = current_path.parent

        return None

    @classmethod
    def _has_scsmetadata_config(cls, pyproject_path: Path) -> bool:
        """Check if pyproject.toml has scsmetadata configuration."""
        import tomllib

        try:
            with open(pyproject_path, 'rb') as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return False
        return "tool" in data and "scsmetadata" in data["tool"]

    @classmethod
    def load_from_pyproject(cls, pyproject_path: Path) -> "Config":
        """Load configuration from pyproject.toml file."""
        import tomllib

        with open(pyproject_path, 'rb') as f:
            data = tomllib.load(f)

        if "tool" not in data or "scsmetadata" not in data["tool"]:
            raise ValueError("No [tool.scsmetadata] section found in pyproject.toml")

        config_data = data["tool"]["scsmetadata"]
        return cls(**config_data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self._prepare_for_yaml(self.model_dump())

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    def _prepare_for_yaml(self, data: Any) -> Any:
        """Prepare data for YAML serialization."""
        if isinstance(data, dict):
            return {k: self._prepare_for_yaml(v) for k, v in data.items()}
        elif isinstance(data, (list, tuple, set)):
            return [self._prepare_for_yaml(item) for item in data]
        elif isinstance(data, Path):
            return str(data)
        elif hasattr(data, 'value'):  # Enum
            return data.value
        else:
            return data

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        aggregation = self.aggregation
        if not aggregation.effective_classpath():
            issues.append("Classpath is empty")

        for element in aggregation.effective_classpath():
            if not element.exists():
                issues.append(f"Classpath element does not exist: {element}")

        if aggregation.output_directory.exists() and not aggregation.output_directory.is_dir():
            issues.append(f"Output directory is not a directory: {aggregation.output_directory}")

        if aggregation.container_image_metadata and self.filter.to_filter().is_empty():
            issues.append("Container image metadata is enabled without a filter; all metadata will be inlined")

        for type_name, constants in aggregation.known_enums.items():
            if not constants:
                issues.append(f"Known enum {type_name} has no constants")

        return issues

    def merge_with_cli_args(self, **cli_args) -> "Config":
        """Merge configuration with CLI arguments."""
        # Create a copy of current config
        config_dict = self.model_dump()

        # Map CLI arguments to config structure
        cli_mapping = {
            'verbose': 'output.verbose',
            'quiet': 'output.quiet',
            'format': 'output.format',
            'artifact_id': 'aggregation.artifact_id',
            'version': 'aggregation.version',
            'classifier': 'aggregation.classifier',
            'output_directory': 'aggregation.output_directory',
            'classpath': 'aggregation.classpath',
            'container_image_metadata': 'aggregation.container_image_metadata',
            'write_legacy_whitelist': 'aggregation.write_legacy_whitelist',
            'enum_hints': 'aggregation.enum_hints',
            'name_filters': 'filter.names',
            'source_type_filters': 'filter.source_types',
            'readme': 'documentation.readme',
        }

        for cli_key, cli_value in cli_args.items():
            if cli_value is not None and cli_key in cli_mapping:
                config_path = cli_mapping[cli_key].split('.')
                current = config_dict

                # Navigate to the right location in config dict
                for path_part in config_path[:-1]:
                    current = current[path_part]

                # Set the value
                current[config_path[-1]] = cli_value

        return Config(**config_dict)
