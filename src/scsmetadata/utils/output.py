"""Output formatting utilities."""

import json

from ..core.models import AggregationResult, OutputFormat, CONFIGURATION_PROPERTIES_CLASSES, CONFIGURATION_PROPERTIES_NAMES
from ..core.config import OutputConfig
from ..merging.marshaller import JsonMarshaller
from ..output.documentation import nice_type, nice_default


class OutputFormatter:
    """Formats aggregation results for the console."""

    def __init__(self, config: OutputConfig):
        self.config = config

    def format_result(self, result: AggregationResult) -> str:
        """Format aggregation result according to configuration."""
        if self.config.format == OutputFormat.JSON:
            return self._format_json(result)
        else:  # Default to table
            return self._format_table(result)

    def format_summary(self, result: AggregationResult) -> str:
        metadata = result.metadata
        return (
            f"Scanned {result.roots_scanned} classpath element(s): "
            f"{result.metadata_documents} metadata document(s), "
            f"{result.whitelist_documents} whitelist(s), "
            f"{len(metadata.groups())} groups, {len(metadata.properties())} properties, "
            f"{len(metadata.hints)} hints"
        )

    def _format_table(self, result: AggregationResult) -> str:
        """Format as a human-readable table."""
        output = []

        # Header
        output.append("Configuration Metadata")
        output.append("=" * 50)
        output.append(self.format_summary(result))
        output.append("")

        properties = result.metadata.properties()
        if properties:
            name_width = max(len(item.name) for item in properties)
            output.append("Properties:")
            output.append("-" * 20)
            for item in properties:
                output.append(
                    f"  {item.name.ljust(name_width)}  {nice_type(item.type)}"
                    f" (default: {nice_default(item.default_value)})"
                )
                if self.config.verbose and item.description:
                    # Truncate long descriptions
                    desc = item.description[:200] + "..." if len(item.description) > 200 else item.description
                    output.append(f"      {desc}")
            output.append("")
        else:
            output.append("No configuration properties found.")
            output.append("")

        if result.metadata.hints:
            output.append("Hints:")
            output.append("-" * 20)
            for hint in result.metadata.hints:
                values = ", ".join(str(value.value) for value in hint.values)
                output.append(f"  {hint.name}: {values}")
            output.append("")

        output.append("Whitelist:")
        output.append("-" * 20)
        for key in (CONFIGURATION_PROPERTIES_CLASSES, CONFIGURATION_PROPERTIES_NAMES):
            tokens = sorted(result.whitelist.tokens(key))
            output.append(f"  {key}: {', '.join(tokens) if tokens else '<none>'}")

        return "\n".join(output)

    def _format_json(self, result: AggregationResult) -> str:
        """Format as JSON."""
        data = {
            'metadata': json.loads(JsonMarshaller().write(result.metadata)),
            'whitelist': result.whitelist.entries,
        }
        return json.dumps(data, indent=2, default=str)
