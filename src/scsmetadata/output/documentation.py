"""Generates the configuration properties section of an app README."""

import logging
import os
import re
from pathlib import Path
from typing import Any, List, Optional

from ..core.exceptions import DocumentationError, TypeResolutionError
from ..core.models import AggregationResult, ConfigurationItem, MetadataFilter
from ..hints.resolver import TypeResolver
from ..merging.filter import filter_metadata


logger = logging.getLogger(__name__)

START_MARKER = "//tag::configuration-properties[]"
END_MARKER = "//end::configuration-properties[]"

_QUALIFIED_NAME = re.compile(r"[\w$]+(?:[.$][\w$]+)*")


def nice_type(type_name: Optional[str]) -> str:
    """Strip packages and outer classes from a (possibly generic) type name."""
    if type_name is None:
        return "<unknown>"

    def simple(match: "re.Match") -> str:
        return re.split(r"[.$]", match.group(0))[-1]

    shortened = _QUALIFIED_NAME.sub(simple, type_name)
    return re.sub(r"\s*,\s*", ", ", shortened)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_stringify(element) for element in value) + "]"
    return str(value)


def nice_default(default_value: Any) -> str:
    if default_value is None:
        return "<none>"
    if default_value == "":
        return "<empty string>"
    return _stringify(default_value)


def nice_description(item: ConfigurationItem) -> str:
    return item.description if item.description is not None else "<documentation missing>"


class DocumentationGenerator:
    """Rewrites the configuration properties section of an asciidoc README."""

    def __init__(self, resolver: Optional[TypeResolver] = None, whitelisted_only: bool = True):
        self.resolver = resolver
        self.whitelisted_only = whitelisted_only
        self.logger = logging.getLogger(__name__)

    def possible_values(self, item: ConfigurationItem) -> str:
        if self.resolver is None or not item.type:
            return ""
        try:
            descriptor = self.resolver.resolve(item.type)
        except TypeResolutionError as e:
            self.logger.debug(f"Could not resolve type {item.type}: {e}")
            return ""
        if descriptor is None:
            return ""
        return ", possible values: `" + "`,`".join(descriptor.constants) + "`"

    def asciidoc_for(self, item: ConfigurationItem) -> str:
        return "$${}$$:: $${}$$ *($${}$$, default: `$${}$$`{})*".format(
            item.name,
            nice_description(item),
            nice_type(item.type),
            nice_default(item.default_value),
            self.possible_values(item),
        )

    def documented_properties(self, result: AggregationResult) -> List[ConfigurationItem]:
        """Properties to document, sorted by name.

        With ``whitelisted_only``, a non-empty whitelist restricts the
        properties to whitelisted names and classes.
        """
        metadata = result.metadata
        if self.whitelisted_only:
            metadata = filter_metadata(metadata, MetadataFilter(
                names=result.whitelist.names,
                source_types=result.whitelist.classes,
            ))
        return sorted(metadata.properties(), key=lambda item: item.name)

    def render(self, properties: List[ConfigurationItem]) -> List[str]:
        lines = []
        for item in properties:
            self.logger.debug(f"Documenting {item.name}")
            lines.append(self.asciidoc_for(item))
        return lines

    def document(self, readme: Path, result: AggregationResult) -> Optional[int]:
        """Replace the marked section of ``readme``.

        Returns the number of documented properties, or ``None`` when the
        README or its start marker is missing.
        """
        if not readme.exists():
            self.logger.info(f"No {readme.name} file found in {readme.parent}, skipping")
            return None

        lines = readme.read_text(encoding='utf-8').splitlines()
        try:
            start = next(i for i, line in enumerate(lines) if line.startswith(START_MARKER))
        except StopIteration:
            self.logger.info("No documentation section marker found")
            return None
        try:
            end = next(i for i in range(start + 1, len(lines)) if lines[i].startswith(END_MARKER))
        except StopIteration:
            raise DocumentationError(
                f"Missing {END_MARKER} after {START_MARKER} in {readme}", readme=str(readme)
            )

        properties = self.documented_properties(result)
        output = lines[:start + 1] + self.render(properties) + lines[end:]

        tmp = readme.with_name(readme.name + '.tmp')
        try:
            tmp.write_text("\n".join(output) + "\n", encoding='utf-8')
            os.replace(tmp, readme)
        except OSError as e:
            raise DocumentationError(f"Error writing {readme}: {e}", readme=str(readme)) from e
        finally:
            if tmp.exists():
                tmp.unlink()

        self.logger.info(f"Documented {len(properties)} configuration properties")
        return len(properties)
