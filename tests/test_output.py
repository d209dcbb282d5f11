"""Test artifact emission and README documentation."""

import base64
import json
import zipfile

import pytest

from scsmetadata.core.exceptions import ArtifactWriteError, DocumentationError
from scsmetadata.core.models import (
    AggregationResult, ConfigurationItem, ConfigurationMetadata, ItemHint, ValueHint, Whitelist,
    CONFIGURATION_PROPERTIES_NAMES,
)
from scsmetadata.hints import MappingTypeResolver
from scsmetadata.merging import load_whitelist
from scsmetadata.output import ArtifactEmitter, DocumentationGenerator, nice_default, nice_type
from scsmetadata.output.artifact import ENCODED_METADATA_KEY
from scsmetadata.output.documentation import END_MARKER, START_MARKER

from builders import LEGACY_WHITELIST_PATH, METADATA_PATH, WHITELIST_PATH


@pytest.fixture
def result():
    metadata = ConfigurationMetadata()
    metadata.add_item(ConfigurationItem(name="a.b", type="java.lang.String", default_value="hello",
                                        description="The A property."))
    metadata.add_item(ConfigurationItem(name="c.d", type="com.example.MyEnum"))
    metadata.add_hint(ItemHint(name="c.d", values=[ValueHint(value="A")]))
    return AggregationResult(
        metadata=metadata,
        whitelist=Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "a.b,c.d"}),
    )


class TestArtifactEmitter:
    """Test writing the metadata jar."""

    def test_archive_entries_in_order(self, temp_dir, result):
        path = ArtifactEmitter().write_archive(result, temp_dir / "target" / "app-1.0-metadata.jar")

        with zipfile.ZipFile(path) as archive:
            assert archive.namelist() == [METADATA_PATH, WHITELIST_PATH, LEGACY_WHITELIST_PATH]
            document = json.loads(archive.read(METADATA_PATH))
            whitelist = load_whitelist(archive.read(WHITELIST_PATH))
            assert archive.read(LEGACY_WHITELIST_PATH) == archive.read(WHITELIST_PATH)

        assert [prop["name"] for prop in document["properties"]] == ["a.b", "c.d"]
        assert document["hints"] == [{"name": "c.d", "values": [{"value": "A"}]}]
        assert whitelist.names == {"a.b", "c.d"}

    def test_legacy_whitelist_can_be_skipped(self, temp_dir, result):
        emitter = ArtifactEmitter(write_legacy_whitelist=False)

        path = emitter.write_archive(result, temp_dir / "app.jar")

        with zipfile.ZipFile(path) as archive:
            assert archive.namelist() == [METADATA_PATH, WHITELIST_PATH]

    def test_no_temporary_file_left(self, temp_dir, result):
        ArtifactEmitter().write_archive(result, temp_dir / "app.jar")

        assert sorted(p.name for p in temp_dir.iterdir()) == ["app.jar"]

    def test_unwritable_destination(self, temp_dir, result):
        """Test that a destination that is a directory raises a write error."""
        destination = temp_dir / "app.jar"
        destination.mkdir()
        (destination / "occupied").write_text("x")

        with pytest.raises(ArtifactWriteError) as exc_info:
            ArtifactEmitter().write_archive(result, destination)

        assert exc_info.value.path == str(destination)
        assert not (temp_dir / "app.jar.tmp").exists()

    def test_encoded_metadata_line(self, temp_dir, result):
        emitter = ArtifactEmitter()

        path = emitter.write_encoded_metadata(result.metadata, temp_dir / "encoded.properties")

        content = path.read_text(encoding="ascii")
        assert content.count("\n") == 1
        key, _, value = content.rstrip("\n").partition("=")
        assert key == ENCODED_METADATA_KEY
        decoded = json.loads(base64.b64decode(value))
        assert [prop["name"] for prop in decoded["properties"]] == ["a.b", "c.d"]


class TestNiceFormatting:
    """Test README value formatting."""

    @pytest.mark.parametrize("type_name,expected", [
        ("java.lang.String", "String"),
        ("java.lang.Class<?>", "Class<?>"),
        ("java.util.Map$Entry<java.lang.String,    java.util.Map<java.lang.Integer,java.util.List<java.lang.Long>>>",
         "Entry<String, Map<Integer, List<Long>>>"),
        ("int", "int"),
        (None, "<unknown>"),
    ])
    def test_nice_type(self, type_name, expected):
        assert nice_type(type_name) == expected

    @pytest.mark.parametrize("default,expected", [
        (None, "<none>"),
        ("", "<empty string>"),
        (True, "true"),
        (42, "42"),
        (["a", "b"], "[a, b]"),
    ])
    def test_nice_default(self, default, expected):
        assert nice_default(default) == expected


class TestDocumentationGenerator:
    """Test regenerating the README properties section."""

    README = (
        "= My App\n"
        "\n"
        "== Options\n"
        f"{START_MARKER}\n"
        "stale line\n"
        f"{END_MARKER}\n"
        "\n"
        "== Footer\n"
    )

    def test_replaces_marked_section(self, temp_dir, result):
        readme = temp_dir / "README.adoc"
        readme.write_text(self.README, encoding="utf-8")
        generator = DocumentationGenerator(MappingTypeResolver({"com.example.MyEnum": ["A", "B", "C"]}))

        count = generator.document(readme, result)

        assert count == 2
        lines = readme.read_text(encoding="utf-8").splitlines()
        start = lines.index(START_MARKER)
        assert lines[start + 1] == (
            "$$a.b$$:: $$The A property.$$ *($$String$$, default: `$$hello$$`)*"
        )
        assert lines[start + 2] == (
            "$$c.d$$:: $$<documentation missing>$$ *($$MyEnum$$, default: `$$<none>$$`"
            ", possible values: `A`,`B`,`C`)*"
        )
        assert lines[start + 3] == END_MARKER
        assert "stale line" not in lines
        assert lines[-1] == "== Footer"

    def test_whitelist_restricts_documented_properties(self, result):
        result.whitelist = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "c.d"})

        documented = DocumentationGenerator().documented_properties(result)

        assert [item.name for item in documented] == ["c.d"]

    def test_properties_sorted_by_name(self):
        metadata = ConfigurationMetadata(items=[ConfigurationItem(name="z"), ConfigurationItem(name="a")])

        documented = DocumentationGenerator(whitelisted_only=False).documented_properties(
            AggregationResult(metadata=metadata)
        )

        assert [item.name for item in documented] == ["a", "z"]

    def test_missing_readme_or_marker_is_skipped(self, temp_dir, result):
        generator = DocumentationGenerator()
        readme = temp_dir / "README.adoc"

        assert generator.document(readme, result) is None

        readme.write_text("= No markers here\n", encoding="utf-8")
        assert generator.document(readme, result) is None
        assert readme.read_text(encoding="utf-8") == "= No markers here\n"

    def test_unterminated_section(self, temp_dir, result):
        readme = temp_dir / "README.adoc"
        readme.write_text(f"{START_MARKER}\nno end\n", encoding="utf-8")

        with pytest.raises(DocumentationError):
            DocumentationGenerator().document(readme, result)
