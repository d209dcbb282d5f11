"""Test metadata parsing, merging and filtering."""

import io
import json

import pytest

from scsmetadata.core.exceptions import MetadataParseError
from scsmetadata.core.models import (
    ConfigurationItem, ConfigurationMetadata, ItemHint, ItemType, MetadataFilter,
    ValueHint, ValueProvider, Whitelist, CONFIGURATION_PROPERTIES_CLASSES, CONFIGURATION_PROPERTIES_NAMES,
)
from scsmetadata.merging import (
    JsonMarshaller, MetadataMerger, WhitelistMerger,
    dump_whitelist, filter_metadata, load_whitelist, union_tokens,
)
from scsmetadata.sources import ClasspathEnumerator

from builders import METADATA_PATH, WHITELIST_PATH, metadata_json, write_directory, write_jar


class TestJsonMarshaller:
    """Test the metadata JSON reader and writer."""

    def test_read_full_document(self):
        """Test reading groups, properties and hints with camelCase fields."""
        document = json.dumps({
            "groups": [{"name": "log", "type": "com.example.Log", "sourceType": "com.example.Log",
                        "sourceMethod": "log()"}],
            "properties": [{
                "name": "log.level", "type": "java.lang.String", "sourceType": "com.example.Log",
                "description": "Level.", "defaultValue": "INFO",
                "deprecation": {"level": "warning", "replacement": "logging.level"},
            }],
            "hints": [{
                "name": "log.level",
                "values": [{"value": "INFO", "description": "Info."}],
                "providers": [{"name": "any", "parameters": {"target": "x"}}],
            }],
        })

        metadata = JsonMarshaller().read(document)

        group, prop = metadata.items
        assert group.item_type == ItemType.GROUP
        assert group.source_method == "log()"
        assert prop.item_type == ItemType.PROPERTY
        assert prop.default_value == "INFO"
        assert prop.deprecation.replacement == "logging.level"
        hint = metadata.hints[0]
        assert hint.values[0].value == "INFO"
        assert hint.providers[0].parameters == {"target": "x"}

    def test_read_accepts_streams_and_bytes(self):
        """Test reading from a binary stream."""
        payload = metadata_json(properties=[{"name": "a.b"}]).encode("utf-8")

        assert JsonMarshaller().read(io.BytesIO(payload)).item_names() == ["a.b"]
        assert JsonMarshaller().read(payload).item_names() == ["a.b"]

    def test_missing_arrays_are_empty(self):
        """Test that absent sections read as empty."""
        assert JsonMarshaller().read("{}").is_empty()

    @pytest.mark.parametrize("document", [
        "",
        "   ",
        "{not json",
        "[]",
        '{"properties": {}}',
        '{"properties": [{"type": "java.lang.String"}]}',
        '{"hints": [{"name": "a", "values": [{"description": "no value"}]}]}',
    ])
    def test_malformed_documents(self, document):
        """Test that malformed documents raise a parse error."""
        with pytest.raises(MetadataParseError):
            JsonMarshaller().read(document, origin="test.json")

    def test_parse_error_reports_line(self):
        """Test that JSON syntax errors carry the source and line."""
        with pytest.raises(MetadataParseError) as exc_info:
            JsonMarshaller().read('{\n"properties": [\n,]\n}', origin="lib.jar!/meta.json")

        assert exc_info.value.source == "lib.jar!/meta.json"
        assert exc_info.value.line_number == 3

    def test_write_layout(self):
        """Test the written document layout."""
        metadata = ConfigurationMetadata()
        metadata.add_item(ConfigurationItem(name="a.b", type="java.lang.String", source_type="com.example.A",
                                            default_value="hello"))
        metadata.add_item(ConfigurationItem(name="a", item_type=ItemType.GROUP))
        metadata.add_hint(ItemHint(name="a.b", providers=[ValueProvider(name="any")]))

        document = json.loads(JsonMarshaller().write(metadata))

        assert document["groups"] == [{"name": "a"}]
        assert document["properties"] == [{
            "name": "a.b", "type": "java.lang.String", "sourceType": "com.example.A", "defaultValue": "hello",
        }]
        assert document["hints"] == [{"name": "a.b", "providers": [{"name": "any"}]}]

    def test_write_keeps_non_ascii(self):
        """Test that output is UTF-8 without escaping."""
        metadata = ConfigurationMetadata(items=[ConfigurationItem(name="a", description="Größe")])

        assert "Größe".encode("utf-8") in JsonMarshaller().write(metadata)


class TestMetadataMerger:
    """Test merging metadata documents."""

    def test_merge_keeps_duplicates_in_order(self, temp_dir):
        """Test that both definitions of a duplicated name survive, in classpath order."""
        first = write_jar(temp_dir / "first.jar", {
            METADATA_PATH: metadata_json(properties=[{"name": "x", "description": "first"}]),
        })
        second = write_directory(temp_dir / "classes", {
            METADATA_PATH: metadata_json(properties=[{"name": "x", "description": "second"}],
                                         hints=[{"name": "x", "values": [{"value": 1}]}]),
        })
        merger = MetadataMerger()

        metadata = merger.merge_all(ClasspathEnumerator([first, second]).metadata_resources())

        assert [item.description for item in metadata.items] == ["first", "second"]
        assert len(metadata.hints) == 1
        assert merger.documents_merged == 2

    def test_no_documents(self):
        """Test that an empty classpath yields empty metadata."""
        assert MetadataMerger().merge_all([]).is_empty()

    def test_parse_failure_propagates(self, temp_dir):
        """Test that a malformed document aborts the merge."""
        broken = write_jar(temp_dir / "broken.jar", {METADATA_PATH: "{"})

        with pytest.raises(MetadataParseError) as exc_info:
            MetadataMerger().merge_all(ClasspathEnumerator([broken]).metadata_resources())

        assert exc_info.value.source.endswith(METADATA_PATH)


class TestWhitelistMerger:
    """Test merging whitelist files."""

    def test_union_per_key(self):
        """Test that recognized keys are unioned token by token."""
        current = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "a,b"})
        incoming = Whitelist(entries={
            CONFIGURATION_PROPERTIES_NAMES: "b,c",
            CONFIGURATION_PROPERTIES_CLASSES: "com.example.C",
        })

        merged = WhitelistMerger().merge(current, incoming)

        assert merged.names == {"a", "b", "c"}
        assert merged.classes == {"com.example.C"}

    def test_merge_is_idempotent(self):
        """Test that merging the same whitelist twice changes nothing."""
        whitelist = Whitelist(entries={CONFIGURATION_PROPERTIES_CLASSES: "x,y"})
        merger = WhitelistMerger()

        once = merger.merge(Whitelist(), whitelist)
        twice = merger.merge(once, whitelist)

        assert twice.classes == once.classes == {"x", "y"}

    def test_merge_is_commutative_on_token_sets(self):
        """Test that merge order does not change the token sets."""
        a = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "a,b"})
        b = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "c", CONFIGURATION_PROPERTIES_CLASSES: "K"})
        merger = WhitelistMerger()

        left = merger.merge(a, b)
        right = merger.merge(b, a)

        assert left.names == right.names
        assert left.classes == right.classes

    def test_unrecognized_file_is_ignored(self):
        """Test that a file without whitelist keys leaves the current whitelist unchanged."""
        current = Whitelist(entries={CONFIGURATION_PROPERTIES_CLASSES: "x"})
        merger = WhitelistMerger()

        merged = merger.merge(current, Whitelist(entries={"other.key": "1"}))

        assert merged is current
        assert merger.documents_skipped == 1
        assert merger.documents_merged == 0

    def test_incoming_extra_keys_kept(self):
        """Test that extra keys of the incoming file survive and current-only extras are dropped."""
        current = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "a", "current.extra": "1"})
        incoming = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "b", "incoming.extra": "2"})

        merged = WhitelistMerger().merge(current, incoming)

        assert merged.entries["incoming.extra"] == "2"
        assert "current.extra" not in merged.entries

    def test_merge_all_over_classpath(self, temp_dir):
        """Test merging whitelist files found across classpath roots."""
        first = write_jar(temp_dir / "first.jar", {WHITELIST_PATH: "configuration-properties.names=a.b\n"})
        ignored = write_jar(temp_dir / "ignored.jar", {WHITELIST_PATH: "unrelated=true\n"})
        last = write_jar(temp_dir / "last.jar", {
            WHITELIST_PATH: "configuration-properties.classes=com.example.P\n",
        })
        merger = WhitelistMerger()

        merged = merger.merge_all(ClasspathEnumerator([first, ignored, last]).whitelist_resources())

        assert merged.names == {"a.b"}
        assert merged.classes == {"com.example.P"}
        assert merger.documents_merged == 2
        assert merger.documents_skipped == 1


class TestWhitelistFiles:
    """Test whitelist property file handling."""

    def test_load_properties_syntax(self):
        """Test continuation lines, colon separators and comments."""
        content = (
            b"# comment\n"
            b"configuration-properties.classes: com.example.A,\\\n"
            b"    com.example.B\n"
        )

        whitelist = load_whitelist(content)

        assert whitelist.classes == {"com.example.A", "com.example.B"}

    def test_dump_then_load(self):
        """Test that dumped whitelists parse back with the same entries."""
        whitelist = Whitelist(entries={CONFIGURATION_PROPERTIES_NAMES: "a.b,c.d"})

        data = dump_whitelist(whitelist)

        assert data.startswith(b"#Describes whitelisted properties for this app")
        assert load_whitelist(data).entries == whitelist.entries

    def test_union_tokens_order(self):
        """Test that token union keeps first-seen order."""
        assert union_tokens("b,a", None, "a, c") == "b,a,c"
        assert union_tokens(None, "") == ""


class TestFilterMetadata:
    """Test narrowing metadata by names and source types."""

    @pytest.fixture
    def metadata(self):
        metadata = ConfigurationMetadata()
        metadata.add_item(ConfigurationItem(name="a.b", source_type="com.example.A"))
        metadata.add_item(ConfigurationItem(name="c.d", source_type="com.example.C"))
        metadata.add_item(ConfigurationItem(name="e.f", source_type="com.example.E"))
        metadata.add_hint(ItemHint(name="a.b", values=[ValueHint(value="x")]))
        metadata.add_hint(ItemHint(name="e.f", values=[ValueHint(value="y")]))
        return metadata

    def test_no_filter_passes_through(self, metadata):
        """Test that a missing or empty filter returns the input unchanged."""
        assert filter_metadata(metadata, None) is metadata
        assert filter_metadata(metadata, MetadataFilter()) is metadata

    def test_name_or_source_type_match(self, metadata):
        """Test that an item matching either criterion is kept once."""
        metadata_filter = MetadataFilter(names={"a.b", "c.d"}, source_types={"com.example.A"})

        filtered = filter_metadata(metadata, metadata_filter)

        assert filtered.item_names() == ["a.b", "c.d"]

    def test_hints_follow_kept_items(self, metadata):
        """Test that only hints of retained names survive."""
        filtered = filter_metadata(metadata, MetadataFilter(source_types={"com.example.C", "com.example.E"}))

        assert filtered.item_names() == ["c.d", "e.f"]
        assert [hint.name for hint in filtered.hints] == ["e.f"]

    def test_blank_fields_never_match(self):
        """Test that blank names and source types are not matched."""
        metadata = ConfigurationMetadata(items=[ConfigurationItem(name="x", source_type=" ")])

        filtered = filter_metadata(metadata, MetadataFilter(source_types={" "}))

        assert filtered.is_empty()
