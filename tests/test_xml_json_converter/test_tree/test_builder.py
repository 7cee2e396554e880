"""Tests for the event-driven tree builder.

Covers the collapse rule, repetition-driven arrays, forced arrays, text
accumulation, coercion and the ancestor stack bookkeeping.
"""

import pytest

from xml_json_converter.shared import ParseError, ToJsonConfig
from xml_json_converter.tokenization import ExpatEventSource
from xml_json_converter.tree import TreeBuilder


def build(xml: str, **options) -> dict:
    """Parse markup through expat into a node."""
    builder = TreeBuilder(ToJsonConfig.from_dict(options))
    return ExpatEventSource(builder).parse(xml)


class TestCollapseRule:
    """Test text-only elements collapsing to bare values."""

    def test_text_only_element_collapses(self) -> None:
        """Test element without attributes or children becomes a scalar."""
        assert build("<e>v</e>") == {"e": "v"}

    def test_reversible_keeps_text_node(self) -> None:
        """Test reversible mode keeps the text-node key."""
        assert build("<e>v</e>", reversible=True) == {"e": {"$t": "v"}}

    def test_reversible_drops_empty_text(self) -> None:
        """Test whitespace-only text leaves no text key in reversible mode."""
        assert build("<r><e>  </e></r>", reversible=True) == {"r": {"e": {}}}
        assert build("<e>  </e>", reversible=True, trim=False) == {"e": {"$t": "  "}}

    def test_element_with_attributes_does_not_collapse(self) -> None:
        """Test attributes keep the element as a mapping."""
        assert build('<e id="1">v</e>') == {"e": {"id": "1", "$t": "v"}}

    def test_empty_element_is_empty_mapping(self) -> None:
        """Test element with no text stays an empty mapping."""
        assert build("<r><e/><f></f></r>") == {"r": {"e": {}, "f": {}}}

    def test_whitespace_only_text_collapses_to_empty_string(self) -> None:
        """Test whitespace text trims to an empty string value."""
        assert build("<e>   </e>") == {"e": ""}

    def test_collapse_replaces_last_array_entry(self) -> None:
        """Test collapsing inside an array replaces only the newest entry."""
        result = build('<r><i id="1">A</i><i>B</i></r>')
        assert result == {"r": {"i": [{"id": "1", "$t": "A"}, "B"]}}


class TestArrays:
    """Test array creation from repetition and configuration."""

    def test_repetition_creates_array(self) -> None:
        """Test the second sibling with the same name creates an array."""
        assert build("<r><i>A</i><i>B</i></r>") == {"r": {"i": ["A", "B"]}}

    def test_further_repetition_appends_in_document_order(self) -> None:
        """Test subsequent siblings are appended in order."""
        result = build("<r><i>1</i><x/><i>2</i><i>3</i></r>")
        assert result == {"r": {"i": ["1", "2", "3"], "x": {}}}

    def test_forced_array_single_occurrence(self) -> None:
        """Test a forced name is an array even when it occurs once."""
        result = build("<r><only>x</only><other>y</other></r>", arrayNotation=["only"])
        assert result == {"r": {"only": ["x"], "other": "y"}}

    def test_array_mode_wraps_every_element(self) -> None:
        """Test array notation true wraps every element including the root."""
        result = build('<r><i a="1">A</i></r>', array_notation=True)
        assert result == {"r": [{"i": [{"a": "1", "$t": "A"}]}]}

    def test_repeated_nested_structures(self) -> None:
        """Test repeated elements with children keep their own subtrees."""
        xml = "<r><p><n>a</n></p><p><n>b</n><n>c</n></p></r>"
        assert build(xml) == {"r": {"p": [{"n": "a"}, {"n": ["b", "c"]}]}}


class TestText:
    """Test text accumulation and trimming."""

    def test_text_chunks_concatenate(self) -> None:
        """Test multiple data events join in arrival order."""
        builder = TreeBuilder()
        builder.start("e", {})
        builder.data("Hello, ")
        builder.data("world")
        builder.end("e")

        assert builder.close() == {"e": "Hello, world"}

    def test_trim_enabled_by_default(self) -> None:
        """Test surrounding whitespace is removed by default."""
        assert build("<e>\n  v  \n</e>") == {"e": "v"}

    def test_trim_disabled_keeps_whitespace(self) -> None:
        """Test trim false keeps text verbatim."""
        assert build("<e>  v  </e>", trim=False) == {"e": "  v  "}

    def test_whitespace_between_children_is_discarded(self) -> None:
        """Test indentation around child elements leaves no text key."""
        xml = "<r>\n  <i>A</i>\n  <j>B</j>\n</r>"
        assert build(xml, reversible=True) == {"r": {"i": {"$t": "A"}, "j": {"$t": "B"}}}

    def test_mixed_content_text_is_discarded(self) -> None:
        """Test parent text is dropped once a child element has opened."""
        assert build("<a>x<b>y</b>z</a>") == {"a": {"b": "y"}}

    def test_entities_and_cdata_become_text(self) -> None:
        """Test predefined entities and CDATA are delivered as text."""
        assert build("<e>a &amp; <![CDATA[<b>]]></e>") == {"e": "a & <b>"}

    def test_alternate_text_node_true(self) -> None:
        """Test alternate text node uses the _t key."""
        assert build("<e a='1'>v</e>", alternateTextNode=True) == {"e": {"a": "1", "_t": "v"}}

    def test_custom_text_node(self) -> None:
        """Test a custom text-node key."""
        assert build("<e>v</e>", alternate_text_node="xx", reversible=True) == {"e": {"xx": "v"}}


class TestCoercion:
    """Test coercion of attributes and text during building."""

    def test_text_coerced_by_element_name(self) -> None:
        """Test element text is coerced when enabled."""
        assert build("<r><v>123</v><f>1.5</f><b>True</b></r>", coerce=True) == {
            "r": {"v": 123, "f": 1.5, "b": True}
        }

    def test_attributes_coerced(self) -> None:
        """Test attribute values are coerced when enabled."""
        result = build('<e n="5" flag="false" s="x" empty=""/>', coerce=True)
        assert result == {"e": {"n": 5, "flag": False, "s": "x", "empty": ""}}

    def test_no_coercion_by_default(self) -> None:
        """Test values stay strings without coercion."""
        assert build('<v n="5">123</v>') == {"v": {"n": "5", "$t": "123"}}

    def test_custom_function_overrides_default(self) -> None:
        """Test a per-key function replaces default coercion for that key."""
        xml = '<money number="true" text="123.45">104.95</money>'
        result = build(xml, coerce={"text": str}, reversible=True)
        assert result == {"money": {"number": True, "text": "123.45", "$t": 104.95}}

    def test_sanitize_escapes_string_values(self) -> None:
        """Test sanitize escapes reserved characters in string values."""
        result = build('<e q="&quot;x&quot;">a &lt; b</e>', sanitize=True)
        assert result == {"e": {"q": "&quot;x&quot;", "$t": "a &lt; b"}}


class TestBuilderState:
    """Test ancestor stack bookkeeping and statistics."""

    def test_depth_tracks_open_elements(self) -> None:
        """Test depth follows start and end events."""
        builder = TreeBuilder()
        builder.start("a", {})
        builder.start("b", {})
        assert builder.depth == 2

        builder.end("b")
        assert builder.depth == 1

        builder.end("a")
        assert builder.depth == 0

    def test_statistics(self) -> None:
        """Test statistics count elements, depth, arrays and collapses."""
        builder = TreeBuilder()
        ExpatEventSource(builder).parse("<r><i>A</i><i>B</i><n><m/></n></r>")

        stats = builder.statistics
        assert stats.elements == 5
        assert stats.max_depth == 3
        assert stats.arrays_created == 1
        assert stats.collapsed_elements == 2

    def test_end_without_start_raises(self) -> None:
        """Test an unmatched end event raises ParseError."""
        builder = TreeBuilder()
        with pytest.raises(ParseError, match="no matching start tag"):
            builder.end("orphan")

    def test_close_with_open_elements_raises(self) -> None:
        """Test closing while elements are open raises ParseError."""
        builder = TreeBuilder()
        builder.start("a", {})
        with pytest.raises(ParseError, match="left unclosed"):
            builder.close()

    def test_attribute_mapping_is_copied(self) -> None:
        """Test the builder does not keep the caller's attribute mapping."""
        attributes = {"id": "1"}
        builder = TreeBuilder()
        builder.start("e", attributes)
        builder.end("e")
        result = builder.close()

        attributes["id"] = "changed"
        assert result == {"e": {"id": "1"}}
