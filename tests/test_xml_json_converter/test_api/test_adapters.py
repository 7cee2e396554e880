"""Tests for lxml integration."""

import pytest
from lxml import etree

from xml_json_converter.api import from_lxml, to_json, to_lxml
from xml_json_converter.shared import ParseError


class TestFromLxml:
    """Test conversion of lxml trees."""

    @pytest.mark.parametrize("xml", [
        "<r><i>A</i><i>B</i></r>",
        '<r id="7"><i>A</i>tail</r>',
        "<r><!-- note --><i>A</i>t<?pi data?></r>",
        "<r>  <p><n>a</n></p>\n  <p><n>b</n><n>c</n></p>\n</r>",
    ])
    def test_matches_markup_conversion(self, xml: str) -> None:
        """Test replaying an lxml tree gives the same node as parsing markup."""
        assert from_lxml(etree.fromstring(xml), object=True) == to_json(xml, object=True)

    def test_prefixed_namespaces(self) -> None:
        """Test qualified names and xmlns declarations are reconstructed."""
        xml = (
            '<soap:Envelope xmlns:soap="urn:s">'
            '<soap:Body xmlns:a="urn:a" a:x="1">v</soap:Body>'
            '</soap:Envelope>'
        )
        expected = {
            "soap:Envelope": {
                "xmlns:soap": "urn:s",
                "soap:Body": {"xmlns:a": "urn:a", "a:x": "1", "$t": "v"},
            }
        }

        assert from_lxml(etree.fromstring(xml), object=True) == expected
        assert to_json(xml, object=True) == expected

    def test_default_namespace(self) -> None:
        """Test a default namespace is declared once on the declaring element."""
        xml = '<r xmlns="urn:d"><i>A</i></r>'
        assert from_lxml(etree.fromstring(xml), object=True) == {"r": {"xmlns": "urn:d", "i": "A"}}

    def test_xml_namespace_attribute(self) -> None:
        """Test attributes in the xml namespace use the xml prefix."""
        xml = '<r xml:lang="en">v</r>'
        assert from_lxml(etree.fromstring(xml), object=True) == {"r": {"xml:lang": "en", "$t": "v"}}

    def test_element_tree_input(self) -> None:
        """Test an ElementTree is converted from its root."""
        tree = etree.ElementTree(etree.fromstring("<r><i>A</i></r>"))
        assert from_lxml(tree) == '{"r":{"i":"A"}}'

    def test_options_apply(self) -> None:
        """Test conversion options are honored."""
        root = etree.fromstring("<r><n>1</n></r>")
        assert from_lxml(root, object=True, coerce=True, arrayNotation=["n"]) == {"r": {"n": [1]}}

    def test_non_element_rejected(self) -> None:
        """Test non-element input raises TypeError."""
        with pytest.raises(TypeError, match="Expected an lxml element"):
            from_lxml("<r/>")


class TestToLxml:
    """Test conversion into lxml elements."""

    def test_builds_element(self) -> None:
        """Test a node becomes an lxml element tree."""
        root = to_lxml({"r": {"a": "1", "i": [{"$t": "x"}, {"$t": "y"}]}})

        assert root.tag == "r"
        assert root.get("a") == "1"
        assert [child.text for child in root] == ["x", "y"]

    def test_json_text_input(self) -> None:
        """Test JSON text is accepted."""
        root = to_lxml('{"r": {"k": null}}')
        assert etree.tostring(root) == b"<r><k/></r>"

    def test_empty_output_raises(self) -> None:
        """Test a node that serializes to nothing is rejected."""
        with pytest.raises(ParseError, match="no element found"):
            to_lxml({})

    def test_multiple_roots_raise(self) -> None:
        """Test more than one root element is rejected."""
        with pytest.raises(ParseError) as exc_info:
            to_lxml({"a": {}, "b": {}})

        assert exc_info.value.line == 1
        assert isinstance(exc_info.value.__cause__, etree.XMLSyntaxError)
