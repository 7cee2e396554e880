"""lxml integration for XML/JSON conversion.

Applications that already hold an ``lxml.etree`` tree can convert it without
re-serializing: :func:`from_lxml` replays the tree's start/text/end events
through the same :class:`TreeBuilder` used for raw markup, rebuilding
qualified names (``prefix:local``) and ``xmlns`` declarations the way the
non-namespace expat tokenizer reports them. :func:`to_lxml` goes the other
way by parsing the serializer's output with lxml.
"""

from typing import Any, Dict, Mapping, Optional, Union

from lxml import etree

from xml_json_converter.shared import (
    ParseError,
    ToJsonConfig,
    ToXmlConfig,
    get_logger,
)
from xml_json_converter.tree import Node, TreeBuilder

from .converter import JSONInput, encode_json, to_xml

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def _qualified_name(name: str, prefix: Optional[str]) -> str:
    local = etree.QName(name).localname
    return f"{prefix}:{local}" if prefix else local


def _attribute_name(key: str, nsmap: Mapping[Optional[str], str]) -> str:
    if not key.startswith("{"):
        return key
    uri = etree.QName(key).namespace
    if uri == XML_NAMESPACE:
        return _qualified_name(key, "xml")
    prefix = next(
        (prefix for prefix, value in nsmap.items() if value == uri and prefix),
        None,
    )
    return _qualified_name(key, prefix)


def replay_element(
    element: Any,
    target: Any,
    inherited_nsmap: Optional[Mapping[Optional[str], str]] = None
) -> None:
    """Feed an lxml element and its descendants to an event target.

    Comments and processing instructions produce no events, but the text
    following them (their ``tail``) is still reported.

    Args:
        element: lxml element
        target: Object with ``start``, ``data`` and ``end`` methods
        inherited_nsmap: Namespace map in scope at the parent element
    """
    if not isinstance(element.tag, str):
        return

    nsmap = element.nsmap
    inherited = inherited_nsmap or {}
    attributes: Dict[str, str] = {}
    for prefix, uri in nsmap.items():
        if inherited.get(prefix) != uri:
            attributes["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri
    for key, value in element.attrib.items():
        attributes[_attribute_name(key, nsmap)] = value

    name = _qualified_name(element.tag, element.prefix)
    target.start(name, attributes)
    if element.text:
        target.data(element.text)
    for child in element:
        replay_element(child, target, nsmap)
        if child.tail:
            target.data(child.tail)
    target.end(name)


def from_lxml(
    element: Any,
    config: Optional[ToJsonConfig] = None,
    **options: Any
) -> Union[str, Node]:
    """Convert an lxml element or element tree to JSON text or a node.

    Accepts the same options as :func:`~xml_json_converter.to_json`.

    Examples:
        >>> root = etree.fromstring("<r><i>A</i><i>B</i></r>")
        >>> from_lxml(root, object=True)
        {'r': {'i': ['A', 'B']}}
    """
    config = config if config is not None else ToJsonConfig()
    if options:
        config = config.override(**options)
    logger = get_logger(__name__, config.correlation_id, "lxml_adapter")

    if hasattr(element, "getroot"):
        element = element.getroot()
    if not etree.iselement(element):
        raise TypeError(f"Expected an lxml element, got {type(element).__name__}")

    builder = TreeBuilder(config, logger.child("tree_builder"))
    replay_element(element, builder)
    node = builder.close()

    logger.info(
        "Converted lxml element",
        extra={"root_tag": element.tag, "element_count": builder.statistics.elements}
    )
    return node if config.as_object else encode_json(node)


def to_lxml(
    data: JSONInput,
    config: Optional[ToXmlConfig] = None,
    **options: Any
) -> Any:
    """Convert JSON text, bytes or a node to an lxml element.

    The node must serialize to a single well-formed root element.

    Raises:
        ParseError: If the serialized markup is empty or not well-formed
    """
    xml = to_xml(data, config, **options)
    if not xml:
        raise ParseError("no element found")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(xml.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        line, column = e.position
        raise ParseError(e.msg, line=line, column=column, code=e.code) from e
