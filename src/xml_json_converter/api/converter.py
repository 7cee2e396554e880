"""Conversion API between XML documents and JSON-compatible objects.

Level 1 is the pair of module-level functions :func:`to_json` and
:func:`to_xml`; level 2 is :class:`XmlJsonConverter`, a reusable converter
that holds default options for both directions and keeps usage statistics.
Both levels fail fast: malformed input raises instead of producing partial
output.
"""

import json
import threading
import time
from typing import Any, Dict, Optional, Union

from xml_json_converter.serialization import XmlSerializer
from xml_json_converter.shared import (
    ToJsonConfig,
    ToXmlConfig,
    get_logger,
)
from xml_json_converter.tokenization import ExpatEventSource, XMLInput
from xml_json_converter.tree import Node, TreeBuilder

JSONInput = Union[str, bytes, bytearray, Dict[str, Any]]

MS_PER_SECOND = 1000


def encode_json(node: Node, indent: Optional[int] = None) -> str:
    """Serialize a node to JSON text, compact unless ``indent`` is given.

    U+2028 and U+2029 are valid in JSON strings but not in JavaScript
    source, so they are written as escape sequences.
    """
    separators = (",", ":") if indent is None else None
    text = json.dumps(node, ensure_ascii=False, indent=indent, separators=separators)
    return text.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")


def decode_json(data: JSONInput) -> Any:
    """Return ``data`` as an object, decoding JSON text or UTF-8 bytes.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
    """
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8")
    if isinstance(data, str):
        return json.loads(data)
    return data


def _resolve(config: Any, config_class: type, options: Dict[str, Any]) -> Any:
    resolved = config if config is not None else config_class()
    return resolved.override(**options) if options else resolved


def to_json(
    xml: XMLInput,
    config: Optional[ToJsonConfig] = None,
    **options: Any
) -> Union[str, Node]:
    """Convert an XML document to JSON text or to a node object.

    Args:
        xml: XML document as text or bytes
        config: Base options; keyword ``options`` override individual fields
        **options: Option overrides by field name (``as_object``) or by
            option name (``object``, ``arrayNotation``, ``alternateTextNode``)

    Returns:
        The node when ``object``/``as_object`` is set, otherwise JSON text

    Raises:
        ParseError: If the document is not well-formed

    Examples:
        >>> to_json("<r><i>A</i><i>B</i></r>")
        '{"r":{"i":["A","B"]}}'
        >>> to_json("<v>123</v>", object=True, coerce=True)
        {'v': 123}
        >>> to_json("<e>v</e>", object=True, reversible=True)
        {'e': {'$t': 'v'}}
    """
    config = _resolve(config, ToJsonConfig, options)
    start_time = time.time()
    logger = get_logger(__name__, config.correlation_id, "to_json")

    logger.info(
        "Starting XML to JSON conversion",
        extra={
            "input_type": type(xml).__name__,
            "content_length": len(xml),
            "reversible": config.reversible,
        }
    )

    builder = TreeBuilder(config, logger.child("tree_builder"))
    source = ExpatEventSource(builder, logger=logger.child("expat_source"))
    node = source.parse(xml)

    result: Union[str, Node] = node if config.as_object else encode_json(node)

    logger.info(
        "XML to JSON conversion completed",
        extra={
            "element_count": builder.statistics.elements,
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        }
    )
    return result


def to_xml(
    data: JSONInput,
    config: Optional[ToXmlConfig] = None,
    **options: Any
) -> str:
    """Convert JSON text, bytes or an already-parsed node to XML text.

    The result is a fragment: no XML declaration is written and the number
    of root elements is not checked.

    Args:
        data: JSON text, UTF-8 encoded JSON bytes, or a node
        config: Base options; keyword ``options`` override individual fields
        **options: Option overrides (``ignoreNull``/``ignore_null``, ...)

    Returns:
        XML text

    Examples:
        >>> to_xml('{"r": {"k": null}}')
        '<r><k></k></r>'
        >>> to_xml({"r": {"k": None}}, ignoreNull=True)
        '<r></r>'
    """
    config = _resolve(config, ToXmlConfig, options)
    start_time = time.time()
    logger = get_logger(__name__, config.correlation_id, "to_xml")

    logger.info(
        "Starting JSON to XML conversion",
        extra={"input_type": type(data).__name__, "ignore_null": config.ignore_null}
    )

    node = decode_json(data)
    xml = XmlSerializer(config, logger.child("xml_serializer")).serialize(node)

    logger.info(
        "JSON to XML conversion completed",
        extra={
            "output_length": len(xml),
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        }
    )
    return xml


class XmlJsonConverter:
    """Reusable converter holding default options for both directions.

    Attributes:
        json_config: Default options for XML to JSON conversion
        xml_config: Default options for JSON to XML conversion
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> converter = XmlJsonConverter(json_config=ToJsonConfig(reversible=True))
        >>> node = converter.to_json("<e a='1'>v</e>", object=True)
        >>> converter.to_xml(node)
        '<e a="1">v</e>'
        >>> converter.statistics["total_conversions"]
        2
    """

    def __init__(
        self,
        json_config: Optional[ToJsonConfig] = None,
        xml_config: Optional[ToXmlConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize converter.

        Args:
            json_config: Default XML to JSON options
            xml_config: Default JSON to XML options
            correlation_id: Optional correlation ID applied to both directions
        """
        self.correlation_id = correlation_id
        self.json_config = json_config or ToJsonConfig()
        self.xml_config = xml_config or ToXmlConfig()
        if correlation_id is not None:
            self.json_config = self.json_config.override(correlation_id=correlation_id)
            self.xml_config = self.xml_config.override(correlation_id=correlation_id)

        self.logger = get_logger(__name__, correlation_id, "xml_json_converter")

        self._lock = threading.Lock()
        self._conversions = 0
        self._failures = 0
        self._total_processing_time = 0.0

    def to_json(self, xml: XMLInput, **overrides: Any) -> Union[str, Node]:
        """Convert XML using the default options plus per-call overrides."""
        return self._run(to_json, xml, self.json_config, overrides)

    def to_xml(self, data: JSONInput, **overrides: Any) -> str:
        """Convert JSON using the default options plus per-call overrides."""
        return self._run(to_xml, data, self.xml_config, overrides)

    def _run(self, func: Any, data: Any, config: Any, overrides: Dict[str, Any]) -> Any:
        start_time = time.time()
        try:
            return func(data, config, **overrides)
        except Exception:
            with self._lock:
                self._failures += 1
            raise
        finally:
            with self._lock:
                self._conversions += 1
                self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND

    def reconfigure(
        self,
        json_config: Optional[ToJsonConfig] = None,
        xml_config: Optional[ToXmlConfig] = None
    ) -> None:
        """Replace the default options for one or both directions."""
        if json_config:
            self.json_config = json_config
        if xml_config:
            self.xml_config = xml_config

        self.logger.info(
            "Converter reconfigured",
            extra={
                "json_config_updated": json_config is not None,
                "xml_config_updated": xml_config is not None,
            }
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get converter usage statistics."""
        with self._lock:
            conversions = self._conversions
            failures = self._failures
            total_time = self._total_processing_time
        return {
            "total_conversions": conversions,
            "failed_conversions": failures,
            "success_rate": (conversions - failures) / conversions if conversions else 0.0,
            "total_processing_time_ms": total_time,
            "average_processing_time_ms": total_time / conversions if conversions else 0.0,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset converter usage statistics."""
        with self._lock:
            self._conversions = 0
            self._failures = 0
            self._total_processing_time = 0.0

        self.logger.info("Converter statistics reset")
