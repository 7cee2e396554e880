"""Serialization of JSON-compatible nodes to XML markup.

Each node is written in two passes: scalar values first (attributes, then
element text under the text-node key), then nested nodes as child elements.
A start tag is left open while attributes are appended and is completed
with ``>`` only when text, a child element or the closing tag follows, so
attributes always precede content whatever the key order of the node.
Values are markup-escaped unless a ``sanitize`` transform replaces it.
"""

from typing import Any, Callable, List, Mapping, Optional
from xml.sax.saxutils import escape

from xml_json_converter.shared.config import ToXmlConfig
from xml_json_converter.shared.logging import CorrelationLogger, get_logger
from xml_json_converter.tree.coercion import resolve_sanitizer

_ARRAY_TYPES = (list, tuple)
_SCALAR_TYPES = (str, int, float, bool)

# Quote escaping for attribute values on top of the default &, < and > escaping
_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


def _is_scalar(value: Any) -> bool:
    return isinstance(value, _SCALAR_TYPES)


def scalar_to_text(value: Any) -> str:
    """Render a scalar the way it appears in JSON (``true``, ``12``, ``"x"`` → ``x``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class XmlSerializer:
    """Re-linearizes a nested node into XML text.

    A serializer owns its output buffer; use one instance per conversion.

    Examples:
        >>> XmlSerializer().serialize({"r": {"id": 1, "$t": "x"}})
        '<r id="1">x</r>'
        >>> XmlSerializer(ToXmlConfig(ignore_null=True)).serialize({"r": {"k": None}})
        '<r></r>'
    """

    def __init__(
        self,
        config: Optional[ToXmlConfig] = None,
        logger: Optional[CorrelationLogger] = None
    ) -> None:
        """Initialize serializer.

        Args:
            config: Conversion options (defaults to ToXmlConfig())
            logger: Optional logger, normally a child of the caller's logger
        """
        self.config = config or ToXmlConfig()
        self.text_node_name = self.config.text_node_name
        self.logger = logger or get_logger(
            __name__, self.config.correlation_id, "xml_serializer"
        )
        self._sanitize: Optional[Callable[[str], str]] = resolve_sanitizer(
            self.config.sanitize
        )
        self._parts: List[str] = []
        self._tag_incomplete = False
        self._elements_written = 0

    def serialize(self, node: Any) -> str:
        """Serialize a node and return the XML text.

        An empty, absent or non-mapping root yields an empty string.
        """
        self._parts = []
        self._tag_incomplete = False
        self._elements_written = 0

        if node and isinstance(node, Mapping):
            self._write_node(node, top_level=True)

        xml = "".join(self._parts)
        self.logger.debug(
            "Serialization completed",
            extra={"elements_written": self._elements_written, "output_length": len(xml)}
        )
        return xml

    def _write_node(self, node: Mapping[str, Any], top_level: bool = False) -> None:
        # First pass: scalars become attributes, then text content
        texts: List[Any] = []
        for key, value in node.items():
            if _is_scalar(value):
                values = [value]
            elif isinstance(value, _ARRAY_TYPES):
                values = [item for item in value if _is_scalar(item)]
            else:
                continue

            for item in values:
                if key == self.text_node_name:
                    texts.append(item)
                elif top_level:
                    self.logger.debug(
                        "Skipping top-level scalar without an enclosing element",
                        extra={"key": key}
                    )
                else:
                    self._add_attribute(key, item)

        for text in texts:
            self._add_text(text)

        # Second pass: nested nodes become child elements
        for key, value in node.items():
            if isinstance(value, _ARRAY_TYPES):
                for item in value:
                    if isinstance(item, Mapping) or item is None:
                        self._write_child(key, item)
            elif isinstance(value, Mapping) or value is None:
                self._write_child(key, value)

    def _write_child(self, name: str, value: Optional[Mapping[str, Any]]) -> None:
        if value is None and self.config.ignore_null:
            return
        self._open_tag(name)
        if value:
            self._write_node(value)
        self._close_tag(name)

    def _escape(self, value: Any, entities: Optional[Mapping[str, str]] = None) -> str:
        text = scalar_to_text(value)
        if self._sanitize is not None:
            return self._sanitize(text)
        return escape(text, entities or {})

    def _open_tag(self, name: str) -> None:
        self._complete_tag()
        self._parts.append(f"<{name}")
        self._tag_incomplete = True
        self._elements_written += 1

    def _add_attribute(self, name: str, value: Any) -> None:
        self._parts.append(f' {name}="{self._escape(value, _ATTRIBUTE_ENTITIES)}"')

    def _add_text(self, value: Any) -> None:
        self._complete_tag()
        self._parts.append(self._escape(value))

    def _close_tag(self, name: str) -> None:
        self._complete_tag()
        self._parts.append(f"</{name}>")

    def _complete_tag(self) -> None:
        if self._tag_incomplete:
            self._parts.append(">")
            self._tag_incomplete = False
