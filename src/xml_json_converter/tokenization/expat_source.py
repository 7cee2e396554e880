"""Expat-backed source of XML parse events.

The event source owns the low-level tokenizer. It runs expat in
non-namespace mode so element and attribute names arrive exactly as written
(``soap:Envelope``, ``xmlns:soap``) and forwards element start, character
data and element end events to a target object in document order.
"""

from typing import Any, Optional, Union
from xml.parsers import expat

from xml_json_converter.shared.errors import ParseError
from xml_json_converter.shared.logging import CorrelationLogger, get_logger

XMLInput = Union[str, bytes, bytearray, memoryview]


class ExpatEventSource:
    """Feeds XML input through expat and dispatches events to a target.

    The target must provide ``start(name, attributes)``, ``data(text)``,
    ``end(name)`` and ``close()``; :class:`~xml_json_converter.tree.TreeBuilder`
    does.

    Args:
        target: Event receiver
        encoding: Override for the document encoding of byte input
        logger: Optional logger
    """

    def __init__(
        self,
        target: Any,
        encoding: Optional[str] = None,
        logger: Optional[CorrelationLogger] = None
    ) -> None:
        self.target = target
        self.encoding = encoding
        self.logger = logger or get_logger(__name__, component="expat_source")

    def _create_parser(self) -> Any:
        parser = expat.ParserCreate(self.encoding)
        parser.buffer_text = True
        parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)
        parser.StartElementHandler = self.target.start
        parser.CharacterDataHandler = self.target.data
        parser.EndElementHandler = self.target.end
        return parser

    def parse(self, data: XMLInput) -> Any:
        """Parse a complete document and return ``target.close()``.

        Args:
            data: XML text (parsed as UTF-8) or bytes (declared encoding honored)

        Returns:
            Whatever the target's ``close()`` returns

        Raises:
            ParseError: If expat reports malformed markup
        """
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)

        parser = self._create_parser()
        try:
            parser.Parse(data, True)
        except expat.ExpatError as e:
            message = expat.ErrorString(e.code)
            self.logger.warning(
                "XML tokenizer rejected input",
                extra={"error": message, "line": e.lineno, "column": e.offset}
            )
            raise ParseError(message, line=e.lineno, column=e.offset, code=e.code) from e

        return self.target.close()
