"""Event-driven tree builder for XML to JSON conversion.

The builder receives element-start, text and element-end events in document
order (from the expat event source or any other tokenizer) and materializes
a JSON-compatible node: a dict mapping names to scalars, dicts or lists of
dicts. Parent context is tracked with an explicit ancestor stack because the
events arrive flat, without any natural recursive shape.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from xml_json_converter.shared.config import ToJsonConfig
from xml_json_converter.shared.errors import ParseError
from xml_json_converter.shared.logging import CorrelationLogger, get_logger

from .coercion import ValueCoercer

Node = Dict[str, Any]


@dataclass
class BuildStatistics:
    """Counters collected while building a tree."""

    elements: int = 0
    text_chunks: int = 0
    collapsed_elements: int = 0
    arrays_created: int = 0
    max_depth: int = 0


class TreeBuilder:
    """Builds a JSON-compatible node from a stream of XML parse events.

    Implements the ``start``/``data``/``end``/``close`` target interface, so
    an instance can be handed directly to an event source.

    Examples:
        >>> builder = TreeBuilder()
        >>> builder.start("r", {})
        >>> builder.start("i", {})
        >>> builder.data("A")
        >>> builder.end("i")
        >>> builder.end("r")
        >>> builder.close()
        {'r': {'i': 'A'}}
    """

    def __init__(
        self,
        config: Optional[ToJsonConfig] = None,
        logger: Optional[CorrelationLogger] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Conversion options (defaults to ToJsonConfig())
            logger: Optional logger, normally a child of the caller's logger
        """
        self.config = config or ToJsonConfig()
        self.text_node_name = self.config.text_node_name
        self.logger = logger or get_logger(
            __name__, self.config.correlation_id, "tree_builder"
        )
        self._coerce = ValueCoercer(self.config.coerce, self.config.sanitize)

        self.root: Node = {}
        self.statistics = BuildStatistics()
        self._ancestors: List[Node] = []
        self._current: Node = self.root
        self._last_opened: Optional[str] = None

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._ancestors)

    def start(self, name: str, attributes: Mapping[str, str]) -> None:
        """Handle an element start event."""
        node: Node = {key: self._coerce(value, key) for key, value in attributes.items()}
        current = self._current

        if name not in current:
            if self.config.array_mode or name in self.config.force_arrays:
                current[name] = [node]
                self.statistics.arrays_created += 1
            else:
                current[name] = node
        elif not isinstance(current[name], list):
            current[name] = [current[name], node]
            self.statistics.arrays_created += 1
        else:
            current[name].append(node)

        self._ancestors.append(current)
        self._current = node
        self._last_opened = name

        self.statistics.elements += 1
        self.statistics.max_depth = max(self.statistics.max_depth, len(self._ancestors))

    def data(self, text: str) -> None:
        """Handle a text chunk; consecutive chunks concatenate."""
        existing = self._current.get(self.text_node_name)
        self._current[self.text_node_name] = (
            text if existing is None else f"{existing}{text}"
        )
        self.statistics.text_chunks += 1

    def end(self, name: str) -> None:
        """Handle an element end event."""
        if not self._ancestors:
            raise ParseError(f"closing tag </{name}> has no matching start tag")

        current = self._current
        text_key = self.text_node_name

        text = current.get(text_key)
        if isinstance(text, str) and text:
            if self.config.trim:
                text = text.strip()
            current[text_key] = self._coerce(text, name)

        # Text gathered around a child element is stale once the child closed
        if self._last_opened != name:
            current.pop(text_key, None)

        # Empty text writes no markup, so reversible nodes never keep it
        if self.config.reversible and current.get(text_key) == "":
            del current[text_key]

        ancestor = self._ancestors.pop()
        if not self.config.reversible and text_key in current and len(current) == 1:
            value = current[text_key]
            slot = ancestor[name]
            if isinstance(slot, list):
                slot[-1] = value
            else:
                ancestor[name] = value
            self.statistics.collapsed_elements += 1

        self._current = ancestor

    def close(self) -> Node:
        """Finish building and return the root node."""
        if self._ancestors:
            raise ParseError(f"{len(self._ancestors)} element(s) left unclosed")

        self.logger.debug(
            "Tree building completed",
            extra={
                "element_count": self.statistics.elements,
                "max_depth": self.statistics.max_depth,
                "collapsed_elements": self.statistics.collapsed_elements,
                "arrays_created": self.statistics.arrays_created,
            }
        )
        return self.root
