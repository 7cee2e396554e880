"""Public conversion API.

Level 1: :func:`to_json` and :func:`to_xml`.
Level 2: :class:`XmlJsonConverter` with reusable defaults and statistics.
Integrations: :func:`from_lxml` and :func:`to_lxml` for lxml trees.
"""

from .adapters import from_lxml, replay_element, to_lxml
from .converter import (
    XmlJsonConverter,
    decode_json,
    encode_json,
    to_json,
    to_xml,
)

__all__ = [
    "XmlJsonConverter",
    "decode_json",
    "encode_json",
    "from_lxml",
    "replay_element",
    "to_json",
    "to_lxml",
    "to_xml",
]
