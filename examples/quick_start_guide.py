#!/usr/bin/env python3
"""
Quick Start Guide for the XML/JSON converter.

Walks through XML to JSON conversion, the reversible round trip back to XML,
and the options that shape the JSON output.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_json_converter import (
    ParseError, ToJsonConfig, XmlJsonConverter, to_json, to_xml
)

CATALOG = """<catalog>
  <book id="123" genre="fiction">
    <title>My Book</title>
    <price currency="USD">19.99</price>
    <available>true</available>
  </book>
  <book id="456">
    <title>Other Book</title>
  </book>
</catalog>"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - XML/JSON Converter")
    print("=" * 40)

    # Step 1: XML to JSON
    print("\n📄 Step 1: XML to JSON")
    print("-" * 30)

    print(to_json(CATALOG))

    # Step 2: Reversible conversion and back
    print("\n🔁 Step 2: Round trip")
    print("-" * 30)

    node = to_json(CATALOG, object=True, reversible=True)
    xml = to_xml(node)
    print(xml)
    print(f"✅ Round trip stable: {to_json(xml, reversible=True) == to_json(CATALOG, reversible=True)}")

    # Step 3: Malformed input
    print("\n🚨 Step 3: Error handling")
    print("-" * 30)

    try:
        to_json("<catalog><book></catalog>")
    except ParseError as e:
        print(f"❌ {e}")
        print(f"📍 Position: {e.position}")


def options_example():
    """Example showing how options change the JSON shape."""

    print("\n\n🔧 OPTIONS EXAMPLE")
    print("=" * 35)

    variants = [
        ({}, "Defaults"),
        ({"coerce": True}, "Coerced values"),
        ({"arrayNotation": ["title"]}, "Forced arrays"),
        ({"alternateTextNode": True, "reversible": True}, "Alternate text node"),
    ]

    for options, description in variants:
        print(f"\n📋 {description}:")
        print(f"  {to_json(CATALOG, **options)}")


def converter_example():
    """Example showing the reusable converter and its statistics."""

    print("\n\n📊 CONVERTER EXAMPLE")
    print("=" * 35)

    converter = XmlJsonConverter(json_config=ToJsonConfig(reversible=True, coerce=True))
    for document in (CATALOG, "<price>1.5</price>", "<broken>"):
        try:
            print(f"  {converter.to_json(document)}")
        except ParseError as e:
            print(f"  ❌ {e}")

    stats = converter.statistics
    print(f"\n  Conversions: {stats['total_conversions']}")
    print(f"  Success rate: {stats['success_rate']:.1%}")


def main():
    """Main function."""
    try:
        quick_start_example()
        options_example()
        converter_example()

        print(f"\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
