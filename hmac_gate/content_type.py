"""Content-type parsing shared by decoders and error rendering."""

from __future__ import annotations


def parse_content_type(value: str) -> tuple[str, str]:
    """Split a content-type header into lower-cased (type, subtype)."""
    media = value.split(";", 1)[0].strip().lower()
    kind, sep, subtype = media.partition("/")
    if not sep:
        return "", kind
    return kind.strip(), subtype.strip()


def content_category(value: str) -> str:
    """Map a content-type header onto the category key used by option tables."""
    _, subtype = parse_content_type(value)
    if subtype == "x-www-form-urlencoded":
        return "urlencoded"
    if subtype == "json" or subtype.endswith("+json"):
        return "json"
    return subtype
