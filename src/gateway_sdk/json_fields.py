"""
Minimal JSON field extraction for authentication responses

Only tolerant of flat, non-nested, non-escaped JSON objects such as
``{"accessKey":"abc","expireSeconds":7200}``. This is not a general-purpose
JSON parser.
"""

from typing import Optional


def extract_field(raw_text: str, field_name: str) -> Optional[str]:
    """
    Extract a scalar field from flat JSON text.

    String values (``"key":"value"``) are tried first, then bare values
    (``"key":value``) which run up to the next ``,`` or ``}`` and are trimmed.

    Args:
        raw_text: Raw response body
        field_name: Name of the field to extract

    Returns:
        Optional[str]: Field value as text, or None if not found
    """
    if not raw_text:
        return None

    string_marker = f'"{field_name}":"'
    index = raw_text.find(string_marker)
    if index != -1:
        start = index + len(string_marker)
        end = raw_text.find('"', start)
        if end != -1:
            return raw_text[start:end]

    bare_marker = f'"{field_name}":'
    index = raw_text.find(bare_marker)
    if index != -1:
        start = index + len(bare_marker)
        end = raw_text.find(',', start)
        if end == -1:
            end = raw_text.find('}', start)
        if end != -1:
            return raw_text[start:end].strip()

    return None
