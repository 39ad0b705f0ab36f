"""Small naming helpers shared by the path and model extractors."""

from __future__ import annotations


def capitalize_first(s: str) -> str:
    """``"listExtensions"`` -> ``"ListExtensions"``."""
    return s[:1].upper() + s[1:]


def lower_first(s: str) -> str:
    """``"ExtensionInfo"`` -> ``"extensionInfo"``."""
    return s[:1].lower() + s[1:]


def ref_name(ref: str) -> str:
    """Strip a JSON reference down to the name it points at.

    ``"#/components/schemas/ExtensionInfo"`` -> ``"ExtensionInfo"``
    """
    return ref.rsplit("/", 1)[-1]
