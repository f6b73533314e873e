"""Path lookup and template substitution over event data."""

import re
from collections.abc import Mapping, Sequence
from typing import Any

_INDEX_PATTERN = re.compile(r"\[(\d+)\]")
_PLACEHOLDER_PATTERN = re.compile(r"\$\{(\w+)\}")


def _split_path(path: str) -> list[str]:
    """Split ``os.load[0]`` into ``["os", "load", "0"]``."""
    normalized = _INDEX_PATTERN.sub(r".\1", path)
    return [segment for segment in normalized.split(".") if segment]


def reach(obj: Any, path: str) -> Any:
    """Resolve a dotted path inside nested mappings and sequences.

    Args:
        obj: Root object (usually an event).
        path: Dotted path, list items addressed as ``name[0]`` or ``name.0``.

    Returns:
        The value at ``path``, or None if any segment is missing.
    """
    if not path:
        return None
    current = obj
    for segment in _split_path(path):
        if isinstance(current, Mapping):
            if segment in current:
                current = current[segment]
            elif segment.lstrip("-").isdigit() and int(segment) in current:
                current = current[int(segment)]
            else:
                return None
        elif isinstance(current, Sequence) and not isinstance(current, str | bytes):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Replace ``${name}`` tokens with values from ``variables``.

    Unknown names are left in place.
    """
    if "${" not in template:
        return template

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER_PATTERN.sub(_replace, template)
