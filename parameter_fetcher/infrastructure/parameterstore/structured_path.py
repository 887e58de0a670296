"""
Structured-path lookup inside JSON parameter values.

Paths use the dotted syntax secret-store users already write in their
manifests:

    a.b        → {"a": {"b": ...}}
    items.0    → {"items": [..., ...]}
    a\\.b      → {"a.b": ...}

The path is walked one segment at a time. An all-digit segment indexes a
list and is an ordinary key on an object, so ``ports.80`` reads
``{"ports": {"80": ...}}``. Each segment is quoted before it is handed to
jmespath, so keys containing ``-`` or other operator characters work
unchanged. A field holding null exists and reads as an empty string.
"""

import json
from typing import Any

import jmespath
from jmespath.exceptions import JMESPathError


def _split(path: str) -> list[str]:
    segments: list[str] = []
    current: list[str] = []
    escaped = False
    for char in path:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ".":
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
    segments.append("".join(current))
    return segments


def segment_expression(segment: str, node: Any) -> str:
    """jmespath expression selecting *segment* from *node*."""
    if isinstance(node, list) and segment.isdigit():
        return f"[{int(segment)}]"
    return json.dumps(segment)


def _has(node: Any, segment: str) -> bool:
    if isinstance(node, dict):
        return segment in node
    if isinstance(node, list):
        return segment.isdigit() and int(segment) < len(node)
    return False


def render(value: Any) -> str:
    """String form of a resolved value: strings verbatim, null as "", anything else as compact JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def get_path(document: str, path: str) -> tuple[str, bool]:
    """Evaluate *path* against the JSON *document*.

    Returns:
        (rendered value, True) when the path resolves to a field, including
        one holding null (rendered as ""); ("", False) otherwise, including
        when *document* is not valid JSON.
    """
    try:
        node = json.loads(document)
    except ValueError:
        return "", False
    for segment in _split(path):
        if not _has(node, segment):
            return "", False
        try:
            node = jmespath.search(segment_expression(segment, node), node)
        except JMESPathError:
            return "", False
    return render(node), True
