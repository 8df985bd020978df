"""
Accessors for loosely-typed JSON/YAML values.

Detector output and snapshot documents are probed best-effort: every accessor
returns ``None`` when the value does not have the requested shape instead of
raising, so callers decide what a missing shape means.
"""
import json
from typing import Any, Dict, List, Optional


def as_map(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return {str(k): v for k, v in value.items()}
    return None


def as_list(value: Any) -> Optional[List[Any]]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def scalar_string(value: Any) -> Optional[str]:
    """Render a JSON scalar as text (``True`` -> ``"true"``, ``0.8`` -> ``"0.8"``)."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return None


def as_string_list(value: Any) -> Optional[List[str]]:
    """A single string becomes a one-element list; non-scalar items are dropped."""
    if isinstance(value, str):
        return [value]
    items = as_list(value)
    if items is None:
        return None
    out = []
    for item in items:
        text = scalar_string(item)
        if text is not None:
            out.append(text)
    return out


def first_string(mapping: Any, *keys: str) -> Optional[str]:
    """Return the first non-blank scalar found under ``keys``."""
    data = as_map(mapping)
    if data is None:
        return None
    for key in keys:
        text = scalar_string(data.get(key))
        if text is not None and text.strip():
            return text
    return None
