"""HCL string escaping and value rendering."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
    # Keep user text from turning into Terraform interpolation.
    ("${", "$${"),
)


def escape_hcl_string(value: str) -> str:
    """Escape *value* for a double-quoted HCL string."""
    for old, new in _ESCAPES:
        value = value.replace(old, new)
    return value


def quote(value: str) -> str:
    return f'"{escape_hcl_string(value)}"'


def format_hcl_value(value: Any, indent: int = 2) -> str:
    """Render a Python value as an HCL literal expression.

    Mappings render as multi-line objects whose entries are indented by
    ``indent + 2`` spaces; the closing brace aligns with *indent*.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return json.dumps(value)
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, Mapping):
        if not value:
            return "{}"
        pad = " " * (indent + 2)
        inner = "\n".join(
            f"{pad}{k} = {format_hcl_value(v, indent + 2)}" for k, v in value.items()
        )
        return f"{{\n{inner}\n{' ' * indent}}}"
    if isinstance(value, list | tuple | set | frozenset):
        return "[" + ", ".join(format_hcl_value(v, indent) for v in value) + "]"
    return quote(str(value))
