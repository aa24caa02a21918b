"""Naming templates: token substitution and slug extraction.

Templates use ``{type}``, ``{env}``, ``{name}`` (always substituted) and the
optional ``{region}`` / ``{org}`` tokens. An optional token with no value is
removed together with one adjacent separator (``-``, ``_`` or ``.``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from tfstudio.resources.schema import NamingConstraints

_SEPARATORS = "[-_.]"
_OPTIONAL_TOKENS = ("region", "org")
_SLUG_SENTINEL = "___slug___"


class NamingConvention(BaseModel):
    """Project-wide naming convention."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    template: str = "{type}-{name}-{env}"
    env: str = "dev"
    region: str | None = None
    org: str | None = None


@dataclass(frozen=True, slots=True)
class NamingTokens:
    type: str
    env: str
    name: str = ""
    region: str | None = None
    org: str | None = None


def build_tokens(convention: NamingConvention, abbreviation: str, name: str = "") -> NamingTokens:
    """Token set for a resource type's abbreviation under *convention*."""
    return NamingTokens(
        type=abbreviation,
        env=convention.env,
        name=name,
        region=convention.region,
        org=convention.org,
    )


def apply_naming_template(
    template: str,
    tokens: NamingTokens,
    constraints: NamingConstraints | None = None,
) -> str:
    """Render *template* with *tokens*, then apply *constraints*.

    Constraints run in a fixed order: lowercase, hyphen stripping, truncation.
    """
    result = (
        template.replace("{type}", tokens.type)
        .replace("{env}", tokens.env)
        .replace("{name}", tokens.name)
    )

    for key in _OPTIONAL_TOKENS:
        value = getattr(tokens, key)
        token = re.escape("{" + key + "}")
        if not value:
            pattern = f"{_SEPARATORS}{token}|{token}{_SEPARATORS}|{token}"
            result = re.sub(pattern, "", result)
        else:
            result = result.replace("{" + key + "}", value)

    if constraints is not None:
        if constraints.lowercase:
            result = result.lower()
        if constraints.no_hyphens:
            result = result.replace("-", "")
        if constraints.max_length and len(result) > constraints.max_length:
            result = result[: constraints.max_length]

    return result


def extract_slug(
    full_name: str,
    template: str,
    tokens: NamingTokens,
    constraints: NamingConstraints | None = None,
) -> str:
    """Recover the ``{name}`` part of *full_name* rendered from *template*.

    Falls back to *full_name* when it does not have the template's shape
    (names can be edited by hand). ``tokens.name`` is ignored.
    """
    rendered = apply_naming_template(template, replace(tokens, name=_SLUG_SENTINEL), constraints)

    parts = rendered.split(_SLUG_SENTINEL)
    if len(parts) != 2:
        return full_name
    prefix, suffix = parts

    if not full_name.startswith(prefix):
        return full_name
    rest = full_name[len(prefix) :]

    if suffix:
        if not rest.endswith(suffix):
            return full_name
        rest = rest[: -len(suffix)]

    return rest or full_name


def sanitize_terraform_name(name: str) -> str:
    """Turn a cloud resource name into a valid Terraform identifier."""
    cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", name.replace("-", "_")).lower()
    return re.sub(r"^[0-9_]+", "", cleaned) or "resource"
