"""Resource naming conventions."""

from tfstudio.naming.template import (
    NamingConvention,
    NamingTokens,
    apply_naming_template,
    build_tokens,
    extract_slug,
    sanitize_terraform_name,
)

__all__ = [
    "NamingConvention",
    "NamingTokens",
    "apply_naming_template",
    "build_tokens",
    "extract_slug",
    "sanitize_terraform_name",
]
