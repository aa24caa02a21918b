"""YAML project file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML

from tfstudio.config.schema import Document

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Provider id -> (provider config key -> environment variable).
_PROVIDER_ENV_MAP: dict[str, dict[str, str]] = {
    "azurerm": {
        "subscription_id": "ARM_SUBSCRIPTION_ID",
        "tenant_id": "ARM_TENANT_ID",
    },
}


def _resolve_provider_configs(raw_configs: Any, config_dir: Path) -> Any:
    """Fill provider settings from YAML, env vars, and the ``.env`` file.

    Priority (highest wins): YAML value > env var > ``.env`` file.
    """
    if not isinstance(raw_configs, dict):
        return raw_configs

    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved = {k: dict(v) if isinstance(v, dict) else v for k, v in raw_configs.items()}
    for provider_id, fields in _PROVIDER_ENV_MAP.items():
        for field, env_key in fields.items():
            section = resolved.get(provider_id)
            if section is None:
                section = {}
            elif not isinstance(section, dict) or section.get(field) is not None:
                continue
            val = os.environ.get(env_key)
            if val is None:
                val = dotenv_vals.get(env_key)
            if val is not None:
                section[field] = val
                resolved[provider_id] = section
    return resolved


def _validate_unique_ids(document: Document) -> list[str]:
    """Check that no two nodes share an id."""
    seen: set[str] = set()
    errors: list[str] = []
    for node in document.nodes:
        if node.id in seen:
            errors.append(f"Duplicate node id '{node.id}'")
        seen.add(node.id)
    return errors


def load_config(path: Path | str) -> Document:
    """Load a YAML project file and return a ``Document``.

    Raises:
        ConfigError: On YAML parse errors or validation failures.
    """
    path = Path(path)

    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    try:
        project = raw.get("project") or {}
        if isinstance(project, dict):
            raw["project"] = {
                **project,
                "provider_configs": _resolve_provider_configs(
                    project.get("provider_configs") or {}, path.parent
                ),
            }
        document = Document.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    document.config_dir = path.parent

    errors = _validate_unique_ids(document)
    if errors:
        raise ConfigError("\n".join(errors))

    logger.info("Loaded config from %s (%d nodes)", path, len(document.nodes))
    return document
