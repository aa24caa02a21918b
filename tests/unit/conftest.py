"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tfstudio.config import load
from tfstudio.engine.registry import PluginRegistry
from tfstudio.plugins.azure_networking import create_plugin

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from tfstudio.config.schema import Document

_ENV_VARS = (
    "TFSTUDIO_CONFIG",
    "TFSTUDIO_OUTPUT_DIR",
    "TFSTUDIO_LOG",
    "ARM_SUBSCRIPTION_ID",
    "ARM_TENANT_ID",
    "NO_COLOR",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove TFSTUDIO_* / ARM_* env vars so unit tests don't leak host config."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_document(tmp_path: Path) -> Callable[..., Document]:
    """Factory fixture: write YAML + optional .env, return loaded Document."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Document:
        (tmp_path / "tfstudio.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "tfstudio.yaml")

    return _make


@pytest.fixture
def azure_registry() -> PluginRegistry:
    """Registry with the built-in Azure networking plugin registered."""
    registry = PluginRegistry()
    registry.register_plugin(create_plugin())
    registry.finalize()
    return registry
