"""Plugin references: resolution to ``InfraPlugin`` loaders."""

from __future__ import annotations

import asyncio
import importlib
import importlib.metadata
import importlib.util
import inspect
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tfstudio.engine.plugins import InfraPlugin

if TYPE_CHECKING:
    from types import ModuleType

    from tfstudio.engine.plugins import PluginLoader
    from tfstudio.engine.registry import PluginRegistry

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "tfstudio.plugins"


class PluginResolutionError(Exception):
    """Raised when a plugin reference cannot be turned into a plugin."""


def _load_local_module(module_path: str, config_dir: Path) -> ModuleType:
    """Load a Python module from a file relative to *config_dir*."""
    parts = module_path.split(".")
    candidates = [
        config_dir / Path(*parts).with_suffix(".py"),
        config_dir / Path(*parts) / "__init__.py",
    ]
    file_path = next((p for p in candidates if p.exists()), None)
    if file_path is None:
        raise PluginResolutionError(f"Module '{module_path}' not found relative to {config_dir}")

    spec = importlib.util.spec_from_file_location(module_path, file_path)
    if spec is None or spec.loader is None:
        raise PluginResolutionError(f"Failed to create module spec for '{file_path}'")
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def resolve_reference(reference: str, config_dir: Path) -> Any:
    """Resolve a plugin *reference* to the object it names.

    Resolution order:

    1. No ``:``: entry-point lookup (group ``tfstudio.plugins``).
    2. Has ``:``: split into ``module_path:attribute``.
       a. Try ``importlib.import_module`` (installed packages).
       b. Fall back to ``spec_from_file_location`` (local files relative to *config_dir*).
    """
    if ":" not in reference:
        eps = list(importlib.metadata.entry_points(group=ENTRY_POINT_GROUP, name=reference))
        if not eps:
            raise PluginResolutionError(
                f"No entry point found for '{reference}' in group '{ENTRY_POINT_GROUP}'"
            )
        return eps[0].load()

    module_path, _, attribute = reference.rpartition(":")
    if not module_path or not attribute:
        raise PluginResolutionError(
            f"Invalid plugin reference '{reference}': expected 'module.path:attribute'"
        )

    try:
        mod = importlib.import_module(module_path)
    except ModuleNotFoundError:
        mod = _load_local_module(module_path, config_dir)

    obj = getattr(mod, attribute, None)
    if obj is None:
        raise PluginResolutionError(f"Module has no attribute '{attribute}' (from '{reference}')")
    return obj


def make_loader(provider_id: str, reference: str, config_dir: Path) -> PluginLoader:
    """Build a lazy loader for *reference*.

    The reference may name an ``InfraPlugin`` or a factory returning one
    (optionally as an awaitable). Imports run in a worker thread.
    """

    async def _load() -> InfraPlugin:
        obj = await asyncio.to_thread(resolve_reference, reference, config_dir)
        result = obj() if callable(obj) else obj
        plugin = await result if inspect.isawaitable(result) else result
        if not isinstance(plugin, InfraPlugin):
            raise PluginResolutionError(
                f"'{reference}' did not produce an InfraPlugin (got {type(plugin).__name__})"
            )
        if plugin.provider_id != provider_id:
            raise PluginResolutionError(
                f"'{reference}' provides '{plugin.provider_id}', declared for '{provider_id}'"
            )
        return plugin

    return _load


def declare_plugins(
    registry: PluginRegistry, references: dict[str, str], config_dir: Path
) -> None:
    """Declare one lazy loader per provider id on *registry*."""
    for provider_id, reference in references.items():
        logger.debug("Declaring plugin %s for provider %s", reference, provider_id)
        registry.register_lazy_plugin(provider_id, make_loader(provider_id, reference, config_dir))


def declare_entry_point_plugins(
    registry: PluginRegistry, provider_ids: list[str], config_dir: Path
) -> None:
    """Declare entry-point plugins for providers that have no loader yet.

    Entry points in ``tfstudio.plugins`` are named after the provider id
    they serve.
    """
    available = {ep.name for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)}
    for provider_id in provider_ids:
        if registry.lazy_entry(provider_id) is not None or provider_id not in available:
            continue
        loader = make_loader(provider_id, provider_id, config_dir)
        registry.register_lazy_plugin(provider_id, loader)
