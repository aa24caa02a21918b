"""Plugin registry: resource types, providers, connection rules.

Plugins register synchronously with ``register_plugin`` or are declared
lazily per provider with ``register_lazy_plugin`` and loaded on demand by
``load_plugins_for_providers``. The registry is meant to be constructed once
and passed explicitly to the pipeline, the validators and the UI layer; it
supports a single writer.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from tfstudio.engine.edge_rules import EdgeRuleValidator, OutputAcceptingHandle
from tfstudio.engine.errors import (
    DuplicateResourceTypeError,
    PluginLoadError,
    PluginRegistryError,
    UnknownResourceTypeError,
)
from tfstudio.engine.plugins import InfraPlugin

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from tfstudio.engine.plugins import (
        BindingHclGenerator,
        ConnectionRule,
        HclGenerator,
        IconDefinition,
        PaletteCategory,
        PluginLoader,
        ProviderConfig,
        ResourceTypeRegistration,
    )
    from tfstudio.resources.schema import ResourceSchema

logger = logging.getLogger(__name__)

LoadState = Literal["pending", "loading", "loaded", "error"]


@dataclass
class LazyPluginEntry:
    provider_id: str
    loader: PluginLoader
    state: LoadState = "pending"
    error: BaseException | None = None


class PluginRegistry:
    """Registry of resource types contributed by provider plugins."""

    def __init__(self) -> None:
        self._plugins: list[InfraPlugin] = []
        self._resource_types: dict[str, ResourceTypeRegistration] = {}
        self._providers: dict[str, ProviderConfig] = {}
        self._connection_rules: list[ConnectionRule] = []
        self._binding_generators: list[BindingHclGenerator] = []
        self._palette_categories: dict[str, PaletteCategory] = {}

        self._loaded_providers: set[str] = set()
        self._lazy: dict[str, LazyPluginEntry] = {}
        self._in_flight: dict[str, asyncio.Task[None]] = {}
        self._notified: set[int] = set()
        self._listeners: list[Callable[[PluginRegistry], None]] = []

    # --- Registration ---

    def register_plugin(self, plugin: InfraPlugin) -> None:
        """Merge a plugin's contributions.

        Raises:
            DuplicateResourceTypeError: If any of the plugin's type ids is taken.
                Nothing from the plugin is merged in that case.
        """
        for type_id in plugin.resource_types:
            if type_id in self._resource_types:
                raise DuplicateResourceTypeError(type_id, plugin.id)

        if plugin.provider_config is not None and plugin.provider_id not in self._providers:
            self._providers[plugin.provider_id] = plugin.provider_config

        self._resource_types.update(plugin.resource_types)
        self._connection_rules.extend(plugin.connection_rules)
        self._binding_generators.extend(plugin.binding_generators)
        for category in plugin.palette_categories:
            self._palette_categories.setdefault(category.id, category)

        self._plugins.append(plugin)
        self._loaded_providers.add(plugin.provider_id)
        logger.debug(
            "Registered plugin %s (%d resource types)", plugin.id, len(plugin.resource_types)
        )

    def register_lazy_plugin(self, provider_id: str, loader: PluginLoader) -> None:
        """Declare a plugin without loading it."""
        if provider_id in self._lazy:
            raise PluginRegistryError(f'A plugin loader for "{provider_id}" is already declared')
        self._lazy[provider_id] = LazyPluginEntry(provider_id=provider_id, loader=loader)

    async def load_plugins_for_providers(self, provider_ids: Iterable[str]) -> None:
        """Load the declared plugins of *provider_ids* that are not loaded yet.

        Concurrent calls for the same provider share one in-flight load, so a
        loader runs once no matter how many callers wait on it.

        Raises:
            PluginLoadError: If any loader in the batch fails. Other providers
                of the batch still load; the failed one can be retried.
        """
        wanted: list[str] = []
        for provider_id in dict.fromkeys(provider_ids):
            if self.is_provider_loaded(provider_id):
                continue
            if provider_id not in self._lazy:
                logger.debug("No plugin declared for provider %s, skipping", provider_id)
                continue
            wanted.append(provider_id)
        if not wanted:
            return

        results = await asyncio.gather(
            *(self._load_provider(pid) for pid in wanted), return_exceptions=True
        )
        self.finalize()

        for result in results:
            if isinstance(result, BaseException):
                raise result

    def _load_provider(self, provider_id: str) -> asyncio.Task[None]:
        task = self._in_flight.get(provider_id)
        if task is None:
            task = asyncio.ensure_future(self._run_loader(self._lazy[provider_id]))
            self._in_flight[provider_id] = task
            task.add_done_callback(lambda t: self._forget_in_flight(provider_id, t))
        return task

    def _forget_in_flight(self, provider_id: str, task: asyncio.Task[None]) -> None:
        if self._in_flight.get(provider_id) is task:
            del self._in_flight[provider_id]

    async def _run_loader(self, entry: LazyPluginEntry) -> None:
        entry.state = "loading"
        entry.error = None
        logger.debug("Loading plugin for provider %s", entry.provider_id)
        try:
            result = entry.loader()
            plugin = await result if inspect.isawaitable(result) else result
            if not isinstance(plugin, InfraPlugin):
                raise TypeError(f"loader returned {type(plugin).__name__}, expected InfraPlugin")
            if plugin.provider_id != entry.provider_id:
                raise ValueError(
                    f'plugin {plugin.id} provides "{plugin.provider_id}", '
                    f'declared for "{entry.provider_id}"'
                )
            self.register_plugin(plugin)
        except asyncio.CancelledError:
            entry.state = "pending"
            raise
        except Exception as exc:
            entry.state = "error"
            entry.error = exc
            logger.debug("Plugin load failed for %s", entry.provider_id, exc_info=True)
            self._notify()
            raise PluginLoadError(entry.provider_id, str(exc)) from exc
        entry.state = "loaded"
        logger.info("Loaded plugin %s for provider %s", plugin.id, entry.provider_id)

    def finalize(self) -> None:
        """Re-sort palette categories and notify newly registered plugins.

        Incremental and idempotent: each plugin's ``on_all_plugins_registered``
        runs once, however many times this is called.
        """
        ordered = sorted(self._palette_categories.values(), key=lambda c: c.order)
        self._palette_categories = {c.id: c for c in ordered}

        for plugin in self._plugins:
            if id(plugin) in self._notified:
                continue
            self._notified.add(id(plugin))
            if plugin.on_all_plugins_registered is not None:
                plugin.on_all_plugins_registered(self)

        self._notify()

    # --- Change notification ---

    def subscribe(self, listener: Callable[[PluginRegistry], None]) -> Callable[[], None]:
        """Call *listener* after each finalize or failed load; returns an unsubscribe."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- Load status ---

    def is_provider_loaded(self, provider_id: str) -> bool:
        return provider_id in self._loaded_providers

    def lazy_entry(self, provider_id: str) -> LazyPluginEntry | None:
        return self._lazy.get(provider_id)

    @property
    def loading_providers(self) -> set[str]:
        return set(self._in_flight)

    @property
    def is_loading(self) -> bool:
        return bool(self._in_flight)

    @property
    def load_errors(self) -> dict[str, BaseException]:
        return {
            pid: entry.error
            for pid, entry in self._lazy.items()
            if entry.state == "error" and entry.error is not None
        }

    # --- Queries ---

    def get_registration(self, type_id: str) -> ResourceTypeRegistration:
        try:
            return self._resource_types[type_id]
        except KeyError as e:
            raise UnknownResourceTypeError(type_id) from e

    def get_resource_schema(self, type_id: str) -> ResourceSchema | None:
        reg = self._resource_types.get(type_id)
        return reg.schema if reg is not None else None

    def get_hcl_generator(self, type_id: str) -> HclGenerator:
        return self.get_registration(type_id).hcl_generator

    def get_icon(self, type_id: str) -> IconDefinition | None:
        return self.get_registration(type_id).icon

    def get_provider_config(self, provider_id: str) -> ProviderConfig | None:
        return self._providers.get(provider_id)

    def has_resource_type(self, type_id: str) -> bool:
        return type_id in self._resource_types

    def resource_type_ids(self) -> list[str]:
        return list(self._resource_types)

    def provider_ids(self) -> list[str]:
        return list(self._providers)

    def get_resource_types_for_category(self, category: str) -> list[ResourceTypeRegistration]:
        return [r for r in self._resource_types.values() if r.schema.category == category]

    def get_connection_rules(self) -> list[ConnectionRule]:
        return list(self._connection_rules)

    def get_palette_categories(self) -> list[PaletteCategory]:
        return list(self._palette_categories.values())

    def get_binding_generator(
        self, source_type: str, target_type: str
    ) -> BindingHclGenerator | None:
        """Binding generator for a source/target pair; exact match beats wildcard."""
        exact = next(
            (
                g
                for g in self._binding_generators
                if g.source_type == source_type and g.target_type == target_type
            ),
            None,
        )
        if exact is not None:
            return exact
        return next(
            (
                g
                for g in self._binding_generators
                if g.source_type is None and g.target_type == target_type
            ),
            None,
        )

    def build_edge_validator(self) -> EdgeRuleValidator:
        handles = [
            OutputAcceptingHandle(type_id=type_id, handle_id=h.id)
            for type_id, reg in self._resource_types.items()
            for h in reg.schema.handles
            if h.accepts_outputs
        ]
        return EdgeRuleValidator(self._connection_rules, handles)
