"""terraform.tf and providers.tf rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tfstudio.engine.escape import quote

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tfstudio.engine.plugins import ProviderConfig
    from tfstudio.engine.project import BackendConfig


class ProviderConfigBuilder:
    """Collects the providers used by a generation run."""

    def __init__(self) -> None:
        self._providers: dict[str, ProviderConfig] = {}
        self._user_configs: dict[str, Mapping[str, Any]] = {}

    def add_provider(self, config: ProviderConfig, user_config: Mapping[str, Any]) -> None:
        self._providers[config.id] = config
        self._user_configs[config.id] = user_config

    def active_provider_ids(self) -> list[str]:
        return list(self._providers)

    def generate_terraform_block(
        self,
        terraform_version: str = ">= 1.0",
        backend: BackendConfig | None = None,
    ) -> str:
        lines = ["terraform {", f"  required_version = {quote(terraform_version)}"]

        if self._providers:
            lines.append("")
            lines.append("  required_providers {")
            lines.extend(p.required_provider_hcl() for p in self._providers.values())
            lines.append("  }")

        if backend is not None:
            lines.append("")
            lines.append(f'  backend "{backend.type}" {{')
            lines.extend(f"    {k} = {quote(v)}" for k, v in backend.config.items())
            lines.append("  }")

        lines.append("}")
        return "\n".join(lines)

    def generate_provider_blocks(self) -> str:
        return "\n\n".join(
            config.provider_block_hcl(self._user_configs.get(pid, {}))
            for pid, config in self._providers.items()
        )
