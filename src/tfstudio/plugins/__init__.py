"""Built-in provider plugins."""

# Provider id -> plugin reference, declared lazily unless disabled.
BUILTIN_PLUGINS: dict[str, str] = {
    "azurerm": "tfstudio.plugins.azure_networking:create_plugin",
}
