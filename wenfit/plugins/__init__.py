"""Plugin system: global rules applied to every top-level validation call."""
from .registry import (
    GlobalRule,
    Plugin,
    PluginAlreadyRegisteredError,
    PluginRegistry,
    Registrar,
    RulePlugin,
    clear_plugins,
    get_plugin_registry,
    register_plugin,
)

__all__ = [
    "GlobalRule",
    "Plugin",
    "PluginAlreadyRegisteredError",
    "PluginRegistry",
    "Registrar",
    "RulePlugin",
    "clear_plugins",
    "get_plugin_registry",
    "register_plugin",
]
