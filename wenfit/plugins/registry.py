"""Plugin and Global Rule Registry

Plugins contribute global rules: checks applied to the raw input of every
top-level safe_parse()/parse() call once the schema's own validation has
passed. Rules run in registration order and each failing rule adds one error
at the root path.

Usage:
    from wenfit import GlobalRule, RulePlugin, register_plugin

    no_admin = GlobalRule(
        name="no-admin",
        validate=lambda schema, value: value != "admin",
        message="Reserved value",
        code="reserved",
    )
    register_plugin(RulePlugin("reserved-words", [no_admin]))

A validate callable may return an awaitable; the call then completes
asynchronously.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol, Sequence

from wenfit.logging import get_logger

if TYPE_CHECKING:
    from wenfit.core.schema import Schema

log = get_logger(__name__)

RuleCheck = Callable[["Schema", Any], "bool | Awaitable[bool]"]


@dataclass(frozen=True, slots=True)
class GlobalRule:
    """Validation check applied to every top-level call."""
    name: str
    validate: RuleCheck
    message: str
    code: str = "plugin.error"


class Registrar(Protocol):
    """What a plugin sees while installing."""

    def add_global_rule(self, rule: GlobalRule) -> None: ...

    def get_global_rules(self) -> list[GlobalRule]: ...


class Plugin(ABC):
    """Extension unit, identified by a unique name."""

    name: str

    @abstractmethod
    def install(self, registrar: Registrar) -> None:
        """Contribute rules through registrar."""


class RulePlugin(Plugin):
    """Plugin installing a fixed list of global rules."""

    def __init__(self, name: str, rules: Sequence[GlobalRule]):
        self.name = name
        self.rules = tuple(rules)

    def install(self, registrar: Registrar) -> None:
        for rule in self.rules: registrar.add_global_rule(rule)

    def __repr__(self) -> str: return f"RulePlugin(name={self.name!r}, rules={len(self.rules)})"


class PluginAlreadyRegisteredError(ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Plugin {name!r} is already registered")


class _Installer:
    """Registrar handed to Plugin.install, bound to one registry."""

    __slots__ = ("_registry",)

    def __init__(self, registry: PluginRegistry):
        self._registry = registry

    def add_global_rule(self, rule: GlobalRule) -> None:
        self._registry._rules.append(rule)

    def get_global_rules(self) -> list[GlobalRule]: return self._registry.global_rules()


class PluginRegistry:
    """Registered plugins by name plus the flattened, ordered global rule list.

    Written only by register()/clear(), read during validation.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._rules: list[GlobalRule] = []

    def register(self, plugin: Plugin) -> None:
        """Install plugin; a name can only be registered once."""
        if plugin.name in self._plugins: raise PluginAlreadyRegisteredError(plugin.name)
        self._plugins[plugin.name] = plugin
        before = len(self._rules)
        plugin.install(_Installer(self))
        log.info("plugin_registered", plugin=plugin.name, rules_added=len(self._rules) - before)

    def get(self, name: str) -> Plugin | None: return self._plugins.get(name)

    def has(self, name: str) -> bool: return name in self._plugins

    def all(self) -> list[Plugin]: return list(self._plugins.values())

    def global_rules(self) -> list[GlobalRule]:
        """Rules in registration order (a copy)."""
        return list(self._rules)

    def clear(self) -> None:
        self._plugins.clear()
        self._rules.clear()
        log.debug("plugins_cleared")

    def __len__(self) -> int: return len(self._plugins)


_default_registry = PluginRegistry()


def get_plugin_registry() -> PluginRegistry:
    """Process-wide registry consulted when no registry is injected."""
    return _default_registry


def register_plugin(plugin: Plugin) -> None:
    _default_registry.register(plugin)


def clear_plugins() -> None:
    _default_registry.clear()
