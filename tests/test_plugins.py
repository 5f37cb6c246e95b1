"""Plugin registry and global rules."""
import asyncio
import inspect

import pytest

from wenfit import (
    GlobalRule,
    Plugin,
    PluginAlreadyRegisteredError,
    RulePlugin,
    get_plugin_registry,
    number,
    object_,
    register_plugin,
    string,
)


def rule(name, check, message="rejected", code="plugin.error"):
    return GlobalRule(name=name, validate=check, message=message, code=code)


class TestPluginRegistry:
    """Registration bookkeeping."""

    def test_register_and_lookup(self, plugins):
        plugin = RulePlugin("p", [rule("r", lambda s, v: True)])
        plugins.register(plugin)
        assert plugins.has("p")
        assert plugins.get("p") is plugin
        assert plugins.all() == [plugin]
        assert [r.name for r in plugins.global_rules()] == ["r"]

    def test_duplicate_name_raises(self, plugins):
        plugins.register(RulePlugin("p", []))
        with pytest.raises(PluginAlreadyRegisteredError):
            plugins.register(RulePlugin("p", []))
        with pytest.raises(ValueError):
            plugins.register(RulePlugin("p", []))

    def test_rules_keep_registration_order(self, plugins):
        plugins.register(RulePlugin("one", [rule("a", None), rule("b", None)]))
        plugins.register(RulePlugin("two", [rule("c", None)]))
        assert [r.name for r in plugins.global_rules()] == ["a", "b", "c"]

    def test_clear(self, plugins):
        plugins.register(RulePlugin("p", [rule("r", None)]))
        plugins.clear()
        assert not plugins.has("p")
        assert plugins.global_rules() == []

    def test_custom_plugin_sees_registrar(self, plugins):
        seen = []

        class Counting(Plugin):
            name = "counting"

            def install(self, registrar):
                registrar.add_global_rule(rule("x", lambda s, v: True))
                seen.append(len(registrar.get_global_rules()))

        plugins.register(Counting())
        assert seen == [1]

    def test_global_rules_returns_copy(self, plugins):
        plugins.register(RulePlugin("p", [rule("r", None)]))
        plugins.global_rules().clear()
        assert len(plugins.global_rules()) == 1


class TestGlobalRules:
    """Rules run after the schema's own validation passes."""

    def test_failing_rule_adds_root_error(self, plugins):
        plugins.register(RulePlugin("p", [rule("no-admin", lambda s, v: v != "admin", "Reserved", "reserved")]))
        result = string().safe_parse("admin", plugins=plugins)
        assert [(e.path, e.code, e.message) for e in result.errors] == [((), "reserved", "Reserved")]
        assert string().safe_parse("bob", plugins=plugins).success

    def test_rule_receives_schema_and_raw_input(self, plugins):
        seen = []
        schema = string().to_upper()
        plugins.register(RulePlugin("p", [rule("spy", lambda s, v: seen.append((s, v)) or True)]))
        assert schema.safe_parse("abc", plugins=plugins).data == "ABC"
        assert seen == [(schema, "abc")]

    def test_skipped_when_schema_fails(self, plugins):
        calls = []
        plugins.register(RulePlugin("p", [rule("spy", lambda s, v: calls.append(v) or True)]))
        assert not number().safe_parse("x", plugins=plugins).success
        assert calls == []

    def test_runs_once_per_call_not_per_nested_schema(self, plugins):
        calls = []
        plugins.register(RulePlugin("p", [rule("spy", lambda s, v: calls.append(v) or True)]))
        object_({"a": string(), "b": object_({"c": number()})}).safe_parse({"a": "x", "b": {"c": 1}}, plugins=plugins)
        assert len(calls) == 1

    def test_every_failing_rule_reported_in_order(self, plugins):
        plugins.register(RulePlugin("p", [
            rule("a", lambda s, v: False, "first"),
            rule("b", lambda s, v: True, "never"),
            rule("c", lambda s, v: False, "third"),
        ]))
        assert [e.message for e in number().safe_parse(1, plugins=plugins).errors] == ["first", "third"]

    def test_raising_rule_uses_exception_text(self, plugins):
        def explode(schema, value):
            raise RuntimeError("rule crashed")

        def explode_silently(schema, value):
            raise RuntimeError()

        plugins.register(RulePlugin("p", [rule("a", explode, "fallback a"), rule("b", explode_silently, "fallback b")]))
        result = number().safe_parse(1, plugins=plugins)
        assert [(e.code, e.message) for e in result.errors] == [("plugin.error", "rule crashed"), ("plugin.error", "fallback b")]

    def test_process_wide_registry(self):
        register_plugin(RulePlugin("global", [rule("no-zero", lambda s, v: v != 0, "Zero not allowed")]))
        assert get_plugin_registry().has("global")
        assert number().safe_parse(0).errors[0].message == "Zero not allowed"


class TestAsyncGlobalRules:
    """An async rule makes the whole call deferred."""

    @pytest.mark.asyncio
    async def test_async_rule_makes_sync_schema_async(self, plugins):
        async def not_taken(schema, value):
            await asyncio.sleep(0)
            return value != "taken"

        plugins.register(RulePlugin("p", [rule("unique", not_taken, "Already taken")]))
        pending = string().safe_parse("taken", plugins=plugins)
        assert inspect.isawaitable(pending)
        result = await pending
        assert [e.message for e in result.errors] == ["Already taken"]
        assert (await string().safe_parse("free", plugins=plugins)).data == "free"

    @pytest.mark.asyncio
    async def test_mixed_rules_keep_registration_order(self, plugins):
        async def async_false(schema, value):
            return False

        plugins.register(RulePlugin("p", [
            rule("a", async_false, "async first"),
            rule("b", lambda s, v: False, "sync second"),
        ]))
        result = await number().safe_parse(1, plugins=plugins)
        assert [e.message for e in result.errors] == ["async first", "sync second"]

    @pytest.mark.asyncio
    async def test_async_rule_rejection(self, plugins):
        async def broken(schema, value):
            raise ConnectionError("db down")

        plugins.register(RulePlugin("p", [rule("a", broken, "fallback")]))
        result = await number().safe_parse(1, plugins=plugins)
        assert result.errors[0].message == "db down"

    @pytest.mark.asyncio
    async def test_rules_after_async_schema(self, plugins):
        async def ok(value):
            return True

        plugins.register(RulePlugin("p", [rule("a", lambda s, v: False, "rule failed")]))
        result = await number().refine(ok).safe_parse(1, plugins=plugins)
        assert [e.code for e in result.errors] == ["plugin.error"]
