"""Error Message Templates

Maps an error code to a replacement message so applications can localize or
reword built-in errors without touching schemas. A template is either a string
with {{placeholder}} syntax, substituted from the error's meta mapping, or a
callable receiving that mapping.

Resolution order for a built-in error:
1. message passed to the constraint method (e.g. string().min(3, "Too short"))
2. template registered for the error's code
3. the schema's compiled-in default text

Usage:
    from wenfit import set_error_messages

    set_error_messages({
        "string.min": "Mindestens {{min}} Zeichen",
        "required": lambda meta: f"{meta['key']} fehlt",
    })
"""
from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from wenfit.errors.codes import ErrorCode, code_value
from wenfit.logging import get_logger

log = get_logger(__name__)

MessageTemplate = str | Callable[[dict[str, Any]], str]

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


class MessageRegistry:
    """Registry of message templates keyed by error code.

    Written only by explicit registration calls, read during validation.
    """

    __slots__ = ("_templates",)

    def __init__(self, templates: Mapping[ErrorCode | str, MessageTemplate] | None = None):
        self._templates: dict[str, MessageTemplate] = {}
        if templates: self.set_templates(templates)

    def set_template(self, code: ErrorCode | str, template: MessageTemplate) -> None:
        self._templates[code_value(code)] = template
        log.debug("message_template_set", code=code_value(code))

    def set_templates(self, templates: Mapping[ErrorCode | str, MessageTemplate]) -> None:
        for code, template in templates.items(): self.set_template(code, template)

    def get_template(self, code: ErrorCode | str) -> MessageTemplate | None:
        return self._templates.get(code_value(code))

    def has_template(self, code: ErrorCode | str) -> bool: return code_value(code) in self._templates

    def remove_template(self, code: ErrorCode | str) -> None: self._templates.pop(code_value(code), None)

    def clear(self) -> None:
        self._templates.clear()
        log.debug("message_templates_cleared")

    def __len__(self) -> int: return len(self._templates)

    def format(self, code: ErrorCode | str, default: str, meta: Mapping[str, Any] | None = None) -> str:
        """Render the message for code, falling back to default when no template exists."""
        if (template := self._templates.get(code_value(code))) is None: return default
        if callable(template):
            try:
                return str(template(dict(meta or {})))
            except Exception as e:
                log.warning("message_template_failed", code=code_value(code), error=str(e))
                return default
        return self._substitute(template, meta)

    @staticmethod
    def _substitute(template: str, meta: Mapping[str, Any] | None) -> str:
        """Replace {{key}} with meta[key]; unknown keys are left verbatim."""
        if not meta: return template
        return _PLACEHOLDER.sub(lambda m: str(meta[m.group(1)]) if m.group(1) in meta else m.group(0), template)


_default_registry = MessageRegistry()


def get_message_registry() -> MessageRegistry:
    """Process-wide registry consulted when no registry is injected."""
    return _default_registry


def set_error_message(code: ErrorCode | str, template: MessageTemplate) -> None:
    _default_registry.set_template(code, template)


def set_error_messages(templates: Mapping[ErrorCode | str, MessageTemplate]) -> None:
    _default_registry.set_templates(templates)


def clear_error_messages() -> None:
    _default_registry.clear()
