"""Jinja2 rendering of ticket fields.

A :class:`TemplateSet` wraps one Jinja2 source of named macros, compiled once.
Ticket fields from the receiver configuration are small ad-hoc templates that
are rendered against an alert group with every public macro of the set in
scope, so ``summary: "{{ jira_summary() }}"`` reuses a shared definition.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, List

import jinja2

from ticketbridge.modules.alertticket.domain import AlertGroup
from ticketbridge.modules.alertticket.template.defaults import DEFAULT_TEMPLATES
from ticketbridge.modules.alertticket.util import AlertTicketConstant, ConfigError, TemplateError

log = logging.getLogger(__name__)

SET_NAME = "templates"


def _match(pattern: str, text: str) -> bool:
    return re.search(pattern, text) is not None


_GROUP_REF = re.compile(r"\$(?:\{(\w+)\}|(\d+))")


def _re_replace_all(pattern: str, repl: str, text: str) -> str:
    # replacement strings use $1 or ${name} group references
    python_repl = _GROUP_REF.sub(lambda m: f"\\g<{m.group(1) or m.group(2)}>", repl)
    return re.sub(pattern, python_repl, text)


def _string_slice(*items: str) -> List[str]:
    return list(items)


def has_template_syntax(text: str) -> bool:
    return any(marker in text for marker in AlertTicketConstant.TEMPLATE_MARKERS)


def _build_environment(source: str) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.DictLoader({SET_NAME: source}),
        undefined=jinja2.ChainableUndefined,
        autoescape=False,
        keep_trailing_newline=True,
    )
    env.filters.update(
        to_upper=lambda text: str(text).upper(),
        to_lower=lambda text: str(text).lower(),
        match=lambda text, pattern: _match(pattern, text),
        re_replace_all=lambda text, pattern, repl: _re_replace_all(pattern, repl, text),
    )
    env.globals.update(
        match=_match,
        re_replace_all=_re_replace_all,
        string_slice=_string_slice,
    )
    return env


class TemplateSet:
    """Immutable compiled template set; safe to share between requests."""

    def __init__(self, source: str, cache_size: int = 256) -> None:
        self.source = source
        self._env = _build_environment(source)
        try:
            self._set = self._env.get_template(SET_NAME)
        except jinja2.TemplateError as exc:
            raise TemplateError(f"parse template set: {exc}", template=source) from exc
        self._compile: Callable[[str], jinja2.Template] = lru_cache(maxsize=cache_size)(self._env.from_string)

    @classmethod
    def compile(cls, source: str) -> "TemplateSet":
        return cls(source)

    @classmethod
    def default(cls) -> "TemplateSet":
        return cls(DEFAULT_TEMPLATES)

    @classmethod
    def load(cls, path: str | Path) -> "TemplateSet":
        log.debug("loading templates from %s", path)
        try:
            source = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"cannot read template file {path}: {exc}") from exc
        return cls(source)

    def render(self, text: str, group: AlertGroup) -> str:
        if not text or not has_template_syntax(text):
            return text
        try:
            template = self._compile(text)
            context = group.template_context()
            context.update(self._macros(context))
            result = template.render(context)
        except Exception as exc:  # noqa: BLE001
            raise TemplateError(f"render template {text!r}: {exc}", template=text) from exc
        log.debug("template %r rendered to %r", text, result)
        return result

    def _macros(self, context: Dict[str, Any]) -> Dict[str, Any]:
        module = self._set.make_module(vars=context)
        return {name: value for name, value in vars(module).items() if not name.startswith("_")}
