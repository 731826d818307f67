"""Recursive rendering of structured custom-field values.

Custom Jira fields may be whole structures (``{"value": "{{ ... }}"}``,
lists of option objects, ...). Every string inside, mapping keys included, is
rendered; the shape is rebuilt with lists and string-keyed dicts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, Union

from ticketbridge.modules.alertticket.domain import AlertGroup
from ticketbridge.modules.alertticket.template.renderer import TemplateSet

Scalar = Union[int, float, bool, None]
TemplatedValue = Union[str, Sequence["TemplatedValue"], Mapping[str, "TemplatedValue"], Scalar]


def render_value(value: TemplatedValue, templates: TemplateSet, group: AlertGroup) -> Any:
    if isinstance(value, str):
        return templates.render(value, group)
    if isinstance(value, Mapping):
        rendered: Dict[str, Any] = {}
        for key, item in value.items():
            # non-string keys cannot become Jira field names
            if not isinstance(key, str):
                continue
            rendered[templates.render(key, group)] = render_value(item, templates, group)
        return rendered
    if isinstance(value, (list, tuple)):
        items: List[Any] = [render_value(item, templates, group) for item in value]
        return items
    return value


def render_fields(fields: Mapping[str, TemplatedValue], templates: TemplateSet, group: AlertGroup) -> Dict[str, Any]:
    return {name: render_value(value, templates, group) for name, value in fields.items()}
