"""Template set used when the configuration does not name a template file."""

from __future__ import annotations

DEFAULT_TEMPLATES = """\
{% macro jira_summary() -%}
[{{ status | upper }}{% if status == "firing" %}:{{ alerts.firing() | length }}{% endif %}] \
{{ group_labels.values() | join(" ") }}\
{% if common_labels | length > group_labels | length %} \
({{ common_labels.remove(group_labels.names()).values() | join(" ") }})\
{% endif %}
{%- endmacro %}

{% macro jira_description() -%}
{% for alert in alerts.firing() -%}
Labels:
{% for name, value in alert.labels.items() %} - {{ name }} = {{ value }}
{% endfor %}
Annotations:
{% for name, value in alert.annotations.items() %} - {{ name }} = {{ value }}
{% endfor %}
Source: {{ alert.generator_url }}
{% endfor %}
{%- endmacro %}
"""

DEFAULT_SUMMARY = "{{ jira_summary() }}"
DEFAULT_DESCRIPTION = "{{ jira_description() }}"
