import pytest

from conftest import build_group
from ticketbridge.modules.alertticket.template import (
    DEFAULT_DESCRIPTION,
    DEFAULT_SUMMARY,
    TemplateSet,
    render_fields,
    render_value,
)
from ticketbridge.modules.alertticket.util import ConfigError, TemplateError


@pytest.fixture
def templates():
    return TemplateSet.default()


def test_text_without_markers_is_returned_unchanged(templates):
    group = build_group()
    assert templates.render("CPU at 100% on {host}", group) == "CPU at 100% on {host}"
    assert templates.render("", group) == ""


def test_render_group_fields(templates):
    group = build_group()
    assert templates.render("{{ group_labels.alertname }} @ {{ receiver }}", group) == "HighCPU @ jira-ops"
    assert templates.render("{{ alerts | length }}/{{ alerts.firing() | length }}", group) == "1/1"


def test_missing_keys_render_empty(templates):
    group = build_group()
    assert templates.render("[{{ group_labels.nope }}]", group) == "[]"
    assert templates.render("[{{ nothing.deeper.still }}]", group) == "[]"


def test_helper_functions(templates):
    group = build_group()
    assert templates.render("{{ group_labels.env | to_upper }}", group) == "PROD"
    assert templates.render("{{ 'MiXeD' | to_lower }}", group) == "mixed"
    assert templates.render("{{ match('^High', group_labels.alertname) }}", group) == "True"
    assert templates.render("{{ re_replace_all('host-([0-9]+)', 'node$1', 'host-7') }}", group) == "node7"
    assert templates.render("{{ 'a-b' | re_replace_all('-', '+') }}", group) == "a+b"
    assert templates.render("{{ string_slice('a', 'b') | join(',') }}", group) == "a,b"


def test_default_summary(templates):
    group = build_group()
    assert templates.render(DEFAULT_SUMMARY, group) == "[FIRING:1] HighCPU prod (sre)"


def test_default_description_lists_firing_alerts(templates):
    group = build_group(alert_statuses=("firing", "resolved"))
    description = templates.render(DEFAULT_DESCRIPTION, group)
    assert "instance = host-0" in description
    assert "Source: http://prometheus/graph?g0=0" in description
    assert "host-1" not in description


def test_macros_from_custom_set_are_in_scope():
    templates = TemplateSet('{% macro hello(name) %}hi {{ name }} from {{ receiver }}{% endmacro %}')
    assert templates.render('{{ hello("bob") }}', build_group()) == "hi bob from jira-ops"


def test_load_template_file(tmp_path):
    path = tmp_path / "custom.j2"
    path.write_text("{% macro title() %}{{ status }}!{% endmacro %}", encoding="utf-8")
    templates = TemplateSet.load(path)
    assert templates.render("{{ title() }}", build_group(status="resolved")) == "resolved!"


def test_invalid_template_set_raises():
    with pytest.raises(TemplateError):
        TemplateSet("{% macro broken( %}")


def test_render_errors_are_template_errors(templates):
    group = build_group()
    with pytest.raises(TemplateError) as excinfo:
        templates.render("{{ unclosed", group)
    assert not excinfo.value.retryable
    with pytest.raises(TemplateError):
        templates.render("{{ re_replace_all('(', 'x', 'y') }}", group)


def test_render_value_walks_structures(templates):
    group = build_group()
    value = {
        "customfield_1": {"value": "{{ group_labels.env }}"},
        "customfield_2": ["{{ group_labels.alertname }}", 3, True, None],
        "{{ 'customfield_' ~ 3 }}": 1.5,
        42: "dropped",
    }
    assert render_value(value, templates, group) == {
        "customfield_1": {"value": "prod"},
        "customfield_2": ["HighCPU", 3, True, None],
        "customfield_3": 1.5,
    }


def test_render_fields_keeps_scalars(templates):
    group = build_group()
    fields = {"customfield_9": 7, "customfield_10": ("{{ receiver }}",)}
    assert render_fields(fields, templates, group) == {"customfield_9": 7, "customfield_10": ["jira-ops"]}


def test_any_evaluation_failure_is_a_template_error(templates):
    group = build_group()
    with pytest.raises(TemplateError) as excinfo:
        templates.render("{{ 1 // 0 }}", group)
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)


def test_failure_inside_macro_is_a_template_error():
    templates = TemplateSet("{% macro ratio() %}{{ alerts | length / 0 }}{% endmacro %}")
    with pytest.raises(TemplateError):
        templates.render("{{ ratio() }}", build_group())


def test_missing_template_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        TemplateSet.load(tmp_path / "missing.j2")
