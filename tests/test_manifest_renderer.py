"""Tests for manifest template rendering."""

import pytest

from minicloud.orchestration.manifest_renderer import (
    ManifestTemplateNotFoundError,
    render,
    substitute,
)


def test_substitute_replaces_every_occurrence():
    out = substitute("name: {{NAME}}\nlabel: {{NAME}}", {"NAME": "x"})
    assert out == "name: x\nlabel: x"


def test_unknown_placeholders_left_verbatim():
    out = substitute("{{NAME}}-{{OTHER}}", {"NAME": "a"})
    assert out == "a-{{OTHER}}"


def test_values_are_not_escaped():
    out = substitute("cmd: {{V}}", {"V": "\"quoted\" {{X}}"})
    assert out == "cmd: \"quoted\" {{X}}"


def test_rerender_without_placeholders_is_idempotent():
    once = substitute("a {{NAME}} b", {"NAME": "x"})
    assert substitute(once, {"NAME": "y"}) == once


def test_render_database_template():
    out = render(
        "k8s/database.yaml",
        {
            "POD_NAME": "pg-main-pg",
            "NAMESPACE": "demo",
            "INSTANCE_NAME": "pg-main",
            "POSTGRES_IMAGE": "postgres:16-alpine",
            "POSTGRES_PORT": "5432",
            "SECRET_NAME": "pg-main-conn",
            "SERVICE_NAME": "pg-main-svc",
        },
    )
    assert "name: pg-main-pg" in out
    assert "namespace: demo" in out
    assert "name: pg-main-conn" in out
    assert "name: pg-main-svc" in out
    assert "{{" not in out


def test_render_app_template_leaves_missing_variable():
    out = render("k8s/app.yaml", {"APP_NAME": "hello"})
    assert "app: hello" in out
    assert "{{APP_IMAGE}}" in out


def test_unknown_template_raises():
    with pytest.raises(ManifestTemplateNotFoundError):
        render("k8s/nope.yaml", {})


def test_template_id_cannot_escape_templates_dir():
    with pytest.raises(ManifestTemplateNotFoundError):
        render("../kubectl.py", {})
