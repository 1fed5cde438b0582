"""Renders Kubernetes manifests from bundled text templates.

Placeholders have the form ``{{KEY}}`` and are replaced literally. Values are
not escaped or validated, and placeholders without a matching variable are
left as-is.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

_TEMPLATES_DIR = Path(__file__).parent / "templates"


class ManifestTemplateNotFoundError(LookupError):
    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Manifest template not found: {template_id}")


@lru_cache(maxsize=32)
def _load_template(template_id: str) -> str:
    root = _TEMPLATES_DIR.resolve()
    path = (root / template_id).resolve()
    if not path.is_relative_to(root) or not path.is_file():
        raise ManifestTemplateNotFoundError(template_id)
    return path.read_text(encoding="utf-8")


def substitute(template: str, variables: dict[str, str]) -> str:
    """Replace each ``{{KEY}}`` in ``template`` with ``variables[KEY]``."""
    rendered = template
    for key, value in variables.items():
        rendered = rendered.replace("{{" + key + "}}", value)
    return rendered


def render(template_id: str, variables: dict[str, str]) -> str:
    """Load template ``template_id`` (e.g. ``"k8s/app.yaml"``) and substitute."""
    return substitute(_load_template(template_id), variables)
