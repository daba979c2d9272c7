from pathlib import Path

import pytest

from whisker import Renderer, RenderSettings, TemplateRegistry

from tests.infrastructure import write_templates


@pytest.fixture
def renderer() -> Renderer:
    """Renderer with default settings and its own cache."""
    return Renderer()


@pytest.fixture
def strict_renderer() -> Renderer:
    return Renderer(TemplateRegistry(settings=RenderSettings(strict=True)))


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Small project: a page template with partials next to it and a view file."""
    root = tmp_path
    write_templates(root / "templates", {
        "page": "<h1>{{title}}</h1>\n{{#items}}\n  {{>item}}\n{{/items}}\n",
        "item": "<li>{{name}}</li>\n",
    })
    (root / "data.yaml").write_text(
        "title: Fruit & Veg\nitems:\n  - name: apple\n  - name: kale\n",
        encoding="utf-8",
    )
    return root
