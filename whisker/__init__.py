"""
whisker: Mustache templates for Python.

Compiles `{{ }}` templates into cached node lists and renders them
against dicts, objects and lists.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .errors import (
    WhiskerUserError, ParseError, RenderError, MissingKeyError,
    RecursionLimitError, LoaderError, ConfigError,
)
from .loaders import TemplateLoader, StringLoader, DictLoader, FileSystemLoader, CompositeLoader
from .renderer import Renderer
from .settings import RenderSettings, html_escape, no_escape
from .template import MISSING, Tags, TemplateCache, TemplateRegistry


def render(template: str, view: Any, partials: Optional[Mapping[str, str]] = None, **settings: Any) -> str:
    """
    Renders template text with a throw-away Renderer.

    Keyword arguments override RenderSettings fields. Use a Renderer
    instance to keep parsed templates cached between calls.
    """
    return Renderer().render(template, view, partials, RenderSettings().merged(**settings))


__all__ = [
    "render",
    "Renderer",
    "RenderSettings",
    "html_escape",
    "no_escape",
    "Tags",
    "TemplateCache",
    "TemplateRegistry",
    "MISSING",
    "TemplateLoader",
    "StringLoader",
    "DictLoader",
    "FileSystemLoader",
    "CompositeLoader",
    "WhiskerUserError",
    "ParseError",
    "RenderError",
    "MissingKeyError",
    "RecursionLimitError",
    "LoaderError",
    "ConfigError",
]
