"""
Public rendering API.

Ties the registry, the template cache and the writer together. Each Renderer
owns its cache, so independent renderers never see each other's templates.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .errors import LoaderError
from .settings import RenderSettings
from .template.cache import TemplateCache
from .template.nodes import TemplateAST
from .template.registry import TemplateRegistry
from .template.tokens import DEFAULT_TAGS, Tags
from .template.writer import TemplateWriter

logger = logging.getLogger(__name__)

TagsSpec = Union[Tags, str, None]


def _coerce_tags(tags: TagsSpec) -> Tags:
    if tags is None:
        return DEFAULT_TAGS
    if isinstance(tags, Tags):
        return tags
    return Tags.parse(tags)


class Renderer:
    """
    Main entry point for rendering Mustache templates.
    """

    def __init__(self, registry: Optional[TemplateRegistry] = None, cache: Optional[TemplateCache] = None):
        """
        Args:
            registry: Value adapters, loaders and default settings
            cache: Parse cache; a fresh one is created when omitted
        """
        self.registry = registry or TemplateRegistry()
        self.cache = cache or TemplateCache()
        self.writer = TemplateWriter(self.registry, self.cache)

    def render(
        self,
        template: str,
        view: Any,
        partials: Optional[Mapping[str, str]] = None,
        settings: Optional[RenderSettings] = None,
        tags: TagsSpec = None,
    ) -> str:
        """
        Renders a template against a view.

        Args:
            template: Template identifier, passed through the registry's template
                loader (with the default loader this is the template text itself)
            view: Root context value
            partials: Partial name -> template source for this call
            settings: Overrides the registry's default settings
            tags: Initial delimiters, a Tags or a "<% %>" string

        Returns:
            Rendered text

        Raises:
            ParseError: When the template or a partial is malformed
            RenderError: See TemplateWriter.render
            LoaderError: When the template loader does not know the template
        """
        ast = self.parse(template, tags)
        return self.writer.render(ast, view, partials, settings or self.registry.settings)

    def parse(self, template: str, tags: TagsSpec = None) -> TemplateAST:
        """
        Parses a template and stores the result in the cache.

        Parsing ahead of time avoids parsing on the fly during rendering.
        """
        source = self._load(template)
        return self.cache.get_or_parse(source, _coerce_tags(tags))

    def cache_template(self, template: str, tags: TagsSpec = None) -> None:
        """Parses a template into the cache, discarding the result."""
        self.parse(template, tags)

    def clear_cache(self) -> None:
        """Clears every cached template."""
        self.cache.clear()

    def _load(self, template: str) -> str:
        source = self.registry.template_loader.load(template)
        if source is None:
            raise LoaderError(f"Template not found: {template}")
        return source


__all__ = ["Renderer"]
