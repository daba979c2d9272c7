"""
Template source loaders.

The renderer only needs `load(name) -> text`; these classes provide it
for raw strings, in-memory mappings and template directories.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

from .errors import LoaderError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".mustache",)


class TemplateLoader(ABC):
    """Supplies template text for a template identifier."""

    @abstractmethod
    def load(self, name: str) -> Optional[str]:
        """
        Returns the template text, or None when the loader does not know `name`.

        Raises:
            LoaderError: When the template exists but cannot be read
        """
        pass


class StringLoader(TemplateLoader):
    """Treats the identifier itself as the template text."""

    def load(self, name: str) -> Optional[str]:
        return name


class DictLoader(TemplateLoader):
    """Looks templates up in a name -> text mapping."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = dict(templates)

    def load(self, name: str) -> Optional[str]:
        return self.templates.get(name)


class FileSystemLoader(TemplateLoader):
    """
    Reads templates from a directory.

    `name` is resolved as `root/name + extension` for every configured
    extension in order, then as `root/name` itself. Names that would
    escape the root directory are never read.
    """

    def __init__(self, root: Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS, encoding: str = "utf-8"):
        self.root = Path(root)
        self.extensions = tuple(extensions)
        self.encoding = encoding

    def load(self, name: str) -> Optional[str]:
        path = self.find(name)
        if path is None:
            logger.debug(f"Template '{name}' not found under {self.root}")
            return None
        try:
            return path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise LoaderError(f"Failed to read template {path}: {e}") from e

    def find(self, name: str) -> Optional[Path]:
        """Returns the file backing `name`, or None."""
        root = self.root.resolve()
        for candidate in self._candidates(name):
            path = (root / candidate).resolve()
            if not path.is_relative_to(root):
                logger.warning(f"Template name '{name}' points outside of {root}, ignored")
                return None
            if path.is_file():
                return path
        return None

    def _candidates(self, name: str) -> Iterable[str]:
        for ext in self.extensions:
            if ext and not name.endswith(ext):
                yield name + ext
        yield name


class CompositeLoader(TemplateLoader):
    """Asks several loaders in turn; the first one that knows the name wins."""

    def __init__(self, *loaders: TemplateLoader):
        self.loaders = list(loaders)

    def add(self, loader: TemplateLoader) -> CompositeLoader:
        self.loaders.append(loader)
        return self

    def load(self, name: str) -> Optional[str]:
        for loader in self.loaders:
            text = loader.load(name)
            if text is not None:
                return text
        return None


__all__ = [
    "TemplateLoader",
    "StringLoader",
    "DictLoader",
    "FileSystemLoader",
    "CompositeLoader",
    "DEFAULT_EXTENSIONS",
]
