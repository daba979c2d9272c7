"""
Parsed template cache.

Maps (source text, initial delimiters) to the parsed node tuple. The cache is
an explicit object owned by a renderer; independent renderers never share it.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Tuple

from .nodes import TemplateAST
from .parser import parse_template
from .tokens import DEFAULT_TAGS, Tags

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tags]


class TemplateCache:
    """
    Thread-safe parse cache.

    A miss parses the template exactly once per key, even when several threads
    ask for the same key at the same time. Hits never take a lock.
    Parse errors propagate and leave nothing behind.
    """

    def __init__(self, parse_func: Callable[[str, Tags], TemplateAST] = parse_template):
        self._parse = parse_func
        self._entries: Dict[CacheKey, TemplateAST] = {}
        self._lock = threading.Lock()
        self._key_locks: Dict[CacheKey, threading.Lock] = {}

    def get_or_parse(self, source: str, tags: Tags = DEFAULT_TAGS) -> TemplateAST:
        """
        Returns the cached node tuple for (source, tags), parsing it on a miss.

        The returned tuple is shared with every other caller.
        """
        key = (source, tags)
        ast = self._entries.get(key)
        if ast is not None:
            return ast

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        try:
            with key_lock:
                ast = self._entries.get(key)
                if ast is None:
                    logger.debug(f"Template cache miss ({len(source)} chars, tags '{tags}')")
                    ast = self._parse(source, tags)
                    self._entries[key] = ast
        finally:
            with self._lock:
                self._key_locks.pop(key, None)
        return ast

    def clear(self) -> None:
        """Drops every cached template."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Template cache cleared ({count} entries)")

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["TemplateCache", "CacheKey"]
