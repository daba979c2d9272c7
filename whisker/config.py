"""
Configuration loader.

Reads whisker.yaml (render settings, partials directory, delimiters) and view
data files for the command line tool.
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError, LoaderError
from .loaders import DEFAULT_EXTENSIONS, FileSystemLoader, TemplateLoader
from .settings import DEFAULT_MAX_PARTIAL_DEPTH, RenderSettings
from .template.tokens import DEFAULT_TAGS, Tags

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "whisker.yaml"

_yaml = YAML(typ="safe")

_KNOWN_KEYS = {"strict", "skip_recursive_lookup", "max_partial_depth", "partials", "extensions", "tags"}


def _read_yaml_map(path: Path) -> dict:
    """Reads a YAML file that must contain a mapping."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def _expect(raw: Dict[str, Any], key: str, kind: type, source: str) -> Any:
    value = raw[key]
    # bool is an int subclass; keep them apart
    if kind is int and isinstance(value, bool) or not isinstance(value, kind):
        raise ConfigError(f"{source}: '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass
class WhiskerConfig:
    """
    Project level settings.

    Attributes:
        strict: Raise on unknown keys instead of rendering nothing
        skip_recursive_lookup: Resolve names only in the innermost scope
        max_partial_depth: Limit for nested partials and lambda expansions
        partials: Directory partials are loaded from
        extensions: File extensions tried when loading partials
        tags: Delimiters the main template starts with
    """
    strict: bool = False
    skip_recursive_lookup: bool = False
    max_partial_depth: int = DEFAULT_MAX_PARTIAL_DEPTH
    partials: Optional[Path] = None
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    tags: Tags = DEFAULT_TAGS

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], base_dir: Optional[Path] = None, source: str = "config") -> WhiskerConfig:
        """
        Builds a config from a parsed YAML mapping.

        Relative `partials` paths are resolved against `base_dir`.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        unknown = set(raw) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"{source}: unknown keys: {', '.join(sorted(unknown))}")

        cfg = cls()
        if "strict" in raw:
            cfg.strict = _expect(raw, "strict", bool, source)
        if "skip_recursive_lookup" in raw:
            cfg.skip_recursive_lookup = _expect(raw, "skip_recursive_lookup", bool, source)
        if "max_partial_depth" in raw:
            depth = _expect(raw, "max_partial_depth", int, source)
            if depth < 1:
                raise ConfigError(f"{source}: 'max_partial_depth' must be positive")
            cfg.max_partial_depth = depth
        if "partials" in raw:
            partials = Path(_expect(raw, "partials", str, source))
            if base_dir is not None and not partials.is_absolute():
                partials = base_dir / partials
            cfg.partials = partials
        if "extensions" in raw:
            extensions = _expect(raw, "extensions", list, source)
            if not all(isinstance(ext, str) for ext in extensions):
                raise ConfigError(f"{source}: 'extensions' must be a list of strings")
            cfg.extensions = list(extensions)
        if "tags" in raw:
            try:
                cfg.tags = Tags.parse(_expect(raw, "tags", str, source))
            except ValueError as e:
                raise ConfigError(f"{source}: {e}") from e
        return cfg

    def to_settings(self, base: Optional[RenderSettings] = None) -> RenderSettings:
        """Render settings with this config's values applied."""
        return (base or RenderSettings()).merged(
            strict=self.strict,
            skip_recursive_lookup=self.skip_recursive_lookup,
            max_partial_depth=self.max_partial_depth,
        )

    def partial_loader(self) -> Optional[TemplateLoader]:
        """Loader for the configured partials directory, if any."""
        if self.partials is None:
            return None
        return FileSystemLoader(self.partials, self.extensions)


def load_config(path: Optional[Path] = None, cwd: Optional[Path] = None) -> WhiskerConfig:
    """
    Loads whisker.yaml.

    Args:
        path: Explicit config file; must exist when given
        cwd: Directory searched for whisker.yaml when no path is given

    Returns:
        Loaded config, or defaults when no file is found
    """
    if path is None:
        candidate = (cwd or Path.cwd()) / CONFIG_FILE_NAME
        if not candidate.is_file():
            logger.debug(f"No {CONFIG_FILE_NAME} in {candidate.parent}, using defaults")
            return WhiskerConfig()
        path = candidate
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug(f"Loading config from {path}")
    return WhiskerConfig.from_dict(_read_yaml_map(path), base_dir=path.parent, source=str(path))


def load_view(spec: Optional[str]) -> Any:
    """
    Loads view data for rendering.

    `spec` is a file path (`.json` parsed as JSON, anything else as YAML)
    or `-` for YAML/JSON from stdin. None yields an empty view.
    """
    if spec is None:
        return {}
    if spec == "-":
        text = sys.stdin.read()
        name = "<stdin>"
        is_json = False
    else:
        path = Path(spec)
        if not path.is_file():
            raise LoaderError(f"Data file not found: {path}")
        text = path.read_text(encoding="utf-8")
        name = str(path)
        is_json = path.suffix.lower() == ".json"

    try:
        if is_json:
            return json.loads(text)
        # YAML is a superset of JSON, so stdin accepts both
        data = _yaml.load(text)
    except (ValueError, YAMLError) as e:
        raise LoaderError(f"Failed to parse data file {name}: {e}") from e
    return {} if data is None else data


__all__ = ["WhiskerConfig", "load_config", "load_view", "CONFIG_FILE_NAME"]
