"""
Utilities for creating files and directories in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict


def write(p: Path, text: str) -> Path:
    """
    Writes text to a file, creating parent directories when needed.

    Args:
        p: File path
        text: File contents

    Returns:
        Path of the written file
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def write_templates(root: Path, templates: Dict[str, str], ext: str = ".mustache") -> Dict[str, Path]:
    """Writes several templates at once, `name` -> `root/name + ext`."""
    return {name: write(root / f"{name}{ext}", text) for name, text in templates.items()}
