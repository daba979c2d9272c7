from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Tuple

from .config import WhiskerConfig, load_config, load_view
from .errors import LoaderError, WhiskerUserError
from .loaders import FileSystemLoader
from .parse_report import build_parse_report
from .renderer import Renderer
from .template.registry import TemplateRegistry
from .template.tokens import Tags
from .version import tool_version


def _setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug or os.environ.get("WHISKER_DEBUG") else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="whisker",
        description="Mustache template renderer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="verbose logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Shared arguments for render/parse
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="template file, or - to read it from stdin")
        sp.add_argument(
            "--tags",
            metavar="'OPEN CLOSE'",
            help="initial delimiters separated by a space, e.g. '<% %>'",
        )
        sp.add_argument(
            "--config",
            metavar="FILE",
            help="config file (default: ./whisker.yaml when present)",
        )

    sp_render = sub.add_parser("render", help="Render a template to stdout")
    add_common(sp_render)
    sp_render.add_argument("--data", metavar="FILE|-", help="view data: .json file, YAML file or - for stdin")
    sp_render.add_argument("--partials", metavar="DIR", help="directory with partial templates")
    sp_render.add_argument("--strict", action="store_true", default=None, help="fail on unknown keys")
    sp_render.add_argument("--max-partial-depth", type=int, metavar="N", help="nesting limit for partials")
    sp_render.add_argument("--output", "-o", metavar="FILE", help="write to a file instead of stdout")

    sp_parse = sub.add_parser("parse", help="Print the parsed node list (JSON)")
    add_common(sp_parse)

    return p


def _read_template(spec: str) -> Tuple[str, Optional[Path]]:
    """Returns the template text and the file it came from (None for stdin)."""
    if spec == "-":
        return sys.stdin.read(), None
    path = Path(spec)
    if not path.is_file():
        raise LoaderError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8"), path


def _resolve_tags(ns: argparse.Namespace, cfg: WhiskerConfig) -> Tags:
    if ns.tags:
        return Tags.parse(ns.tags)
    return cfg.tags


def _load_cfg(ns: argparse.Namespace) -> WhiskerConfig:
    return load_config(Path(ns.config) if ns.config else None)


def _cmd_render(ns: argparse.Namespace) -> int:
    cfg = _load_cfg(ns)
    if ns.partials:
        cfg.partials = Path(ns.partials)
    text, template_path = _read_template(ns.template)

    partial_loader = cfg.partial_loader()
    if partial_loader is None and template_path is not None:
        # Partials next to the template by default
        partial_loader = FileSystemLoader(template_path.parent, cfg.extensions)

    settings = cfg.to_settings().merged(strict=ns.strict, max_partial_depth=ns.max_partial_depth)
    registry = TemplateRegistry(settings=settings, partial_loader=partial_loader)
    renderer = Renderer(registry)

    output = renderer.render(text, load_view(ns.data), tags=_resolve_tags(ns, cfg))

    if ns.output:
        Path(ns.output).write_text(output, encoding="utf-8")
        sys.stderr.write(f"Wrote: {ns.output}\n")
    else:
        sys.stdout.write(output)
    return 0


def _cmd_parse(ns: argparse.Namespace) -> int:
    cfg = _load_cfg(ns)
    text, template_path = _read_template(ns.template)
    tags = _resolve_tags(ns, cfg)

    ast = Renderer().parse(text, tags)
    name = str(template_path) if template_path is not None else "<stdin>"
    report = build_parse_report(name, ast, tags)
    sys.stdout.write(json.dumps(report.model_dump(mode="json", by_alias=True, exclude_none=True), ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.debug)

    try:
        if ns.cmd == "render":
            return _cmd_render(ns)
        if ns.cmd == "parse":
            return _cmd_parse(ns)
    except WhiskerUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
