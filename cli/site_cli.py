"""Command line interface for building and checking docsite sites."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from docsite.config import Settings
from docsite.exceptions import DocsiteError
from docsite.filesystem.toml_manager import (
    SITE_CONFIG_FILE,
    NavLink,
    SidebarGroup,
    SidebarItem,
    SiteConfig,
    ThemeConfig,
    write_site_config,
)
from docsite.main import configure_logging
from docsite.services.build_service import build_site, check_content
from docsite.services.route_service import normalize_base

_INDEX_TEMPLATE = """\
---
layout: home
hero:
  name: {title}
  tagline: {tagline}
  actions:
    - theme: brand
      text: Get started
      link: /getting-started
---
"""

_GETTING_STARTED_TEMPLATE = """\
# Getting started

Write your pages as markdown files next to `site.toml`.
"""


def _settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {"content_dir": Path(args.dir)}
    if getattr(args, "out", None):
        overrides["output_dir"] = Path(args.out)
    if args.debug:
        overrides["debug"] = True
    return Settings(**overrides)


def init_content_dir(content_dir: Path, title: str, description: str = "", base: str = "/") -> None:
    """Scaffold a new content directory without overwriting existing files."""
    if content_dir.exists() and not content_dir.is_dir():
        raise NotADirectoryError(f"Content path exists but is not a directory: {content_dir}")
    if (content_dir / SITE_CONFIG_FILE).exists():
        raise FileExistsError(f"{content_dir / SITE_CONFIG_FILE} already exists")

    content_dir.mkdir(parents=True, exist_ok=True)
    (content_dir / "public").mkdir(exist_ok=True)
    config = SiteConfig(
        title=title,
        description=description,
        base=normalize_base(base),
        theme=ThemeConfig(
            nav=[NavLink(text="Home", link="/"), NavLink(text="Guide", link="/getting-started")],
            sidebar=[
                SidebarGroup(
                    text="Guide",
                    items=[SidebarItem(text="Getting started", link="/getting-started")],
                )
            ],
        ),
    )
    write_site_config(content_dir, config)
    for name, text in (
        ("index.md", _INDEX_TEMPLATE.format(title=json.dumps(title), tagline=json.dumps(description or title))),
        ("getting-started.md", _GETTING_STARTED_TEMPLATE),
    ):
        path = content_dir / name
        if not path.exists():
            path.write_text(text, encoding="utf-8")


def cmd_build(args: argparse.Namespace) -> int:
    settings = _settings(args)
    settings.validate_paths()
    result = build_site(settings)
    print(f"Built {len(result.pages)} page(s) and {len(result.assets)} asset(s) into {result.output_dir}")
    for page in result.pages:
        print(f"  {page.route} -> {page.output_path}")
    if result.problems:
        print(f"Ignored {len(result.problems)} dead link(s)")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    settings = _settings(args)
    problems = check_content(settings)
    if not problems:
        print("All links resolve.")
        return 0
    print(f"{len(problems)} broken link(s):")
    for problem in problems:
        print(f"  {problem}")
    return 1


def cmd_init(args: argparse.Namespace) -> int:
    content_dir = Path(args.dir)
    init_content_dir(content_dir, args.title, args.description, args.base)
    print(f"Initialized site in {content_dir}")
    return 0


def cmd_preview(args: argparse.Namespace) -> int:
    from docsite.main import cli_entry

    settings = _settings(args)
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    cli_entry(settings)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Build a static documentation site from markdown and site.toml",
    )
    parser.add_argument("--dir", "-d", default="docs", help="Content directory (default: docs)")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")
    build = subparsers.add_parser("build", help="Build the static site")
    build.add_argument("--out", "-o", help="Output directory (default: dist)")
    build.set_defaults(func=cmd_build)

    check = subparsers.add_parser("check", help="Check that every link resolves to a page")
    check.set_defaults(func=cmd_check)

    init = subparsers.add_parser("init", help="Scaffold a new content directory")
    init.add_argument("--title", default="My Docs", help="Site title")
    init.add_argument("--description", default="", help="Site description")
    init.add_argument("--base", default="/", help="Base URL path the site is deployed under")
    init.set_defaults(func=cmd_init)

    preview = subparsers.add_parser("preview", help="Serve a built site locally")
    preview.add_argument("--out", "-o", help="Output directory to serve (default: dist)")
    preview.add_argument("--host", help="Bind host")
    preview.add_argument("--port", type=int, help="Bind port")
    preview.set_defaults(func=cmd_preview)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    configure_logging(args.debug)
    try:
        return args.func(args)
    except (DocsiteError, ValueError, OSError, RuntimeError) as exc:
        print(f"Error: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
