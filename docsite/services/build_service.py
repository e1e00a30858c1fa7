"""Static site build: validate links, render pages, write the output tree."""

from __future__ import annotations

import functools
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape as xml_escape

from docsite.exceptions import BrokenLinkError, BuildError
from docsite.filesystem.content_manager import PUBLIC_DIR, ContentIndex, ContentManager
from docsite.pandoc.renderer import render_markdown
from docsite.schemas.page import PageSummary
from docsite.services.link_service import LinkProblem, check_site
from docsite.services.page_service import MarkdownRenderer, render_page
from docsite.services.route_service import href_for
from docsite.services.theme_service import STYLE_CSS, STYLESHEET_PATH, Theme

if TYPE_CHECKING:
    from docsite.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Summary of a finished build."""

    output_dir: Path
    pages: list[PageSummary] = field(default_factory=list)
    assets: list[str] = field(default_factory=list)
    problems: list[LinkProblem] = field(default_factory=list)


def _excluded_output(settings: Settings) -> tuple[str, ...]:
    """Output dir relative to the content dir, when nested inside it."""
    content = settings.content_dir.resolve()
    output = settings.output_dir.resolve()
    if output.is_relative_to(content):
        return (output.relative_to(content).as_posix(),)
    return ()


def clean_output_dir(output_dir: Path, content_dir: Path) -> None:
    """Remove and recreate the output directory.

    Raises BuildError if the output directory is the content directory, contains
    it, or is the filesystem root.
    """
    output = output_dir.resolve()
    content = content_dir.resolve()
    if output == Path(output.anchor):
        raise BuildError(f"Refusing to clean filesystem root: {output}")
    if output == content or content.is_relative_to(output):
        raise BuildError(f"Refusing to clean {output}: it contains the content directory")
    if output.exists() and not output.is_dir():
        raise BuildError(f"Output path exists but is not a directory: {output}")
    if output.exists():
        shutil.rmtree(output)
    output.mkdir(parents=True)


def _write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise BuildError(f"Failed to write {path}: {exc}") from exc


def copy_public_assets(content_dir: Path, output_dir: Path, assets: list[str]) -> list[str]:
    """Copy files under ``public/`` verbatim to the output root."""
    public_dir = content_dir / PUBLIC_DIR
    for rel in assets:
        target = output_dir / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(public_dir / rel, target)
    return assets


def build_sitemap(index: ContentIndex) -> str:
    """Render sitemap.xml for every page of the site."""
    hostname = (index.site_config.hostname or "").rstrip("/")
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for route in sorted(index.pages):
        url = hostname + href_for(route, index.site_config.base)
        lines.append(f"  <url><loc>{xml_escape(url)}</loc></url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def _report_problems(problems: list[LinkProblem], ignore: bool) -> None:
    if not problems:
        return
    if not ignore:
        raise BrokenLinkError(problems)
    for problem in problems:
        logger.warning("Ignoring dead link %s", problem)


def build_site(settings: Settings, *, render: MarkdownRenderer | None = None) -> BuildResult:
    """Build the static site described by ``settings.content_dir``.

    Raises BrokenLinkError if any internal link resolves to no page (unless the
    site sets ``ignore_dead_links``) and BuildError for output problems.
    """
    if render is None:
        render = functools.partial(
            render_markdown,
            pandoc_bin=settings.pandoc_bin,
            timeout=settings.render_timeout,
        )

    content_dir = settings.content_dir
    output_dir = settings.output_dir
    if not content_dir.is_dir():
        raise BuildError(f"Content directory does not exist: {content_dir}")

    manager = ContentManager(content_dir=content_dir, exclude=_excluded_output(settings))
    index = manager.build_index()
    site = index.site_config
    logger.info("Building %r (%d page(s), base %s)", site.title, len(index.pages), site.base)

    problems = check_site(index)
    _report_problems(problems, site.ignore_dead_links)

    theme = Theme(site_config=site)
    rendered = [render_page(route, page, index, theme, render) for route, page in sorted(index.pages.items())]
    content_problems = [problem for page in rendered for problem in page.dead_links]
    _report_problems(content_problems, site.ignore_dead_links)
    problems.extend(content_problems)

    clean_output_dir(output_dir, content_dir)
    result = BuildResult(output_dir=output_dir, problems=problems)
    for page in rendered:
        _write_text(output_dir / page.output_path, page.html)
        result.pages.append(
            PageSummary(
                route=page.route,
                title=page.title,
                output_path=page.output_path,
                dead_links=len(page.dead_links),
            )
        )
        logger.debug("Wrote %s -> %s", page.route, page.output_path)

    result.assets = copy_public_assets(content_dir, output_dir, index.public_assets)
    _write_text(output_dir / STYLESHEET_PATH, STYLE_CSS)
    if "/404" not in index.pages:
        _write_text(output_dir / "404.html", theme.render_not_found())
    # GitHub Pages must not run Jekyll over the output
    _write_text(output_dir / ".nojekyll", "")
    if site.hostname:
        _write_text(output_dir / "sitemap.xml", build_sitemap(index))

    logger.info(
        "Build complete: %d page(s), %d asset(s) in %s",
        len(result.pages),
        len(result.assets),
        output_dir,
    )
    return result


def check_content(settings: Settings) -> list[LinkProblem]:
    """Validate configuration and front matter links without rendering."""
    manager = ContentManager(content_dir=settings.content_dir, exclude=_excluded_output(settings))
    return check_site(manager.build_index())
