"""Navigation link collection and dead link detection.

Every internal link in the site configuration, in page front matter and in
rendered page content must resolve to an existing page (or a file under
``public/``). External links are never checked.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from docsite.services.route_service import is_external, normalize_link, split_fragment

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from docsite.filesystem.content_manager import ContentIndex
    from docsite.filesystem.frontmatter import PageData
    from docsite.filesystem.toml_manager import SidebarItem, SiteConfig

logger = logging.getLogger(__name__)

_HREF_RE = re.compile(r"""<a\b[^>]*?\shref=(["'])([^"']*)\1""", re.IGNORECASE)


@dataclass(frozen=True)
class LinkRef:
    """A link together with where it was written."""

    source: str
    text: str
    link: str


@dataclass(frozen=True)
class LinkProblem:
    """An internal link that resolves to no page."""

    source: str
    text: str
    link: str
    route: str

    def __str__(self) -> str:
        return f"{self.source}: '{self.text}' -> {self.link} (no page for {self.route})"


def _collect_sidebar_items(items: Iterable[SidebarItem], where: str) -> Iterator[LinkRef]:
    for i, item in enumerate(items):
        item_where = f"{where}.items[{i}]"
        if item.link is not None:
            yield LinkRef(source=item_where, text=item.text, link=item.link)
        yield from _collect_sidebar_items(item.items, item_where)


def collect_config_links(site_config: SiteConfig) -> Iterator[LinkRef]:
    """Yield every link written in the site configuration."""
    theme = site_config.theme
    if theme.logo:
        yield LinkRef(source="theme.logo", text="logo", link=theme.logo)
    for i, nav in enumerate(theme.nav):
        yield LinkRef(source=f"theme.nav[{i}]", text=nav.text, link=nav.link)
    for i, group in enumerate(theme.sidebar):
        where = f"theme.sidebar[{i}]"
        if group.path is not None:
            yield LinkRef(source=f"{where}.path", text=group.text or group.path, link=group.path)
        yield from _collect_sidebar_items(group.items, where)
    for i, social in enumerate(theme.social_links):
        yield LinkRef(source=f"theme.social_links[{i}]", text=social.icon, link=social.link)


def collect_page_links(pages: Mapping[str, PageData]) -> Iterator[LinkRef]:
    """Yield hero image, hero action and feature links from page front matter."""
    for page in pages.values():
        if page.hero is not None:
            if page.hero.image is not None:
                yield LinkRef(
                    source=f"{page.file_path}: hero.image",
                    text=page.hero.image.alt or "image",
                    link=page.hero.image.src,
                )
            for i, action in enumerate(page.hero.actions):
                yield LinkRef(
                    source=f"{page.file_path}: hero.actions[{i}]",
                    text=action.text,
                    link=action.link,
                )
        for i, feature in enumerate(page.features):
            if feature.link is not None:
                yield LinkRef(
                    source=f"{page.file_path}: features[{i}]",
                    text=feature.title,
                    link=feature.link,
                )


def resolves(link: str, routes: set[str], public_assets: Iterable[str] = (), current_route: str = "/") -> bool:
    """Whether an internal link points at an existing page or public asset."""
    path, _ = split_fragment(link.strip())
    if not path:
        return True
    route = normalize_link(link, current_route)
    if route in routes or route.lstrip("/") in set(public_assets):
        return True
    # ``/guide`` and ``/guide/`` refer to the same directory index page
    return not route.endswith("/") and route + "/" in routes


def validate_links(
    refs: Iterable[LinkRef],
    routes: set[str],
    public_assets: Iterable[str] = (),
) -> list[LinkProblem]:
    """Return a problem for every internal link that resolves to no page."""
    assets = list(public_assets)
    problems: list[LinkProblem] = []
    for ref in refs:
        if is_external(ref.link):
            continue
        if not resolves(ref.link, routes, assets):
            problems.append(
                LinkProblem(
                    source=ref.source,
                    text=ref.text,
                    link=ref.link,
                    route=normalize_link(ref.link),
                )
            )
    return problems


def find_dead_links(
    html: str,
    page_route: str,
    routes: set[str],
    public_assets: Iterable[str] = (),
    source: str = "",
) -> list[LinkProblem]:
    """Find internal hrefs in page HTML that resolve to no page.

    Links are expected in the form written by the author (before base rewriting);
    relative links are resolved against *page_route*.
    """
    assets = list(public_assets)
    problems: list[LinkProblem] = []
    for match in _HREF_RE.finditer(html):
        href = match.group(2)
        if not href or href.startswith("#") or is_external(href):
            continue
        if not resolves(href, routes, assets, current_route=page_route):
            problems.append(
                LinkProblem(
                    source=source or page_route,
                    text=href,
                    link=href,
                    route=normalize_link(href, page_route),
                )
            )
    return problems


def check_site(index: ContentIndex) -> list[LinkProblem]:
    """Validate configuration and front matter links against the content index."""
    refs = [*collect_config_links(index.site_config), *collect_page_links(index.pages)]
    problems = validate_links(refs, index.routes, index.public_assets)
    logger.info("Checked %d link(s), %d problem(s)", len(refs), len(problems))
    return problems
