"""Page service: markdown to a complete HTML document."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from docsite.pandoc.renderer import rewrite_internal_links
from docsite.schemas.page import HeaderSchema, PageDataSchema
from docsite.services.link_service import LinkProblem, find_dead_links
from docsite.services.route_service import output_path_for_route

if TYPE_CHECKING:
    from docsite.filesystem.content_manager import ContentIndex
    from docsite.filesystem.frontmatter import PageData
    from docsite.services.theme_service import Theme

MarkdownRenderer = Callable[[str], str]


@dataclass
class RenderedPage:
    """A page ready to be written to the output directory."""

    route: str
    title: str
    output_path: str
    html: str
    dead_links: list[LinkProblem] = field(default_factory=list)


def page_data(page: PageData) -> PageDataSchema:
    """Serialized metadata for a page."""
    return PageDataSchema(
        title=page.title,
        description=page.description,
        frontmatter=page.frontmatter,
        headers=[HeaderSchema(level=h.level, title=h.title, slug=h.slug) for h in page.headers],
        relative_path=page.file_path,
    )


def render_page(
    route: str,
    page: PageData,
    index: ContentIndex,
    theme: Theme,
    render: MarkdownRenderer,
) -> RenderedPage:
    """Render one page: markdown, dead link detection, link rewriting, layout."""
    base = index.site_config.base
    body_html = render(page.content) if page.content.strip() else ""
    dead_links = find_dead_links(
        body_html,
        route,
        index.routes,
        index.public_assets,
        source=page.file_path,
    )
    body_html = rewrite_internal_links(body_html, route, base)

    document = theme.render_page(page, route, body_html, page_data(page).to_json())
    return RenderedPage(
        route=route,
        title=page.title,
        output_path=output_path_for_route(route),
        html=document,
        dead_links=dead_links,
    )
