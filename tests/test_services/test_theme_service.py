"""Tests for the default theme."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docsite.filesystem.content_manager import ContentIndex, ContentManager
from docsite.filesystem.frontmatter import parse_page
from docsite.filesystem.toml_manager import EditLink, SidebarGroup, SidebarItem, SiteConfig, ThemeConfig
from docsite.services.theme_service import (
    PrevNextLink,
    Theme,
    flatten_sidebar_links,
    is_active,
    prev_next,
)

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def index(tmp_content_dir: Path) -> ContentIndex:
    return ContentManager(content_dir=tmp_content_dir).build_index()


@pytest.fixture
def theme(index: ContentIndex) -> Theme:
    return Theme(site_config=index.site_config)


class TestIsActive:
    @pytest.mark.parametrize(
        ("link", "route", "expected"),
        [
            ("/", "/", True),
            ("/", "/intro", False),
            ("/intro", "/intro", True),
            ("/intro.md", "/intro", True),
            ("/intro", "/usage", False),
            ("/guide/", "/guide/setup", True),
            ("/guide", "/guide/", True),
            ("https://example.com/", "/", False),
        ],
    )
    def test_is_active(self, link: str, route: str, expected: bool) -> None:
        assert is_active(link, route) is expected


class TestPrevNext:
    def test_sidebar_order(self, index: ContentIndex) -> None:
        assert flatten_sidebar_links(index.site_config) == [("Introduction", "/intro"), ("Usage", "/usage")]

    def test_first_page_has_only_next(self, index: ContentIndex) -> None:
        prev_link, next_link = prev_next(index.site_config, index.pages["/intro"], "/intro")
        assert prev_link is None
        assert next_link == PrevNextLink(text="Usage", href="/test-docs/usage.html")

    def test_last_page_has_only_prev(self, index: ContentIndex) -> None:
        prev_link, next_link = prev_next(index.site_config, index.pages["/usage"], "/usage")
        assert prev_link == PrevNextLink(text="Introduction", href="/test-docs/intro.html")
        assert next_link is None

    def test_page_outside_sidebar(self, index: ContentIndex) -> None:
        assert prev_next(index.site_config, index.pages["/"], "/") == (None, None)

    def test_front_matter_overrides(self, index: ContentIndex) -> None:
        page = parse_page(
            "---\nprev: Volver\nnext:\n  text: Inicio\n  link: /\n---\n# Usage\n",
            file_path="usage.md",
        )
        prev_link, next_link = prev_next(index.site_config, page, "/usage")
        assert prev_link == PrevNextLink(text="Volver", href="/test-docs/intro.html")
        assert next_link == PrevNextLink(text="Inicio", href="/test-docs/")

    def test_front_matter_disables(self, index: ContentIndex) -> None:
        page = parse_page("---\nprev: false\n---\n# Usage\n", file_path="usage.md")
        prev_link, _ = prev_next(index.site_config, page, "/usage")
        assert prev_link is None


class TestSidebar:
    def test_active_item_lists_h2_headers(self, index: ContentIndex, theme: Theme) -> None:
        groups = theme.sidebar(index.pages["/usage"], "/usage")
        assert len(groups) == 1
        assert groups[0].text == "Guide"
        assert groups[0].href == "/test-docs/"
        intro, usage = groups[0].items
        assert not intro.active
        assert intro.headers == []
        assert usage.active
        assert usage.href == "/test-docs/usage.html"
        assert [h.slug for h in usage.headers] == ["basics", "basics-1"]

    def test_depth_two_includes_h3(self, index: ContentIndex) -> None:
        index.site_config.theme.sidebar[0].sidebar_depth = 2
        groups = Theme(site_config=index.site_config).sidebar(index.pages["/usage"], "/usage")
        usage = groups[0].items[1]
        assert [h.slug for h in usage.headers] == ["basics", "details", "basics-1"]

    def test_depth_zero_lists_no_headers(self, index: ContentIndex) -> None:
        index.site_config.theme.sidebar[0].sidebar_depth = 0
        groups = Theme(site_config=index.site_config).sidebar(index.pages["/usage"], "/usage")
        assert groups[0].items[1].headers == []

    def test_front_matter_hides_sidebar(self, theme: Theme) -> None:
        page = parse_page("---\nsidebar: false\n---\n# X\n", file_path="x.md")
        assert theme.sidebar(page, "/x") == []


class TestRenderDocPage:
    def test_document_structure(self, index: ContentIndex, theme: Theme) -> None:
        page = index.pages["/intro"]
        html = theme.render_page(page, "/intro", '<h1 id="introduction">Introduction</h1>', "{}")

        assert "<title>Introduction | Test Docs</title>" in html
        assert '<html lang="en-US">' in html
        assert 'href="/test-docs/assets/style.css"' in html
        assert '<img class="logo" src="/test-docs/logo.png"' in html
        assert '<a href="/test-docs/intro.html" class="active">Guide</a>' in html
        assert '<a href="/test-docs/">Home</a>' in html
        assert 'href="https://example.com/" target="_blank"' in html
        assert 'aria-label="github"' in html
        assert '<article class="doc"><h1 id="introduction">Introduction</h1></article>' in html
        assert '<a href="#setup">Setup</a>' in html
        assert 'class="next" href="/test-docs/usage.html"' in html
        assert 'class="prev"' not in html
        assert "Released under the MIT License." in html

    def test_description_falls_back_to_content(self, index: ContentIndex, theme: Theme) -> None:
        html = theme.render_page(index.pages["/intro"], "/intro", "", "{}")
        assert '<meta name="description" content="Read the usage guide next. Install it.">' in html

    def test_outline_can_be_disabled(self, theme: Theme) -> None:
        page = parse_page("---\noutline: false\n---\n# X\n\n## Y\n", file_path="x.md")
        html = theme.render_page(page, "/x", "", "{}")
        assert 'class="outline"' not in html

    def test_page_layout_has_no_sidebar(self, theme: Theme) -> None:
        page = parse_page("---\nlayout: page\n---\n# Plain\n", file_path="plain.md")
        html = theme.render_page(page, "/plain", "<p>x</p>", "{}")
        assert 'class="sidebar"' not in html
        assert 'class="prev-next"' not in html
        assert 'class="layout-page"' in html

    def test_edit_link(self, index: ContentIndex) -> None:
        site = index.site_config
        site.theme.edit_link = EditLink(pattern="https://github.com/example/docs/edit/main/docs/:path")
        html = Theme(site_config=site).render_page(index.pages["/intro"], "/intro", "", "{}")
        assert 'href="https://github.com/example/docs/edit/main/docs/intro.md"' in html
        assert "Edit this page" in html

    def test_page_data_is_embedded_safely(self, index: ContentIndex, theme: Theme) -> None:
        html = theme.render_page(index.pages["/intro"], "/intro", "", '{"title": "</script>"}')
        assert '{"title": "<\\/script>"}' in html

    def test_sidebar_is_rendered(self, index: ContentIndex, theme: Theme) -> None:
        html = theme.render_page(index.pages["/usage"], "/usage", "", "{}")
        assert '<aside class="sidebar">' in html
        assert '<p class="sidebar-title"><a href="/test-docs/">Guide</a></p>' in html
        assert '<a href="/test-docs/intro.html">Introduction</a>' in html
        assert '<li class="sidebar-item active">' in html
        assert '<a href="#basics-1">Basics</a>' in html

    def test_page_footer_replaces_site_footer(self, theme: Theme) -> None:
        page = parse_page("---\nfooter: MIT Licensed\n---\n# X\n", file_path="x.md")
        html = theme.render_page(page, "/x", "", "{}")
        assert '<p class="message">MIT Licensed</p>' in html
        assert "Released under the MIT License." not in html
        assert "Copyright 2024" not in html

    def test_page_footer_can_be_hidden(self, theme: Theme) -> None:
        page = parse_page("---\nfooter: false\n---\n# X\n", file_path="x.md")
        html = theme.render_page(page, "/x", "", "{}")
        assert "site-footer" not in html

    def test_heading_markup_is_dropped_from_title(self, theme: Theme) -> None:
        page = parse_page("# A <b>bold</b> title\n", file_path="x.md")
        html = theme.render_page(page, "/x", "", "{}")
        assert "<title>A bold title | Test Docs</title>" in html


class TestRenderHomePage:
    def test_hero_and_features(self, index: ContentIndex, theme: Theme) -> None:
        html = theme.render_page(index.pages["/"], "/", "", "{}")
        assert "<title>Test Docs</title>" in html
        assert 'class="layout-home"' in html
        assert '<span class="clip">Test</span>' in html
        assert '<p class="tagline">Tagline</p>' in html
        assert '<a class="action brand" href="/test-docs/intro.html">Start</a>' in html
        assert '<h2 class="title">Fast</h2>' in html
        assert 'class="sidebar"' not in html
        assert '<article class="doc">' not in html

    def test_home_with_title_uses_suffix(self, theme: Theme) -> None:
        page = parse_page("---\nlayout: home\ntitle: Inicio\n---\n", file_path="index.md")
        html = theme.render_page(page, "/", "", "{}")
        assert "<title>Inicio | Test Docs</title>" in html

    def test_site_description_is_last_fallback(self, theme: Theme) -> None:
        page = parse_page("---\nlayout: home\n---\n", file_path="index.md")
        html = theme.render_page(page, "/", "", "{}")
        assert '<meta name="description" content="Docs for tests">' in html


def test_not_found_page(theme: Theme) -> None:
    html = theme.render_not_found()
    assert "<title>404 | Test Docs</title>" in html
    assert "PAGE NOT FOUND" in html
    assert '<a href="/test-docs/">Take me home</a>' in html


def test_default_site_has_no_logo_or_footer() -> None:
    page = parse_page("# Hi\n", file_path="hi.md")
    html = Theme(site_config=SiteConfig()).render_page(page, "/hi", "", "{}")
    assert 'class="logo"' not in html
    assert "site-footer" not in html
    assert 'href="/assets/style.css"' in html


def test_minimal_sidebar_site_renders_doc_page() -> None:
    site = SiteConfig(theme=ThemeConfig(sidebar=[SidebarGroup(items=[SidebarItem("A", "/a")])]))
    html = Theme(site_config=site).render_page(parse_page("# A\n\n## B\n", "a.md"), "/a", "<h1>A</h1>", "{}")
    assert '<li class="sidebar-item active">' in html
    assert '<a href="/a.html">A</a>' in html
    assert '<a href="#b">B</a>' in html
