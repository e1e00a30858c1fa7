"""Tests for navigation link collection and dead link detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docsite.filesystem.content_manager import ContentManager
from docsite.filesystem.frontmatter import parse_page
from docsite.filesystem.toml_manager import (
    NavLink,
    SidebarGroup,
    SidebarItem,
    SiteConfig,
    SocialLink,
    ThemeConfig,
)
from docsite.services.link_service import (
    LinkProblem,
    LinkRef,
    check_site,
    collect_config_links,
    collect_page_links,
    find_dead_links,
    validate_links,
)

if TYPE_CHECKING:
    from pathlib import Path

ROUTES = {"/", "/intro", "/usage", "/guide/"}


def _config() -> SiteConfig:
    return SiteConfig(
        theme=ThemeConfig(
            nav=[NavLink(text="Home", link="/"), NavLink(text="Ext", link="https://example.com")],
            sidebar=[
                SidebarGroup(
                    text="Guide",
                    path="/guide/",
                    items=[
                        SidebarItem(text="Intro", link="/intro"),
                        SidebarItem(
                            text="More",
                            items=[SidebarItem(text="Missing", link="/missing")],
                        ),
                    ],
                )
            ],
            social_links=[SocialLink(icon="github", link="https://github.com/x")],
        )
    )


class TestCollect:
    def test_collect_config_links_covers_every_section(self) -> None:
        refs = list(collect_config_links(_config()))
        assert [r.source for r in refs] == [
            "theme.nav[0]",
            "theme.nav[1]",
            "theme.sidebar[0].path",
            "theme.sidebar[0].items[0]",
            "theme.sidebar[0].items[1].items[0]",
            "theme.social_links[0]",
        ]

    def test_collect_page_links(self) -> None:
        page = parse_page(
            "---\nlayout: home\nhero:\n  actions:\n    - text: Go\n      link: /intro\n"
            "features:\n  - title: F\n    link: /nowhere\n  - title: G\n---\n",
            file_path="index.md",
        )
        refs = list(collect_page_links({"/": page}))
        assert refs == [
            LinkRef(source="index.md: hero.actions[0]", text="Go", link="/intro"),
            LinkRef(source="index.md: features[0]", text="F", link="/nowhere"),
        ]


def test_logo_is_collected_first() -> None:
    config = _config()
    config.theme.logo = "/logo.svg"
    first = next(iter(collect_config_links(config)))
    assert first == LinkRef(source="theme.logo", text="logo", link="/logo.svg")


class TestValidateLinks:
    def test_reports_only_missing_internal_links(self) -> None:
        problems = validate_links(collect_config_links(_config()), ROUTES)
        assert problems == [
            LinkProblem(
                source="theme.sidebar[0].items[1].items[0]",
                text="Missing",
                link="/missing",
                route="/missing",
            )
        ]

    def test_md_suffix_and_fragment_resolve(self) -> None:
        refs = [LinkRef("a", "a", "/intro.md#setup"), LinkRef("b", "b", "/usage.html")]
        assert validate_links(refs, ROUTES) == []

    def test_directory_without_trailing_slash_resolves(self) -> None:
        assert validate_links([LinkRef("a", "a", "/guide")], ROUTES) == []

    def test_public_asset_resolves(self) -> None:
        refs = [LinkRef("a", "a", "/files/cheatsheet.pdf")]
        assert validate_links(refs, ROUTES, ["files/cheatsheet.pdf"]) == []
        assert len(validate_links(refs, ROUTES)) == 1

    def test_problem_str_names_source_and_link(self) -> None:
        problem = LinkProblem(source="theme.nav[2]", text="Docs", link="/docs", route="/docs")
        assert str(problem) == "theme.nav[2]: 'Docs' -> /docs (no page for /docs)"


class TestFindDeadLinks:
    def test_relative_links_resolve_against_page(self) -> None:
        html = '<p><a href="./usage.md">u</a> <a href="intro.md#setup">i</a></p>'
        assert find_dead_links(html, "/intro", ROUTES) == []

    def test_dead_link_is_reported(self) -> None:
        html = '<a href="./nope.md">x</a><a href="https://example.com">ok</a><a href="#top">ok</a>'
        problems = find_dead_links(html, "/intro", ROUTES, source="intro.md")
        assert [(p.source, p.link, p.route) for p in problems] == [("intro.md", "./nope.md", "/nope")]

    def test_single_quoted_href(self) -> None:
        problems = find_dead_links("<a class='x' href='/gone'>x</a>", "/", ROUTES)
        assert [p.route for p in problems] == ["/gone"]


class TestCheckSite:
    def test_fixture_site_is_clean(self, tmp_content_dir: Path) -> None:
        index = ContentManager(content_dir=tmp_content_dir).build_index()
        assert check_site(index) == []

    def test_missing_page_is_reported(self, tmp_content_dir: Path) -> None:
        (tmp_content_dir / "usage.md").unlink()
        index = ContentManager(content_dir=tmp_content_dir).build_index()
        problems = check_site(index)
        assert [p.link for p in problems] == ["/usage"]
        assert problems[0].source == "theme.sidebar[0].items[1]"

    def test_missing_logo_is_reported(self, tmp_content_dir: Path) -> None:
        (tmp_content_dir / "public" / "logo.png").unlink()
        index = ContentManager(content_dir=tmp_content_dir).build_index()
        problems = check_site(index)
        assert [(p.source, p.link) for p in problems] == [("theme.logo", "/logo.png")]

    def test_missing_hero_image_is_reported(self, tmp_content_dir: Path) -> None:
        (tmp_content_dir / "index.md").write_text(
            "---\nlayout: home\nhero:\n  name: Test\n  image:\n    src: /hero.svg\n    alt: Hero\n---\n",
            encoding="utf-8",
        )
        index = ContentManager(content_dir=tmp_content_dir).build_index()
        problems = check_site(index)
        assert [(p.source, p.text, p.link) for p in problems] == [("index.md: hero.image", "Hero", "/hero.svg")]
