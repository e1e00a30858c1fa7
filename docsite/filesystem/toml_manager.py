"""TOML configuration reader/writer for site.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import tomli_w

from docsite.services.route_service import normalize_base

if TYPE_CHECKING:
    from pathlib import Path

SITE_CONFIG_FILE = "site.toml"


@dataclass
class NavLink:
    """A top navigation entry."""

    text: str
    link: str


@dataclass
class SidebarItem:
    """A sidebar entry; items without a link act as collapsible headings."""

    text: str
    link: str | None = None
    items: list[SidebarItem] = field(default_factory=list)


@dataclass
class SidebarGroup:
    """A sidebar section.

    ``path`` is the optional link of the group title and must resolve to a page.
    ``sidebar_depth`` controls how many heading levels of the active page are
    listed under its sidebar entry (0 = none, 1 = ``h2``, 2 = ``h2`` + ``h3``).
    """

    text: str | None = None
    path: str | None = None
    sidebar_depth: int = 1
    items: list[SidebarItem] = field(default_factory=list)


@dataclass
class SocialLink:
    """A social icon link shown in the header."""

    icon: str
    link: str


@dataclass
class FooterConfig:
    message: str = ""
    copyright: str = ""


@dataclass
class EditLink:
    """Pattern for the "edit this page" link; ``:path`` is replaced by the page file."""

    pattern: str
    text: str = "Edit this page"


@dataclass
class ThemeConfig:
    """Parsed ``[theme]`` table."""

    logo: str | None = None
    outline_title: str = "On this page"
    nav: list[NavLink] = field(default_factory=list)
    sidebar: list[SidebarGroup] = field(default_factory=list)
    social_links: list[SocialLink] = field(default_factory=list)
    footer: FooterConfig = field(default_factory=FooterConfig)
    edit_link: EditLink | None = None


@dataclass
class SiteConfig:
    """Parsed site configuration from site.toml."""

    title: str = "My Docs"
    description: str = ""
    base: str = "/"
    lang: str = "en-US"
    hostname: str | None = None
    ignore_dead_links: bool = False
    theme: ThemeConfig = field(default_factory=ThemeConfig)


def _require(entry: dict[str, Any], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        msg = f"{where} missing required '{key}' field: {entry}"
        raise ValueError(msg)
    return value.strip()


def _parse_sidebar_items(raw_items: list[dict[str, Any]], where: str) -> list[SidebarItem]:
    items: list[SidebarItem] = []
    for i, item_data in enumerate(raw_items):
        item_where = f"{where}.items[{i}]"
        text = _require(item_data, "text", item_where)
        children = _parse_sidebar_items(item_data.get("items", []), item_where)
        link = item_data.get("link")
        if link is None and not children:
            msg = f"{item_where} needs a 'link' or nested 'items': {item_data}"
            raise ValueError(msg)
        items.append(SidebarItem(text=text, link=link, items=children))
    return items


def _parse_sidebar(raw_groups: list[dict[str, Any]]) -> list[SidebarGroup]:
    groups: list[SidebarGroup] = []
    for i, group_data in enumerate(raw_groups):
        where = f"theme.sidebar[{i}]"
        depth = group_data.get("sidebar_depth", 1)
        if not isinstance(depth, int) or depth < 0:
            msg = f"{where} 'sidebar_depth' must be a non-negative integer, got {depth!r}"
            raise ValueError(msg)
        groups.append(
            SidebarGroup(
                text=group_data.get("text"),
                path=group_data.get("path"),
                sidebar_depth=depth,
                items=_parse_sidebar_items(group_data.get("items", []), where),
            )
        )
    return groups


def _parse_theme(theme_data: dict[str, Any]) -> ThemeConfig:
    nav = [
        NavLink(
            text=_require(entry, "text", f"theme.nav[{i}]"),
            link=_require(entry, "link", f"theme.nav[{i}]"),
        )
        for i, entry in enumerate(theme_data.get("nav", []))
    ]
    social_links = [
        SocialLink(
            icon=_require(entry, "icon", f"theme.social_links[{i}]"),
            link=_require(entry, "link", f"theme.social_links[{i}]"),
        )
        for i, entry in enumerate(theme_data.get("social_links", []))
    ]
    footer_data = theme_data.get("footer", {})
    edit_data = theme_data.get("edit_link")
    edit_link = None
    if edit_data is not None:
        edit_link = EditLink(
            pattern=_require(edit_data, "pattern", "theme.edit_link"),
            text=edit_data.get("text", "Edit this page"),
        )

    return ThemeConfig(
        logo=theme_data.get("logo"),
        outline_title=theme_data.get("outline_title", "On this page"),
        nav=nav,
        sidebar=_parse_sidebar(theme_data.get("sidebar", [])),
        social_links=social_links,
        footer=FooterConfig(
            message=footer_data.get("message", ""),
            copyright=footer_data.get("copyright", ""),
        ),
        edit_link=edit_link,
    )


def parse_site_config(content_dir: Path) -> SiteConfig:
    """Parse site.toml from the content directory.

    A missing file yields the default configuration. Invalid TOML and malformed
    entries raise ``ValueError``.
    """
    config_path = content_dir / SITE_CONFIG_FILE
    if not config_path.exists():
        return SiteConfig()

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in {config_path}: {exc}") from exc
    site_data = data.get("site", {})

    return SiteConfig(
        title=site_data.get("title", "My Docs"),
        description=site_data.get("description", ""),
        base=normalize_base(site_data.get("base", "/")),
        lang=site_data.get("lang", "en-US"),
        hostname=site_data.get("hostname"),
        ignore_dead_links=bool(site_data.get("ignore_dead_links", False)),
        theme=_parse_theme(data.get("theme", {})),
    )


def _sidebar_item_data(item: SidebarItem) -> dict[str, Any]:
    entry: dict[str, Any] = {"text": item.text}
    if item.link is not None:
        entry["link"] = item.link
    if item.items:
        entry["items"] = [_sidebar_item_data(child) for child in item.items]
    return entry


def write_site_config(content_dir: Path, config: SiteConfig) -> None:
    """Write site configuration back to site.toml."""
    site_data: dict[str, Any] = {
        "title": config.title,
        "description": config.description,
        "base": config.base,
        "lang": config.lang,
    }
    if config.hostname:
        site_data["hostname"] = config.hostname
    if config.ignore_dead_links:
        site_data["ignore_dead_links"] = True

    theme = config.theme
    theme_data: dict[str, Any] = {"outline_title": theme.outline_title}
    if theme.logo:
        theme_data["logo"] = theme.logo
    if theme.edit_link is not None:
        theme_data["edit_link"] = {"pattern": theme.edit_link.pattern, "text": theme.edit_link.text}
    if theme.footer.message or theme.footer.copyright:
        theme_data["footer"] = {
            "message": theme.footer.message,
            "copyright": theme.footer.copyright,
        }
    theme_data["nav"] = [{"text": n.text, "link": n.link} for n in theme.nav]

    sidebar_data: list[dict[str, Any]] = []
    for group in theme.sidebar:
        entry: dict[str, Any] = {"sidebar_depth": group.sidebar_depth}
        if group.text is not None:
            entry["text"] = group.text
        if group.path is not None:
            entry["path"] = group.path
        entry["items"] = [_sidebar_item_data(item) for item in group.items]
        sidebar_data.append(entry)
    theme_data["sidebar"] = sidebar_data
    theme_data["social_links"] = [{"icon": s.icon, "link": s.link} for s in theme.social_links]

    config_path = content_dir / SITE_CONFIG_FILE
    config_path.write_bytes(tomli_w.dumps({"site": site_data, "theme": theme_data}).encode("utf-8"))
