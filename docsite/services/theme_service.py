"""Default theme: Jinja2 templates, navigation view models and stylesheet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from jinja2 import DictLoader, Environment, select_autoescape

from docsite.filesystem.frontmatter import generate_description
from docsite.filesystem.toml_manager import FooterConfig
from docsite.services.route_service import href_for, is_external, normalize_link

if TYPE_CHECKING:
    from collections.abc import Iterable

    from docsite.filesystem.frontmatter import Header, PageData
    from docsite.filesystem.toml_manager import SidebarItem, SiteConfig

STYLESHEET_PATH = "assets/style.css"

_GITHUB_ICON = (
    '<svg viewBox="0 0 16 16" width="20" height="20" aria-hidden="true"><path fill="currentColor" '
    'd="M8 0C3.58 0 0 3.58 0 8c0 3.54 2.29 6.53 5.47 7.59.4.07.55-.17.55-.38 0-.19-.01-.82-.01-1.49'
    "-2.01.37-2.53-.49-2.69-.94-.09-.23-.48-.94-.82-1.13-.28-.15-.68-.52-.01-.53.63-.01 1.08.58 1.23"
    ".82.72 1.21 1.87.87 2.33.66.07-.52.28-.87.51-1.07-1.78-.2-3.64-.89-3.64-3.95 0-.87.31-1.59.82"
    "-2.15-.08-.2-.36-1.02.08-2.12 0 0 .67-.21 2.2.82.64-.18 1.32-.27 2-.27.68 0 1.36.09 2 .27 1.53"
    "-1.04 2.2-.82 2.2-.82.44 1.1.16 1.92.08 2.12.51.56.82 1.27.82 2.15 0 3.07-1.87 3.75-3.65 3.95"
    ".29.25.54.73.54 1.48 0 1.07-.01 1.93-.01 2.2 0 .21.15.46.55.38A8.013 8.013 0 0016 8c0-4.42"
    '-3.58-8-8-8z"/></svg>'
)
SOCIAL_ICONS: dict[str, str] = {"github": _GITHUB_ICON}

_HEAD = """\
<!DOCTYPE html>
<html lang="{{ site.lang }}">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ head_title }}</title>
    <meta name="description" content="{{ description }}">
    <link rel="stylesheet" href="{{ stylesheet }}">
</head>
"""

_HEADER = """\
<header class="site-header">
    <a class="site-title" href="{{ home_href }}">
        {% if logo %}<img class="logo" src="{{ logo }}" alt="">{% endif %}
        <span>{{ site.title }}</span>
    </a>
    <nav class="site-nav">
        {% for item in nav %}
        <a href="{{ item.href }}"{% if item.active %} class="active"{% endif %}{% if item.external %} target="_blank" rel="noreferrer"{% endif %}>{{ item.text }}</a>
        {% endfor %}
        {% for social in social_links %}
        <a class="social-link" href="{{ social.href }}" aria-label="{{ social.icon }}" target="_blank" rel="noreferrer">{% if social.svg %}{{ social.svg|safe }}{% else %}{{ social.icon }}{% endif %}</a>
        {% endfor %}
    </nav>
</header>
"""

_FOOTER = """\
{% if footer.message or footer.copyright %}
<footer class="site-footer">
    {% if footer.message %}<p class="message">{{ footer.message }}</p>{% endif %}
    {% if footer.copyright %}<p class="copyright">{{ footer.copyright }}</p>{% endif %}
</footer>
{% endif %}
<script id="page-data" type="application/json">{{ page_data|safe }}</script>
"""

TEMPLATES: dict[str, str] = {
    "head.html": _HEAD,
    "header.html": _HEADER,
    "footer.html": _FOOTER,
    "sidebar_item.html": """\
<li class="sidebar-item{% if item.active %} active{% endif %}">
    {% if item.href %}<a href="{{ item.href }}">{{ item.text }}</a>{% else %}<p class="sidebar-heading">{{ item.text }}</p>{% endif %}
    {% if item.headers %}
    <ul class="sidebar-headers">
        {% for header in item.headers %}
        <li class="level-{{ header.level }}"><a href="#{{ header.slug }}">{{ header.title }}</a></li>
        {% endfor %}
    </ul>
    {% endif %}
    {% if item.children %}
    <ul class="sidebar-items">
        {% for item in item.children %}{% include "sidebar_item.html" %}{% endfor %}
    </ul>
    {% endif %}
</li>
""",
    "doc.html": """\
{% include "head.html" %}
<body class="layout-{{ layout }}">
{% include "header.html" %}
<div class="container">
    {% if sidebar %}
    <aside class="sidebar">
        {% for group in sidebar %}
        <section class="sidebar-group">
            {% if group.text %}
            <p class="sidebar-title">{% if group.href %}<a href="{{ group.href }}">{{ group.text }}</a>{% else %}{{ group.text }}{% endif %}</p>
            {% endif %}
            <ul class="sidebar-items">
                {% for item in group.items %}{% include "sidebar_item.html" %}{% endfor %}
            </ul>
        </section>
        {% endfor %}
    </aside>
    {% endif %}
    <main class="content">
        <article class="doc">{{ content|safe }}</article>
        {% if edit_link %}
        <p class="edit-link"><a href="{{ edit_link.href }}" target="_blank" rel="noreferrer">{{ edit_link.text }}</a></p>
        {% endif %}
        {% if prev or next %}
        <nav class="prev-next">
            {% if prev %}<a class="prev" href="{{ prev.href }}"><span class="desc">&larr;</span> {{ prev.text }}</a>{% endif %}
            {% if next %}<a class="next" href="{{ next.href }}">{{ next.text }} <span class="desc">&rarr;</span></a>{% endif %}
        </nav>
        {% endif %}
    </main>
    {% if outline %}
    <aside class="outline">
        <p class="outline-title">{{ outline_title }}</p>
        <ul>
            {% for header in outline %}
            <li class="level-{{ header.level }}"><a href="#{{ header.slug }}">{{ header.title }}</a></li>
            {% endfor %}
        </ul>
    </aside>
    {% endif %}
</div>
{% include "footer.html" %}
</body>
</html>
""",
    "home.html": """\
{% include "head.html" %}
<body class="layout-home">
{% include "header.html" %}
<main class="home">
    {% if hero %}
    <section class="hero">
        <div class="hero-main">
            {% if hero.name %}<h1 class="name"><span class="clip">{{ hero.name }}</span></h1>{% endif %}
            {% if hero.text %}<p class="text">{{ hero.text }}</p>{% endif %}
            {% if hero.tagline %}<p class="tagline">{{ hero.tagline }}</p>{% endif %}
            {% if hero.actions %}
            <div class="actions">
                {% for action in hero.actions %}
                <a class="action {{ action.theme }}" href="{{ action.href }}">{{ action.text }}</a>
                {% endfor %}
            </div>
            {% endif %}
        </div>
        {% if hero.image %}<div class="hero-image"><img src="{{ hero.image.src }}" alt="{{ hero.image.alt }}"></div>{% endif %}
    </section>
    {% endif %}
    {% if features %}
    <section class="features">
        {% for feature in features %}
        <div class="feature">
            {% if feature.href %}<a href="{{ feature.href }}">{% endif %}
            <h2 class="title">{{ feature.title }}</h2>
            <p class="details">{{ feature.details }}</p>
            {% if feature.href %}</a>{% endif %}
        </div>
        {% endfor %}
    </section>
    {% endif %}
    {% if content %}<article class="doc">{{ content|safe }}</article>{% endif %}
</main>
{% include "footer.html" %}
</body>
</html>
""",
    "404.html": """\
{% include "head.html" %}
<body class="layout-404">
{% include "header.html" %}
<main class="not-found">
    <p class="code">404</p>
    <h1 class="title">PAGE NOT FOUND</h1>
    <p class="action"><a href="{{ home_href }}">Take me home</a></p>
</main>
{% include "footer.html" %}
</body>
</html>
""",
}

STYLE_CSS = """\
:root {
    --c-brand: #3178c6;
    --c-brand-dark: #235a97;
    --c-text: #213547;
    --c-text-light: #476582;
    --c-bg: #ffffff;
    --c-bg-soft: #f6f6f7;
    --c-border: #e2e2e3;
    --sidebar-width: 272px;
}
@media (prefers-color-scheme: dark) {
    :root {
        --c-text: rgba(255, 255, 245, 0.86);
        --c-text-light: rgba(235, 235, 245, 0.6);
        --c-bg: #1b1b1f;
        --c-bg-soft: #202127;
        --c-border: #2e2e32;
    }
}
* { box-sizing: border-box; }
body {
    margin: 0;
    font-family: Inter, -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    color: var(--c-text);
    background: var(--c-bg);
    line-height: 1.7;
}
a { color: var(--c-brand); text-decoration: none; }
a:hover { text-decoration: underline; }
.site-header {
    display: flex;
    justify-content: space-between;
    align-items: center;
    padding: 0 1.5rem;
    height: 64px;
    border-bottom: 1px solid var(--c-border);
}
.site-title { display: flex; align-items: center; gap: 0.5rem; font-weight: 600; color: var(--c-text); }
.site-title .logo { height: 32px; border-radius: 50%; }
.site-nav { display: flex; align-items: center; gap: 1.25rem; font-size: 0.9rem; }
.site-nav a { color: var(--c-text); }
.site-nav a.active { color: var(--c-brand); }
.social-link { display: inline-flex; color: var(--c-text-light); }
.container { display: flex; max-width: 1440px; margin: 0 auto; }
.sidebar {
    flex: 0 0 var(--sidebar-width);
    padding: 1.5rem;
    border-right: 1px solid var(--c-border);
    background: var(--c-bg-soft);
    min-height: calc(100vh - 64px);
}
.sidebar ul { list-style: none; margin: 0; padding: 0; }
.sidebar-title, .sidebar-heading { font-weight: 700; margin: 0 0 0.5rem; }
.sidebar-item a { display: block; padding: 0.2rem 0; color: var(--c-text-light); }
.sidebar-item.active > a { color: var(--c-brand); font-weight: 500; }
.sidebar-items .sidebar-items, .sidebar-headers { padding-left: 1rem; font-size: 0.85rem; }
.content { flex: 1; min-width: 0; padding: 2rem 3rem 4rem; max-width: 820px; }
.doc h1 { font-size: 2rem; line-height: 1.25; }
.doc h2 { margin-top: 2.5rem; padding-top: 1.5rem; border-top: 1px solid var(--c-border); }
.header-anchor { opacity: 0; margin-left: 0.25rem; }
h1:hover .header-anchor, h2:hover .header-anchor, h3:hover .header-anchor { opacity: 1; }
.doc pre { background: var(--c-bg-soft); padding: 1rem 1.25rem; overflow-x: auto; border-radius: 8px; }
.doc code { font-family: ui-monospace, Menlo, Monaco, Consolas, monospace; font-size: 0.875em; }
.doc :not(pre) > code { background: var(--c-bg-soft); padding: 0.15rem 0.35rem; border-radius: 4px; }
.doc table { border-collapse: collapse; }
.doc th, .doc td { border: 1px solid var(--c-border); padding: 0.5rem 1rem; }
.doc blockquote { margin: 1rem 0; padding-left: 1rem; border-left: 3px solid var(--c-border); color: var(--c-text-light); }
code span.kw, code span.cf { color: #d73a49; }
code span.dt { color: #6f42c1; }
code span.st, code span.ch { color: #032f62; }
code span.dv, code span.fl, code span.bn { color: #005cc5; }
code span.co { color: #6a737d; font-style: italic; }
code span.fu { color: #6f42c1; }
.edit-link { margin-top: 3rem; font-size: 0.875rem; }
.prev-next { display: flex; justify-content: space-between; gap: 1rem; margin-top: 2rem; padding-top: 1.5rem; border-top: 1px solid var(--c-border); }
.prev-next a { flex: 1; padding: 0.75rem 1rem; border: 1px solid var(--c-border); border-radius: 8px; }
.prev-next a.next { text-align: right; }
.outline { flex: 0 0 224px; padding: 2rem 1rem; font-size: 0.8rem; }
.outline ul { list-style: none; padding: 0; margin: 0; }
.outline .level-3 { padding-left: 0.75rem; }
.outline-title { font-weight: 700; }
.home { max-width: 1152px; margin: 0 auto; padding: 3rem 1.5rem; }
.hero { display: flex; align-items: center; justify-content: space-between; gap: 2rem; }
.hero .name { font-size: 3.5rem; margin: 0; line-height: 1.1; }
.hero .clip { color: var(--c-brand); }
.hero .text { font-size: 3rem; font-weight: 700; margin: 0; line-height: 1.1; }
.hero .tagline { font-size: 1.5rem; color: var(--c-text-light); }
.hero-image img { max-width: 320px; max-height: 320px; }
.actions { display: flex; gap: 0.75rem; flex-wrap: wrap; }
.action { display: inline-block; padding: 0.5rem 1.25rem; border-radius: 20px; font-weight: 600; }
.action.brand { background: var(--c-brand); color: #fff; }
.action.alt { background: var(--c-bg-soft); color: var(--c-text); border: 1px solid var(--c-border); }
.features { display: grid; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); gap: 1rem; margin-top: 3rem; }
.feature { background: var(--c-bg-soft); border: 1px solid var(--c-border); border-radius: 12px; padding: 1.5rem; }
.feature .title { font-size: 1.1rem; margin: 0 0 0.5rem; }
.feature .details { color: var(--c-text-light); font-size: 0.9rem; margin: 0; }
.site-footer { text-align: center; padding: 2rem 1.5rem; border-top: 1px solid var(--c-border); color: var(--c-text-light); font-size: 0.875rem; }
.site-footer p { margin: 0; }
.not-found { text-align: center; padding: 6rem 1.5rem; }
.not-found .code { font-size: 4rem; font-weight: 600; margin: 0; }
@media (max-width: 960px) {
    .container { flex-direction: column; }
    .sidebar { min-height: 0; border-right: 0; border-bottom: 1px solid var(--c-border); }
    .outline { display: none; }
    .content { padding: 1.5rem; }
    .hero { flex-direction: column-reverse; text-align: center; }
}
"""


@dataclass
class SidebarLinkView:
    text: str
    href: str | None
    route: str | None
    active: bool = False
    headers: list[Header] = field(default_factory=list)
    children: list[SidebarLinkView] = field(default_factory=list)


@dataclass
class SidebarGroupView:
    text: str | None
    href: str | None
    items: list[SidebarLinkView] = field(default_factory=list)


@dataclass
class PrevNextLink:
    text: str
    href: str


def create_environment() -> Environment:
    """Create the Jinja2 environment holding the theme templates."""
    return Environment(
        loader=DictLoader(TEMPLATES),
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def is_active(link: str, route: str) -> bool:
    """Whether a nav link should be highlighted for the page at *route*."""
    if is_external(link):
        return False
    target = normalize_link(link)
    if target == "/":
        return route == "/"
    return route == target or route.startswith(target.rstrip("/") + "/")


def flatten_sidebar_links(site_config: SiteConfig) -> list[tuple[str, str]]:
    """Return ``(text, link)`` for every internal sidebar link in reading order."""

    def _walk(items: Iterable[SidebarItem]) -> list[tuple[str, str]]:
        result: list[tuple[str, str]] = []
        for item in items:
            if item.link is not None and not is_external(item.link):
                result.append((item.text, item.link))
            result.extend(_walk(item.items))
        return result

    links: list[tuple[str, str]] = []
    for group in site_config.theme.sidebar:
        links.extend(_walk(group.items))
    return links


def _override(value: object, default: PrevNextLink | None, base: str) -> PrevNextLink | None:
    """Apply a ``prev``/``next`` front matter override."""
    if value is False:
        return None
    if isinstance(value, str) and default is not None:
        return PrevNextLink(text=value, href=default.href)
    if isinstance(value, dict) and value.get("link"):
        return PrevNextLink(text=str(value.get("text", value["link"])), href=href_for(str(value["link"]), base))
    return default


def page_footer(page: PageData, default: FooterConfig) -> FooterConfig:
    """Apply a page-level ``footer`` front matter override.

    A string replaces the site footer on that page; ``false`` hides it.
    """
    value = page.frontmatter.get("footer")
    if value is False:
        return FooterConfig()
    if isinstance(value, str):
        return FooterConfig(message=value)
    return default


def prev_next(site_config: SiteConfig, page: PageData, route: str) -> tuple[PrevNextLink | None, PrevNextLink | None]:
    """Compute the previous/next page links from sidebar order."""
    base = site_config.base
    links = flatten_sidebar_links(site_config)
    routes = [normalize_link(link) for _, link in links]
    prev_link: PrevNextLink | None = None
    next_link: PrevNextLink | None = None
    if route in routes:
        i = routes.index(route)
        if i > 0:
            prev_link = PrevNextLink(text=links[i - 1][0], href=href_for(links[i - 1][1], base))
        if i < len(links) - 1:
            next_link = PrevNextLink(text=links[i + 1][0], href=href_for(links[i + 1][1], base))
    return (
        _override(page.frontmatter.get("prev"), prev_link, base),
        _override(page.frontmatter.get("next"), next_link, base),
    )


@dataclass
class Theme:
    """Renders pages of one site with the default theme."""

    site_config: SiteConfig
    _env: Environment = field(default_factory=create_environment, repr=False)

    def _sidebar_items(self, items: Iterable[SidebarItem], route: str, headers: list[Header]) -> list[SidebarLinkView]:
        base = self.site_config.base
        views: list[SidebarLinkView] = []
        for item in items:
            item_route = None if item.link is None or is_external(item.link) else normalize_link(item.link)
            active = item_route == route
            views.append(
                SidebarLinkView(
                    text=item.text,
                    href=href_for(item.link, base) if item.link is not None else None,
                    route=item_route,
                    active=active,
                    headers=headers if active else [],
                    children=self._sidebar_items(item.items, route, headers),
                )
            )
        return views

    def sidebar(self, page: PageData, route: str) -> list[SidebarGroupView]:
        """Build the sidebar view for the page at *route*."""
        if page.frontmatter.get("sidebar") is False:
            return []
        groups: list[SidebarGroupView] = []
        for group in self.site_config.theme.sidebar:
            max_level = 1 + group.sidebar_depth
            headers = [h for h in page.headers if 2 <= h.level <= max_level]
            groups.append(
                SidebarGroupView(
                    text=group.text,
                    href=href_for(group.path, self.site_config.base) if group.path else None,
                    items=self._sidebar_items(group.items, route, headers),
                )
            )
        return groups

    def _common_context(self, route: str) -> dict[str, Any]:
        site = self.site_config
        theme = site.theme
        return {
            "site": site,
            "home_href": site.base,
            "stylesheet": site.base + STYLESHEET_PATH,
            "logo": href_for(theme.logo, site.base) if theme.logo else None,
            "nav": [
                {
                    "text": item.text,
                    "href": href_for(item.link, site.base),
                    "active": is_active(item.link, route),
                    "external": is_external(item.link),
                }
                for item in theme.nav
            ],
            "social_links": [
                {"icon": s.icon, "href": s.link, "svg": SOCIAL_ICONS.get(s.icon)} for s in theme.social_links
            ],
            "footer": theme.footer,
        }

    def render_page(self, page: PageData, route: str, content_html: str, page_data_json: str) -> str:
        """Render a full HTML document for one page."""
        site = self.site_config
        base = site.base
        context = self._common_context(route)
        title_is_default = not page.frontmatter.get("title") and page.layout == "home"
        context.update(
            {
                "head_title": site.title if title_is_default else f"{page.title} | {site.title}",
                "description": page.description or generate_description(page.content) or site.description,
                "layout": page.layout,
                "content": content_html,
                "page_data": page_data_json.replace("</", "<\\/"),
            }
        )
        context["footer"] = page_footer(page, site.theme.footer)

        if page.layout == "home":
            hero = None
            if page.hero is not None:
                hero = {
                    "name": page.hero.name,
                    "text": page.hero.text,
                    "tagline": page.hero.tagline,
                    "image": (
                        {"src": href_for(page.hero.image.src, base), "alt": page.hero.image.alt}
                        if page.hero.image
                        else None
                    ),
                    "actions": [
                        {"text": a.text, "theme": a.theme, "href": href_for(a.link, base)} for a in page.hero.actions
                    ],
                }
            context["hero"] = hero
            context["features"] = [
                {
                    "title": f.title,
                    "details": f.details,
                    "href": href_for(f.link, base) if f.link else None,
                }
                for f in page.features
            ]
            if not content_html.strip():
                context["content"] = ""
            return self._env.get_template("home.html").render(**context)

        prev_link, next_link = prev_next(site, page, route) if page.layout == "doc" else (None, None)
        outline: list[Header] = []
        if page.layout == "doc" and page.frontmatter.get("outline") is not False:
            outline = [h for h in page.headers if h.level in (2, 3)]
        edit_link = None
        if site.theme.edit_link is not None and page.file_path:
            edit_link = {
                "href": site.theme.edit_link.pattern.replace(":path", page.file_path),
                "text": site.theme.edit_link.text,
            }
        context.update(
            {
                "sidebar": self.sidebar(page, route) if page.layout == "doc" else [],
                "prev": prev_link,
                "next": next_link,
                "outline": outline,
                "outline_title": site.theme.outline_title,
                "edit_link": edit_link,
            }
        )
        return self._env.get_template("doc.html").render(**context)

    def render_not_found(self) -> str:
        """Render the 404 page."""
        context = self._common_context("/404")
        context.update(
            {
                "head_title": f"404 | {self.site_config.title}",
                "description": self.site_config.description,
                "page_data": "{}",
            }
        )
        return self._env.get_template("404.html").render(**context)
