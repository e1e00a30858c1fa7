"""Pandoc-based markdown to HTML renderer."""

from __future__ import annotations

import html
import logging
import re
import subprocess
from html.parser import HTMLParser
from urllib.parse import urlsplit

from docsite.services.route_service import href_for, is_external, slugify, unique_slug

logger = logging.getLogger(__name__)


class RenderError(RuntimeError):
    """Raised when pandoc rendering fails (missing binary, timeout, parse error)."""


PANDOC_FROM = "gfm+tex_math_dollars+footnotes+raw_html"
DEFAULT_TIMEOUT = 30

_TAG_RE = re.compile(r"<[^>]+>")
_HEADING_RE = re.compile(r"<(h[1-6])([^>]*)>(.*?)</\1>", re.DOTALL)
_ID_ATTR_RE = re.compile(r"""\s+id=(["'])[^"']*\1""")

# Raw HTML in pages is kept except for elements and attributes that run code
# or embed other documents.
_DROPPED_ELEMENTS: frozenset[str] = frozenset(
    {"embed", "frame", "frameset", "iframe", "noscript", "object", "script", "style", "template"}
)
_VOID_TAGS: frozenset[str] = frozenset(
    {"area", "br", "col", "embed", "hr", "img", "input", "source", "track", "wbr"}
)
_URL_ATTRS: frozenset[str] = frozenset({"action", "formaction", "href", "poster", "src", "xlink:href"})
_LINK_SCHEMES: frozenset[str] = frozenset({"http", "https", "mailto", "tel"})
_MEDIA_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def _is_safe_url(attr: str, value: str) -> bool:
    """Whether *value* may appear in the URL attribute *attr*.

    Links may use http(s), mailto and tel; media sources only http(s) or an
    inline ``data:image/`` payload. Protocol-relative URLs are rejected.
    """
    value = value.strip()
    if value.startswith("//") or value.startswith("\\\\"):
        return False
    scheme = urlsplit(value).scheme.lower()
    if not scheme:
        return True
    if attr == "href":
        return scheme in _LINK_SCHEMES
    if scheme == "data":
        return value[5:].lstrip().lower().startswith("image/")
    return scheme in _MEDIA_SCHEMES


def _format_attrs(attrs: list[tuple[str, str | None]]) -> str:
    parts: list[str] = []
    for name, value in attrs:
        if name.startswith("on") or name == "srcdoc":
            continue
        if value is None:
            parts.append(f" {name}")
            continue
        if name in _URL_ATTRS and not _is_safe_url(name, value):
            continue
        parts.append(f' {name}="{html.escape(value, quote=True)}"')
    return "".join(parts)


class _ContentFilter(HTMLParser):
    """Pass page HTML through, minus scripts, embedded documents and handlers."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._parts: list[str] = []
        self._dropping = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROPPED_ELEMENTS:
            if tag not in _VOID_TAGS:
                self._dropping += 1
            return
        if not self._dropping:
            self._parts.append(f"<{tag}{_format_attrs(attrs)}>")

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROPPED_ELEMENTS or self._dropping:
            return
        self._parts.append(f"<{tag}{_format_attrs(attrs)} />")

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROPPED_ELEMENTS:
            if tag not in _VOID_TAGS:
                self._dropping = max(0, self._dropping - 1)
            return
        if not self._dropping and tag not in _VOID_TAGS:
            self._parts.append(f"</{tag}>")

    def handle_data(self, data: str) -> None:
        if not self._dropping:
            self._parts.append(html.escape(data, quote=False))

    def handle_entityref(self, name: str) -> None:
        if not self._dropping:
            self._parts.append(f"&{name};")

    def handle_charref(self, name: str) -> None:
        if not self._dropping:
            self._parts.append(f"&#{name};")

    def result(self) -> str:
        return "".join(self._parts)


def _filter_html(rendered_html: str) -> str:
    """Strip executable content from rendered page HTML."""
    content_filter = _ContentFilter()
    content_filter.feed(rendered_html)
    content_filter.close()
    return content_filter.result()


def render_markdown(
    markdown: str,
    *,
    pandoc_bin: str = "pandoc",
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """Render markdown to HTML with a pandoc subprocess.

    Uses GFM + KaTeX math + syntax highlighting. Scripts and embedded
    documents are removed from the output and every heading gets an anchor id.

    Raises RenderError if pandoc is missing, times out or fails.
    """
    try:
        result = subprocess.run(
            [
                pandoc_bin,
                "-f",
                PANDOC_FROM,
                "-t",
                "html5",
                "--katex",
                "--syntax-highlighting=pygments",
                "--wrap=none",
            ],
            input=markdown,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        raise RenderError(
            f"Pandoc is not installed ({pandoc_bin!r} not found). "
            "See https://pandoc.org/installing.html"
        ) from None
    except subprocess.TimeoutExpired:
        raise RenderError(f"Pandoc rendering timed out after {timeout}s") from None

    if result.returncode != 0:
        raise RenderError(f"Pandoc rendering error: {result.stderr.strip()[:200]}")

    return _add_heading_anchors(_filter_html(result.stdout))


def _add_heading_anchors(html_text: str) -> str:
    """Give every heading a unique id and a permalink anchor.

    Ids already on the heading (pandoc assigns its own) are replaced so they
    always equal the slugs ``extract_headers`` computes from the markdown.
    """
    seen: dict[str, int] = {}

    def _add_id(match: re.Match[str]) -> str:
        tag = match.group(1)
        attrs = _ID_ATTR_RE.sub("", match.group(2))
        content = match.group(3)
        text = html.unescape(_TAG_RE.sub("", content))
        slug = unique_slug(slugify(text), seen)
        anchor = f'<a class="header-anchor" href="#{slug}" aria-hidden="true">#</a>'
        return f'<{tag}{attrs} id="{slug}">{content} {anchor}</{tag}>'

    return _HEADING_RE.sub(_add_id, html_text)


_SKIP_PREFIXES = ("#", "data:", "mailto:", "tel:")


def rewrite_internal_links(html_text: str, page_route: str, base: str = "/") -> str:
    """Rewrite internal src and href attributes to their deployed URLs.

    Args:
        html_text: Rendered HTML string.
        page_route: Route of the page the HTML belongs to, e.g. ``/intro``;
            relative links are resolved against it.
        base: Site base path, e.g. ``/how-to-code-in-typescript/``.

    Returns:
        HTML where ``intro.md`` style links become ``{base}intro.html`` and
        asset references are prefixed with the base.
    """

    def _replace(match: re.Match[str]) -> str:
        attr = match.group(1)
        quote = match.group(2)
        value = match.group(3)

        if not value or value.startswith(_SKIP_PREFIXES) or is_external(value):
            return match.group(0)
        rewritten = href_for(html.unescape(value), base, page_route)
        return f"{attr}={quote}{html.escape(rewritten, quote=True)}{quote}"

    return re.sub(r"""(src|href)=(["'])([^"']*)\2""", _replace, html_text)
