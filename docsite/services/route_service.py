"""Routes, output paths, heading slugs and link normalization."""

from __future__ import annotations

import posixpath
import re
from urllib.parse import urlsplit

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_PAGE_SUFFIXES = (".md", ".html")


def slugify(text: str) -> str:
    """Generate a heading anchor slug.

    - Lowercase, strip
    - Drop punctuation (unicode letters and digits are kept)
    - Replace whitespace runs with a single hyphen
    - Strip leading/trailing hyphens
    """
    slug = re.sub(r"[^\w\s-]", "", text.lower().strip())
    slug = re.sub(r"\s+", "-", slug)
    return slug.strip("-")


def unique_slug(slug: str, seen: dict[str, int]) -> str:
    """Return *slug* or a ``-N`` suffixed variant not yet present in *seen*."""
    if slug not in seen:
        seen[slug] = 0
        return slug
    while True:
        seen[slug] += 1
        candidate = f"{slug}-{seen[slug]}"
        if candidate not in seen:
            seen[candidate] = 0
            return candidate


def route_for_file(rel_path: str) -> str:
    """Map a content-relative markdown path to its site route.

    ``index.md`` -> ``/``, ``intro.md`` -> ``/intro``,
    ``guide/index.md`` -> ``/guide/``, ``guide/a.md`` -> ``/guide/a``.
    """
    path = rel_path.replace("\\", "/").removeprefix("./").removesuffix(".md")
    if path == "index":
        return "/"
    if path.endswith("/index"):
        return "/" + path.removesuffix("index")
    return "/" + path


def output_path_for_route(route: str) -> str:
    """Map a route to the HTML file path relative to the output directory."""
    if route.endswith("/"):
        return route.lstrip("/") + "index.html"
    return route.lstrip("/") + ".html"


def is_external(link: str) -> bool:
    """Whether *link* leaves the site (has a URL scheme or is protocol-relative)."""
    value = link.strip()
    return value.startswith("//") or bool(_SCHEME_RE.match(value))


def split_fragment(link: str) -> tuple[str, str]:
    """Split ``path#fragment`` into ``(path, "#fragment")``; query strings are dropped."""
    parts = urlsplit(link)
    fragment = f"#{parts.fragment}" if parts.fragment else ""
    return parts.path, fragment


def normalize_link(link: str, current_route: str = "/") -> str:
    """Normalize an internal link to a route.

    Relative links are resolved against *current_route*. Query strings, fragments
    and ``.md``/``.html`` suffixes are dropped; ``/index`` becomes ``/``.
    """
    path, _ = split_fragment(link.strip())
    if not path:
        return current_route

    if not path.startswith("/"):
        base_dir = current_route if current_route.endswith("/") else posixpath.dirname(current_route)
        trailing = path.endswith("/")
        path = posixpath.normpath(posixpath.join(base_dir or "/", path))
        if trailing and not path.endswith("/"):
            path += "/"

    for suffix in _PAGE_SUFFIXES:
        if path.endswith(suffix):
            path = path.removesuffix(suffix)
            break

    if path == "/index" or path == "":
        return "/"
    if path.endswith("/index"):
        return path.removesuffix("index")
    return path


def normalize_base(base: str) -> str:
    """Ensure the base path starts and ends with ``/``."""
    value = base.strip()
    if not value or value == "/":
        return "/"
    return "/" + value.strip("/") + "/"


def href_for(link: str, base: str = "/", current_route: str = "/") -> str:
    """Return the deployed href for a link written in config or content.

    External links are returned unchanged. Internal links are normalized,
    prefixed with *base* and given their ``.html`` file name; fragments survive.
    Links with any other file extension are treated as assets and only prefixed.
    """
    if is_external(link):
        return link
    stripped = link.strip()
    if stripped.startswith("#"):
        return stripped
    path, fragment = split_fragment(stripped)
    extension = posixpath.splitext(path)[1]
    if extension and extension not in _PAGE_SUFFIXES:
        return normalize_base(base) + normalize_link(path, current_route).lstrip("/") + fragment
    route = normalize_link(stripped, current_route)
    target = output_path_for_route(route)
    if target.endswith("index.html"):
        target = target.removesuffix("index.html")
    return normalize_base(base) + target + fragment
