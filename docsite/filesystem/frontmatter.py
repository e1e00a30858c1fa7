"""YAML front matter parser for documentation pages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import frontmatter

from docsite.services.route_service import slugify, unique_slug

RECOGNIZED_FIELDS: frozenset[str] = frozenset(
    {
        "title",
        "description",
        "layout",
        "hero",
        "features",
        "prev",
        "next",
        "sidebar",
        "outline",
        "footer",
    }
)

LAYOUTS: frozenset[str] = frozenset({"doc", "home", "page"})

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_CODE_SPAN_RE = re.compile(r"(`+)(.+?)\1")
# Intraword underscores (snake_case) are not emphasis.
_EMPHASIS_RES = (
    re.compile(r"\*{1,3}([^*]+)\*{1,3}"),
    re.compile(r"(?<!\w)_{1,3}([^_]+)_{1,3}(?!\w)"),
)
_HTML_TAG_RE = re.compile(r"<[^>]+>")


@dataclass
class HeroImage:
    src: str
    alt: str = ""


@dataclass
class HeroAction:
    text: str
    link: str
    theme: str = "brand"


@dataclass
class Hero:
    """Hero block of a ``home`` layout page."""

    name: str = ""
    text: str = ""
    tagline: str = ""
    image: HeroImage | None = None
    actions: list[HeroAction] = field(default_factory=list)


@dataclass
class Feature:
    title: str
    details: str = ""
    link: str | None = None


@dataclass
class Header:
    """A heading found in the page body."""

    level: int
    title: str
    slug: str


@dataclass
class PageData:
    """Parsed documentation page."""

    title: str
    content: str
    raw_content: str
    description: str = ""
    layout: str = "doc"
    file_path: str = ""
    frontmatter: dict[str, Any] = field(default_factory=dict)
    hero: Hero | None = None
    features: list[Feature] = field(default_factory=list)
    headers: list[Header] = field(default_factory=list)


def extract_title(content: str, file_path: str = "") -> str:
    """Extract title from first # heading in markdown body.

    Falls back to deriving title from filename.
    """
    in_code_block = False
    for line in content.strip().split("\n"):
        stripped = line.strip()
        if stripped.startswith("```"):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        if stripped.startswith("# ") and not stripped.startswith("## "):
            return plain_heading_text(stripped.removeprefix("# "))
    if file_path:
        name = file_path.rsplit("/", maxsplit=1)[-1].removesuffix(".md")
        if name == "index":
            return "Home"
        return name.replace("-", " ").replace("_", " ").capitalize()
    return "Untitled"


def _strip_emphasis(text: str) -> str:
    for pattern in _EMPHASIS_RES:
        text = pattern.sub(r"\1", text)
    return text


def plain_heading_text(text: str) -> str:
    """Strip inline markdown and HTML from heading text.

    Code spans keep their content verbatim (``Array<T>``, ``foo_bar``), the
    same text the rendered ``<code>`` element carries.
    """
    text = _IMAGE_RE.sub("", text)
    text = _LINK_RE.sub(r"\1", text)
    parts: list[str] = []
    pos = 0
    for match in _CODE_SPAN_RE.finditer(text):
        parts.append(_HTML_TAG_RE.sub("", _strip_emphasis(text[pos : match.start()])))
        parts.append(match.group(2).strip())
        pos = match.end()
    parts.append(_HTML_TAG_RE.sub("", _strip_emphasis(text[pos:])))
    return "".join(parts).strip()


def extract_headers(content: str) -> list[Header]:
    """List every ATX heading outside fenced code blocks.

    Slugs are made unique across the whole page in document order, so they
    match the anchor ids assigned by the renderer.
    """
    headers: list[Header] = []
    seen: dict[str, int] = {}
    in_code_block = False
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        match = _HEADING_RE.match(line)
        if match is None:
            continue
        title = plain_heading_text(match.group(2))
        headers.append(
            Header(
                level=len(match.group(1)),
                title=title,
                slug=unique_slug(slugify(title), seen),
            )
        )
    return headers


def generate_description(content: str, max_length: int = 160) -> str:
    """Generate a plain-text page description from the markdown body.

    Skips headings, code blocks, images and raw HTML lines; strips inline
    formatting from the rest.
    """
    lines: list[str] = []
    in_code_block = False
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("```"):
            in_code_block = not in_code_block
            continue
        if in_code_block or not stripped:
            continue
        if stripped.startswith(("#", "![", "<", ":::", "|")):
            continue
        stripped = _LINK_RE.sub(r"\1", stripped)
        stripped = _strip_emphasis(stripped)
        stripped = stripped.replace("`", "")
        lines.append(stripped)
        if sum(len(part) for part in lines) > max_length:
            break

    text = " ".join(lines)
    if len(text) > max_length:
        text = text[:max_length].rsplit(" ", maxsplit=1)[0] + "..."
    return text


def parse_hero(raw_hero: object) -> Hero | None:
    """Parse the ``hero`` front matter mapping."""
    if not isinstance(raw_hero, dict):
        return None

    image: HeroImage | None = None
    raw_image = raw_hero.get("image")
    if isinstance(raw_image, str):
        image = HeroImage(src=raw_image)
    elif isinstance(raw_image, dict) and raw_image.get("src"):
        image = HeroImage(src=str(raw_image["src"]), alt=str(raw_image.get("alt", "")))

    actions: list[HeroAction] = []
    for raw_action in raw_hero.get("actions") or []:
        if not isinstance(raw_action, dict) or "link" not in raw_action:
            msg = f"hero action missing required 'link' field: {raw_action}"
            raise ValueError(msg)
        actions.append(
            HeroAction(
                text=str(raw_action.get("text", "")),
                link=str(raw_action["link"]),
                theme=str(raw_action.get("theme", "brand")),
            )
        )

    return Hero(
        name=str(raw_hero.get("name", "")),
        text=str(raw_hero.get("text", "")),
        tagline=str(raw_hero.get("tagline", "")),
        image=image,
        actions=actions,
    )


def parse_features(raw_features: object) -> list[Feature]:
    """Parse the ``features`` front matter list; entries without a title are skipped."""
    if not isinstance(raw_features, list):
        return []
    features: list[Feature] = []
    for raw in raw_features:
        if not isinstance(raw, dict) or not raw.get("title"):
            continue
        link = raw.get("link")
        features.append(
            Feature(
                title=str(raw["title"]),
                details=str(raw.get("details", "")),
                link=str(link) if link else None,
            )
        )
    return features


def parse_page(raw_content: str, file_path: str = "") -> PageData:
    """Parse a markdown file with optional YAML front matter into PageData."""
    post = frontmatter.loads(raw_content)
    metadata = dict(post.metadata)

    # Non-string values (e.g. title: 42) are coerced to string.
    fm_title = metadata.get("title")
    if fm_title is not None and str(fm_title).strip():
        title = str(fm_title).strip()
    else:
        title = extract_title(post.content, file_path)

    layout = str(metadata.get("layout", "doc"))
    if layout not in LAYOUTS:
        msg = f"Unknown layout {layout!r} in {file_path or 'page'}; expected one of {sorted(LAYOUTS)}"
        raise ValueError(msg)

    raw_description = metadata.get("description")
    description = str(raw_description).strip() if raw_description else ""

    return PageData(
        title=title,
        content=post.content,
        raw_content=raw_content,
        description=description,
        layout=layout,
        file_path=file_path,
        frontmatter=metadata,
        hero=parse_hero(metadata.get("hero")),
        features=parse_features(metadata.get("features")),
        headers=extract_headers(post.content),
    )
