"""Content directory scanner."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import yaml

from docsite.filesystem.frontmatter import PageData, parse_page
from docsite.filesystem.toml_manager import SiteConfig, parse_site_config
from docsite.services.route_service import route_for_file

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

PUBLIC_DIR = "public"


@dataclass
class ContentIndex:
    """Complete index of all content in the content directory."""

    site_config: SiteConfig
    pages: dict[str, PageData]  # route -> parsed page
    public_assets: list[str]  # paths relative to public/, posix separators

    @property
    def routes(self) -> set[str]:
        return set(self.pages)


def _is_excluded(rel_parts: tuple[str, ...], excluded: tuple[str, ...]) -> bool:
    if any(part.startswith(".") for part in rel_parts):
        return True
    if rel_parts and rel_parts[0] == PUBLIC_DIR:
        return True
    for prefix in excluded:
        prefix_parts = tuple(prefix.strip("/").split("/"))
        if rel_parts[: len(prefix_parts)] == prefix_parts:
            return True
    return False


def discover_pages(content_dir: Path, exclude: tuple[str, ...] = ()) -> list[Path]:
    """Recursively discover markdown pages under the content directory.

    Hidden directories, ``public/`` and any *exclude* prefix (paths relative to
    the content dir, e.g. the build output) are skipped.
    """
    if not content_dir.exists():
        return []
    pages: list[Path] = []
    for path in sorted(content_dir.rglob("*.md")):
        rel_parts = path.relative_to(content_dir).parts
        if _is_excluded(rel_parts, exclude):
            continue
        pages.append(path)
    return pages


def discover_public_assets(content_dir: Path) -> list[str]:
    """List files under ``public/`` relative to that directory."""
    public_dir = content_dir / PUBLIC_DIR
    if not public_dir.is_dir():
        return []
    return sorted(
        path.relative_to(public_dir).as_posix()
        for path in public_dir.rglob("*")
        if path.is_file() and not path.name.startswith(".")
    )


@dataclass
class ContentManager:
    """Reads the site configuration and pages of a content directory."""

    content_dir: Path
    exclude: tuple[str, ...] = ()
    _site_config: SiteConfig | None = field(default=None, repr=False)

    @property
    def site_config(self) -> SiteConfig:
        """Get site configuration, loading if needed."""
        if self._site_config is None:
            self._site_config = parse_site_config(self.content_dir)
        return self._site_config

    def _validate_path(self, rel_path: str) -> Path:
        """Validate that a relative path stays within the content directory.

        Raises ValueError if the resolved path escapes content_dir.
        """
        full_path = (self.content_dir / rel_path).resolve()
        if not full_path.is_relative_to(self.content_dir.resolve()):
            raise ValueError(f"Path traversal detected: {rel_path}")
        return full_path

    def read_page(self, rel_path: str) -> PageData | None:
        """Read a single page by path relative to the content directory."""
        full_path = self._validate_path(rel_path)
        if not full_path.exists() or not full_path.is_file():
            return None
        return parse_page(full_path.read_text(encoding="utf-8"), file_path=rel_path)

    def scan_pages(self) -> dict[str, PageData]:
        """Scan all pages from the content directory, keyed by route."""
        pages: dict[str, PageData] = {}
        for page_path in discover_pages(self.content_dir, self.exclude):
            rel_path = page_path.relative_to(self.content_dir).as_posix()
            try:
                page = parse_page(page_path.read_text(encoding="utf-8"), file_path=rel_path)
            except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError):
                logger.exception("Skipping page %s due to parse error", rel_path)
                continue
            pages[route_for_file(rel_path)] = page
        logger.debug("Scanned %d page(s) in %s", len(pages), self.content_dir)
        return pages

    def build_index(self) -> ContentIndex:
        """Build a complete content index from the filesystem."""
        return ContentIndex(
            site_config=self.site_config,
            pages=self.scan_pages(),
            public_assets=discover_public_assets(self.content_dir),
        )
