"""Shared test fixtures for docsite."""

from __future__ import annotations

import html
import re
from pathlib import Path

import pytest

from docsite.config import Settings
from docsite.pandoc.renderer import _add_heading_anchors

REPO_DOCS_DIR = Path(__file__).resolve().parent.parent / "docs"

SITE_TOML = """\
[site]
title = "Test Docs"
description = "Docs for tests"
base = "/test-docs/"
lang = "en-US"

[theme]
logo = "/logo.png"

[theme.footer]
message = "Released under the MIT License."
copyright = "Copyright 2024"

[[theme.nav]]
text = "Home"
link = "/"

[[theme.nav]]
text = "Guide"
link = "/intro"

[[theme.nav]]
text = "External"
link = "https://example.com/"

[[theme.sidebar]]
text = "Guide"
path = "/"
sidebar_depth = 1

[[theme.sidebar.items]]
text = "Introduction"
link = "/intro"

[[theme.sidebar.items]]
text = "Usage"
link = "/usage"

[[theme.social_links]]
icon = "github"
link = "https://github.com/example/docs"
"""

INDEX_MD = """\
---
layout: home
hero:
  name: Test
  text: Docs for tests
  tagline: Tagline
  actions:
    - theme: brand
      text: Start
      link: /intro
features:
  - title: Fast
    details: Builds quickly.
---
"""

INTRO_MD = """\
# Introduction

Read the [usage guide](./usage.md) next.

## Setup

Install it.
"""

USAGE_MD = """\
---
title: Usage
---
# How to use it

## Basics

Some text.

### Details

More text.

## Basics

Duplicate heading.
"""


def fake_render(markdown: str) -> str:
    """Deterministic stand-in for pandoc: headings, paragraphs and links only."""
    parts: list[str] = []
    for block in markdown.strip().split("\n\n"):
        block = block.strip()
        if not block:
            continue
        heading = re.match(r"^(#{1,6})\s+(.+)$", block)
        if heading and "\n" not in block:
            level = len(heading.group(1))
            parts.append(f"<h{level}>{html.escape(heading.group(2))}</h{level}>")
            continue
        text = html.escape(block, quote=False)
        text = re.sub(r"\[([^\]]+)\]\(([^)]+)\)", r'<a href="\2">\1</a>', text)
        parts.append(f"<p>{text}</p>")
    return _add_heading_anchors("\n".join(parts))


@pytest.fixture
def tmp_content_dir(tmp_path: Path) -> Path:
    """Create a temporary content directory with a small site."""
    content = tmp_path / "docs"
    content.mkdir()
    (content / "public").mkdir()
    (content / "public" / "logo.png").write_bytes(b"\x89PNG\r\n")
    (content / "site.toml").write_text(SITE_TOML, encoding="utf-8")
    (content / "index.md").write_text(INDEX_MD, encoding="utf-8")
    (content / "intro.md").write_text(INTRO_MD, encoding="utf-8")
    (content / "usage.md").write_text(USAGE_MD, encoding="utf-8")
    return content


@pytest.fixture
def test_settings(tmp_content_dir: Path, tmp_path: Path) -> Settings:
    """Create test settings with temporary paths."""
    return Settings(
        _env_file=None,
        debug=True,
        content_dir=tmp_content_dir,
        output_dir=tmp_path / "dist",
    )
