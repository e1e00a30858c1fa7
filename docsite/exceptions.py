"""Application-level exception types.

Convention:
- ``ValueError`` for configuration and front matter validation errors
  (missing ``link`` on a nav entry, negative sidebar depth, invalid TOML).
  The message names the offending entry so it can be shown as-is.
- ``DocsiteError`` subclasses for build failures.  The CLI catches them,
  prints ``Error: <message>`` and exits with status 1.
- ``RenderError`` (in ``docsite.pandoc.renderer``) for pandoc failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from docsite.services.link_service import LinkProblem


class DocsiteError(Exception):
    """Base class for errors raised while building a site."""


class BuildError(DocsiteError):
    """Raised when the build cannot proceed (unsafe output dir, unwritable files)."""


class BrokenLinkError(DocsiteError):
    """Raised when one or more internal links point at pages that do not exist."""

    def __init__(self, problems: Sequence[LinkProblem]) -> None:
        self.problems = list(problems)
        lines = [f"{len(self.problems)} broken link(s):"]
        lines.extend(f"  {problem}" for problem in self.problems)
        super().__init__("\n".join(lines))
