"""Build configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Docsite build settings.

    Site-level data (title, navigation, sidebar) lives in ``site.toml`` inside the
    content directory; these settings only describe where and how to build.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCSITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    debug: bool = False

    # Paths
    content_dir: Path = Path("./docs")
    output_dir: Path = Path("./dist")

    # Rendering
    pandoc_bin: str = "pandoc"
    render_timeout: int = Field(default=30, ge=1)

    # Preview server
    host: str = "127.0.0.1"
    port: int = Field(default=4173, ge=1, le=65535)

    def validate_paths(self) -> None:
        """Validate that the output directory cannot clobber the content directory."""
        content = self.content_dir.resolve()
        output = self.output_dir.resolve()

        violations: list[str] = []
        if output == content:
            violations.append("OUTPUT_DIR must differ from CONTENT_DIR")
        elif content.is_relative_to(output):
            violations.append("OUTPUT_DIR must not contain CONTENT_DIR")
        if output == Path(output.anchor):
            violations.append("OUTPUT_DIR must not be the filesystem root")

        if violations:
            joined = "; ".join(violations)
            raise ValueError(f"Unsafe build configuration: {joined}")
