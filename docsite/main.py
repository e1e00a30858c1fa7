"""FastAPI preview server for a built site."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from docsite.config import Settings
from docsite.filesystem.toml_manager import parse_site_config

if TYPE_CHECKING:
    from starlette.requests import Request

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    """Configure application logging."""
    level = logging.DEBUG if debug else logging.INFO
    fmt = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create an app serving ``settings.output_dir`` under the site base path.

    Raises RuntimeError if the output directory has not been built.
    """
    if settings is None:
        settings = Settings()

    output_dir = settings.output_dir
    if not (output_dir / "index.html").is_file():
        raise RuntimeError(f"No built site in {output_dir}; run 'docsite build' first")

    base = parse_site_config(settings.content_dir).base
    not_found_page = output_dir / "404.html"

    app = FastAPI(title="docsite preview", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.base = base

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> HTMLResponse:
        if not_found_page.is_file():
            return HTMLResponse(not_found_page.read_text(encoding="utf-8"), status_code=404)
        return HTMLResponse("Not Found", status_code=404)

    if base != "/":

        @app.get("/", include_in_schema=False)
        async def redirect_to_base() -> RedirectResponse:
            return RedirectResponse(base)

    app.mount(base.rstrip("/") or "/", StaticFiles(directory=str(output_dir), html=True), name="site")
    logger.info("Serving %s at %s", output_dir, base)
    return app


def cli_entry(settings: Settings | None = None) -> None:
    """Run the preview server with uvicorn."""
    import uvicorn

    if settings is None:
        settings = Settings()
    configure_logging(settings.debug)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)
