"""
HTTP surface of the ROPM generator.

Two routes: the entry form at GET / and the generation endpoint at
POST /gerar-boletim. Static files under <base>/public are served as well,
with /assets pointing at <base>/public/assets.
"""

import json
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from ropm import __version__
from ropm.config import AppConfig, load_config
from ropm.core.intake import unflatten_form
from ropm.output.pdf_report import ROPMReportGenerator

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Erro ao gerar PDF: "

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> Any:
    """
    Decode the request body into a raw submission.

    HTML forms are unflattened into nested dicts and lists; anything else is
    parsed as JSON. An empty body is an empty submission.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return unflatten_form(form.multi_items())

    body = await request.body()
    if not body.strip():
        return {}
    return json.loads(body)


def create_app(
    config: Optional[AppConfig] = None,
    generator: Optional[ROPMReportGenerator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration (loaded from the environment when omitted)
        generator: Report generator to share across requests (built from config when omitted)

    Returns:
        Configured FastAPI application
    """
    config = config or load_config()
    generator = generator or ROPMReportGenerator(config)

    app = FastAPI(title="ROPM Generator", version=__version__)
    app.state.config = config
    app.state.generator = generator

    @app.get("/")
    async def index():
        page = config.public_dir / "index.html"
        if not page.is_file():
            return PlainTextResponse("index.html não encontrado", status_code=404)
        return FileResponse(page, media_type="text/html")

    @app.post("/gerar-boletim")
    async def generate_bulletin(request: Request):
        try:
            payload = await read_payload(request)
            record, pdf = await run_in_threadpool(generator.generate_from_payload, payload)
            return Response(
                content=pdf,
                media_type="application/pdf",
                headers={"Content-Disposition": f"attachment; filename={record.download_filename}"},
            )
        except Exception as e:
            logger.exception("PDF generation failed")
            return PlainTextResponse(ERROR_PREFIX + str(e), status_code=500)

    assets_dir = config.public_dir / "assets"
    if assets_dir.is_dir():
        app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")
    if config.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=config.public_dir), name="public")
    else:
        logger.warning("Public directory %s not found; only the API is served", config.public_dir)

    return app
