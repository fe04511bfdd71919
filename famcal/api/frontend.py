import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.types import Scope

logger = logging.getLogger("famcal")


class SinglePageApp(StaticFiles):
    """
    Serve the built frontend. Paths that don't match a file get `index.html`
    instead of a 404, so client side routes still work after a reload.
    """

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)

        except StarletteHTTPException as ex:
            if ex.status_code != 404:
                raise

            return await super().get_response("index.html", scope)


def mount_frontend(app: FastAPI, directory: Path) -> bool:
    """
    Mount the frontend at the root of the app. This must be called after all
    the endpoints have been defined, otherwise the frontend would shadow them.
    """

    if not (directory / "index.html").is_file():
        logger.warning("No frontend build found in `%s`, not serving it", directory)

        return False

    app.mount("/", SinglePageApp(directory=directory, html=True), "frontend")

    return True
