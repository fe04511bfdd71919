from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from famcal.api.endpoints.admin import router as admin_router
from famcal.api.endpoints.calendar import router as calendar_router
from famcal.api.endpoints.login import router as login_router
from famcal.api.endpoints.me import router as me_router
from famcal.api.endpoints.updates import router as updates_router
from famcal.api.frontend import mount_frontend
from famcal.api.infra.db_connection import connect
from famcal.api.infra.migrate import migrate
from famcal.api.infra.session_repo import SessionRepo
from famcal.api.infra.setup_token_repo import SetupTokenRepo
from famcal.api.middleware import (
    SlowRequestMiddleware,
    UnhandledExceptionHandler,
    famcal_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from famcal.api.settings import DBSettings, ServerSettings
from famcal.application.exceptions import FamcalException, NotFound
from famcal.application.session.purge_expired import PurgeExpiredCredentials


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:  # pragma: no cover
    db = connect(DBSettings().db_url)

    try:
        migrate(db)

        PurgeExpiredCredentials(SessionRepo(db), SetupTokenRepo(db)).handle()

    finally:
        db.close()

    yield


app = FastAPI(
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)
app.include_router(login_router)
app.include_router(me_router)
app.include_router(calendar_router)
app.include_router(updates_router)
app.include_router(admin_router)
app.add_middleware(UnhandledExceptionHandler)
app.add_middleware(SlowRequestMiddleware)
app.add_exception_handler(FamcalException, famcal_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]


SERVER_SETTINGS = ServerSettings()

# The frontend dev server runs on a different origin
if not SERVER_SETTINGS.is_production:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[SERVER_SETTINGS.app_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.get("/api/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


@app.api_route(
    "/api/{_:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def unknown_api_route(_: str) -> None:
    raise NotFound("Unknown API route")


# In development the frontend is served by its own dev server
if SERVER_SETTINGS.is_production:
    mount_frontend(app, Path(SERVER_SETTINGS.frontend_dir))
