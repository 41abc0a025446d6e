import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app.adapters.image_storage import build_image_store
from app.api.health import router as health_router
from app.api.routes_admin import router as admin_router
from app.api.routes_auth import router as auth_router
from app.api.routes_catalogue import router as catalogue_router
from app.config import Settings, get_settings
from app.db import create_session_factory
from app.errors import BackendError, CatalogError, NotFoundError
from app.repositories.catalog_repo import build_repository
from app.repositories.remote_store import RemoteStoreAdapter
from app.services.auth_service import AuthService
from app.services.catalog_service import CatalogService
from app.utils.logging import configure_logging

log = logging.getLogger("catalog.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    os.makedirs(app.state.settings.images_dir, exist_ok=True)
    app.state.remote.ensure_schema()
    app.state.auth.ensure_bootstrap()
    log.info(
        "catalog backend ready (remote %s, data dir %s)",
        "configured" if app.state.remote.configured else "not configured",
        app.state.settings.DATA_DIR,
    )
    yield


def _error_response(err: CatalogError) -> JSONResponse:
    message = err.message
    if isinstance(err, BackendError):
        # internals stay in the server log
        message = BackendError.default_message
    return JSONResponse(status_code=err.kind.status_code, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        if isinstance(exc, BackendError):
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        log.debug("rejected request for %s: %s", request.url.path, errors)
        locations = {err["loc"][0] for err in errors if err.get("loc")}
        if "path" in locations:
            # a non-numeric id can never name a product
            return JSONResponse(status_code=404, content={"error": NotFoundError.default_message})
        if "query" in locations:
            return JSONResponse(status_code=400, content={"error": "Invalid query parameter"})
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal error"})


def _mount_frontend(app: FastAPI, static_dir: Optional[str]) -> None:
    def _page(name: str):
        path = os.path.join(static_dir or "", name)
        if not static_dir or not os.path.isfile(path):
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return FileResponse(path)

    @app.get("/", include_in_schema=False)
    def index():
        return _page("index.html")

    @app.get("/admin", include_in_schema=False)
    def admin_page():
        return _page("admin.html")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    remote = RemoteStoreAdapter(create_session_factory(settings.DATABASE_URL))
    repo = build_repository(settings, remote)

    app = FastAPI(title="Catalog Backend", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.remote = remote
    app.state.catalog = CatalogService(repo)
    app.state.auth = AuthService(repo, settings)
    app.state.images = build_image_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(catalogue_router, prefix="/products", tags=["catalogue"])
    app.include_router(admin_router, tags=["admin"])
    app.include_router(auth_router, tags=["auth"])

    # uploaded images kept on local disk
    app.mount("/images", StaticFiles(directory=settings.images_dir, check_dir=False), name="images")
    _mount_frontend(app, settings.STATIC_DIR)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    run()
