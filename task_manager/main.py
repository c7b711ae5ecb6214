from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_manager.modules.auth.api import router as auth_router
from task_manager.modules.tasks.api import router as tasks_router, stats_router
from task_manager.modules.tasks.store import MemoryTaskStore
from task_manager.core.config import Settings, settings as default_settings
from task_manager.core.jwt import JWTSigner, Signer
from task_manager.core.logger import logger, setup_logging
from task_manager.core.response import (
    http_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from task_manager.core.security import BcryptHasher, Hasher
from task_manager.db.session import Database, init_database
from task_manager.routes.auth import USER_PREFIX
from task_manager.routes.tasks import STATS_PREFIX, STATS_ROUTES, get_task_endpoint

DOCS_URL = "/api-docs"
OPENAPI_URL = "/swagger.json"


def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    hasher: Optional[Hasher] = None,
    signer: Optional[Signer] = None,
) -> FastAPI:
    """
    Build the API for one deployment mode.
      database → users + owned tasks, every task route behind a Bearer token
      memory   → ownerless shared task list, no /api/users routes, no auth
    """
    app_settings = app_settings or default_settings
    setup_logging(app_settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.database is not None:
            app.state.database.create_schema()
        logger.info(f"{app_settings.PROJECT_NAME} started in '{app_settings.STORAGE_MODE}' mode")
        yield

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.VERSION,
        docs_url=DOCS_URL,
        openapi_url=OPENAPI_URL,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    if app_settings.auth_enabled:
        app.state.database = database or init_database(app_settings.DATABASE_URL)
        app.state.task_store = None
        app.state.hasher = hasher or BcryptHasher(rounds=app_settings.BCRYPT_ROUNDS)
        app.state.signer = signer or JWTSigner(
            app_settings.JWT_SECRET,
            expires_delta=timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
    else:
        app.state.database = None
        app.state.task_store = MemoryTaskStore()
        app.state.hasher = None
        app.state.signer = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register global exception handlers ────────────────────────────
    # These ensure 400, 401, 403, 404, 500 all return the unified response format
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ───────────────────────────────────────────────────────
    if app_settings.auth_enabled:
        app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(stats_router)

    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url=DOCS_URL)

    @app.get("/info", tags=["Health"])
    def info():
        endpoints = {
            "tasks": get_task_endpoint("list"),
            "stats": STATS_PREFIX + STATS_ROUTES["stats"],
        }
        if app_settings.auth_enabled:
            endpoints["users"] = USER_PREFIX
        return {
            "success": True,
            "message": "Welcome to Task Manager API",
            "data": {"documentation": DOCS_URL, "endpoints": endpoints},
        }

    @app.get("/health", tags=["Health"])
    def health():
        return {"success": True, "message": "OK", "data": None}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=default_settings.PORT)


if __name__ == "__main__":
    run()
