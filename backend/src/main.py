import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from auth.interfaces.routes import router as auth_router
from health.routes import router as health_router
from shared.config import Settings, load_settings
from shared.error_handlers import register_exception_handlers
from shared.infrastructure.database import build_engine, build_session_factory
from shared.logging_config import configure_logging
from shared.middleware import ClientIdMiddleware, ErrorTranslationMiddleware
from users.interfaces.routes import router as users_router

logger = logging.getLogger(__name__)

STATIC_PATH = "/static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Accounts API starting (environment=%s)", app.state.settings.ENVIRONMENT)
    yield
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Accounts API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = build_engine(settings.DATABASE_URL)
    app.state.session_factory = build_session_factory(app.state.engine)

    # Starlette runs the last added middleware first: CORS, the client-id gate, then
    # error translation, so error responses still pass back through CORS.
    app.add_middleware(ErrorTranslationMiddleware, settings=settings)
    app.add_middleware(ClientIdMiddleware, settings=settings, exempt_prefixes=(f"{STATIC_PATH}/",))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(users_router)

    if settings.PUBLIC_DIR.is_dir():
        app.mount(STATIC_PATH, StaticFiles(directory=settings.PUBLIC_DIR), name="static")
    else:
        logger.warning("Public directory %s not found, static files disabled", settings.PUBLIC_DIR)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.PORT)
