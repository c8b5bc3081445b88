import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.features.accessibility.routes.analyze import router as analyze_router
from app.platform.config import settings
from app.platform.exceptions import add_exception_handlers
from app.platform.logger import LOG_FORMAT

# Configure logging to show INFO level messages
logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Runs axe-core against a page in headless Chrome and reports accessibility violations",
        version="1.0.0",
        debug=settings.DEBUG,
        # /analyze is the only public route; docs are for local debugging
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    add_exception_handlers(app)

    app.include_router(analyze_router)

    return app


app = create_app()
