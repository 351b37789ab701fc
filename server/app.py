import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import SERVER_VERSION
from .routes import all_routers

logger = logging.getLogger("kartline-server")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Kartline Server",
        description="Karting racing line generation",
        version=SERVER_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for r in all_routers:
        app.include_router(r)

    @app.on_event("startup")
    async def on_startup():
        logger.info("Kartline Server %s started", SERVER_VERSION)

    return app
