from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from faucet import __version__
from faucet.api import create_api_router
from faucet.api.routers.faucet import error_response
from faucet.core.config import Settings, get_settings
from faucet.core.container import ApplicationContainer
from faucet.core.logging_config import configure_logging


def create_app(settings: Optional[Settings] = None, container: Optional[ApplicationContainer] = None) -> FastAPI:
    if container is not None:
        settings = container.settings
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.container = container or ApplicationContainer.build(settings)
        await app.state.container.startup()
        try:
            yield
        finally:
            await app.state.container.shutdown()

    app = FastAPI(
        title=settings.project_name,
        description="Solana testnet faucet",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type"],
        expose_headers=["Link"],
        max_age=300,
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request format")

    app.include_router(create_api_router(settings.api_prefix))
    return app


app = create_app()
