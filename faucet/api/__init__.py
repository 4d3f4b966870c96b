from fastapi import APIRouter

from faucet.api.routers import faucet


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(faucet.router, tags=["faucet"])
    return router


__all__ = [
    "create_api_router",
]
