"""Route registration boundary.

The lifecycle manager hands its FastAPI engine to a RouteRegistrar, which
attaches the request handlers. Business handlers live behind this seam;
SystemRouteRegistrar only provides the health, version and translation
endpoints.
"""

from typing import Protocol

from fastapi import APIRouter, FastAPI

from api.routes.i18n import router as i18n_router
from api.routes.system import router as system_router
from infrastructure.logging import get_module_logger

logger = get_module_logger()
api_router = APIRouter()

api_router.include_router(system_router)
api_router.include_router(i18n_router)


class RouteRegistrar(Protocol):
    """Attaches request handlers to an HTTP router.

    Errors raised by register() abort server initialization.
    """

    def register(self, root_dir: str, router: FastAPI) -> None: ...


class SystemRouteRegistrar:
    """Registers the built-in system and translation routes."""

    def register(self, root_dir: str, router: FastAPI) -> None:
        router.include_router(api_router)
        logger.info("routes_registered", root_dir=root_dir, count=len(api_router.routes))
