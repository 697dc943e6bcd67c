from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from portal.api.routers import health, permissions
from portal.core.config import Settings, get_settings
from portal.core.rbac import create_rbac_permission_policy, load_policy_from_files
from src.common.logger import get_logger, setup_logger

VERSION = "0.1.0"

logger = get_logger("api")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the permission service application.

    The RBAC policy is loaded once at startup; a malformed policy aborts
    startup instead of serving with a partial one.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logger(level=settings.log_level, log_dir=settings.log_dir)
        config_paths = settings.app_config_paths_list
        logger.info("Loading RBAC policy from %s", ", ".join(config_paths) or "<defaults>")
        config = load_policy_from_files(config_paths)
        app.state.rbac_policy = create_rbac_permission_policy(config)
        yield
        app.state.rbac_policy = None

    app = FastAPI(
        title=settings.app_name,
        description="RBAC permission policy for the developer portal",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(permissions.router, prefix="/api")

    return app


app = create_app()
