import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from rewardapi import containers
from rewardapi.core.exception_handlers import (
    handle_api_error,
    handle_request_validation,
    handle_routing_error,
    handle_unexpected_error,
)
from rewardapi.core.exceptions import BaseAPIException
from rewardapi.core.logging_middleware import LoggingMiddleware
from rewardapi.logging_config import setup_logging
from rewardapi.routers import (
    auth_router,
    health_router,
    point_router,
    referral_router,
    store_router,
    user_router,
    wheel_router,
    withdrawal_router,
)

load_dotenv()
logger = logging.getLogger(__name__)


def create_app(container: Optional[containers.Container] = None) -> FastAPI:
    container = container or containers.Container()
    # the most recently wired container serves the routes; make it this one
    container.wire(modules=container.wiring_config.modules)
    settings = container.config.settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # opens the store and applies migrations when AUTO_MIGRATE is set
        container.init_resources()
        logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
        try:
            yield
        finally:
            container.shutdown_resources()

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)
    app.container = container  # type: ignore

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BaseAPIException, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_routing_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router, prefix=settings.API_V1_STR)
    app.include_router(auth_router.router, prefix=settings.API_V1_STR)
    app.include_router(user_router.router, prefix=settings.API_V1_STR)
    app.include_router(wheel_router.router, prefix=settings.API_V1_STR)
    app.include_router(point_router.router, prefix=settings.API_V1_STR)
    app.include_router(withdrawal_router.router, prefix=settings.API_V1_STR)
    app.include_router(referral_router.router, prefix=settings.API_V1_STR)
    app.include_router(store_router.router, prefix=settings.API_V1_STR)

    return app


app = create_app()

handler = Mangum(app, lifespan="auto")
