# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.routers import auth, carts, health, orders, products, users
from storefront.utils.logging import get_logger
from storefront.utils.settings import APP_ENV

logger = get_logger(__name__)


#errors are always {"error": "..."}
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("invalid_payload", method=request.method, path=request.url.path, errors=exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid payload"})


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("storage_error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


def create_app() -> FastAPI:
    app = FastAPI(title="Storefront", version="1.0.0")

    if APP_ENV != "production":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app
