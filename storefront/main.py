# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from storefront.api import api_router
from storefront.data.database import init_db
from storefront.domain.errors import InternalError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    try:
        init_db()
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")
    yield


async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # details stay in the server log, the caller gets a generic message
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError("Internal server error")
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_detail()})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(api_router)
    app.add_exception_handler(Exception, unhandled_error)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
