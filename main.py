import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

import auth
import catalog
import orders
from config import get_settings
from database import ensure_indexes, get_db
from errors import ErrorCategory, ShopError, StoreError
from observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        ensure_indexes(get_db())
    except StoreError:
        # register still checks for an existing email before inserting
        logger.error("Could not ensure database indexes", exc_info=True)
    logger.info("FAM Sports API started")
    yield
    logger.info("FAM Sports API shutting down")


app = FastAPI(title="FAM Sports API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in catalog.routers:
    app.include_router(router)
app.include_router(orders.router)
app.include_router(auth.router)


# ----------------------- Error handlers -----------------------
@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        exc_info=exc if exc.http_status >= 500 else None,
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


def _describe(error: dict) -> str:
    loc = [str(part) for part in error["loc"] if part not in ("body", "query", "path")]
    return f"{'.'.join(loc) or 'body'}: {error['msg']}"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(
        f"Validation error on {request.url.path}: {errors}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "; ".join(_describe(e) for e in errors),
            "error": "VALIDATION_ERROR",
            "category": ErrorCategory.VALIDATION.value,
            "details": [
                {
                    "field": ".".join(str(part) for part in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in errors
            ],
        },
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Server error",
            "error": "INTERNAL_ERROR",
            "category": ErrorCategory.INTERNAL.value,
        },
    )


# ----------------------- Health -----------------------
@app.get("/")
def root():
    return {"message": "FAM Sports API running"}


@app.get("/test")
def test_database(db: Database = Depends(get_db)):
    response = {
        "backend": "Running",
        "database": "Not Available",
        "database_name": db.name,
        "connection_status": "Not Connected",
        "collections": [],
    }
    try:
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "Connected & Working"
        response["connection_status"] = "Connected"
    except PyMongoError as e:
        response["database"] = f"Error: {str(e)[:80]}"
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
