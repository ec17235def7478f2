# notekeeper/main.py
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from notekeeper.config import settings
from notekeeper.core.db import init_db, close_db
from notekeeper.core.errors import ApiError
from notekeeper.core.middleware import BodySizeLimitMiddleware
from notekeeper.core.responses import error_response
from notekeeper.services import build_services

from notekeeper.api.v1.routers import users, notes

logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db(generate_schemas=settings.db_generate_schemas)
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)
    yield
    await close_db()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Services are stateless; build them once and share them across requests
app.state.services = build_services(settings)


# ---------------------------------------------------------------------------
# Error handling: every failure leaves through the same envelope
# ---------------------------------------------------------------------------
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return error_response(exc.status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e.get("loc", [])), "msg": e.get("msg", "")} for e in exc.errors()]
    return error_response(400, "Invalid request body", errors)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("[error] unhandled exception on %s %s", request.method, request.url.path)
    return error_response(500, "Internal Server Error")


# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------
app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)


# CORS (with Cookie); added last so it wraps every other layer
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# REST
app.include_router(users.router, prefix="/api/v1")
app.include_router(notes.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}

# Static frontend, mounted last so API routes take precedence
if os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notekeeper.main:app", host=settings.host, port=settings.port)
