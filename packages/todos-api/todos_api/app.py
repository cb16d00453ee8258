"""
FastAPI application entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todos import __version__
from todos.config import TodosConfig, load_config
from todos.errors import TodoError
from todos.stores import TodoStore, init_store

from todos_api.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store once at startup and release it on shutdown."""
    config: TodosConfig = app.state.config
    app.state.store = await init_store(config, store=app.state.store)
    logger.info(f"Todos API ready (store={app.state.store.name})")
    try:
        yield
    finally:
        await app.state.store.close()


async def _todo_error_handler(request: Request, exc: TodoError) -> JSONResponse:
    expose = request.app.state.config.api.expose_error_details
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(expose))


async def _invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected request body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    config: Optional[TodosConfig] = None,
    store: Optional[TodoStore] = None,
) -> FastAPI:
    """
    Build the API.

    Args:
        config: Optional TodosConfig. Loaded from the default location if omitted.
        store: Optional store to serve from; built from config if omitted.
    """
    config = config or load_config()

    app = FastAPI(title="Todos API", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.store = store

    app.add_exception_handler(TodoError, _todo_error_handler)
    app.add_exception_handler(RequestValidationError, _invalid_body_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(router, prefix=config.api.prefix)
    return app
