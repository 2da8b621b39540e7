"""Storefront FastAPI application.

Serves the product catalogue and order endpoints. Commands are processed
synchronously inside the HTTP request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
    python src/app.py            # honours PORT and HOST
"""

import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api import order_router, product_router, register_exception_handlers
from storefront.domain import storefront
from storefront.utils.db import setup_db
from storefront.utils.logging import add_context, clear_context, get_logger

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in domain.toml:
#   - unset/"development" → in-memory stores
#   - "production"        → PostgreSQL at DATABASE_URL
storefront.init()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_db(storefront)
    logger.info("Storefront API started", domain=storefront.name)
    yield
    logger.info("Storefront API shutting down")
    clear_context()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Watch storefront: product catalogue and orders",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for API requests."""
    if not request.url.path.startswith("/api"):
        # Health check, docs, etc.
        return await call_next(request)

    clear_context()
    add_context(method=request.method, path=request.url.path)
    with storefront.domain_context():
        response = await call_next(request)
    return response


register_exception_handlers(app)

app.include_router(product_router)
app.include_router(order_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/")
async def root():
    return {"success": True, "message": "Welcome to the Storefront API"}


@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": {"name": storefront.name},
        }
    )


if __name__ == "__main__":
    uvicorn.run(
        "app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=False,
    )
