"""FastAPI application setup for Character Table."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from character_table.api.dependencies import get_app_settings, get_loader, get_store
from character_table.api.routes_admin import router as admin_router
from character_table.api.routes_table import router as table_router
from character_table.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title="Character Table",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(table_router, prefix="/table", tags=["table"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.on_event("startup")
async def startup() -> None:
    """Create the table session and kick off the one-time catalog load."""
    settings = get_app_settings()
    get_store()
    if not settings.load_on_startup:
        return
    loader = get_loader()
    if settings.load_in_background:
        loader.start_background()
    else:
        loader.run()
