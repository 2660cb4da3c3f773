from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pocketdeck.api import cards_router, decks_router, health_router
from pocketdeck.catalog.service import build_catalog_service
from pocketdeck.config import settings
from pocketdeck.db.database import close_db, init_db
from pocketdeck.services.identity import FirebaseTokenVerifier


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()

    # One connection pool for TCGdex and the identity provider
    async with httpx.AsyncClient(
        follow_redirects=True, timeout=settings.catalog_request_timeout
    ) as http:
        app.state.catalog_service = build_catalog_service(http, settings)
        app.state.token_verifier = FirebaseTokenVerifier(http, settings.identity_api_key)
        yield

    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("pocketdeck"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(decks_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
