"""
Shared request dependencies.

The catalog service and token verifier are created once in the app
lifespan and kept on app.state; tests swap them with dependency_overrides.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from pocketdeck.catalog.service import CatalogService
from pocketdeck.services.identity import InvalidTokenError, Principal, TokenVerifier

logger = logging.getLogger(__name__)


def get_catalog_service(request: Request) -> CatalogService:
    service: CatalogService = request.app.state.catalog_service
    return service


def get_token_verifier(request: Request) -> TokenVerifier:
    verifier: TokenVerifier = request.app.state.token_verifier
    return verifier


async def get_current_user(
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    authorization: Annotated[str | None, Header()] = None,
) -> Principal:
    """
    Authenticate the request from its bearer token.

    Raises 401 if the header is missing or the token is rejected.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - No token provided",
        )

    token = authorization.removeprefix("Bearer ").strip()

    try:
        return await verifier.verify(token)
    except InvalidTokenError as e:
        logger.info("Token verification failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - Invalid token",
        ) from e


CurrentUser = Annotated[Principal, Depends(get_current_user)]
Catalog = Annotated[CatalogService, Depends(get_catalog_service)]
