"""
FastAPI dependencies for dependency injection.

- The identity resolver is a cached singleton built from settings
- The reserved-word gate is built once at startup (see main.lifespan) and
  read from app.state, never from a module global
- Services are request-scoped and receive everything they need
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from gourls_app.config import settings
from gourls_app.database.connection import get_db
from gourls_app.services.identity import AmbientIdentityResolver, IdentityResolver
from gourls_app.services.redirect_service import RedirectService
from gourls_app.services.reserved_words import ReservedWords
from gourls_app.services.url_service import UrlService


@lru_cache()
def get_identity_resolver() -> IdentityResolver:
    """
    Get identity resolver instance (singleton).

    @lru_cache ensures this is called only once.
    """
    return AmbientIdentityResolver(
        default_user=settings.default_user,
        env_var=settings.current_user_env_var,
    )


def get_reserved_words(request: Request) -> ReservedWords:
    """Reserved-word gate loaded during application startup."""
    return request.app.state.reserved_words


def _principal_name(request: Request) -> Optional[str]:
    # Only present when an AuthenticationMiddleware is installed
    user = request.scope.get("user")
    if user is not None and getattr(user, "is_authenticated", False):
        return user.display_name
    return None


def get_current_user(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> str:
    """Resolve the acting user once per request."""
    return resolver.resolve(
        header_value=request.headers.get(settings.user_header),
        principal_name=_principal_name(request),
    )


def get_url_service(
    db: Session = Depends(get_db),
    reserved_words: ReservedWords = Depends(get_reserved_words),
    current_user: str = Depends(get_current_user),
) -> UrlService:
    """Get UrlService with all dependencies injected."""
    return UrlService(db=db, reserved_words=reserved_words, current_user=current_user)


def get_redirect_service(db: Session = Depends(get_db)) -> RedirectService:
    return RedirectService(
        db=db,
        create_page_url=settings.create_page_url,
        case_insensitive=settings.redirect_case_insensitive,
    )
