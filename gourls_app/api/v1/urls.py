from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from gourls_app.schemas.url_entry import (
    CurrentUserResponse,
    ReservedWordsResponse,
    UrlEntryCreate,
    UrlEntryResponse,
    UrlEntryUpdate,
)
from gourls_app.services.identity import is_authenticated_name
from gourls_app.services.redirect_service import RedirectService
from gourls_app.services.reserved_words import ReservedWords
from gourls_app.services.results import ErrorKind, OperationResult
from gourls_app.services.url_service import UrlService
from gourls_app.api.v1.redirect import to_redirect_response
from gourls_app.dependencies import (
    get_current_user,
    get_redirect_service,
    get_reserved_words,
    get_url_service,
)

router = APIRouter(prefix="/urls", tags=["urls"])

ERROR_STATUS = {
    ErrorKind.RESERVED_WORD: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


def unwrap(result: OperationResult) -> Optional[UrlEntryResponse]:
    """Return the entry or raise the HTTPException matching the failure kind"""
    if not result.ok:
        raise HTTPException(
            status_code=ERROR_STATUS[result.error.kind],
            detail={"error": result.error.kind.value, "message": result.error.message},
        )
    return result.entry


@router.get("/user", response_model=CurrentUserResponse)
def get_current_user_info(current_user: str = Depends(get_current_user)):
    """Who am I"""
    return CurrentUserResponse(name=current_user, is_authenticated=is_authenticated_name(current_user))


@router.get("/reserved-words", response_model=ReservedWordsResponse)
def list_reserved_words(reserved_words: ReservedWords = Depends(get_reserved_words)):
    return ReservedWordsResponse(reserved_words=reserved_words.words)


@router.get("/", response_model=List[UrlEntryResponse])
async def list_urls(url_service: UrlService = Depends(get_url_service)):
    return await url_service.list_urls()


@router.get("/search", response_model=List[UrlEntryResponse])
async def search_urls(
    short_name: Optional[str] = Query(None, alias="shortName"),
    url_service: UrlService = Depends(get_url_service)
):
    """Case-insensitive substring search; no term returns everything"""
    return await url_service.search_urls(short_name)


@router.get("/redirect/{short_name}")
async def redirect_to_long_url(
    short_name: str,
    redirect_service: RedirectService = Depends(get_redirect_service)
):
    """Redirect to the long URL, or to the create page when the name is free"""
    return to_redirect_response(await redirect_service.resolve(short_name))


@router.get("/by-id/{entry_id}", response_model=UrlEntryResponse)
async def get_url_by_id(
    entry_id: UUID,
    url_service: UrlService = Depends(get_url_service)
):
    return unwrap(await url_service.get_by_id(entry_id))


@router.get("/{short_name}", response_model=UrlEntryResponse)
async def get_url_by_short_name(
    short_name: str,
    url_service: UrlService = Depends(get_url_service)
):
    return unwrap(await url_service.get_by_short_name(short_name))


@router.post("/", response_model=UrlEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_url(
    url_data: UrlEntryCreate,
    url_service: UrlService = Depends(get_url_service)
):
    return unwrap(await url_service.create_url(url_data.short_name, url_data.long_url))


@router.put("/{entry_id}", response_model=UrlEntryResponse)
async def update_url(
    entry_id: UUID,
    url_data: UrlEntryUpdate,
    url_service: UrlService = Depends(get_url_service)
):
    return unwrap(await url_service.update_url(entry_id, url_data.short_name, url_data.long_url))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_url(
    entry_id: UUID,
    url_service: UrlService = Depends(get_url_service)
):
    unwrap(await url_service.delete_url(entry_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
