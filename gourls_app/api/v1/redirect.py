from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse

from gourls_app.services.redirect_service import (
    NeedsCreation,
    RedirectResolution,
    RedirectService,
    RedirectTarget,
)
from gourls_app.dependencies import get_redirect_service

router = APIRouter(tags=["redirect"])


def to_redirect_response(resolution: RedirectResolution):
    """
    302 to the long URL or to the create page.

    When the create page would be captured again by /{short_name}, answer
    404 with the creation prompt in the body instead of redirecting in a loop.
    """
    if isinstance(resolution, RedirectTarget):
        return RedirectResponse(url=resolution.long_url, status_code=status.HTTP_302_FOUND)

    if resolution.redirectable:
        return RedirectResponse(url=resolution.create_url, status_code=status.HTTP_302_FOUND)

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "detail": {
                "error": "not_found",
                "message": f"Short URL '{resolution.short_name}' does not exist yet.",
                "shortName": resolution.short_name,
                "createUrl": resolution.create_url,
                "available": True,
            }
        },
    )


@router.get("/{short_name}")
async def redirect_visitor(
    short_name: str,
    requested: Optional[str] = Query(None, alias="shortName"),
    redirect_service: RedirectService = Depends(get_redirect_service)
):
    """
    Visitor-facing go link: /{short_name}.

    Known names redirect to their long URL. Unknown names redirect to the
    create page with the name pre-filled instead of returning a bare 404.
    If that create page is this very route, the prompt is returned for the
    name carried in ?shortName=.
    """
    resolution = await redirect_service.resolve(short_name)

    if isinstance(resolution, NeedsCreation) and not resolution.redirectable and requested:
        resolution = NeedsCreation(
            short_name=requested,
            create_url=redirect_service.create_url_for(requested),
            redirectable=False,
        )

    return to_redirect_response(resolution)
