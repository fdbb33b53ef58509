from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from redirector_app.schemas.resolution import Resolution
from redirector_app.services.url_resolver import URLResolver
from redirector_app.dependencies import get_profile_id, get_site_id, get_url_resolver

router = APIRouter(prefix="/resolve", tags=["resolve"])


@router.get("", response_model=Resolution, response_model_exclude_none=True)
async def resolve_legacy_url(
    url: Optional[str] = Query(None, description="The old URL, URL encoded"),
    site_id: int = Depends(get_site_id),
    profile_id: Optional[int] = Depends(get_profile_id),
    resolver: URLResolver = Depends(get_url_resolver)
):
    """
    Find where an old forum URL lives now.

    The URL must be URL encoded, otherwise its own query string (page=,
    t=, ...) is lost:

        /api/v1/resolve?url=http%3A%2F%2Fwww.lfgss.com%2Fshowthread.php%3Ft%3D7865%26page%3D32

    Always answers 200; the body's status is 301 with a redirect link, or 404.
    """
    if not url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="url is required"
        )

    return await resolver.resolve(site_id, url, profile_id)
