from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from redirector_app.services.short_url_service import ShortURLService
from redirector_app.dependencies import get_short_url_service

router = APIRouter(tags=["redirect"])


@router.get("/out/{short_url}")
def redirect_to_destination(
    short_url: str,
    short_url_service: ShortURLService = Depends(get_short_url_service)
):
    """
    Redirect a short link to its destination.

    Every call counts a hit; affiliate parameters are applied to the
    destination on the way out.
    """
    link, status_code = short_url_service.get_redirect(short_url)

    if status_code == status.HTTP_404_NOT_FOUND:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short URL {short_url} not found"
        )
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not retrieve redirect"
        )

    return RedirectResponse(url=link.url, status_code=status.HTTP_302_FOUND)
