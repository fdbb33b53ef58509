import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from redirector_app.cache.strategies import CacheStrategy
from redirector_app.config import settings
from redirector_app.models.origin import ImportOrigin
from redirector_app.schemas.origin import Origin

logger = logging.getLogger(__name__)


class OriginRegistry:
    """
    Looks up which product (and which import run) a site was migrated from.

    Cache-Aside over import_origins. Only positive results are cached: a
    site that has no origin is looked up in the database every time, so a
    site that gets imported while the API is running is picked up on the
    next request instead of after the TTL.
    """

    def __init__(self, db: Session, cache: Optional[CacheStrategy] = None):
        self.db = db
        self.cache = cache

    @staticmethod
    def cache_key(site_id: int) -> str:
        return f"site_origin:{site_id}"

    async def get_origin(self, site_id: int) -> Optional[Origin]:
        """
        Return the site's origin, or None if the site was never imported.

        Database errors are logged and reported as None.
        """
        cache_key = self.cache_key(site_id)

        if self.cache:
            cached = await self.cache.get(cache_key)
            if cached:
                try:
                    return Origin.model_validate_json(cached)
                except ValidationError:
                    logger.warning("Discarding unreadable cached origin for site %s", site_id)

        try:
            row = self.db.query(ImportOrigin).filter(
                ImportOrigin.site_id == site_id
            ).first()
        except SQLAlchemyError:
            logger.exception("Origin lookup failed for site %s", site_id)
            self.db.rollback()
            return None

        if row is None:
            return None

        origin = Origin.model_validate(row)

        if self.cache:
            await self.cache.set(cache_key, origin.model_dump_json(), ttl=settings.origin_cache_ttl)

        return origin
