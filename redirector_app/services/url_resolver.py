from typing import Optional
from urllib.parse import urlsplit

from sqlalchemy.orm import Session

from redirector_app.cache.strategies import CacheStrategy
from redirector_app.schemas.resolution import Resolution
from redirector_app.services.content_lookup import ContentLookup, SQLContentLookup
from redirector_app.services.identifier_translator import IdentifierTranslator
from redirector_app.services.origin_registry import OriginRegistry
from redirector_app.services.product_factory import ProductResolverFactory


class URLResolver:
    """
    Resolves URLs from a site's previous forum software to current API links.

    Flow:
    1. Find the site's origin (cached); no origin, nothing to resolve
    2. Parse the URL
    3. Hand over to the resolver for the origin's product
    """

    def __init__(
        self,
        db: Session,
        cache: Optional[CacheStrategy] = None,
        lookup: Optional[ContentLookup] = None
    ):
        self.origins = OriginRegistry(db, cache)
        self.translator = IdentifierTranslator(db)
        self.lookup = lookup or SQLContentLookup(db)

    async def resolve(self, site_id: int, raw_url: str, profile_id: Optional[int] = None) -> Resolution:
        """
        Resolve raw_url for a site, on behalf of profile_id (if signed in).

        Always returns a Resolution: status 301 with a redirect link, or 404.
        """
        origin = await self.origins.get_origin(site_id)
        if origin is None:
            return Resolution.not_found(raw_url)

        try:
            parsed_url = urlsplit(raw_url)
        except ValueError:
            return Resolution.not_found(raw_url)

        strategy = ProductResolverFactory.create(origin.product, self.translator, self.lookup)
        if strategy is None:
            return Resolution.not_found(raw_url)

        resolution = Resolution(url=raw_url, origin=origin, parsed_url=parsed_url)
        return strategy.resolve(resolution, profile_id)
