"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the cache and the affiliate
rewriter, and builds the per-request services on top of them.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (inject mocks)
- Flexible (swap implementations via config)
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from redirector_app.cache.factory import CacheFactory, CacheBackend
from redirector_app.cache.strategies import CacheStrategy
from redirector_app.config import settings
from redirector_app.database.connection import get_db
from redirector_app.services.affiliates.factory import AffiliateNetworkFactory
from redirector_app.services.affiliates.rewriter import AffiliateRewriter


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get cache instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_affiliate_rewriter() -> AffiliateRewriter:
    """
    Get the affiliate rewriter (singleton).

    Building the domain automatons is the expensive part, so they are built
    once per process and shared read-only by every request.
    """
    return AffiliateNetworkFactory.create_rewriter(settings.affiliate_networks)


def get_site_id(x_site_id: int = Header(..., description="Site the legacy URL belongs to")) -> int:
    """The site is identified by the gateway in front of the API"""
    return x_site_id


def get_profile_id(
    x_profile_id: Optional[int] = Header(None, description="Signed-in profile, if any")
) -> Optional[int]:
    return x_profile_id


def get_url_resolver(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache),
):
    """Get URLResolver with all dependencies injected."""
    from redirector_app.services.url_resolver import URLResolver
    return URLResolver(db=db, cache=cache)


def get_short_url_service(
    db: Session = Depends(get_db),
    affiliates: AffiliateRewriter = Depends(get_affiliate_rewriter),
):
    """Get ShortURLService with all dependencies injected."""
    from redirector_app.services.short_url_service import ShortURLService
    return ShortURLService(db=db, affiliates=affiliates)
