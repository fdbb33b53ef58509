import logging
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from redirector_app.models.link import Link
from redirector_app.schemas.link import ShortLink
from redirector_app.services.affiliates.rewriter import AffiliateRewriter

logger = logging.getLogger(__name__)


class ShortURLService:
    """
    Resolves short links to their destinations, counting every hit.

    The hit counter is incremented by the same statement that reads the row
    (UPDATE ... RETURNING), so concurrent requests for one token are
    serialized by the database and no increment is lost.
    """

    def __init__(self, db: Session, affiliates: Optional[AffiliateRewriter] = None):
        self.db = db
        self.affiliates = affiliates

    def get_redirect(self, short_url: str) -> Tuple[Optional[ShortLink], int]:
        """
        Count a hit on a short link and return it.

        Returns:
            (link, 200) with link.url ready to redirect to,
            (None, 404) for an unknown token,
            (None, 500) if the database failed
        """
        stmt = (
            update(Link)
            .where(Link.short_url == short_url)
            .values(hits=Link.hits + 1)
            .returning(
                Link.link_id,
                Link.short_url,
                Link.domain,
                Link.url,
                Link.inner_text,
                Link.created,
                Link.resolved_url,
                Link.resolved,
                Link.hits,
            )
        )

        try:
            row = self.db.execute(stmt).mappings().first()
            self.db.commit()
        except SQLAlchemyError:
            logger.exception("Hit increment failed for short URL %s", short_url)
            self.db.rollback()
            return None, 500

        if row is None:
            logger.info("Short URL %s not found", short_url)
            return None, 404

        link = ShortLink.model_validate(dict(row))

        # Rewritten on every hit, never stored: the row keeps the URL as posted
        if self.affiliates and self.affiliates.may_apply(link.domain):
            link.url = self.affiliates.rewrite(link)

        return link, 200
