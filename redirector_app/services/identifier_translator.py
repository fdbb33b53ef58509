import logging

from sqlalchemy import BigInteger, cast, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from redirector_app.models.origin import ImportedItem

logger = logging.getLogger(__name__)


class IdentifierTranslator:
    """Translates ids from an imported product into current item ids."""

    def __init__(self, db: Session):
        self.db = db

    def get_new_id(self, origin_id: int, item_type_id: int, old_id: int) -> int:
        """
        Return the current id for (origin, item type, legacy id), or 0.

        0 means either no mapping exists or the lookup failed; only the
        latter is logged. Legacy ids are compared numerically, so "007"
        stored by the importer matches 7.
        """
        stmt = (
            select(ImportedItem.item_id)
            .where(
                ImportedItem.origin_id == origin_id,
                ImportedItem.item_type_id == item_type_id,
                cast(ImportedItem.old_id, BigInteger) == old_id,
            )
            .limit(1)
        )

        try:
            new_id = self.db.execute(stmt).scalar()
        except SQLAlchemyError:
            logger.exception(
                "Item lookup failed for origin=%s item_type_id=%s old_id=%s",
                origin_id, item_type_id, old_id,
            )
            self.db.rollback()
            return 0

        return new_id or 0
