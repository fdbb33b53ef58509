"""
Lookups into the main forum schema needed to finish a resolution.

The resolver only needs four answers from the rest of the platform, so they
sit behind a small interface: tests and other deployments can swap the SQL
implementation out.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from redirector_app.models.content import Attachment, Comment, ReadMarker, Site


class ContentLookup(ABC):
    """
    Secondary lookups used by the resolver.

    Implementations raise on store failure; the resolver treats that as a
    failed resolution.
    """

    @abstractmethod
    def get_last_read_time(self, item_type_id: int, item_id: int, profile_id: int) -> Optional[datetime]:
        """When the profile last read the item, or None if never."""
        pass

    @abstractmethod
    def get_next_or_last_comment_id(
        self,
        item_type_id: int,
        item_id: int,
        since: Optional[datetime],
    ) -> Optional[int]:
        """
        The first comment on the item created after `since`.

        Falls back to the item's last comment when nothing is newer, and
        returns None only when the item has no comments at all.
        """
        pass

    @abstractmethod
    def get_attachment_file_hash(self, attachment_meta_id: int) -> Optional[str]:
        """SHA-1 of the file behind an attachment metadata id."""
        pass

    @abstractmethod
    def get_site_subdomain(self, site_id: int) -> Optional[str]:
        """The routing subdomain of a site."""
        pass


class SQLContentLookup(ContentLookup):
    """ContentLookup over the platform's own tables."""

    def __init__(self, db: Session):
        self.db = db

    def get_last_read_time(self, item_type_id: int, item_id: int, profile_id: int) -> Optional[datetime]:
        return self.db.query(func.max(ReadMarker.read)).filter(
            ReadMarker.item_type_id == item_type_id,
            ReadMarker.item_id == item_id,
            ReadMarker.profile_id == profile_id,
        ).scalar()

    def get_next_or_last_comment_id(
        self,
        item_type_id: int,
        item_id: int,
        since: Optional[datetime],
    ) -> Optional[int]:
        comments = self.db.query(Comment.comment_id).filter(
            Comment.item_type_id == item_type_id,
            Comment.item_id == item_id,
            Comment.is_deleted == False,
        )

        if since is not None:
            next_id = comments.filter(Comment.created > since).order_by(
                Comment.created.asc(), Comment.comment_id.asc()
            ).limit(1).scalar()
        else:
            # Never read: the first comment is the first unread one
            next_id = comments.order_by(
                Comment.created.asc(), Comment.comment_id.asc()
            ).limit(1).scalar()

        if next_id is not None:
            return next_id

        return comments.order_by(
            Comment.created.desc(), Comment.comment_id.desc()
        ).limit(1).scalar()

    def get_attachment_file_hash(self, attachment_meta_id: int) -> Optional[str]:
        return self.db.query(Attachment.file_sha1).filter(
            Attachment.attachment_meta_id == attachment_meta_id
        ).limit(1).scalar()

    def get_site_subdomain(self, site_id: int) -> Optional[str]:
        return self.db.query(Site.subdomain_key).filter(
            Site.site_id == site_id
        ).scalar()
