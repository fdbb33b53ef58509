"""
Platform tables read by the resolver for secondary lookups.

These are owned by the main forum API; only the columns the resolver reads
are mapped here.
"""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String
from redirector_app.database.connection import Base


class Site(Base):
    __tablename__ = "sites"

    site_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    subdomain_key = Column(String, unique=True, nullable=False)


class Attachment(Base):
    __tablename__ = "attachments"

    attachment_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    attachment_meta_id = Column(BigInteger, nullable=False, index=True)
    file_sha1 = Column(String(40), nullable=False)


class Comment(Base):
    __tablename__ = "comments"

    comment_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    item_type_id = Column(BigInteger, nullable=False)
    item_id = Column(BigInteger, nullable=False)
    created = Column(DateTime(timezone=True), nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False)


class ReadMarker(Base):
    """When a profile last read an item."""
    __tablename__ = "read"

    read_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    item_type_id = Column(BigInteger, nullable=False)
    item_id = Column(BigInteger, nullable=False)
    profile_id = Column(BigInteger, nullable=False, index=True)
    read = Column(DateTime(timezone=True), nullable=False)
