from sqlalchemy import BigInteger, Column, Integer, String, DateTime
from sqlalchemy.sql import func
from redirector_app.database.connection import Base


class Link(Base):
    """
    Short link model.

    Everything except hits is written when the link is created (by the
    comment processor, outside this service). hits only ever changes through
    the atomic increment in ShortURLService.get_redirect.
    """
    __tablename__ = "links"

    link_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    short_url = Column(String, unique=True, nullable=False, index=True)
    domain = Column(String, nullable=False, default="")
    url = Column(String, nullable=False)
    inner_text = Column(String, nullable=False, default="")
    created = Column(DateTime(timezone=True), server_default=func.now())
    resolved_url = Column(String, nullable=True)
    resolved = Column(DateTime(timezone=True), nullable=True)
    hits = Column(BigInteger, nullable=False, default=0)
