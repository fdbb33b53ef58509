from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class LinkType(BaseModel):
    """A REST link: where to go and what it is."""
    rel: Optional[str] = None
    href: str = ""
    title: Optional[str] = None


class ShortLink(BaseModel):
    """Short link row as returned by the atomic hit increment.

    This is a detached copy: changing url here (affiliate rewriting) never
    touches the stored row.
    """
    id: int = Field(validation_alias="link_id")
    short_url: str
    domain: str
    url: str
    inner_text: str = ""
    created: Optional[datetime] = None
    resolved_url: Optional[str] = None
    resolved: Optional[datetime] = None
    hits: int

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
