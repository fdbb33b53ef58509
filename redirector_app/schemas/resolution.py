from urllib.parse import SplitResult

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from typing import Optional

from redirector_app.item_types import ItemType
from redirector_app.schemas.link import LinkType
from redirector_app.schemas.origin import Origin

# Actions describe what the client should do once it reaches the destination
ACTION_NEW_COMMENT = "newcomment"
ACTION_COMMENT_IN_CONTEXT = "incontext"
ACTION_SEARCH = "search"
ACTION_WHO_IS_ONLINE = "online"


class Resolution(BaseModel):
    """
    The outcome of resolving one legacy URL.

    Computed per request and never stored. origin and parsed_url are
    working state and are left out of the JSON response, as are an item_id
    or offset of 0.
    """
    url: str
    status: int = 0
    redirect: LinkType = Field(default_factory=LinkType)
    item_type: Optional[ItemType] = Field(default=None, serialization_alias="itemType")
    item_id: int = Field(default=0, serialization_alias="itemId")
    offset: int = 0
    action: Optional[str] = None
    search: Optional[str] = None

    origin: Optional[Origin] = Field(default=None, exclude=True)
    parsed_url: Optional[SplitResult] = Field(default=None, exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_serializer(mode="wrap")
    def _omit_zero_position(self, handler):
        data = handler(self)
        for key in ("item_id", "itemId", "offset"):
            if data.get(key) == 0:
                del data[key]
        return data

    @classmethod
    def not_found(cls, url: str) -> "Resolution":
        """A failed resolution carries nothing but the URL and the status."""
        return cls(url=url, status=404)
