"""
Item types shared with the rest of the platform.

The numeric ids are the values stored in item_type_id columns and must
match the main API.
"""

from enum import Enum


class ItemType(str, Enum):
    """Content kinds the resolver can send people to"""
    MICROCOSM = "microcosm"
    PROFILE = "profile"
    COMMENT = "comment"
    HUDDLE = "huddle"
    CONVERSATION = "conversation"
    UPDATE = "update"
    ATTACHMENT = "attachment"

    @property
    def id(self) -> int:
        return ITEM_TYPE_IDS[self]


ITEM_TYPE_IDS = {
    ItemType.MICROCOSM: 2,
    ItemType.PROFILE: 3,
    ItemType.COMMENT: 4,
    ItemType.HUDDLE: 5,
    ItemType.CONVERSATION: 6,
    ItemType.UPDATE: 16,
    ItemType.ATTACHMENT: 21,
}

# Canonical API collections
API_TYPE_MICROCOSM = "/api/v1/microcosms"
API_TYPE_PROFILE = "/api/v1/profiles"
API_TYPE_COMMENT = "/api/v1/comments"
API_TYPE_HUDDLE = "/api/v1/huddles"
API_TYPE_CONVERSATION = "/api/v1/conversations"
API_TYPE_UPDATE = "/api/v1/updates"
API_TYPE_FILE = "/api/v1/files"
