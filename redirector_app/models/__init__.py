"""
Database models for the redirector.

Origins, imported item mappings and short links are owned by this service.
The content tables are read-only views onto the main forum schema.
"""

from .origin import ImportOrigin, ImportedItem
from .link import Link
from .content import Site, Attachment, Comment, ReadMarker

__all__ = [
    "ImportOrigin",
    "ImportedItem",
    "Link",
    "Site",
    "Attachment",
    "Comment",
    "ReadMarker",
]
