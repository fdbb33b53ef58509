"""
Legacy URL resolution strategies, one per imported forum product.

Every product shares the second half of the pipeline (jumping to the first
unread comment, building the destination link, appending the offset); only
the classification of the incoming URL differs. ProductResolverStrategy
implements the shared half and leaves classify() to the product.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from sqlalchemy.exc import SQLAlchemyError

from redirector_app.config import settings
from redirector_app.item_types import (
    ItemType,
    API_TYPE_COMMENT,
    API_TYPE_CONVERSATION,
    API_TYPE_FILE,
    API_TYPE_HUDDLE,
    API_TYPE_MICROCOSM,
    API_TYPE_PROFILE,
    API_TYPE_UPDATE,
)
from redirector_app.schemas.link import LinkType
from redirector_app.schemas.resolution import (
    Resolution,
    ACTION_COMMENT_IN_CONTEXT,
    ACTION_NEW_COMMENT,
    ACTION_SEARCH,
    ACTION_WHO_IS_ONLINE,
)
from redirector_app.services.content_lookup import ContentLookup
from redirector_app.services.identifier_translator import IdentifierTranslator

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"^[+-]?[0-9]+$")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


class ResolutionFailed(Exception):
    """Raised anywhere in the pipeline to abandon a resolution (404)."""


def parse_id(value: Optional[str]) -> int:
    """Parse a legacy id or page number; anything that isn't a 64-bit integer is 0."""
    if not value or not _INTEGER.match(value):
        return 0
    number = int(value)
    if number < _INT64_MIN or number > _INT64_MAX:
        return 0
    return number


def page_to_offset(page: int, per_page: int) -> int:
    """
    Convert a 1-based page number to an item offset.

    Pages 0 and 1 come back unchanged (offset 0 and 1): only pages after the
    first are multiplied out.
    """
    if page > 1:
        return (page - 1) * per_page
    return page


def add_query_param(href: str, key: str, value: str) -> str:
    parts = urlsplit(href)
    extra = urlencode({key: value})
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit(parts._replace(query=query))


class ProductResolverStrategy(ABC):
    """
    Base class for product-specific resolvers.

    Subclasses classify the URL (set item_type, item_id, offset, action and
    search on the resolution) and raise ResolutionFailed when they can't.
    """

    def __init__(self, translator: IdentifierTranslator, lookup: ContentLookup):
        self.translator = translator
        self.lookup = lookup

    @abstractmethod
    def classify(self, resolution: Resolution) -> None:
        pass

    def resolve(self, resolution: Resolution, profile_id: Optional[int]) -> Resolution:
        """Run the full pipeline, returning a 301 resolution or a bare 404."""
        try:
            self.classify(resolution)
            self.resolve_action(resolution, profile_id)
            paginated = self.build_destination(resolution)
        except ResolutionFailed:
            return Resolution.not_found(resolution.url)

        if paginated and resolution.offset > 0:
            resolution.redirect.href = add_query_param(
                resolution.redirect.href, "offset", str(resolution.offset)
            )
        else:
            resolution.offset = 0

        resolution.status = 301
        return resolution

    def translate(self, resolution: Resolution, item_type: ItemType, old_id: int) -> int:
        """Translate a legacy id or fail the resolution."""
        new_id = self.translator.get_new_id(resolution.origin.origin_id, item_type.id, old_id)
        if new_id == 0:
            raise ResolutionFailed(f"No {item_type.value} imported as {old_id}")
        return new_id

    @staticmethod
    def page_size(item_type: Optional[ItemType]) -> int:
        if item_type == ItemType.MICROCOSM:
            return settings.threads_per_forum_page
        return settings.posts_per_thread_page

    def resolve_action(self, resolution: Resolution, profile_id: Optional[int]) -> None:
        """
        Turn "jump to the newest comment" on a conversation into a comment.

        Needs to know who is asking: without a profile there is no last
        read time to start from.
        """
        if resolution.item_type != ItemType.CONVERSATION or resolution.action != ACTION_NEW_COMMENT:
            return

        if not profile_id or not resolution.item_id:
            raise ResolutionFailed("Cannot find the newest comment without a profile")

        conversation_type_id = ItemType.CONVERSATION.id
        try:
            last_read = self.lookup.get_last_read_time(
                conversation_type_id, resolution.item_id, profile_id
            )
            comment_id = self.lookup.get_next_or_last_comment_id(
                conversation_type_id, resolution.item_id, last_read
            )
        except SQLAlchemyError:
            logger.exception(
                "Newest comment lookup failed for conversation %s profile %s",
                resolution.item_id, profile_id,
            )
            raise ResolutionFailed("Newest comment lookup failed")

        if not comment_id:
            raise ResolutionFailed(f"Conversation {resolution.item_id} has no comments")

        resolution.item_type = ItemType.COMMENT
        resolution.item_id = comment_id
        resolution.action = ACTION_COMMENT_IN_CONTEXT

    def build_destination(self, resolution: Resolution) -> bool:
        """
        Set resolution.redirect for the resolved item type.

        Returns whether the destination is a paginated list that may take an
        offset.
        """
        item_type = resolution.item_type
        item_id = resolution.item_id

        if item_type == ItemType.MICROCOSM:
            href = f"{API_TYPE_MICROCOSM}/{item_id}" if item_id else API_TYPE_MICROCOSM
            resolution.redirect = LinkType(rel=item_type.value, href=href)
            return True

        if item_type == ItemType.CONVERSATION:
            if not item_id:
                raise ResolutionFailed("Conversation without an id")
            resolution.redirect = LinkType(rel=item_type.value, href=f"{API_TYPE_CONVERSATION}/{item_id}")
            return True

        if item_type == ItemType.COMMENT:
            if not item_id:
                raise ResolutionFailed("Comment without an id")
            resolution.redirect = LinkType(rel=item_type.value, href=f"{API_TYPE_COMMENT}/{item_id}")
            return False

        if item_type == ItemType.HUDDLE:
            href = f"{API_TYPE_HUDDLE}/{item_id}" if item_id else API_TYPE_HUDDLE
            resolution.redirect = LinkType(rel=item_type.value, href=href)
            return False

        if item_type == ItemType.ATTACHMENT:
            resolution.redirect = LinkType(href=self._attachment_href(resolution))
            return False

        if item_type == ItemType.PROFILE:
            if item_id:
                resolution.redirect = LinkType(rel=item_type.value, href=f"{API_TYPE_PROFILE}/{item_id}")
                return False

            if resolution.action == ACTION_SEARCH:
                href = f"{API_TYPE_PROFILE}?{urlencode({'q': resolution.search or ''})}"
            elif resolution.action == ACTION_WHO_IS_ONLINE:
                href = f"{API_TYPE_PROFILE}?online=true"
            else:
                href = API_TYPE_PROFILE
            resolution.redirect = LinkType(rel=item_type.value, href=href)
            return True

        if item_type == ItemType.UPDATE:
            resolution.redirect = LinkType(rel=item_type.value, href=API_TYPE_UPDATE)
            return False

        raise ResolutionFailed("URL did not resolve to anything")

    def _attachment_href(self, resolution: Resolution) -> str:
        try:
            file_sha1 = self.lookup.get_attachment_file_hash(resolution.item_id)
            subdomain = self.lookup.get_site_subdomain(resolution.origin.site_id)
        except SQLAlchemyError:
            logger.exception("Attachment lookup failed for attachment meta %s", resolution.item_id)
            raise ResolutionFailed("Attachment lookup failed")

        if not file_sha1 or not subdomain:
            raise ResolutionFailed(f"Attachment {resolution.item_id} not found")

        return f"https://{subdomain}.{settings.file_host_domain}{API_TYPE_FILE}/{file_sha1}"


@dataclass(frozen=True)
class QueryRule:
    """A query string argument carrying a legacy id of one item type."""
    key: str
    item_type: ItemType


@dataclass(frozen=True)
class PathRule:
    """
    A URL path pattern.

    Group 1 is the legacy id when translate is set (or the search term when
    search is set); group 2 is the page number when paged is set.
    """
    name: str
    pattern: Pattern
    item_type: ItemType
    translate: bool = True
    paged: bool = False
    action: Optional[str] = None
    search: bool = False


class VBulletinResolver(ProductResolverStrategy):
    """
    Resolves vBulletin 3/4 URLs, both the plain PHP ones
    (showthread.php?t=123&page=2) and the SEO rewritten ones
    (thread123-2.html).
    """

    # First positive id wins
    QUERY_RULES: List[QueryRule] = [
        QueryRule("f", ItemType.MICROCOSM),
        QueryRule("forumid", ItemType.MICROCOSM),
        QueryRule("p", ItemType.COMMENT),
        QueryRule("pmid", ItemType.HUDDLE),
        QueryRule("postid", ItemType.COMMENT),
        QueryRule("t", ItemType.CONVERSATION),
        QueryRule("threadid", ItemType.CONVERSATION),
        QueryRule("u", ItemType.PROFILE),
        QueryRule("userid", ItemType.PROFILE),
    ]

    # Ordered by likelihood, and so that the longer names match before the
    # shorter names they end with (printthread before thread)
    PATH_RULES: List[PathRule] = [
        PathRule("last post in thread", re.compile(r"lastpostinthread([0-9]+)\.html$"),
                 ItemType.CONVERSATION, action=ACTION_NEW_COMMENT),
        PathRule("new post in thread", re.compile(r"newpostinthread([0-9]+)\.html$"),
                 ItemType.CONVERSATION, action=ACTION_NEW_COMMENT),
        PathRule("print thread page", re.compile(r"printthread([0-9]+)-([0-9]+)\.html$"),
                 ItemType.CONVERSATION, paged=True),
        PathRule("print thread", re.compile(r"printthread([0-9]+)\.html$"),
                 ItemType.CONVERSATION),
        # The page is ignored: old posts are full of links to pages that no
        # longer exist, so these always go to the first page
        PathRule("thread page", re.compile(r"thread([0-9]+)-([0-9]+)\.html$"),
                 ItemType.CONVERSATION),
        PathRule("thread", re.compile(r"thread([0-9]+)\.html$"),
                 ItemType.CONVERSATION),
        PathRule("post position", re.compile(r"post([0-9]+)-[0-9]+\.html$"),
                 ItemType.COMMENT, action=ACTION_COMMENT_IN_CONTEXT),
        PathRule("post", re.compile(r"post([0-9]+)\.html$"),
                 ItemType.COMMENT, action=ACTION_COMMENT_IN_CONTEXT),
        PathRule("forum page", re.compile(r"forum([0-9]+)-([0-9]+)\.html$"),
                 ItemType.MICROCOSM, paged=True),
        PathRule("forum", re.compile(r"forum([0-9]+)\.html$"),
                 ItemType.MICROCOSM),
        PathRule("announcement", re.compile(r"announcement([0-9]+).*$"),
                 ItemType.MICROCOSM),
        PathRule("member list letter", re.compile(r"memberslist/([0a-z])[0-9]+\.html$"),
                 ItemType.PROFILE, translate=False, action=ACTION_SEARCH, search=True),
        PathRule("member", re.compile(r"member([0-9]+).*\.html$"),
                 ItemType.PROFILE),
        PathRule("attachment", re.compile(r"attachments/([0-9]+)d[0-9]+-.*$"),
                 ItemType.ATTACHMENT),
        PathRule("member list", re.compile(r"memberslist/?$"),
                 ItemType.PROFILE, translate=False),
        PathRule("who's online", re.compile(r"online\.php$"),
                 ItemType.PROFILE, translate=False, action=ACTION_WHO_IS_ONLINE),
        PathRule("private messages", re.compile(r"private\.php$"),
                 ItemType.HUDDLE, translate=False),
        PathRule("subscriptions", re.compile(r"subscription\.php$"),
                 ItemType.UPDATE, translate=False),
        PathRule("user cp", re.compile(r"usercp\.php$"),
                 ItemType.UPDATE, translate=False),
    ]

    def classify(self, resolution: Resolution) -> None:
        query = parse_qs(resolution.parsed_url.query, keep_blank_values=True)

        self._classify_query(resolution, query)

        page = parse_id(self._first(query, "page"))
        if page > 0:
            resolution.offset = page_to_offset(page, self.page_size(resolution.item_type))

        if self._first(query, "goto") == "newpost":
            resolution.action = ACTION_NEW_COMMENT

        # Path matching only when the query string didn't identify anything
        if resolution.item_type is None:
            self._classify_path(resolution)

    def _classify_query(self, resolution: Resolution, query: Dict[str, List[str]]) -> None:
        for rule in self.QUERY_RULES:
            old_id = parse_id(self._first(query, rule.key))
            if old_id > 0:
                resolution.item_id = self.translate(resolution, rule.item_type, old_id)
                resolution.item_type = rule.item_type
                return

    def _classify_path(self, resolution: Resolution) -> None:
        path = resolution.parsed_url.path

        for rule in self.PATH_RULES:
            match = rule.pattern.search(path)
            if not match:
                continue

            logger.debug("%s matched vBulletin rule %r", resolution.url, rule.name)
            resolution.item_type = rule.item_type

            if rule.translate:
                resolution.item_id = self.translate(resolution, rule.item_type, parse_id(match.group(1)))
            if rule.paged:
                resolution.offset = page_to_offset(parse_id(match.group(2)), self.page_size(rule.item_type))
            if rule.action:
                resolution.action = rule.action
            if rule.search:
                resolution.search = match.group(1)
            return

    @staticmethod
    def _first(query: Dict[str, List[str]], key: str) -> str:
        values = query.get(key)
        return values[0] if values else ""
