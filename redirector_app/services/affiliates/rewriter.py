import logging
from itertools import chain
from typing import Iterable, List

from redirector_app.schemas.link import ShortLink
from redirector_app.services.affiliates.matcher import DomainMatcher
from redirector_app.services.affiliates.strategies import AffiliateNetwork

logger = logging.getLogger(__name__)


class AffiliateRewriter:
    """
    Rewrites short link destinations for the enabled affiliate networks.

    Two phases:
    1. may_apply(): one automaton over every network's domain fragments,
       so the vast majority of links (no shop involved) cost one scan
    2. rewrite(): each network in turn, first one to handle the link wins
    """

    def __init__(self, networks: Iterable[AffiliateNetwork]):
        self.networks: List[AffiliateNetwork] = list(networks)
        self._matcher = DomainMatcher(
            chain.from_iterable(network.domain_parts for network in self.networks)
        )

    def may_apply(self, domain: str) -> bool:
        return self._matcher.matches(domain)

    def rewrite(self, link: ShortLink) -> str:
        """
        Return the destination to send people to.

        Never fails: a destination that can't be parsed is logged and
        returned as it was stored.
        """
        for network in self.networks:
            if not network.matches(link.domain):
                continue

            try:
                changed, url = network.rewrite(link)
            except ValueError:
                logger.exception("%s could not rewrite %r", network.name, link.url)
                return link.url

            if changed:
                return url

        return link.url
