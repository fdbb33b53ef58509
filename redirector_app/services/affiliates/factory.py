"""
Factory for creating affiliate networks from configuration.
"""

from enum import Enum
from typing import Iterable, Optional

from redirector_app.config import settings
from redirector_app.services.affiliates.rewriter import AffiliateRewriter
from redirector_app.services.affiliates.strategies import (
    AffiliateNetwork,
    AffiliateWindowNetwork,
    AmazonNetwork,
    CommunityPartnerNetwork,
    EbayNetwork,
    WebgainsNetwork,
)


class AffiliateNetworkType(Enum):
    """Available affiliate networks"""
    AFFWIN = "affwin"
    EBAY = "ebay"
    WEBGAINS = "webgains"
    AMAZON = "amazon"
    LFGSS = "lfgss"


class AffiliateNetworkFactory:
    """Builds networks with the identifiers from settings"""

    @classmethod
    def create(cls, network_type: AffiliateNetworkType) -> AffiliateNetwork:
        """
        Create one affiliate network.

        Raises:
            ValueError: If network_type is unknown
        """
        if network_type == AffiliateNetworkType.AFFWIN:
            return AffiliateWindowNetwork(affiliate_id=settings.affwin_affiliate_id)
        elif network_type == AffiliateNetworkType.EBAY:
            return EbayNetwork(
                publisher_id=settings.ebay_publisher_id,
                campaign_id=settings.ebay_campaign_id,
            )
        elif network_type == AffiliateNetworkType.WEBGAINS:
            return WebgainsNetwork(campaign_id=settings.webgains_campaign_id)
        elif network_type == AffiliateNetworkType.AMAZON:
            return AmazonNetwork(
                campaign_id=settings.amazon_campaign_id,
                tag_id=settings.amazon_tag_id,
                creative_id=settings.amazon_creative_id,
            )
        elif network_type == AffiliateNetworkType.LFGSS:
            return CommunityPartnerNetwork(
                bikmo_ref=settings.bikmo_ref,
                wahoo_store=settings.wahoo_store,
                wahoo_account=settings.wahoo_account,
            )
        raise ValueError(f"Unknown affiliate network: {network_type}")

    @classmethod
    def create_rewriter(cls, names: Optional[Iterable[str]] = None) -> AffiliateRewriter:
        """
        Create a rewriter for the named networks, in order.

        Args:
            names: Network names. If None, uses settings.affiliate_networks.
        """
        if names is None:
            names = settings.affiliate_networks

        return AffiliateRewriter(
            cls.create(AffiliateNetworkType(name)) for name in names
        )
