"""
Affiliate link rewriting for short link destinations.
Implements Strategy Pattern, one strategy per affiliate network.
"""

from .strategies import (
    AffiliateNetwork,
    AffiliateWindowNetwork,
    AmazonNetwork,
    CommunityPartnerNetwork,
    EbayNetwork,
    WebgainsNetwork,
)
from .rewriter import AffiliateRewriter
from .factory import AffiliateNetworkFactory, AffiliateNetworkType

__all__ = [
    "AffiliateNetwork",
    "AffiliateWindowNetwork",
    "AmazonNetwork",
    "CommunityPartnerNetwork",
    "EbayNetwork",
    "WebgainsNetwork",
    "AffiliateRewriter",
    "AffiliateNetworkFactory",
    "AffiliateNetworkType",
]
