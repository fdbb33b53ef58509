"""
Factory for choosing the resolver strategy of an imported product.
"""

import logging
from enum import Enum
from typing import Optional

from redirector_app.services.content_lookup import ContentLookup
from redirector_app.services.identifier_translator import IdentifierTranslator
from redirector_app.services.product_strategies import (
    ProductResolverStrategy,
    VBulletinResolver,
)

logger = logging.getLogger(__name__)


class ProductType(Enum):
    """Forum products we can import from, as stored in import_origins.product"""
    VBULLETIN = "vbulletin"


class ProductResolverFactory:
    """Maps an origin's product name to the strategy that understands its URLs"""

    _strategies = {
        ProductType.VBULLETIN: VBulletinResolver,
    }

    @classmethod
    def create(
        cls,
        product: str,
        translator: IdentifierTranslator,
        lookup: ContentLookup,
    ) -> Optional[ProductResolverStrategy]:
        """
        Create the resolver for a product.

        Strategies hold the request's database session, so a new one is
        built per call.

        Returns:
            The strategy, or None for products we have no resolver for
        """
        try:
            product_type = ProductType(product)
        except ValueError:
            logger.info("No URL resolver for product %r", product)
            return None

        return cls._strategies[product_type](translator, lookup)
