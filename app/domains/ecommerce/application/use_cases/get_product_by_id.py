"""
Get Product By ID Use Case

Use case for retrieving a single product by its ID.
"""

import logging

from app.core.domain import EntityNotFoundException
from app.domains.ecommerce.application.ports import IProductRepository
from app.domains.ecommerce.domain.entities import Product

logger = logging.getLogger(__name__)


class GetProductByIdUseCase:
    """Use case for getting a product by ID."""

    def __init__(self, product_repository: IProductRepository):
        """
        Initialize use case with dependencies.

        Args:
            product_repository: Repository for product data access
        """
        self.product_repo = product_repository

    async def execute(self, product_id: str, include_inactive: bool = False) -> Product:
        """
        Execute get product by ID use case.

        Args:
            product_id: Product ID to retrieve
            include_inactive: Return deactivated products too (admin views)

        Returns:
            The product
        """
        product = await self.product_repo.get_by_id(product_id)
        if product is None or (not product.is_active and not include_inactive):
            raise EntityNotFoundException("Product", product_id)
        return product


__all__ = ["GetProductByIdUseCase"]
