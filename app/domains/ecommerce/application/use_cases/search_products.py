"""
Search Products Use Case

Catalog listing with filters, text search, sorting and paging.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from app.core.domain import ValidationException
from app.domains.ecommerce.application.ports import IProductRepository, ProductQuery
from app.domains.ecommerce.domain.entities import Product

from .get_customer_orders import page_offset

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("newest", "oldest", "name", "rating", "price_asc", "price_desc")


@dataclass
class SearchProductsRequest:
    """Request for product search"""

    search: str | None = None
    category: str | None = None
    featured: bool | None = None
    in_stock: bool | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    sort: str = "newest"
    page: int = 1
    limit: int = 12
    include_inactive: bool = False


@dataclass
class SearchProductsResponse:
    """Response from product search"""

    products: list[Product] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 12

    @property
    def pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0


class SearchProductsUseCase:
    """
    Use case for searching products.

    Inactive products are hidden unless an administrator asks for them.
    """

    def __init__(self, product_repository: IProductRepository):
        """
        Initialize use case with dependencies.

        Args:
            product_repository: Repository for product data access
        """
        self.product_repo = product_repository

    async def execute(self, request: SearchProductsRequest) -> SearchProductsResponse:
        """
        Execute product search use case.

        Args:
            request: Search request parameters

        Returns:
            Search response with products
        """
        if request.sort not in SORT_OPTIONS:
            raise ValidationException(f"Sort must be one of: {', '.join(SORT_OPTIONS)}", field="sort")
        if (
            request.min_price is not None
            and request.max_price is not None
            and request.min_price > request.max_price
        ):
            raise ValidationException("Minimum price cannot exceed maximum price", field="min_price")

        query = ProductQuery(
            category=request.category,
            featured=request.featured,
            search=request.search.strip() if request.search else None,
            min_price=request.min_price,
            max_price=request.max_price,
            in_stock=request.in_stock,
            include_inactive=request.include_inactive,
            sort=request.sort,
            limit=request.limit,
            offset=page_offset(request.page, request.limit),
        )
        products, total = await self.product_repo.search(query)
        logger.debug(f"Product search returned {len(products)} of {total}")

        return SearchProductsResponse(products=products, total=total, page=request.page, limit=request.limit)


__all__ = ["SearchProductsUseCase", "SearchProductsRequest", "SearchProductsResponse", "SORT_OPTIONS"]
