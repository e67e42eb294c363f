"""
E-commerce Domain Container.

Single Responsibility: Wire all e-commerce domain dependencies.
"""

import logging
from typing import TYPE_CHECKING, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.domains.ecommerce.application.use_cases import (
    AddReviewUseCase,
    CartService,
    CreateCategoryUseCase,
    CreateCouponUseCase,
    CreateOrderUseCase,
    CreateProductUseCase,
    DeactivateCouponUseCase,
    DeactivateProductUseCase,
    DeleteCategoryUseCase,
    DeleteReviewUseCase,
    GetCustomerOrdersUseCase,
    GetDashboardUseCase,
    GetOrderUseCase,
    GetProductAnalyticsUseCase,
    GetProductByIdUseCase,
    GetSalesAnalyticsUseCase,
    GetShippingSettingsUseCase,
    ListActiveCouponsUseCase,
    ListAllReviewsUseCase,
    ListCategoriesUseCase,
    ListCouponsUseCase,
    ListOrdersUseCase,
    ListProductReviewsUseCase,
    ListUserReviewsUseCase,
    ProcessCancelRequestUseCase,
    ProcessReturnRequestUseCase,
    RequestCancellationUseCase,
    RequestReturnUseCase,
    SearchProductsUseCase,
    SetCategoryStatusUseCase,
    SetReviewStatusUseCase,
    SetSizeStockUseCase,
    TrackOrderUseCase,
    UpdateCategoryUseCase,
    UpdateCouponUseCase,
    UpdateOrderStatusUseCase,
    UpdatePaymentStatusUseCase,
    UpdateProductUseCase,
    UpdateReviewUseCase,
    UpdateShippingSettingsUseCase,
    ValidateCouponUseCase,
)
from app.domains.ecommerce.application.use_cases.order_transition import OrderTransitionUseCase
from app.domains.ecommerce.infrastructure.repositories import (
    RedisCartRepository,
    SQLAlchemyAnalyticsRepository,
    SQLAlchemyCategoryRepository,
    SQLAlchemyCouponRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyStoreSettingsRepository,
)

if TYPE_CHECKING:
    from app.core.container.base import BaseContainer

logger = logging.getLogger(__name__)

TTransition = TypeVar("TTransition", bound=OrderTransitionUseCase)


class EcommerceContainer:
    """
    E-commerce domain container.

    Single Responsibility: Create e-commerce repositories and use cases.
    Repositories and use cases are request-scoped: they share the request's
    session, which is also their unit of work.
    """

    def __init__(self, base: "BaseContainer"):
        """
        Initialize e-commerce container.

        Args:
            base: BaseContainer with shared singletons
        """
        self._base = base

    # ==================== REPOSITORIES ====================

    def create_product_repository(self, db: AsyncSession) -> SQLAlchemyProductRepository:
        """Create Product Repository."""
        return SQLAlchemyProductRepository(session=db)

    def create_category_repository(self, db: AsyncSession) -> SQLAlchemyCategoryRepository:
        """Create Category Repository."""
        return SQLAlchemyCategoryRepository(session=db)

    def create_order_repository(self, db: AsyncSession) -> SQLAlchemyOrderRepository:
        """Create Order Repository."""
        return SQLAlchemyOrderRepository(session=db)

    def create_coupon_repository(self, db: AsyncSession) -> SQLAlchemyCouponRepository:
        """Create Coupon Repository."""
        return SQLAlchemyCouponRepository(session=db)

    def create_review_repository(self, db: AsyncSession) -> SQLAlchemyReviewRepository:
        """Create Review Repository."""
        return SQLAlchemyReviewRepository(session=db)

    def create_store_settings_repository(self, db: AsyncSession) -> SQLAlchemyStoreSettingsRepository:
        """Create Store Settings Repository seeded from configured defaults."""
        return SQLAlchemyStoreSettingsRepository(session=db, defaults=self._base.get_default_shipping_config())

    def create_analytics_repository(self, db: AsyncSession) -> SQLAlchemyAnalyticsRepository:
        """Create Analytics Repository."""
        return SQLAlchemyAnalyticsRepository(session=db)

    def create_cart_repository(self) -> RedisCartRepository:
        """Create Cart Repository."""
        return RedisCartRepository(
            client=self._base.get_redis(),
            ttl_seconds=self._base.settings.CART_TTL_SECONDS,
        )

    # ==================== CATALOG ====================

    def create_search_products_use_case(self, db: AsyncSession) -> SearchProductsUseCase:
        return SearchProductsUseCase(product_repository=self.create_product_repository(db))

    def create_get_product_by_id_use_case(self, db: AsyncSession) -> GetProductByIdUseCase:
        return GetProductByIdUseCase(product_repository=self.create_product_repository(db))

    def create_create_product_use_case(self, db: AsyncSession) -> CreateProductUseCase:
        return CreateProductUseCase(self.create_product_repository(db), transaction=db)

    def create_update_product_use_case(self, db: AsyncSession) -> UpdateProductUseCase:
        return UpdateProductUseCase(self.create_product_repository(db), transaction=db)

    def create_set_size_stock_use_case(self, db: AsyncSession) -> SetSizeStockUseCase:
        return SetSizeStockUseCase(self.create_product_repository(db), transaction=db)

    def create_deactivate_product_use_case(self, db: AsyncSession) -> DeactivateProductUseCase:
        return DeactivateProductUseCase(self.create_product_repository(db), transaction=db)

    # ==================== CATEGORIES ====================

    def create_list_categories_use_case(self, db: AsyncSession) -> ListCategoriesUseCase:
        return ListCategoriesUseCase(self.create_category_repository(db))

    def create_create_category_use_case(self, db: AsyncSession) -> CreateCategoryUseCase:
        return CreateCategoryUseCase(self.create_category_repository(db), transaction=db)

    def create_update_category_use_case(self, db: AsyncSession) -> UpdateCategoryUseCase:
        return UpdateCategoryUseCase(self.create_category_repository(db), transaction=db)

    def create_set_category_status_use_case(self, db: AsyncSession) -> SetCategoryStatusUseCase:
        return SetCategoryStatusUseCase(self.create_category_repository(db), transaction=db)

    def create_delete_category_use_case(self, db: AsyncSession) -> DeleteCategoryUseCase:
        return DeleteCategoryUseCase(self.create_category_repository(db), transaction=db)

    # ==================== CART & CHECKOUT ====================

    def create_cart_service(self, db: AsyncSession) -> CartService:
        return CartService(
            cart_repository=self.create_cart_repository(),
            product_repository=self.create_product_repository(db),
        )

    def create_create_order_use_case(self, db: AsyncSession) -> CreateOrderUseCase:
        """Create CreateOrderUseCase with dependencies."""
        return CreateOrderUseCase(
            order_repository=self.create_order_repository(db),
            product_repository=self.create_product_repository(db),
            coupon_repository=self.create_coupon_repository(db),
            settings_repository=self.create_store_settings_repository(db),
            transaction=db,
            publisher=self._base.get_event_publisher(),
            order_number_prefix=self._base.settings.ORDER_NUMBER_PREFIX,
            max_attempts=self._base.settings.ORDER_NUMBER_MAX_RETRIES,
        )

    # ==================== ORDERS ====================

    def create_get_customer_orders_use_case(self, db: AsyncSession) -> GetCustomerOrdersUseCase:
        return GetCustomerOrdersUseCase(order_repository=self.create_order_repository(db))

    def create_get_order_use_case(self, db: AsyncSession) -> GetOrderUseCase:
        return GetOrderUseCase(order_repository=self.create_order_repository(db))

    def create_list_orders_use_case(self, db: AsyncSession) -> ListOrdersUseCase:
        return ListOrdersUseCase(order_repository=self.create_order_repository(db))

    def create_track_order_use_case(self, db: AsyncSession) -> TrackOrderUseCase:
        return TrackOrderUseCase(order_repository=self.create_order_repository(db))

    def create_order_transition_use_case(self, use_case_cls: type[TTransition], db: AsyncSession) -> TTransition:
        """Create any order lifecycle use case; they share the same dependencies."""
        return use_case_cls(
            order_repository=self.create_order_repository(db),
            product_repository=self.create_product_repository(db),
            transaction=db,
            publisher=self._base.get_event_publisher(),
        )

    def create_request_cancellation_use_case(self, db: AsyncSession) -> RequestCancellationUseCase:
        return self.create_order_transition_use_case(RequestCancellationUseCase, db)

    def create_request_return_use_case(self, db: AsyncSession) -> RequestReturnUseCase:
        return self.create_order_transition_use_case(RequestReturnUseCase, db)

    def create_process_cancel_request_use_case(self, db: AsyncSession) -> ProcessCancelRequestUseCase:
        return self.create_order_transition_use_case(ProcessCancelRequestUseCase, db)

    def create_process_return_request_use_case(self, db: AsyncSession) -> ProcessReturnRequestUseCase:
        return self.create_order_transition_use_case(ProcessReturnRequestUseCase, db)

    def create_update_order_status_use_case(self, db: AsyncSession) -> UpdateOrderStatusUseCase:
        return self.create_order_transition_use_case(UpdateOrderStatusUseCase, db)

    def create_update_payment_status_use_case(self, db: AsyncSession) -> UpdatePaymentStatusUseCase:
        return self.create_order_transition_use_case(UpdatePaymentStatusUseCase, db)

    # ==================== COUPONS ====================

    def create_validate_coupon_use_case(self, db: AsyncSession) -> ValidateCouponUseCase:
        return ValidateCouponUseCase(
            coupon_repository=self.create_coupon_repository(db),
            order_repository=self.create_order_repository(db),
        )

    def create_create_coupon_use_case(self, db: AsyncSession) -> CreateCouponUseCase:
        return CreateCouponUseCase(self.create_coupon_repository(db), transaction=db)

    def create_update_coupon_use_case(self, db: AsyncSession) -> UpdateCouponUseCase:
        return UpdateCouponUseCase(self.create_coupon_repository(db), transaction=db)

    def create_deactivate_coupon_use_case(self, db: AsyncSession) -> DeactivateCouponUseCase:
        return DeactivateCouponUseCase(self.create_coupon_repository(db), transaction=db)

    def create_list_active_coupons_use_case(self, db: AsyncSession) -> ListActiveCouponsUseCase:
        return ListActiveCouponsUseCase(self.create_coupon_repository(db))

    def create_list_coupons_use_case(self, db: AsyncSession) -> ListCouponsUseCase:
        return ListCouponsUseCase(self.create_coupon_repository(db))

    # ==================== REVIEWS ====================

    def create_add_review_use_case(self, db: AsyncSession) -> AddReviewUseCase:
        return AddReviewUseCase(
            review_repository=self.create_review_repository(db),
            order_repository=self.create_order_repository(db),
            product_repository=self.create_product_repository(db),
            transaction=db,
            publisher=self._base.get_event_publisher(),
        )

    def create_list_product_reviews_use_case(self, db: AsyncSession) -> ListProductReviewsUseCase:
        return ListProductReviewsUseCase(
            review_repository=self.create_review_repository(db),
            product_repository=self.create_product_repository(db),
        )

    def create_update_review_use_case(self, db: AsyncSession) -> UpdateReviewUseCase:
        return UpdateReviewUseCase(
            review_repository=self.create_review_repository(db),
            product_repository=self.create_product_repository(db),
            transaction=db,
        )

    def create_set_review_status_use_case(self, db: AsyncSession) -> SetReviewStatusUseCase:
        return SetReviewStatusUseCase(
            review_repository=self.create_review_repository(db),
            product_repository=self.create_product_repository(db),
            transaction=db,
        )

    def create_delete_review_use_case(self, db: AsyncSession) -> DeleteReviewUseCase:
        return DeleteReviewUseCase(set_status=self.create_set_review_status_use_case(db))

    def create_list_user_reviews_use_case(self, db: AsyncSession) -> ListUserReviewsUseCase:
        return ListUserReviewsUseCase(self.create_review_repository(db))

    def create_list_all_reviews_use_case(self, db: AsyncSession) -> ListAllReviewsUseCase:
        return ListAllReviewsUseCase(self.create_review_repository(db))

    # ==================== ANALYTICS ====================

    def create_get_dashboard_use_case(self, db: AsyncSession) -> GetDashboardUseCase:
        return GetDashboardUseCase(
            analytics_repository=self.create_analytics_repository(db),
            order_repository=self.create_order_repository(db),
        )

    def create_get_sales_analytics_use_case(self, db: AsyncSession) -> GetSalesAnalyticsUseCase:
        return GetSalesAnalyticsUseCase(self.create_analytics_repository(db))

    def create_get_product_analytics_use_case(self, db: AsyncSession) -> GetProductAnalyticsUseCase:
        return GetProductAnalyticsUseCase(self.create_analytics_repository(db))

    # ==================== SETTINGS ====================

    def create_get_shipping_settings_use_case(self, db: AsyncSession) -> GetShippingSettingsUseCase:
        return GetShippingSettingsUseCase(self.create_store_settings_repository(db), transaction=db)

    def create_update_shipping_settings_use_case(self, db: AsyncSession) -> UpdateShippingSettingsUseCase:
        return UpdateShippingSettingsUseCase(self.create_store_settings_repository(db), transaction=db)
