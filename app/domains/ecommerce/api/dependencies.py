"""
E-commerce API Dependencies

FastAPI dependencies for the e-commerce domain: caller identity, role
checks and use case factories bound to the request's database session.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.container import DependencyContainer, get_container
from app.database.async_db import get_async_db
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

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller as forwarded by the gateway."""

    user_id: str
    role: str = "customer"
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def get_di_container() -> DependencyContainer:
    """Get Dependency Injection Container singleton."""
    return get_container()


# ============================================================
# IDENTITY
# ============================================================


async def get_optional_user(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_user_role: str | None = Header(None, alias="X-User-Role"),
    x_user_email: str | None = Header(None, alias="X-User-Email"),
) -> CurrentUser | None:
    """Caller identity, or None for anonymous requests."""
    if not x_user_id or not x_user_id.strip():
        return None
    return CurrentUser(
        user_id=x_user_id.strip(),
        role=(x_user_role or "customer").strip().lower(),
        email=x_user_email,
    )


async def get_current_user(
    user: CurrentUser | None = Depends(get_optional_user),  # noqa: B008
) -> CurrentUser:
    """Require an authenticated caller."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


async def require_admin(
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
) -> CurrentUser:
    """Require an administrator."""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


# ============================================================
# CATALOG
# ============================================================


def get_search_products_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> SearchProductsUseCase:
    return container.ecommerce.create_search_products_use_case(db)


def get_product_by_id_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetProductByIdUseCase:
    return container.ecommerce.create_get_product_by_id_use_case(db)


def get_create_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CreateProductUseCase:
    return container.ecommerce.create_create_product_use_case(db)


def get_update_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateProductUseCase:
    return container.ecommerce.create_update_product_use_case(db)


def get_set_size_stock_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> SetSizeStockUseCase:
    return container.ecommerce.create_set_size_stock_use_case(db)


def get_deactivate_product_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> DeactivateProductUseCase:
    return container.ecommerce.create_deactivate_product_use_case(db)


# ============================================================
# CART
# ============================================================


def get_cart_service(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CartService:
    return container.ecommerce.create_cart_service(db)


# ============================================================
# ORDERS
# ============================================================


def get_create_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CreateOrderUseCase:
    return container.ecommerce.create_create_order_use_case(db)


def get_customer_orders_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetCustomerOrdersUseCase:
    return container.ecommerce.create_get_customer_orders_use_case(db)


def get_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetOrderUseCase:
    return container.ecommerce.create_get_order_use_case(db)


def get_list_orders_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListOrdersUseCase:
    return container.ecommerce.create_list_orders_use_case(db)


def get_track_order_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> TrackOrderUseCase:
    return container.ecommerce.create_track_order_use_case(db)


def get_request_cancellation_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> RequestCancellationUseCase:
    return container.ecommerce.create_request_cancellation_use_case(db)


def get_request_return_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> RequestReturnUseCase:
    return container.ecommerce.create_request_return_use_case(db)


def get_process_cancel_request_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ProcessCancelRequestUseCase:
    return container.ecommerce.create_process_cancel_request_use_case(db)


def get_process_return_request_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ProcessReturnRequestUseCase:
    return container.ecommerce.create_process_return_request_use_case(db)


def get_update_order_status_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateOrderStatusUseCase:
    return container.ecommerce.create_update_order_status_use_case(db)


def get_update_payment_status_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdatePaymentStatusUseCase:
    return container.ecommerce.create_update_payment_status_use_case(db)


# ============================================================
# COUPONS
# ============================================================


def get_validate_coupon_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ValidateCouponUseCase:
    return container.ecommerce.create_validate_coupon_use_case(db)


def get_create_coupon_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CreateCouponUseCase:
    return container.ecommerce.create_create_coupon_use_case(db)


def get_update_coupon_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateCouponUseCase:
    return container.ecommerce.create_update_coupon_use_case(db)


def get_deactivate_coupon_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> DeactivateCouponUseCase:
    return container.ecommerce.create_deactivate_coupon_use_case(db)


def get_list_active_coupons_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListActiveCouponsUseCase:
    return container.ecommerce.create_list_active_coupons_use_case(db)


def get_list_coupons_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListCouponsUseCase:
    return container.ecommerce.create_list_coupons_use_case(db)


# ============================================================
# REVIEWS AND SETTINGS
# ============================================================


def get_add_review_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> AddReviewUseCase:
    return container.ecommerce.create_add_review_use_case(db)


def get_list_product_reviews_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListProductReviewsUseCase:
    return container.ecommerce.create_list_product_reviews_use_case(db)


def get_shipping_settings_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetShippingSettingsUseCase:
    return container.ecommerce.create_get_shipping_settings_use_case(db)


def get_update_shipping_settings_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateShippingSettingsUseCase:
    return container.ecommerce.create_update_shipping_settings_use_case(db)


# ============================================================
# CATEGORIES
# ============================================================


def get_list_categories_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListCategoriesUseCase:
    return container.ecommerce.create_list_categories_use_case(db)


def get_create_category_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> CreateCategoryUseCase:
    return container.ecommerce.create_create_category_use_case(db)


def get_update_category_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateCategoryUseCase:
    return container.ecommerce.create_update_category_use_case(db)


def get_set_category_status_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> SetCategoryStatusUseCase:
    return container.ecommerce.create_set_category_status_use_case(db)


def get_delete_category_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> DeleteCategoryUseCase:
    return container.ecommerce.create_delete_category_use_case(db)


# ============================================================
# REVIEW MANAGEMENT
# ============================================================


def get_update_review_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> UpdateReviewUseCase:
    return container.ecommerce.create_update_review_use_case(db)


def get_delete_review_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> DeleteReviewUseCase:
    return container.ecommerce.create_delete_review_use_case(db)


def get_set_review_status_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> SetReviewStatusUseCase:
    return container.ecommerce.create_set_review_status_use_case(db)


def get_list_user_reviews_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListUserReviewsUseCase:
    return container.ecommerce.create_list_user_reviews_use_case(db)


def get_list_all_reviews_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> ListAllReviewsUseCase:
    return container.ecommerce.create_list_all_reviews_use_case(db)


# ============================================================
# ANALYTICS
# ============================================================


def get_dashboard_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetDashboardUseCase:
    return container.ecommerce.create_get_dashboard_use_case(db)


def get_sales_analytics_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetSalesAnalyticsUseCase:
    return container.ecommerce.create_get_sales_analytics_use_case(db)


def get_product_analytics_use_case(
    db: AsyncSession = Depends(get_async_db),  # noqa: B008
    container: DependencyContainer = Depends(get_di_container),  # noqa: B008
) -> GetProductAnalyticsUseCase:
    return container.ecommerce.create_get_product_analytics_use_case(db)
