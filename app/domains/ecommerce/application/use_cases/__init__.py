"""
E-commerce Use Cases

Business use cases for the e-commerce domain.
Each use case represents a single business operation.
"""

from .analytics import (
    Dashboard,
    DashboardStats,
    GetDashboardUseCase,
    GetProductAnalyticsUseCase,
    GetSalesAnalyticsUseCase,
    SalesAnalytics,
)
from .cart_service import CartLineInput, CartService
from .create_order import (
    CreateOrderRequest,
    CreateOrderResponse,
    CreateOrderUseCase,
    OrderItemInput,
)
from .get_customer_orders import (
    GetCustomerOrdersRequest,
    GetCustomerOrdersUseCase,
    OrderPage,
)
from .get_order import GetOrderRequest, GetOrderUseCase
from .get_product_by_id import GetProductByIdUseCase
from .list_orders import ListOrdersRequest, ListOrdersUseCase
from .manage_categories import (
    CategoryChanges,
    CategoryInput,
    CreateCategoryUseCase,
    DeleteCategoryUseCase,
    ListCategoriesUseCase,
    SetCategoryStatusUseCase,
    UpdateCategoryUseCase,
)
from .manage_coupons import (
    CouponInput,
    CreateCouponUseCase,
    DeactivateCouponUseCase,
    ListActiveCouponsUseCase,
    ListCouponsUseCase,
    UpdateCouponUseCase,
)
from .manage_products import (
    CreateProductUseCase,
    DeactivateProductUseCase,
    ProductInput,
    ProductSizeInput,
    SetSizeStockUseCase,
    UpdateProductUseCase,
)
from .process_order_requests import (
    ProcessCancelRequestRequest,
    ProcessCancelRequestUseCase,
    ProcessReturnRequestRequest,
    ProcessReturnRequestUseCase,
)
from .request_order_changes import (
    RequestCancellationRequest,
    RequestCancellationUseCase,
    RequestReturnRequest,
    RequestReturnUseCase,
)
from .reviews import (
    AddReviewRequest,
    AddReviewUseCase,
    DeleteReviewUseCase,
    ListAllReviewsUseCase,
    ListProductReviewsUseCase,
    ListUserReviewsUseCase,
    ReviewPage,
    SetReviewStatusUseCase,
    UpdateReviewRequest,
    UpdateReviewUseCase,
)
from .search_products import (
    SearchProductsRequest,
    SearchProductsResponse,
    SearchProductsUseCase,
)
from .shipping_settings import GetShippingSettingsUseCase, UpdateShippingSettingsUseCase
from .track_order import (
    TimelineStep,
    TrackOrderRequest,
    TrackOrderResponse,
    TrackOrderUseCase,
)
from .update_order_status import (
    UpdateOrderStatusRequest,
    UpdateOrderStatusUseCase,
    UpdatePaymentStatusRequest,
    UpdatePaymentStatusUseCase,
)
from .validate_coupon import (
    ValidateCouponRequest,
    ValidateCouponResponse,
    ValidateCouponUseCase,
)

__all__ = [
    # Catalog
    "SearchProductsUseCase",
    "SearchProductsRequest",
    "SearchProductsResponse",
    "GetProductByIdUseCase",
    "ProductInput",
    "ProductSizeInput",
    "CreateProductUseCase",
    "UpdateProductUseCase",
    "SetSizeStockUseCase",
    "DeactivateProductUseCase",
    # Categories
    "CategoryInput",
    "CategoryChanges",
    "ListCategoriesUseCase",
    "CreateCategoryUseCase",
    "UpdateCategoryUseCase",
    "SetCategoryStatusUseCase",
    "DeleteCategoryUseCase",
    # Cart
    "CartService",
    "CartLineInput",
    # Checkout
    "CreateOrderUseCase",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderItemInput",
    # Order queries
    "GetCustomerOrdersUseCase",
    "GetCustomerOrdersRequest",
    "OrderPage",
    "GetOrderUseCase",
    "GetOrderRequest",
    "ListOrdersUseCase",
    "ListOrdersRequest",
    "TrackOrderUseCase",
    "TrackOrderRequest",
    "TrackOrderResponse",
    "TimelineStep",
    # Order transitions
    "RequestCancellationUseCase",
    "RequestCancellationRequest",
    "RequestReturnUseCase",
    "RequestReturnRequest",
    "ProcessCancelRequestUseCase",
    "ProcessCancelRequestRequest",
    "ProcessReturnRequestUseCase",
    "ProcessReturnRequestRequest",
    "UpdateOrderStatusUseCase",
    "UpdateOrderStatusRequest",
    "UpdatePaymentStatusUseCase",
    "UpdatePaymentStatusRequest",
    # Coupons
    "ValidateCouponUseCase",
    "ValidateCouponRequest",
    "ValidateCouponResponse",
    "CouponInput",
    "CreateCouponUseCase",
    "UpdateCouponUseCase",
    "DeactivateCouponUseCase",
    "ListActiveCouponsUseCase",
    "ListCouponsUseCase",
    # Reviews
    "AddReviewUseCase",
    "AddReviewRequest",
    "ListProductReviewsUseCase",
    "ReviewPage",
    "UpdateReviewUseCase",
    "UpdateReviewRequest",
    "SetReviewStatusUseCase",
    "DeleteReviewUseCase",
    "ListUserReviewsUseCase",
    "ListAllReviewsUseCase",
    # Analytics
    "GetDashboardUseCase",
    "Dashboard",
    "DashboardStats",
    "GetSalesAnalyticsUseCase",
    "SalesAnalytics",
    "GetProductAnalyticsUseCase",
    # Settings
    "GetShippingSettingsUseCase",
    "UpdateShippingSettingsUseCase",
]
