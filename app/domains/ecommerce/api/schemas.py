"""
E-commerce API Schemas

Pydantic schemas for API request/response validation.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domains.ecommerce.application.ports import StockLevel
from app.domains.ecommerce.application.use_cases import (
    Dashboard,
    OrderPage,
    ReviewPage,
    SalesAnalytics,
    SearchProductsResponse,
    TimelineStep,
    ValidateCouponResponse,
)
from app.domains.ecommerce.domain.entities import Cart, Category, Coupon, Order, Product, Review
from app.domains.ecommerce.domain.services import ProductSales
from app.domains.ecommerce.domain.value_objects import (
    CancelReason,
    CouponEligibility,
    DiscountType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    RefundMethod,
    ReportPeriod,
    ReturnReason,
    ShippingConfig,
)

# ============================================================
# CATALOG
# ============================================================


class ProductSizeSchema(BaseModel):
    """Size definition with its own price and stock."""

    size: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)
    sku: str | None = Field(default=None, max_length=64)


class NutritionSchema(BaseModel):
    """Nutrition facts per serving."""

    model_config = ConfigDict(extra="forbid")

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    fiber: float | None = None


class ProductRequest(BaseModel):
    """Create or replace a product."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    category: str = Field(..., min_length=1, max_length=100)
    image: str = ""
    images: list[str] = Field(default_factory=list)
    sizes: list[ProductSizeSchema] = Field(..., min_length=1)
    ingredients: list[str] = Field(default_factory=list)
    nutrition: NutritionSchema | None = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    is_active: bool = True
    version: int | None = Field(default=None, ge=0, description="Version last read; stale edits are refused")


class SizeStockRequest(BaseModel):
    """Absolute stock for one size."""

    stock: int = Field(..., ge=0)


class ProductResponse(BaseModel):
    """Product response schema."""

    id: str
    name: str
    description: str
    category: str
    image: str
    images: list[str]
    sizes: list[ProductSizeSchema]
    ingredients: list[str]
    nutrition: NutritionSchema | None = None
    tags: list[str]
    rating: float
    review_count: int
    featured: bool
    is_active: bool
    in_stock: bool
    min_price: Decimal
    max_price: Decimal
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            category=product.category,
            image=product.image,
            images=product.images,
            sizes=[ProductSizeSchema(size=s.label, price=s.price, stock=s.stock, sku=s.sku) for s in product.sizes],
            ingredients=product.ingredients,
            nutrition=NutritionSchema(**product.nutrition.to_dict()) if product.nutrition else None,
            tags=product.tags,
            rating=round(product.rating, 1),
            review_count=product.review_count,
            featured=product.featured,
            is_active=product.is_active,
            in_stock=product.in_stock,
            min_price=product.min_price,
            max_price=product.max_price,
            version=product.version,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductListResponse(BaseModel):
    """Paged product listing."""

    products: list[ProductResponse]
    total: int
    page: int
    pages: int

    @classmethod
    def from_result(cls, result: SearchProductsResponse) -> "ProductListResponse":
        return cls(
            products=[ProductResponse.from_entity(p) for p in result.products],
            total=result.total,
            page=result.page,
            pages=result.pages,
        )


# ============================================================
# CART
# ============================================================


class CartItemRequest(BaseModel):
    """Add a product size to the cart."""

    product_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=1)


class CartUpdateRequest(BaseModel):
    """Change a cart line's quantity; 0 removes it."""

    product_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)


class CartRemoveRequest(BaseModel):
    product_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)


class CartSyncRequest(BaseModel):
    """Replace the cart with client-side lines."""

    items: list[CartItemRequest]


class CartItemResponse(BaseModel):
    product_id: str
    size: str
    quantity: int
    name: str
    price: Decimal
    image: str
    category: str
    line_total: Decimal


class CartResponse(BaseModel):
    """Cart response schema."""

    items: list[CartItemResponse]
    subtotal: Decimal
    item_count: int
    updated_at: datetime

    @classmethod
    def from_entity(cls, cart: Cart) -> "CartResponse":
        return cls(
            items=[
                CartItemResponse(
                    product_id=item.product_id,
                    size=item.size,
                    quantity=item.quantity,
                    name=item.name,
                    price=item.price,
                    image=item.image,
                    category=item.category,
                    line_total=item.line_total,
                )
                for item in cart.items
            ],
            subtotal=cart.subtotal,
            item_count=cart.item_count,
            updated_at=cart.updated_at,
        )


# ============================================================
# ORDERS
# ============================================================


class ShippingAddressSchema(BaseModel):
    """Delivery address."""

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=1, max_length=300)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: str = Field(..., pattern=r"^\d{6}$")
    phone: str = Field(..., pattern=r"^[0-9+\-\s()]{10,15}$")


class OrderItemRequest(BaseModel):
    """Order item request schema."""

    product_id: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(BaseModel):
    """Create order request schema."""

    items: list[OrderItemRequest] = Field(..., min_length=1)
    shipping_address: ShippingAddressSchema
    payment_method: PaymentMethod = PaymentMethod.COD
    coupon_code: str | None = Field(default=None, max_length=20)
    notes: str | None = Field(default=None, max_length=500)


class CancelOrderRequest(BaseModel):
    reason: CancelReason
    description: str = Field(default="", max_length=500)


class ReturnOrderRequest(BaseModel):
    reason: ReturnReason
    description: str = Field(default="", max_length=500)


class ProcessCancelRequest(BaseModel):
    approved: bool
    notes: str | None = Field(default=None, max_length=500)


class ProcessReturnRequest(BaseModel):
    approved: bool
    refund_amount: Decimal | None = Field(default=None, ge=0)
    refund_method: RefundMethod | None = None
    return_tracking_number: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=500)


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatus
    notes: str | None = Field(default=None, max_length=500)
    tracking_number: str | None = Field(default=None, max_length=100)
    carrier: str | None = Field(default=None, max_length=100)


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: PaymentStatus
    transaction_id: str | None = None
    payment_intent_id: str | None = None
    payment_method: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    size: str
    price: Decimal
    quantity: int
    image: str
    category: str
    line_total: Decimal


class OrderResponse(BaseModel):
    """Order response schema."""

    id: str
    order_number: str
    user_id: str
    customer_email: str | None
    items: list[OrderItemResponse]
    shipping_address: dict[str, str] | None
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    status: OrderStatus
    subtotal: Decimal
    shipping_cost: Decimal
    discount: Decimal
    total: Decimal
    applied_coupon: dict[str, Any] | None
    payment_details: dict[str, Any]
    shipping_details: dict[str, Any]
    notes: str | None
    cancel_request: dict[str, Any] | None
    return_request: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            order_number=order.order_number,
            user_id=order.user_id,
            customer_email=order.customer_email,
            items=[
                OrderItemResponse(
                    product_id=item.product_id,
                    name=item.name,
                    size=item.size,
                    price=item.price,
                    quantity=item.quantity,
                    image=item.image,
                    category=item.category,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            shipping_address=order.shipping_address.to_dict() if order.shipping_address else None,
            payment_method=order.payment_method,
            payment_status=order.payment_status,
            status=order.status,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            discount=order.discount,
            total=order.total,
            applied_coupon=order.applied_coupon.to_dict() if order.applied_coupon else None,
            payment_details=order.payment_details.to_dict(),
            shipping_details=order.shipping_details.to_dict(),
            notes=order.notes,
            cancel_request=order.cancel_request.to_dict() if order.cancel_request else None,
            return_request=order.return_request.to_dict() if order.return_request else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    total: int
    page: int
    pages: int

    @classmethod
    def from_page(cls, page: OrderPage) -> "OrderListResponse":
        return cls(
            orders=[OrderResponse.from_entity(o) for o in page.orders],
            total=page.total,
            page=page.page,
            pages=page.pages,
        )


class TimelineStepResponse(BaseModel):
    status: OrderStatus
    title: str
    description: str
    timestamp: datetime | None
    completed: bool

    @classmethod
    def from_step(cls, step: TimelineStep) -> "TimelineStepResponse":
        return cls(
            status=step.status,
            title=step.title,
            description=step.description,
            timestamp=step.timestamp,
            completed=step.completed,
        )


class TrackOrderResponse(BaseModel):
    """Public tracking view."""

    order_number: str
    status: OrderStatus
    total: Decimal
    created_at: datetime
    items: list[OrderItemResponse]
    shipping_details: dict[str, Any]
    timeline: list[TimelineStepResponse]


# ============================================================
# COUPONS
# ============================================================


class CouponLineSchema(BaseModel):
    """Cart line used to price category-restricted coupons."""

    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    category: str = ""


class ValidateCouponRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    order_amount: Decimal = Field(..., ge=0)
    items: list[CouponLineSchema] = Field(default_factory=list)


class CouponRequest(BaseModel):
    """Create or replace a coupon."""

    code: str = Field(..., min_length=1, max_length=20)
    description: str = Field(default="", max_length=200)
    discount: Decimal = Field(..., ge=0)
    type: DiscountType
    categories: list[str] = Field(default_factory=list)
    min_order_amount: Decimal = Field(default=Decimal("0"), ge=0)
    max_discount: Decimal = Field(default=Decimal("-1"), ge=-1)
    usage_limit: int = Field(default=-1, ge=-1)
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True
    is_first_time_only: bool = False
    applicable_users: list[str] = Field(default_factory=list)
    excluded_users: list[str] = Field(default_factory=list)


class CouponResponse(BaseModel):
    """Coupon response schema."""

    id: str
    code: str
    description: str
    discount: Decimal
    type: DiscountType
    categories: list[str]
    min_order_amount: Decimal
    max_discount: Decimal
    usage_limit: int
    used_count: int
    valid_from: datetime
    valid_until: datetime
    is_active: bool
    is_first_time_only: bool

    @classmethod
    def from_entity(cls, coupon: Coupon) -> "CouponResponse":
        return cls(
            id=coupon.id,
            code=coupon.code,
            description=coupon.description,
            discount=coupon.discount,
            type=coupon.type,
            categories=coupon.categories,
            min_order_amount=coupon.min_order_amount,
            max_discount=coupon.max_discount,
            usage_limit=coupon.usage_limit,
            used_count=coupon.used_count,
            valid_from=coupon.valid_from,
            valid_until=coupon.valid_until,
            is_active=coupon.is_active,
            is_first_time_only=coupon.is_first_time_only,
        )


class AdminCouponResponse(CouponResponse):
    """Coupon with its targeting lists, for administrators."""

    applicable_users: list[str]
    excluded_users: list[str]
    created_by: str | None

    @classmethod
    def from_entity(cls, coupon: Coupon) -> "AdminCouponResponse":
        public = CouponResponse.from_entity(coupon).model_dump()
        return cls(
            **public,
            applicable_users=coupon.applicable_users,
            excluded_users=coupon.excluded_users,
            created_by=coupon.created_by,
        )


class CouponListResponse(BaseModel):
    coupons: list[AdminCouponResponse]
    total: int


class CouponValidationResponse(BaseModel):
    valid: bool
    eligibility: CouponEligibility
    message: str
    discount: Decimal
    coupon: CouponResponse | None = None

    @classmethod
    def from_result(cls, result: ValidateCouponResponse) -> "CouponValidationResponse":
        return cls(
            valid=result.valid,
            eligibility=result.eligibility,
            message=result.message,
            discount=result.discount,
            coupon=CouponResponse.from_entity(result.coupon) if result.valid and result.coupon else None,
        )


# ============================================================
# REVIEWS
# ============================================================


class ReviewRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=5, max_length=100)
    comment: str = Field(..., min_length=10, max_length=500)


class ReviewResponse(BaseModel):
    id: str
    product_id: str
    order_id: str
    user_name: str | None
    rating: int
    title: str
    comment: str
    is_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, review: Review) -> "ReviewResponse":
        return cls(
            id=review.id,
            product_id=review.product_id,
            order_id=review.order_id,
            user_name=review.user_name,
            rating=review.rating,
            title=review.title,
            comment=review.comment,
            is_verified=review.is_verified,
            is_active=review.is_active,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    total: int


class ReviewUpdateRequest(BaseModel):
    """Author's edit; omitted fields are kept."""

    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, min_length=5, max_length=100)
    comment: str | None = Field(default=None, min_length=10, max_length=500)


class ReviewStatusRequest(BaseModel):
    is_active: bool


class AdminReviewResponse(ReviewResponse):
    user_id: str

    @classmethod
    def from_entity(cls, review: Review) -> "AdminReviewResponse":
        return cls(user_id=review.user_id, **ReviewResponse.from_entity(review).model_dump())


class ReviewPageResponse(BaseModel):
    reviews: list[AdminReviewResponse]
    total: int
    page: int
    pages: int

    @classmethod
    def from_page(cls, page: ReviewPage) -> "ReviewPageResponse":
        return cls(
            reviews=[AdminReviewResponse.from_entity(r) for r in page.reviews],
            total=page.total,
            page=page.page,
            pages=page.pages,
        )


# ============================================================
# SETTINGS
# ============================================================


class ShippingSettingsSchema(BaseModel):
    """Flat shipping fee and the subtotal at which shipping becomes free."""

    shipping_fee: Decimal = Field(..., ge=0)
    free_shipping_threshold: Decimal = Field(..., ge=0)

    @classmethod
    def from_config(cls, config: ShippingConfig) -> "ShippingSettingsSchema":
        return cls(shipping_fee=config.flat_fee, free_shipping_threshold=config.free_shipping_threshold)


# ============================================================
# CATEGORIES
# ============================================================


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    description: str = Field(default="", max_length=300)
    image: str | None = Field(default=None, max_length=500)
    is_active: bool = True


class CategoryUpdateRequest(BaseModel):
    """Partial update; omitted fields are kept."""

    name: str | None = Field(default=None, min_length=2, max_length=50)
    description: str | None = Field(default=None, max_length=300)
    image: str | None = Field(default=None, max_length=500)
    is_active: bool | None = None


class CategoryStatusRequest(BaseModel):
    is_active: bool


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str
    image: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryResponse":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            image=category.image,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


# ============================================================
# ANALYTICS
# ============================================================


class ProductSalesResponse(BaseModel):
    product_id: str
    name: str
    quantity_sold: int
    revenue: Decimal

    @classmethod
    def from_sales(cls, sales: ProductSales) -> "ProductSalesResponse":
        return cls(
            product_id=sales.product_id,
            name=sales.name,
            quantity_sold=sales.quantity_sold,
            revenue=sales.revenue,
        )


class StockLevelResponse(BaseModel):
    product_id: str
    name: str
    category: str
    total_stock: int

    @classmethod
    def from_level(cls, level: StockLevel) -> "StockLevelResponse":
        return cls(
            product_id=level.product_id,
            name=level.name,
            category=level.category,
            total_stock=level.total_stock,
        )


class DashboardStatsResponse(BaseModel):
    total_products: int
    total_orders: int
    total_customers: int
    total_revenue: Decimal
    monthly_orders: int
    monthly_revenue: Decimal


class DashboardResponse(BaseModel):
    """Admin landing page: counters, latest orders, best sellers and stock alerts."""

    stats: DashboardStatsResponse
    recent_orders: list[OrderResponse]
    top_products: list[ProductSalesResponse]
    low_stock: list[StockLevelResponse]
    out_of_stock: list[StockLevelResponse]

    @classmethod
    def from_dashboard(cls, dashboard: Dashboard) -> "DashboardResponse":
        stats = dashboard.stats
        return cls(
            stats=DashboardStatsResponse(
                total_products=stats.total_products,
                total_orders=stats.total_orders,
                total_customers=stats.total_customers,
                total_revenue=stats.total_revenue,
                monthly_orders=stats.monthly_orders,
                monthly_revenue=stats.monthly_revenue,
            ),
            recent_orders=[OrderResponse.from_entity(o) for o in dashboard.recent_orders],
            top_products=[ProductSalesResponse.from_sales(s) for s in dashboard.top_products],
            low_stock=[StockLevelResponse.from_level(s) for s in dashboard.low_stock],
            out_of_stock=[StockLevelResponse.from_level(s) for s in dashboard.out_of_stock],
        )


class DailySalesResponse(BaseModel):
    day: date
    total_sales: Decimal
    order_count: int


class PaymentStatusTotalsResponse(BaseModel):
    status: PaymentStatus
    count: int
    total: Decimal


class SalesAnalyticsResponse(BaseModel):
    period: ReportPeriod
    start: datetime
    end: datetime
    timeseries: list[DailySalesResponse]
    payment_status: list[PaymentStatusTotalsResponse]

    @classmethod
    def from_result(cls, result: SalesAnalytics) -> "SalesAnalyticsResponse":
        return cls(
            period=result.period,
            start=result.start,
            end=result.end,
            timeseries=[
                DailySalesResponse(day=d.day, total_sales=d.total_sales, order_count=d.order_count)
                for d in result.daily_sales
            ],
            payment_status=[
                PaymentStatusTotalsResponse(status=p.status, count=p.count, total=p.total)
                for p in result.payment_status
            ],
        )
