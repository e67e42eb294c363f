"""
E-commerce API Routes

FastAPI routers for the storefront and the admin console. Domain errors
propagate to the application exception handlers.
"""

from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query, status

from app.domains.ecommerce.api.dependencies import (
    CurrentUser,
    get_add_review_use_case,
    get_cart_service,
    get_create_category_use_case,
    get_create_coupon_use_case,
    get_create_order_use_case,
    get_create_product_use_case,
    get_current_user,
    get_customer_orders_use_case,
    get_dashboard_use_case,
    get_deactivate_coupon_use_case,
    get_deactivate_product_use_case,
    get_delete_category_use_case,
    get_delete_review_use_case,
    get_list_active_coupons_use_case,
    get_list_all_reviews_use_case,
    get_list_categories_use_case,
    get_list_coupons_use_case,
    get_list_orders_use_case,
    get_list_product_reviews_use_case,
    get_list_user_reviews_use_case,
    get_optional_user,
    get_order_use_case,
    get_process_cancel_request_use_case,
    get_process_return_request_use_case,
    get_product_analytics_use_case,
    get_product_by_id_use_case,
    get_request_cancellation_use_case,
    get_request_return_use_case,
    get_sales_analytics_use_case,
    get_search_products_use_case,
    get_set_category_status_use_case,
    get_set_review_status_use_case,
    get_set_size_stock_use_case,
    get_shipping_settings_use_case,
    get_track_order_use_case,
    get_update_category_use_case,
    get_update_coupon_use_case,
    get_update_order_status_use_case,
    get_update_payment_status_use_case,
    get_update_product_use_case,
    get_update_review_use_case,
    get_update_shipping_settings_use_case,
    get_validate_coupon_use_case,
    require_admin,
)
from app.domains.ecommerce.api.schemas import (
    AdminCouponResponse,
    AdminReviewResponse,
    CancelOrderRequest,
    CartItemRequest,
    CartResponse,
    CartSyncRequest,
    CartUpdateRequest,
    CategoryRequest,
    CategoryResponse,
    CategoryStatusRequest,
    CategoryUpdateRequest,
    CouponListResponse,
    CouponRequest,
    CouponResponse,
    CouponValidationResponse,
    CreateOrderRequest,
    DashboardResponse,
    OrderListResponse,
    OrderResponse,
    ProcessCancelRequest,
    ProcessReturnRequest,
    ProductListResponse,
    ProductRequest,
    ProductResponse,
    ProductSalesResponse,
    ReturnOrderRequest,
    ReviewListResponse,
    ReviewPageResponse,
    ReviewRequest,
    ReviewResponse,
    ReviewStatusRequest,
    ReviewUpdateRequest,
    SalesAnalyticsResponse,
    ShippingSettingsSchema,
    SizeStockRequest,
    TimelineStepResponse,
    TrackOrderResponse,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    ValidateCouponRequest,
)
from app.domains.ecommerce.application.use_cases import (
    AddReviewRequest,
    AddReviewUseCase,
    CartLineInput,
    CartService,
    CategoryChanges,
    CategoryInput,
    CouponInput,
    CreateCategoryUseCase,
    CreateCouponUseCase,
    CreateOrderUseCase,
    CreateProductUseCase,
    DeactivateCouponUseCase,
    DeactivateProductUseCase,
    DeleteCategoryUseCase,
    DeleteReviewUseCase,
    GetCustomerOrdersRequest,
    GetCustomerOrdersUseCase,
    GetDashboardUseCase,
    GetOrderRequest,
    GetOrderUseCase,
    GetProductAnalyticsUseCase,
    GetProductByIdUseCase,
    GetSalesAnalyticsUseCase,
    GetShippingSettingsUseCase,
    ListActiveCouponsUseCase,
    ListAllReviewsUseCase,
    ListCategoriesUseCase,
    ListCouponsUseCase,
    ListOrdersRequest,
    ListOrdersUseCase,
    ListProductReviewsUseCase,
    ListUserReviewsUseCase,
    OrderItemInput,
    ProcessCancelRequestRequest,
    ProcessCancelRequestUseCase,
    ProcessReturnRequestRequest,
    ProcessReturnRequestUseCase,
    ProductInput,
    ProductSizeInput,
    RequestCancellationRequest,
    RequestCancellationUseCase,
    RequestReturnRequest,
    RequestReturnUseCase,
    SearchProductsRequest,
    SearchProductsUseCase,
    SetCategoryStatusUseCase,
    SetReviewStatusUseCase,
    SetSizeStockUseCase,
    TrackOrderRequest,
    TrackOrderUseCase,
    UpdateCategoryUseCase,
    UpdateCouponUseCase,
    UpdateOrderStatusUseCase,
    UpdatePaymentStatusUseCase,
    UpdateProductUseCase,
    UpdateReviewRequest,
    UpdateReviewUseCase,
    UpdateShippingSettingsUseCase,
    ValidateCouponUseCase,
)
from app.domains.ecommerce.application.use_cases import CreateOrderRequest as CreateOrderCommand
from app.domains.ecommerce.application.use_cases import UpdateOrderStatusRequest as UpdateOrderStatusCommand
from app.domains.ecommerce.application.use_cases import UpdatePaymentStatusRequest as UpdatePaymentStatusCommand
from app.domains.ecommerce.application.use_cases import ValidateCouponRequest as ValidateCouponCommand
from app.domains.ecommerce.application.use_cases.get_customer_orders import MAX_PAGE_SIZE
from app.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus, ReportPeriod

products_router = APIRouter(prefix="/products", tags=["Products"])
cart_router = APIRouter(prefix="/cart", tags=["Cart"])
orders_router = APIRouter(prefix="/orders", tags=["Orders"])
coupons_router = APIRouter(prefix="/coupons", tags=["Coupons"])
categories_router = APIRouter(prefix="/categories", tags=["Categories"])
reviews_router = APIRouter(prefix="/reviews", tags=["Reviews"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


def _product_input(request: ProductRequest) -> ProductInput:
    return ProductInput(
        name=request.name,
        description=request.description,
        category=request.category,
        sizes=[ProductSizeInput(label=s.size, price=s.price, stock=s.stock, sku=s.sku) for s in request.sizes],
        image=request.image,
        images=request.images,
        ingredients=request.ingredients,
        nutrition=request.nutrition.model_dump() if request.nutrition else None,
        tags=request.tags,
        featured=request.featured,
        is_active=request.is_active,
        version=request.version,
    )


def _coupon_input(request: CouponRequest) -> CouponInput:
    return CouponInput(**request.model_dump())


# ============================================================
# PRODUCTS
# ============================================================


@products_router.get("", response_model=ProductListResponse)
async def list_products(
    search: str | None = Query(None, max_length=100),
    category: str | None = None,
    featured: bool | None = None,
    in_stock: bool | None = None,
    min_price: Decimal | None = Query(None, ge=0),
    max_price: Decimal | None = Query(None, ge=0),
    sort: str = "newest",
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=MAX_PAGE_SIZE),
    use_case: SearchProductsUseCase = Depends(get_search_products_use_case),  # noqa: B008
):
    """Browse the catalog with filters, sorting and pagination."""
    result = await use_case.execute(
        SearchProductsRequest(
            search=search,
            category=category,
            featured=featured,
            in_stock=in_stock,
            min_price=min_price,
            max_price=max_price,
            sort=sort,
            page=page,
            limit=limit,
        )
    )
    return ProductListResponse.from_result(result)


@products_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    use_case: GetProductByIdUseCase = Depends(get_product_by_id_use_case),  # noqa: B008
):
    """Get an active product by ID."""
    product = await use_case.execute(product_id)
    return ProductResponse.from_entity(product)


@products_router.get("/{product_id}/reviews", response_model=ReviewListResponse)
async def list_product_reviews(
    product_id: str,
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    use_case: ListProductReviewsUseCase = Depends(get_list_product_reviews_use_case),  # noqa: B008
):
    """Active reviews for a product, newest first."""
    reviews, total = await use_case.execute(product_id, limit=limit, offset=offset)
    return ReviewListResponse(reviews=[ReviewResponse.from_entity(r) for r in reviews], total=total)


# ============================================================
# CART
# ============================================================


@cart_router.get("", response_model=CartResponse)
async def get_cart(
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    return CartResponse.from_entity(await service.get_cart(user.user_id))


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(
    request: CartItemRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    """Add a product size to the cart."""
    cart = await service.add_item(user.user_id, request.product_id, request.size, request.quantity)
    return CartResponse.from_entity(cart)


@cart_router.put("/items", response_model=CartResponse)
async def update_cart_item(
    request: CartUpdateRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    """Change a line's quantity; zero removes the line."""
    cart = await service.update_quantity(user.user_id, request.product_id, request.size, request.quantity)
    return CartResponse.from_entity(cart)


@cart_router.delete("/items/{product_id}/{size}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    size: str,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    cart = await service.remove_item(user.user_id, product_id, size)
    return CartResponse.from_entity(cart)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    return CartResponse.from_entity(await service.clear(user.user_id))


@cart_router.post("/sync", response_model=CartResponse)
async def sync_cart(
    request: CartSyncRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    service: CartService = Depends(get_cart_service),  # noqa: B008
):
    """Replace the cart with lines kept on the client."""
    lines = [CartLineInput(product_id=i.product_id, size=i.size, quantity=i.quantity) for i in request.items]
    cart = await service.sync(user.user_id, lines)
    return CartResponse.from_entity(cart)


# ============================================================
# ORDERS
# ============================================================


@orders_router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    request: CreateOrderRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: CreateOrderUseCase = Depends(get_create_order_use_case),  # noqa: B008
):
    """Place an order: reserves stock, redeems the coupon and assigns an order number."""
    result = await use_case.execute(
        CreateOrderCommand(
            user_id=user.user_id,
            items=[OrderItemInput(product_id=i.product_id, size=i.size, quantity=i.quantity) for i in request.items],
            shipping_address=request.shipping_address.model_dump(),
            payment_method=request.payment_method,
            customer_email=user.email,
            coupon_code=request.coupon_code,
            notes=request.notes,
        )
    )
    return OrderResponse.from_entity(result.order)


@orders_router.get("", response_model=OrderListResponse)
async def list_my_orders(
    status_filter: OrderStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: GetCustomerOrdersUseCase = Depends(get_customer_orders_use_case),  # noqa: B008
):
    """The caller's orders, newest first."""
    result = await use_case.execute(
        GetCustomerOrdersRequest(user_id=user.user_id, status=status_filter, page=page, limit=limit)
    )
    return OrderListResponse.from_page(result)


@orders_router.get("/track/{order_number}", response_model=TrackOrderResponse)
async def track_order(
    order_number: str,
    use_case: TrackOrderUseCase = Depends(get_track_order_use_case),  # noqa: B008
):
    """Public tracking by order number."""
    result = await use_case.execute(TrackOrderRequest(order_number=order_number))
    order = result.order
    return TrackOrderResponse(
        order_number=order.order_number,
        status=order.status,
        total=order.total,
        created_at=order.created_at,
        items=OrderResponse.from_entity(order).items,
        shipping_details=order.shipping_details.to_dict(),
        timeline=[TimelineStepResponse.from_step(step) for step in result.timeline],
    )


@orders_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: GetOrderUseCase = Depends(get_order_use_case),  # noqa: B008
):
    order = await use_case.execute(GetOrderRequest(order_id=order_id, user_id=user.user_id, is_admin=user.is_admin))
    return OrderResponse.from_entity(order)


@orders_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def request_cancellation(
    order_id: str,
    request: CancelOrderRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: RequestCancellationUseCase = Depends(get_request_cancellation_use_case),  # noqa: B008
):
    """Ask the store to cancel an order that has not shipped yet."""
    order = await use_case.execute(
        RequestCancellationRequest(
            order_id=order_id,
            user_id=user.user_id,
            reason=request.reason,
            description=request.description,
        )
    )
    return OrderResponse.from_entity(order)


@orders_router.post("/{order_id}/return", response_model=OrderResponse)
async def request_return(
    order_id: str,
    request: ReturnOrderRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: RequestReturnUseCase = Depends(get_request_return_use_case),  # noqa: B008
):
    """Ask the store to take back a delivered order."""
    order = await use_case.execute(
        RequestReturnRequest(
            order_id=order_id,
            user_id=user.user_id,
            reason=request.reason,
            description=request.description,
        )
    )
    return OrderResponse.from_entity(order)


# ============================================================
# COUPONS
# ============================================================


@coupons_router.get("", response_model=list[CouponResponse])
async def list_active_coupons(
    use_case: ListActiveCouponsUseCase = Depends(get_list_active_coupons_use_case),  # noqa: B008
):
    """Coupons that can currently be redeemed."""
    return [CouponResponse.from_entity(c) for c in await use_case.execute()]


@coupons_router.post("/validate", response_model=CouponValidationResponse)
async def validate_coupon(
    request: ValidateCouponRequest,
    user: CurrentUser | None = Depends(get_optional_user),  # noqa: B008
    use_case: ValidateCouponUseCase = Depends(get_validate_coupon_use_case),  # noqa: B008
):
    """Check a code against an order amount without redeeming it."""
    result = await use_case.execute(
        ValidateCouponCommand(
            code=request.code,
            order_amount=request.order_amount,
            user_id=user.user_id if user else None,
            items=request.items,
        )
    )
    return CouponValidationResponse.from_result(result)


# ============================================================
# REVIEWS
# ============================================================


@reviews_router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def add_review(
    request: ReviewRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: AddReviewUseCase = Depends(get_add_review_use_case),  # noqa: B008
):
    """Review a product from one of the caller's delivered orders."""
    review = await use_case.execute(
        AddReviewRequest(
            user_id=user.user_id,
            order_id=request.order_id,
            product_id=request.product_id,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
            user_name=user.email,
        )
    )
    return ReviewResponse.from_entity(review)


@reviews_router.get("/user", response_model=ReviewPageResponse)
async def list_my_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: ListUserReviewsUseCase = Depends(get_list_user_reviews_use_case),  # noqa: B008
):
    """The caller's reviews, hidden ones included, newest first."""
    return ReviewPageResponse.from_page(await use_case.execute(user.user_id, page=page, limit=limit))


@reviews_router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: str,
    request: ReviewUpdateRequest,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: UpdateReviewUseCase = Depends(get_update_review_use_case),  # noqa: B008
):
    """Edit one of the caller's reviews."""
    review = await use_case.execute(
        UpdateReviewRequest(
            review_id=review_id,
            user_id=user.user_id,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
        )
    )
    return ReviewResponse.from_entity(review)


@reviews_router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: str,
    user: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: DeleteReviewUseCase = Depends(get_delete_review_use_case),  # noqa: B008
) -> None:
    """Hide one of the caller's reviews."""
    await use_case.execute(review_id, user.user_id)


# ============================================================
# CATEGORIES
# ============================================================


@categories_router.get("", response_model=list[CategoryResponse])
async def list_categories(
    use_case: ListCategoriesUseCase = Depends(get_list_categories_use_case),  # noqa: B008
):
    """Active categories by name."""
    return [CategoryResponse.from_entity(c) for c in await use_case.execute()]


# ============================================================
# ADMIN
# ============================================================


@admin_router.get("/orders", response_model=OrderListResponse)
async def admin_list_orders(
    status_filter: OrderStatus | None = Query(None, alias="status"),
    payment_status: PaymentStatus | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=MAX_PAGE_SIZE),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),  # noqa: B008
):
    result = await use_case.execute(
        ListOrdersRequest(status=status_filter, payment_status=payment_status, page=page, limit=limit)
    )
    return OrderListResponse.from_page(result)


@admin_router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def admin_update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    use_case: UpdateOrderStatusUseCase = Depends(get_update_order_status_use_case),  # noqa: B008
):
    """Overwrite an order's status."""
    order = await use_case.execute(
        UpdateOrderStatusCommand(
            order_id=order_id,
            status=request.status,
            notes=request.notes,
            tracking_number=request.tracking_number,
            carrier=request.carrier,
        )
    )
    return OrderResponse.from_entity(order)


@admin_router.patch("/orders/{order_id}/payment", response_model=OrderResponse)
async def admin_update_payment_status(
    order_id: str,
    request: UpdatePaymentStatusRequest,
    use_case: UpdatePaymentStatusUseCase = Depends(get_update_payment_status_use_case),  # noqa: B008
):
    order = await use_case.execute(
        UpdatePaymentStatusCommand(
            order_id=order_id,
            payment_status=request.payment_status,
            transaction_id=request.transaction_id,
            payment_intent_id=request.payment_intent_id,
            payment_method=request.payment_method,
        )
    )
    return OrderResponse.from_entity(order)


@admin_router.post("/orders/{order_id}/cancel-request", response_model=OrderResponse)
async def admin_process_cancel_request(
    order_id: str,
    request: ProcessCancelRequest,
    admin: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: ProcessCancelRequestUseCase = Depends(get_process_cancel_request_use_case),  # noqa: B008
):
    """Approve or reject a pending cancellation; approval restocks the items."""
    order = await use_case.execute(
        ProcessCancelRequestRequest(
            order_id=order_id,
            approved=request.approved,
            processed_by=admin.user_id,
            notes=request.notes,
        )
    )
    return OrderResponse.from_entity(order)


@admin_router.post("/orders/{order_id}/return-request", response_model=OrderResponse)
async def admin_process_return_request(
    order_id: str,
    request: ProcessReturnRequest,
    admin: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: ProcessReturnRequestUseCase = Depends(get_process_return_request_use_case),  # noqa: B008
):
    """Approve or reject a pending return; approval records the refund."""
    order = await use_case.execute(
        ProcessReturnRequestRequest(
            order_id=order_id,
            approved=request.approved,
            processed_by=admin.user_id,
            refund_amount=request.refund_amount,
            refund_method=request.refund_method,
            return_tracking_number=request.return_tracking_number,
            notes=request.notes,
        )
    )
    return OrderResponse.from_entity(order)


@admin_router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_product(
    request: ProductRequest,
    use_case: CreateProductUseCase = Depends(get_create_product_use_case),  # noqa: B008
):
    product = await use_case.execute(_product_input(request))
    return ProductResponse.from_entity(product)


@admin_router.put("/products/{product_id}", response_model=ProductResponse)
async def admin_update_product(
    product_id: str,
    request: ProductRequest,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),  # noqa: B008
):
    product = await use_case.execute(product_id, _product_input(request))
    return ProductResponse.from_entity(product)


@admin_router.put("/products/{product_id}/sizes/{size}/stock", response_model=ProductResponse)
async def admin_set_size_stock(
    product_id: str,
    size: str,
    request: SizeStockRequest,
    use_case: SetSizeStockUseCase = Depends(get_set_size_stock_use_case),  # noqa: B008
):
    """Set the absolute stock of one size."""
    product = await use_case.execute(product_id, size, request.stock)
    return ProductResponse.from_entity(product)


@admin_router.delete("/products/{product_id}", response_model=ProductResponse)
async def admin_deactivate_product(
    product_id: str,
    use_case: DeactivateProductUseCase = Depends(get_deactivate_product_use_case),  # noqa: B008
):
    """Hide a product from the storefront."""
    product = await use_case.execute(product_id)
    return ProductResponse.from_entity(product)


@admin_router.get("/coupons", response_model=CouponListResponse)
async def admin_list_coupons(
    limit: int = Query(50, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    use_case: ListCouponsUseCase = Depends(get_list_coupons_use_case),  # noqa: B008
):
    coupons, total = await use_case.execute(limit=limit, offset=offset)
    return CouponListResponse(coupons=[AdminCouponResponse.from_entity(c) for c in coupons], total=total)


@admin_router.post("/coupons", response_model=AdminCouponResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_coupon(
    request: CouponRequest,
    admin: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: CreateCouponUseCase = Depends(get_create_coupon_use_case),  # noqa: B008
):
    coupon = await use_case.execute(_coupon_input(request), created_by=admin.user_id)
    return AdminCouponResponse.from_entity(coupon)


@admin_router.put("/coupons/{coupon_id}", response_model=AdminCouponResponse)
async def admin_update_coupon(
    coupon_id: str,
    request: CouponRequest,
    use_case: UpdateCouponUseCase = Depends(get_update_coupon_use_case),  # noqa: B008
):
    coupon = await use_case.execute(coupon_id, _coupon_input(request))
    return AdminCouponResponse.from_entity(coupon)


@admin_router.delete("/coupons/{coupon_id}", response_model=AdminCouponResponse)
async def admin_deactivate_coupon(
    coupon_id: str,
    use_case: DeactivateCouponUseCase = Depends(get_deactivate_coupon_use_case),  # noqa: B008
):
    coupon = await use_case.execute(coupon_id)
    return AdminCouponResponse.from_entity(coupon)


@admin_router.get("/reviews", response_model=ReviewPageResponse)
async def admin_list_reviews(
    status_filter: Literal["all", "active", "inactive"] = Query("all", alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    use_case: ListAllReviewsUseCase = Depends(get_list_all_reviews_use_case),  # noqa: B008
):
    is_active = {"all": None, "active": True, "inactive": False}[status_filter]
    return ReviewPageResponse.from_page(await use_case.execute(is_active=is_active, page=page, limit=limit))


@admin_router.patch("/reviews/{review_id}/status", response_model=AdminReviewResponse)
async def admin_set_review_status(
    review_id: str,
    request: ReviewStatusRequest,
    use_case: SetReviewStatusUseCase = Depends(get_set_review_status_use_case),  # noqa: B008
):
    """Show or hide a review; the product rating follows."""
    return AdminReviewResponse.from_entity(await use_case.execute(review_id, request.is_active))


@admin_router.get("/categories", response_model=list[CategoryResponse])
async def admin_list_categories(
    use_case: ListCategoriesUseCase = Depends(get_list_categories_use_case),  # noqa: B008
):
    """Every category, newest first."""
    return [CategoryResponse.from_entity(c) for c in await use_case.execute(include_inactive=True)]


@admin_router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_category(
    request: CategoryRequest,
    use_case: CreateCategoryUseCase = Depends(get_create_category_use_case),  # noqa: B008
):
    category = await use_case.execute(CategoryInput(**request.model_dump()))
    return CategoryResponse.from_entity(category)


@admin_router.put("/categories/{category_id}", response_model=CategoryResponse)
async def admin_update_category(
    category_id: str,
    request: CategoryUpdateRequest,
    use_case: UpdateCategoryUseCase = Depends(get_update_category_use_case),  # noqa: B008
):
    category = await use_case.execute(category_id, CategoryChanges(**request.model_dump()))
    return CategoryResponse.from_entity(category)


@admin_router.patch("/categories/{category_id}/status", response_model=CategoryResponse)
async def admin_set_category_status(
    category_id: str,
    request: CategoryStatusRequest,
    use_case: SetCategoryStatusUseCase = Depends(get_set_category_status_use_case),  # noqa: B008
):
    return CategoryResponse.from_entity(await use_case.execute(category_id, request.is_active))


@admin_router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_category(
    category_id: str,
    use_case: DeleteCategoryUseCase = Depends(get_delete_category_use_case),  # noqa: B008
) -> None:
    await use_case.execute(category_id)


@admin_router.get("/dashboard", response_model=DashboardResponse)
async def admin_dashboard(
    use_case: GetDashboardUseCase = Depends(get_dashboard_use_case),  # noqa: B008
):
    """Store counters, the latest orders, best sellers and stock alerts."""
    return DashboardResponse.from_dashboard(await use_case.execute())


@admin_router.get("/analytics/sales", response_model=SalesAnalyticsResponse)
async def admin_sales_analytics(
    period: ReportPeriod = ReportPeriod.MONTH,
    use_case: GetSalesAnalyticsUseCase = Depends(get_sales_analytics_use_case),  # noqa: B008
):
    """Delivered sales per day and the payment status mix for a reporting window."""
    return SalesAnalyticsResponse.from_result(await use_case.execute(period))


@admin_router.get("/analytics/products", response_model=list[ProductSalesResponse])
async def admin_product_analytics(
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    period: ReportPeriod | None = None,
    use_case: GetProductAnalyticsUseCase = Depends(get_product_analytics_use_case),  # noqa: B008
):
    """Best sellers by units sold, all time unless a period is given."""
    return [ProductSalesResponse.from_sales(s) for s in await use_case.execute(limit=limit, period=period)]


@admin_router.get("/settings/shipping", response_model=ShippingSettingsSchema)
async def admin_get_shipping_settings(
    use_case: GetShippingSettingsUseCase = Depends(get_shipping_settings_use_case),  # noqa: B008
):
    return ShippingSettingsSchema.from_config(await use_case.execute())


@admin_router.put("/settings/shipping", response_model=ShippingSettingsSchema)
async def admin_update_shipping_settings(
    request: ShippingSettingsSchema,
    admin: CurrentUser = Depends(get_current_user),  # noqa: B008
    use_case: UpdateShippingSettingsUseCase = Depends(get_update_shipping_settings_use_case),  # noqa: B008
):
    """Change the flat shipping fee and the free-shipping threshold."""
    config = await use_case.execute(
        request.shipping_fee,
        request.free_shipping_threshold,
        updated_by=admin.user_id,
    )
    return ShippingSettingsSchema.from_config(config)


router = APIRouter()
router.include_router(products_router)
router.include_router(cart_router)
router.include_router(orders_router)
router.include_router(coupons_router)
router.include_router(categories_router)
router.include_router(reviews_router)
router.include_router(admin_router)


__all__ = [
    "router",
    "products_router",
    "cart_router",
    "orders_router",
    "coupons_router",
    "categories_router",
    "reviews_router",
    "admin_router",
]
