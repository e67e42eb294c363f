"""
Create Order Use Case

Business logic for checkout: price the cart, reserve stock, redeem the
coupon, number and persist the order in one transaction.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.core.domain import (
    BusinessRuleViolationException,
    ConcurrencyException,
    DomainEventPublisher,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientStockException,
    ValidationException,
    generate_uuid_str,
    utc_now,
)
from app.domains.ecommerce.application.ports import (
    ICouponRepository,
    IOrderRepository,
    IProductRepository,
    IStoreSettingsRepository,
    ITransaction,
)
from app.domains.ecommerce.domain.entities import AppliedCoupon, Order, OrderItem, Product
from app.domains.ecommerce.domain.events import Audience, NotificationRequested, NotificationTemplate
from app.domains.ecommerce.domain.services import (
    CouponEvaluator,
    OrderTotals,
    PricingService,
    StockLedger,
)
from app.domains.ecommerce.domain.services.order_numbering import ORDER_NUMBER_PREFIX
from app.domains.ecommerce.domain.value_objects import (
    CouponEligibility,
    PaymentMethod,
    ShippingAddress,
)

logger = logging.getLogger(__name__)


@dataclass
class OrderItemInput:
    """Input for order item."""

    product_id: str
    size: str
    quantity: int


@dataclass
class CreateOrderRequest:
    """Request for creating an order."""

    user_id: str
    items: list[OrderItemInput]
    shipping_address: dict[str, Any]
    payment_method: PaymentMethod = PaymentMethod.COD
    customer_email: str | None = None
    coupon_code: str | None = None
    notes: str | None = None


@dataclass
class CreateOrderResponse:
    """Response from order creation."""

    order: Order
    totals: OrderTotals
    attempts: int = 1


class CreateOrderUseCase:
    """
    Use Case: Create Order

    Responsibilities:
    - Validate input and resolve products and sizes
    - Snapshot line items at current prices
    - Check and price the coupon, compute totals with the stored shipping rule
    - In one transaction: decrement stock per line, redeem the coupon,
      allocate the order number and insert the order
    - Retry the transaction when a concurrent checkout took the same number
    - Publish the confirmation notification after commit
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        coupon_repository: ICouponRepository,
        settings_repository: IStoreSettingsRepository,
        transaction: ITransaction,
        publisher: DomainEventPublisher,
        pricing_service: PricingService | None = None,
        order_number_prefix: str = ORDER_NUMBER_PREFIX,
        max_attempts: int = 3,
    ):
        """
        Initialize use case with dependencies.

        Args:
            order_repository: Repository for order data access
            product_repository: Repository for product lookup and stock updates
            coupon_repository: Repository for coupon lookup and redemption
            settings_repository: Store settings holding the shipping rule
            transaction: Unit of work shared by the repositories
            publisher: Publisher for post-commit notifications
            pricing_service: Totals calculator
            order_number_prefix: Prefix of generated order numbers
            max_attempts: Transaction attempts on order number conflicts
        """
        self.order_repository = order_repository
        self.product_repository = product_repository
        self.coupon_repository = coupon_repository
        self.settings_repository = settings_repository
        self.transaction = transaction
        self.publisher = publisher
        self.pricing_service = pricing_service or PricingService()
        self.coupon_evaluator = self.pricing_service.coupon_evaluator
        self.stock_ledger = StockLedger()
        self.order_number_prefix = order_number_prefix
        self.max_attempts = max_attempts

    async def execute(self, request: CreateOrderRequest, now: datetime | None = None) -> CreateOrderResponse:
        """
        Place an order.

        Args:
            request: Order creation request
            now: Checkout time (defaults to current UTC time)

        Returns:
            CreateOrderResponse with the persisted order

        Raises:
            ValidationException: Malformed input
            EntityNotFoundException: Unknown or inactive product
            InsufficientStockException: A line cannot be fulfilled
            BusinessRuleViolationException: Coupon not applicable
            ConcurrencyException: No unique order number after all attempts
        """
        now = now or utc_now()
        address = self._validate_request(request)

        items = await self._build_order_items(request.items)
        subtotal = self.pricing_service.calculate_subtotal(items)
        applied_coupon = await self._resolve_coupon(request, subtotal, items, now)
        shipping_config = await self.settings_repository.get_shipping_config()
        totals = self.pricing_service.calculate_totals(items, shipping_config, applied_coupon)

        for attempt in range(1, self.max_attempts + 1):
            try:
                order = await self._place(request, address, items, totals, applied_coupon, now)
                await self.transaction.commit()
            except DuplicateEntityException:
                await self.transaction.rollback()
                logger.warning(f"Order number conflict on attempt {attempt}/{self.max_attempts}, retrying checkout")
                continue
            except Exception:
                await self.transaction.rollback()
                raise

            logger.info(
                f"Order created: {order.order_number} for user {request.user_id} "
                f"(total={order.total}, attempt={attempt})"
            )
            await self.publisher.publish(self._confirmation(order))
            return CreateOrderResponse(order=order, totals=totals, attempts=attempt)

        raise ConcurrencyException(
            "Order", None, "Could not assign a unique order number, please try again"
        )

    def _validate_request(self, request: CreateOrderRequest) -> ShippingAddress:
        """Validate order request and build the shipping address."""
        if not request.user_id:
            raise ValidationException("User ID is required", field="user_id")
        if not request.items:
            raise ValidationException("At least one item is required", field="items")

        seen: set[tuple[str, str]] = set()
        for i, item in enumerate(request.items):
            if item.quantity <= 0:
                raise ValidationException(f"Item {i + 1}: Quantity must be positive", field="items")
            key = (item.product_id, item.size)
            if key in seen:
                raise ValidationException(f"Item {i + 1}: Duplicate product size in order", field="items")
            seen.add(key)

        try:
            return ShippingAddress(**request.shipping_address)
        except TypeError as e:
            raise ValidationException("Incomplete shipping address", field="shipping_address") from e

    async def _build_order_items(self, items: list[OrderItemInput]) -> list[OrderItem]:
        """Snapshot each line from the current catalog."""
        products = await self.product_repository.get_many(list({item.product_id for item in items}))
        order_items = []

        for item in items:
            product: Product | None = products.get(item.product_id)
            if product is None or not product.is_active:
                raise EntityNotFoundException("Product", item.product_id)

            size = product.get_size(item.size)
            if size is None:
                raise ValidationException(
                    f"Size '{item.size}' is not available for {product.name}", field="size"
                )
            if not self.stock_ledger.is_available(product, item.size, item.quantity):
                raise InsufficientStockException(product.id, item.size, item.quantity, size.stock)

            order_items.append(
                OrderItem(
                    product_id=product.id,
                    name=product.name,
                    size=size.label,
                    price=size.price,
                    quantity=item.quantity,
                    image=product.image,
                    category=product.category,
                )
            )

        return order_items

    async def _resolve_coupon(
        self, request: CreateOrderRequest, subtotal: Decimal, items: list[OrderItem], now: datetime
    ) -> AppliedCoupon | None:
        if not request.coupon_code:
            return None

        coupon = await self.coupon_repository.get_by_code(request.coupon_code)
        is_first_time = await self.order_repository.count_for_user(request.user_id) == 0
        outcome = self.coupon_evaluator.check_eligibility(
            coupon, subtotal, request.user_id, is_first_time, now
        )
        if outcome is not CouponEligibility.ELIGIBLE:
            raise BusinessRuleViolationException(
                f"coupon_{outcome.value}", outcome.message, {"code": request.coupon_code}
            )

        return AppliedCoupon(
            code=coupon.code,
            discount=coupon.discount,
            type=coupon.type,
            max_discount=coupon.max_discount,
            categories=tuple(coupon.categories),
        )

    async def _place(
        self,
        request: CreateOrderRequest,
        address: ShippingAddress,
        items: list[OrderItem],
        totals: OrderTotals,
        applied_coupon: AppliedCoupon | None,
        now: datetime,
    ) -> Order:
        """Write side of checkout. Runs inside the caller's transaction."""
        for item in items:
            if not await self.product_repository.decrement_stock(item.product_id, item.size, item.quantity):
                raise InsufficientStockException(item.product_id, item.size, item.quantity)

        if applied_coupon is not None and not await self.coupon_repository.redeem(applied_coupon.code):
            raise BusinessRuleViolationException(
                f"coupon_{CouponEligibility.USAGE_LIMIT_REACHED.value}",
                CouponEligibility.USAGE_LIMIT_REACHED.message,
                {"code": applied_coupon.code},
            )

        order = Order(
            id=generate_uuid_str(),
            user_id=request.user_id,
            customer_email=request.customer_email,
            order_number=await self.order_repository.allocate_order_number(now, self.order_number_prefix),
            items=list(items),
            shipping_address=address,
            payment_method=request.payment_method,
            subtotal=totals.subtotal,
            shipping_cost=totals.shipping_cost,
            discount=totals.discount,
            total=totals.total,
            applied_coupon=applied_coupon,
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        return await self.order_repository.add(order)

    def _confirmation(self, order: Order) -> NotificationRequested:
        return NotificationRequested(
            template=NotificationTemplate.ORDER_CONFIRMATION,
            audience=Audience.CUSTOMER,
            recipient=order.customer_email,
            data={
                "order_id": order.id,
                "order_number": order.order_number,
                "user_id": order.user_id,
                "total": str(order.total),
                "item_count": order.item_count,
            },
        )


__all__ = ["CreateOrderUseCase", "CreateOrderRequest", "CreateOrderResponse", "OrderItemInput"]
