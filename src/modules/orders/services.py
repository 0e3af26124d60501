"""Order service layer (Use Cases).

Orchestrates pricing, discount redemption and order life-cycle.  Every
write is a single unit of work (``transaction.atomic``).

Submission (``finalize_order``):
1. Validate the payload; nothing is read or written when it fails.
2. Resolve the discount code.  An unusable code is not an error: the
   order proceeds at full price.
3. Price the order through ``modules.orders.pricing``.
4. Insert the order, then claim one use of the discount with a
   conditional increment.  Losing the claim to a concurrent order reprices
   this one at full price; a storage failure of the claim is logged and the
   discounted order stands.
5. Publish ``OrderCreated`` once the transaction commits.

Status rules: confirm and complete have no predecessor guard; cancel is
only allowed from pending or confirmed.
"""

from __future__ import annotations

from decimal import Decimal
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)

import structlog
from django.db import DatabaseError, transaction
from pydantic import BaseModel as PydanticModel
from pydantic import ValidationError as PydanticValidationError

from modules.discounts.services import DiscountService
from modules.orders.constants import (
    CANCELLABLE_STATES,
    ORDER_STATE_ACTIVE,
    ORDER_STATE_COMPLETED,
    ORDER_STATE_LOOKUPS,
    OrderStatus,
)
from modules.orders.dtos import (
    AdminCreateOrderDTO,
    AmountOverrideDTO,
    OrderDetailsDTO,
    OrderQuote,
    SubmitOrderDTO,
)
from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
)
from modules.orders.exceptions import (
    InvalidOrderData,
    InvalidOrderStatus,
    OrderNotFound,
    OrderStorageError,
)
from modules.orders.pricing import (
    PriceBreakdown,
    PricingInput,
    is_known_material,
    price_order,
    round_currency,
)
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.discounts.dtos import DiscountDescriptor
    from modules.discounts.repositories.interfaces import IDiscountCodeRepository
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

D = TypeVar("D", bound=PydanticModel)


def _validate(dto_class: Type[D], data: Union[D, Mapping[str, Any]]) -> D:
    if isinstance(data, dto_class):
        return data
    try:
        return dto_class.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise InvalidOrderData.from_pydantic(exc, "Invalid order data.") from exc


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        discount_repository: IDiscountCodeRepository,
    ) -> None:
        self._order_repo = order_repository
        self._discounts = DiscountService(discount_repository)

    # ------------------------------------------------------------------
    # Pricing
    # ------------------------------------------------------------------

    def quote_order(self, data: Union[OrderDetailsDTO, Mapping[str, Any]]) -> OrderQuote:
        """Price an order without placing it.

        Uses the same resolution and pricing path as submission, but never
        claims a discount use.

        Raises:
            InvalidOrderData: payload failed validation.
        """
        dto = _validate(OrderDetailsDTO, data)
        discount = self._discounts.resolve_discount(dto.discount_code)
        price = price_order(dto.pricing_input(), discount)
        return OrderQuote(
            base_cost=price.base_cost,
            discount_applied=price.discount_applied,
            final_amount=price.final_amount,
            discount_code=discount.code if discount else None,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def finalize_order(self, data: Union[SubmitOrderDTO, Mapping[str, Any]]) -> Order:
        """Price and place a customer order.

        Raises:
            InvalidOrderData: payload failed validation (no side effects).
            OrderStorageError: the order could not be inserted (no discount
                use is consumed).
        """
        dto = _validate(SubmitOrderDTO, data)
        log = logger.bind(user_id=dto.user_id)
        log.info("order.submission_started")

        pricing = dto.pricing_input()
        discount = self._discounts.resolve_discount(dto.discount_code)
        price = price_order(pricing, discount)

        if dto.quoted_price != price.final_amount:
            log.warning(
                "order.quote_mismatch",
                quoted=str(dto.quoted_price),
                computed=str(price.final_amount),
            )
        if not is_known_material(pricing.material):
            log.warning("order.unknown_material", material=pricing.material)

        fields = self._order_fields(dto, pricing, price, discount)
        try:
            order = self._order_repo.create(fields)
        except DatabaseError as exc:
            log.exception("order.insert_failed")
            raise OrderStorageError("Could not save the order.") from exc

        if discount is not None:
            order = self._redeem_discount(order, discount, pricing, log)

        log.info(
            "order.created",
            order_id=str(order.id),
            final_amount=str(order.final_amount),
            discount_applied=str(order.discount_applied),
        )
        self._publish(
            OrderCreated(
                aggregate_id=order.id,
                user_id=order.user_id,
                final_amount=order.final_amount,
                discount_code_id=order.discount_code_id,
            )
        )
        return order

    @transaction.atomic
    def create_admin_order(
        self, data: Union[AdminCreateOrderDTO, Mapping[str, Any]]
    ) -> Order:
        """Place an order on a customer's behalf at an admin-set amount.

        Raises:
            InvalidOrderData: payload failed validation.
            OrderStorageError: the order could not be inserted.
        """
        dto = _validate(AdminCreateOrderDTO, data)
        pricing = dto.pricing_input()
        amount = round_currency(dto.amount)
        try:
            order = self._order_repo.create(
                {
                    "user_id": dto.user_id,
                    "model_name": dto.model_name,
                    "description": dto.description,
                    "material": pricing.material,
                    "weight_grams": pricing.weight_grams,
                    "delegate_sizing": False,
                    "delivery_method": pricing.delivery_method,
                    "fulfillment_mode": pricing.fulfillment_mode,
                    "shipping_location": pricing.shipping_location or "",
                    "base_cost": price_order(pricing).base_cost,
                    "discount_code_id": None,
                    "discount_applied": Decimal("0.00"),
                    "final_amount": amount,
                    "quoted_price": amount,
                    "status": OrderStatus.PENDING,
                }
            )
        except DatabaseError as exc:
            logger.exception("order.insert_failed", user_id=dto.user_id)
            raise OrderStorageError("Could not save the order.") from exc

        logger.info(
            "order.admin_created", order_id=str(order.id), user_id=dto.user_id
        )
        self._publish(
            OrderCreated(
                aggregate_id=order.id,
                user_id=order.user_id,
                final_amount=order.final_amount,
            )
        )
        return order

    def confirm_order(self, order_id: str) -> Order:
        return self.update_status(order_id, OrderStatus.CONFIRMED)

    def complete_order(self, order_id: str) -> Order:
        return self.update_status(order_id, OrderStatus.COMPLETED)

    def cancel_order(self, order_id: str) -> Order:
        return self.update_status(order_id, OrderStatus.CANCELLED)

    @transaction.atomic
    def update_status(self, order_id: str, new_status: str) -> Order:
        """Move an order to ``new_status``.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: unknown status, or cancelling an order that
                is already completed or cancelled.
        """
        if new_status not in OrderStatus.values:
            raise InvalidOrderStatus(f"Unknown order status {new_status!r}.")

        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        old_status = order.status
        log = logger.bind(
            order_id=str(order_id), current_status=old_status, new_status=new_status
        )
        if new_status == OrderStatus.CANCELLED and old_status not in CANCELLABLE_STATES:
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(f"Cannot cancel order in status {old_status}.")

        order = self._order_repo.update(order_id, {"status": new_status})
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log.info("order.status_updated")
        if new_status == OrderStatus.CANCELLED:
            self._publish(OrderCancelled(aggregate_id=order.id, old_status=old_status))
        else:
            self._publish(
                OrderStatusChanged(
                    aggregate_id=order.id, old_status=old_status, new_status=new_status
                )
            )
        return order

    def update_final_amount(self, order_id: str, amount: Any) -> Order:
        """Admin override of the amount the customer pays."""
        return self._override_amount(order_id, "final_amount", amount)

    def update_discount_applied(self, order_id: str, amount: Any) -> Order:
        """Admin override of the recorded discount (``final_amount`` untouched)."""
        return self._override_amount(order_id, "discount_applied", amount)

    @transaction.atomic
    def delete_order(self, order_id: str) -> None:
        """Raises ``OrderNotFound`` if there is nothing to delete."""
        order = self._order_repo.get_by_id(order_id)
        if not order or not self._order_repo.delete(order_id):
            raise OrderNotFound(f"Order {order_id} not found.")
        logger.info("order.removed", order_id=str(order_id))
        self._publish(OrderDeleted(aggregate_id=order.id))

    def delete_user_orders(self, user_id: int) -> int:
        return self._order_repo.delete_for_user(user_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """All orders, newest first, optionally filtered."""
        return self._order_repo.list(filters)

    def list_user_orders(self, user_id: int, state: Optional[str] = None) -> List[Order]:
        """Orders of one user, newest first.

        ``state`` is ``"active"`` (pending or confirmed), ``"completed"`` or
        ``None`` for everything.
        """
        filters: Dict[str, Any] = {"user_id": user_id}
        if state in ORDER_STATE_LOOKUPS:
            filters.update(ORDER_STATE_LOOKUPS[state])
        elif state is not None:
            raise InvalidOrderData(
                "Invalid order state filter.",
                [f"state: must be '{ORDER_STATE_ACTIVE}' or '{ORDER_STATE_COMPLETED}'"],
            )
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _order_fields(
        self,
        dto: SubmitOrderDTO,
        pricing: PricingInput,
        price: PriceBreakdown,
        discount: Optional[DiscountDescriptor],
    ) -> Dict[str, Any]:
        return {
            "user_id": dto.user_id,
            "model_name": dto.model_name,
            "description": dto.description.strip() or dto.summary(),
            "material": pricing.material,
            "weight_grams": pricing.weight_grams,
            "delegate_sizing": pricing.delegate_sizing,
            "delivery_method": pricing.delivery_method,
            "fulfillment_mode": pricing.fulfillment_mode,
            "shipping_location": pricing.shipping_location or "",
            "base_cost": price.base_cost,
            "discount_code_id": discount.id if discount else None,
            "discount_applied": price.discount_applied,
            "final_amount": price.final_amount,
            "quoted_price": dto.quoted_price,
            "status": OrderStatus.PENDING,
        }

    def _redeem_discount(
        self,
        order: Order,
        discount: DiscountDescriptor,
        pricing: PricingInput,
        log: Any,
    ) -> Order:
        log = log.bind(order_id=str(order.id), discount_code_id=str(discount.id))
        try:
            claimed = self._discounts.claim_use(discount.id)
        except DatabaseError:
            log.exception("discount.increment_failed")
            return order

        if claimed:
            log.info("discount.redeemed", code=discount.code)
            return order

        # The last use went to a concurrent order after this one was priced.
        log.warning("discount.claim_lost", code=discount.code)
        full_price = price_order(pricing)
        repriced = self._order_repo.update(
            str(order.id),
            {
                "discount_code_id": None,
                "discount_applied": full_price.discount_applied,
                "final_amount": full_price.final_amount,
            },
        )
        return repriced or order

    @transaction.atomic
    def _override_amount(self, order_id: str, field: str, amount: Any) -> Order:
        try:
            value = AmountOverrideDTO(amount=amount).amount
        except PydanticValidationError as exc:
            raise InvalidOrderData.from_pydantic(exc, "Invalid amount.") from exc

        order = self._order_repo.update(order_id, {field: round_currency(value)})
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        logger.info("order.amount_overridden", order_id=str(order_id), field=field)
        return order

    @staticmethod
    def _publish(event: DomainEvent) -> None:
        """Hand ``event`` to the bus once the surrounding transaction commits.

        Outside an atomic block (in-memory storage driven directly) there is
        nothing to wait for, so the event goes out immediately.
        """
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(lambda: event_bus.publish(event))
        else:
            event_bus.publish(event)
