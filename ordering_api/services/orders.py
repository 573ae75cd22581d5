"""
Order Engine

Places single-item orders and summarizes a customer's spend.

The unit price is read from the menu and the total computed with ``Decimal``
inside the same session transaction as the insert. Both are stored on the
order, so later menu price changes never alter existing orders.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ordering_api.core.exceptions import NotFoundError, ValidationError
from ordering_api.models import Customer, MenuItem, Order

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# Column limits: Integer ids/quantity, Numeric(12, 2) total
MAX_INT = 2**31 - 1
MAX_TOTAL = Decimal("9999999999.99")


@dataclass(frozen=True)
class PlacedOrder:
    """Result of a successful order placement."""
    order_id: int
    total_price: Decimal


@dataclass(frozen=True)
class OrderSummary:
    """
    Total spend of one customer.

    A customer without orders gets the empty summary ``("", 0)``.
    """
    customer_name: str
    total_amount: Decimal

    @classmethod
    def empty(cls) -> "OrderSummary":
        return cls(customer_name="", total_amount=Decimal("0"))


def calculate_total(unit_price: Decimal, quantity: int) -> Decimal:
    """Exact line total, rounded to cents like the stored column."""
    return (Decimal(unit_price) * quantity).quantize(CENTS)


class OrderEngine:
    """
    Order placement and per-customer aggregation.

    Attributes:
        db: Session for the current unit of work
        initial_status: Status given to new orders
    """

    def __init__(self, db: AsyncSession, initial_status: str = "Processing"):
        self.db = db
        self.initial_status = initial_status

    async def place_order(
        self,
        customer_id: int,
        menu_id: Optional[int],
        quantity: Optional[int],
    ) -> PlacedOrder:
        """
        Place an order for ``quantity`` units of a menu item.

        The restaurant is derived from the menu item; clients cannot choose it.

        Raises:
            ValidationError: menu_id or quantity missing, or quantity <= 0,
                or a value does not fit its column
            NotFoundError: menu_id does not exist (nothing is written)
        """
        if not menu_id or quantity is None:
            raise ValidationError("Missing menu_id or quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")
        if menu_id > MAX_INT or quantity > MAX_INT:
            raise ValidationError("menu_id or quantity out of range")

        result = await self.db.execute(select(MenuItem).where(MenuItem.id == menu_id))
        menu = result.scalar_one_or_none()

        if menu is None:
            raise NotFoundError("Menu not found")

        unit_price = Decimal(menu.price)
        total = calculate_total(unit_price, quantity)
        if total > MAX_TOTAL:
            raise ValidationError("Order total too large")

        order = Order(
            customer_id=customer_id,
            restaurant_id=menu.restaurant_id,
            menu_id=menu.id,
            quantity=quantity,
            price=unit_price,
            total=total,
            order_status=self.initial_status,
        )
        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} placed by customer #{customer_id}: {quantity} x menu #{menu.id} = {total}")

        return PlacedOrder(order_id=order.id, total_price=total)

    async def summarize(self, customer_id: int) -> OrderSummary:
        """Sum of order totals for a customer, with the customer's name."""
        query = (
            select(Customer.fullname, func.sum(Order.total))
            .join(Customer, Order.customer_id == Customer.id)
            .where(Order.customer_id == customer_id)
            .group_by(Customer.id, Customer.fullname)
        )
        result = await self.db.execute(query)
        row = result.first()

        if row is None:
            return OrderSummary.empty()

        name, total = row
        return OrderSummary(customer_name=name, total_amount=Decimal(total or 0))
