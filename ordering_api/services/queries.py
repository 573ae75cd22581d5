"""
Query Layer

Read-only listings. Each call runs one query and materializes the full
result; there is no pagination.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ordering_api.models import Customer, MenuItem, Restaurant


# Public customer columns. The password hash is deliberately absent.
CUSTOMER_PUBLIC_COLUMNS = (
    Customer.id,
    Customer.username,
    Customer.fullname,
    Customer.address,
    Customer.email,
    Customer.phone,
)


class QueryLayer:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_menu(self) -> list[dict[str, Any]]:
        """Every menu item joined with its restaurant."""
        query = (
            select(
                MenuItem.id.label("menu_id"),
                MenuItem.menu_name,
                MenuItem.description,
                MenuItem.price,
                MenuItem.category,
                Restaurant.id.label("restaurant_id"),
                Restaurant.restaurant_name,
                Restaurant.address.label("restaurant_address"),
                Restaurant.phone.label("restaurant_phone"),
                Restaurant.menu_description,
            )
            .join(Restaurant, MenuItem.restaurant_id == Restaurant.id)
            .order_by(MenuItem.id)
        )
        result = await self.db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    async def list_customers(self) -> list[dict[str, Any]]:
        """All customers, public fields only."""
        result = await self.db.execute(select(*CUSTOMER_PUBLIC_COLUMNS).order_by(Customer.id))
        return [dict(row) for row in result.mappings().all()]
