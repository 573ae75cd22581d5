"""
Tests for the read-only menu and customer listings.
"""

from decimal import Decimal

from ordering_api.models import Customer
from ordering_api.services.queries import QueryLayer


async def test_list_menu_joins_restaurant(db, restaurant):
    menu = await QueryLayer(db).list_menu()

    assert [item["menu_name"] for item in menu] == ["Margherita", "Garlic Bread", "Espresso"]
    first = menu[0]
    assert first["price"] == Decimal("12.35")
    assert first["restaurant_id"] == restaurant.id
    assert first["restaurant_name"] == "Pizza Palace"
    assert first["restaurant_address"] == "12 Main St"
    assert first["restaurant_phone"] == "555-100-2000"
    assert first["menu_description"] == "Wood-fired pizza"


async def test_list_menu_is_restartable(db, restaurant):
    queries = QueryLayer(db)
    assert await queries.list_menu() == await queries.list_menu()


async def test_list_menu_empty(db):
    assert await QueryLayer(db).list_menu() == []


async def test_list_customers_never_exposes_password(db):
    for username in ("alice", "bob"):
        db.add(Customer(
            fullname=username.title(),
            address="1 Elm St",
            phone="555-000-0000",
            email=f"{username}@example.com",
            username=username,
            password="$2b$04$hash-for-" + username,
        ))
    await db.commit()

    customers = await QueryLayer(db).list_customers()

    assert [c["username"] for c in customers] == ["alice", "bob"]
    for customer in customers:
        assert "password" not in customer
        assert set(customer) == {"id", "username", "fullname", "address", "email", "phone"}
        assert not any("$2b$" in str(value) for value in customer.values())
