"""
Concurrency Simulation Script

Registers a customer, logs in, and fires many concurrent orders at a
running server, then checks the order summary against the sum of the
returned totals.
Run from project root (server and seed data required):
    python scripts/seed.py
    uvicorn ordering_api.main:app --port 3000
    python scripts/simulate.py --orders 50

Version: 1.0.0
"""

import asyncio
import sys
import os
import random
import time
import uuid
import argparse
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
TOTAL_ORDERS = 50

FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis", "Wilson", "Taylor"]
STREETS = ["Main St", "Broadway", "5th Avenue", "Park Ave", "Madison Ave", "Lexington Ave", "Amsterdam Ave"]


def generate_random_customer() -> dict[str, str]:
    """Generate a registration payload with a unique username."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    suffix = uuid.uuid4().hex[:8]
    return {
        "fullname": f"{first} {last}",
        "address": f"{random.randint(1, 999)} {random.choice(STREETS)}",
        "phone": f"555-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
        "email": f"{first.lower()}.{suffix}@example.com",
        "username": f"{first.lower()}_{suffix}",
        "password": uuid.uuid4().hex,
    }


async def authenticate(client: httpx.AsyncClient) -> dict[str, str]:
    """Register a fresh customer and return bearer headers."""
    customer = generate_random_customer()

    response = await client.post(f"{API_BASE_URL}/auth/register", json=customer)
    response.raise_for_status()
    print(f"   ✅ Registered customer #{response.json()['userId']} ({customer['username']})")

    response = await client.post(
        f"{API_BASE_URL}/auth/login",
        json={"username": customer["username"], "password": customer["password"]},
    )
    response.raise_for_status()
    return {"Authorization": f"Bearer {response.json()['token']}"}


async def send_order(
    client: httpx.AsyncClient,
    headers: dict[str, str],
    menu_ids: list[int],
    order_num: int,
) -> dict[str, Any]:
    """Place a single random order."""
    payload = {"menu_id": random.choice(menu_ids), "quantity": random.randint(1, 3)}
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/orders",
            json=payload,
            headers=headers,
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 201:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data.get("orderId"),
                "total": data.get("total_price"),
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
        }


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the simulation.

    Args:
        num_orders: Number of concurrent orders to place
    """
    print("=" * 70)
    print("🔥 ORDER SIMULATION - CONCURRENCY TEST")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        headers = await authenticate(client)

        response = await client.get(f"{API_BASE_URL}/menus", headers=headers)
        response.raise_for_status()
        menu_ids = [m["menu_id"] for m in response.json()]
        if not menu_ids:
            print("\n❌ No menu items found. Run scripts/seed.py first.")
            return {"total": num_orders, "successful": 0, "failed": num_orders}

        start_time = time.time()
        tasks = [send_order(client, headers, menu_ids, i + 1) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)
        total_time = round(time.time() - start_time, 2)

        response = await client.get(f"{API_BASE_URL}/orders/summary", headers=headers)
        response.raise_for_status()
        summary = response.json()

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        placed_total = sum(Decimal(str(r["total"])) for r in successful)
        summary_total = Decimal(str(summary["total_amount"]))

        print("\n📈 Performance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"\n💰 Placed Total: ${placed_total:.2f}")
        print(f"   Summary Total: ${summary_total:.2f} ({summary['customer_name']})")
        if placed_total == summary_total:
            print("   ✅ Summary matches placed orders")
        else:
            print("   ⚠️ Summary does NOT match placed orders")

    if failed:
        print("\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    args = parser.parse_args()

    asyncio.run(run_simulation(num_orders=args.orders))
