"""
Order Traffic Simulation Script

Simulates concurrent customers and walk-in order entry against a running
Restodesk API, then prints the resulting sales figures.
Run from project root: python scripts/simulate.py

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any, Optional

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:8001"
TOTAL_ORDERS = 30
DEFAULT_RESTAURANT = "user-dave-admin"
DEMO_PASSWORD = "password123"

# Sample data for random customers
FIRST_NAMES = ["John", "Jane", "Mike", "Sarah", "Tom", "Emma", "David", "Lisa", "Chris", "Amy"]
NOTES = [None, None, "No onions", "Extra cheese", "Well done", "Spicy", "No ice"]
PAYMENT_METHODS = ["cash", "transfer", "card"]


def generate_random_customer() -> dict[str, str]:
    """Generate a fresh customer registration payload."""
    first = random.choice(FIRST_NAMES)
    return {
        "username": f"{first.lower()}_{random.randint(10000, 99999)}",
        "password": DEMO_PASSWORD,
        "contact": f"555-{random.randint(100, 999)}-{random.randint(1000, 9999)}",
    }


def pick_random_items(menu_ids: list[str]) -> list[str]:
    """Menu item ids to add to a cart, repeats allowed."""
    return [random.choice(menu_ids) for _ in range(random.randint(1, 5))]


async def fetch_menu_ids(client: httpx.AsyncClient, restaurant: str) -> list[str]:
    response = await client.get(f"{API_BASE_URL}/api/menu", params={"restaurant": restaurant})
    response.raise_for_status()
    menu = response.json()
    ids = [item["id"] for item in menu["specials"]]
    for group in menu["categories"]:
        ids.extend(item["id"] for item in group["items"])
    return ids


async def fill_cart(client: httpx.AsyncClient, headers: dict[str, str], item_ids: list[str]) -> None:
    for item_id in item_ids:
        response = await client.post(
            f"{API_BASE_URL}/api/cart/items",
            json={"menu_item_id": item_id},
            headers=headers,
        )
        response.raise_for_status()

    note = random.choice(NOTES)
    if note:
        await client.put(
            f"{API_BASE_URL}/api/cart/items/{item_ids[0]}/notes",
            json={"notes": note},
            headers=headers,
        )


# =============================================================================
# CUSTOMER SIMULATION
# =============================================================================

async def send_customer_order(
    client: httpx.AsyncClient,
    order_num: int,
    restaurant: str,
    menu_ids: list[str],
) -> dict[str, Any]:
    """Register a new customer through the restaurant link and check out a cart."""
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/auth/register",
            json={**generate_random_customer(), "restaurant": restaurant},
            timeout=30.0,
        )
        response.raise_for_status()
        headers = {"X-Session-Token": response.json()["token"]}

        await fill_cart(client, headers, pick_random_items(menu_ids))
        response = await client.post(
            f"{API_BASE_URL}/api/orders",
            json={"payment_method": random.choice(PAYMENT_METHODS)},
            headers=headers,
            timeout=30.0,
        )
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 200:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data.get("id"),
                "total": data.get("total"),
                "time": elapsed,
                "mode": "customer",
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
            "mode": "customer",
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
            "mode": "customer",
        }


# =============================================================================
# WALK-IN SIMULATION
# =============================================================================

async def send_walk_in_order(
    client: httpx.AsyncClient,
    order_num: int,
    admin_username: str,
    menu_ids: list[str],
) -> dict[str, Any]:
    """Admin order entry for a walk-in, each on its own admin session."""
    start_time = time.time()

    try:
        response = await client.post(
            f"{API_BASE_URL}/api/auth/login",
            json={"username": admin_username, "password": DEMO_PASSWORD},
            timeout=30.0,
        )
        response.raise_for_status()
        headers = {"X-Session-Token": response.json()["token"]}

        await fill_cart(client, headers, pick_random_items(menu_ids))
        response = await client.post(f"{API_BASE_URL}/api/orders", json={}, headers=headers, timeout=30.0)
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 200:
            data = response.json()
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data.get("id"),
                "total": data.get("total"),
                "time": elapsed,
                "mode": "walk-in",
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
            "mode": "walk-in",
        }
    except httpx.HTTPError as e:
        elapsed = round(time.time() - start_time, 3)
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": elapsed,
            "mode": "walk-in",
        }


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def print_sales(client: httpx.AsyncClient, admin_username: str) -> None:
    response = await client.post(
        f"{API_BASE_URL}/api/auth/login",
        json={"username": admin_username, "password": DEMO_PASSWORD},
    )
    response.raise_for_status()
    headers = {"X-Session-Token": response.json()["token"]}

    sales = (await client.get(f"{API_BASE_URL}/api/admin/sales", headers=headers)).json()
    today = sales["today"]
    print(f"\n🧾 Today: ${today['total']:.2f} "
          f"(walk-in ${today['walk_in_total']:.2f}, registered ${today['registered_total']:.2f})")
    print("   Last 7 days: " + ", ".join(f"{d['label']} ${d['total']:.2f}" for d in sales["weekly"]))
    for rank, stats in enumerate(sales["top_spenders"], start=1):
        print(f"   #{rank} {stats['username']}: ${stats['total_spent']:.2f} over {stats['order_count']} order(s)")


async def run_simulation(
    mode: str = "both",
    num_orders: int = TOTAL_ORDERS,
    restaurant: str = DEFAULT_RESTAURANT,
    admin_username: str = "dave",
) -> dict[str, Any]:
    """
    Run the traffic simulation.

    Args:
        mode: "customer", "walk-in", or "both"
        num_orders: Number of orders to simulate
        restaurant: Restaurant id customers arrive from
        admin_username: Admin of that restaurant taking walk-in orders
    """
    print("=" * 70)
    print("🔥 ORDER TRAFFIC SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL} (restaurant {restaurant})")
    print(f"🔧 Mode: {mode}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient() as client:
        menu_ids = await fetch_menu_ids(client, restaurant)

        tasks = []
        for i in range(num_orders):
            walk_in = mode == "walk-in" or (mode == "both" and i % 2 == 1)
            if walk_in:
                tasks.append(send_walk_in_order(client, i + 1, admin_username, menu_ids))
            else:
                tasks.append(send_customer_order(client, i + 1, restaurant, menu_ids))
        results = await asyncio.gather(*tasks)

        total_time = round(time.time() - start_time, 2)

        # Analyze results
        successful = [r for r in results if r["success"]]
        failed = [r for r in results if not r["success"]]

        print("\n" + "=" * 70)
        print("📊 SIMULATION RESULTS")
        print("=" * 70)

        print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
        print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
        print(f"⏱️  Total Time: {total_time}s")

        for label in ("customer", "walk-in"):
            subset = [r for r in results if r["mode"] == label]
            if subset:
                print(f"   {label}: {len([r for r in subset if r['success']])}/{len(subset)} successful")

        if successful:
            avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
            total_revenue = sum(r.get("total", 0) for r in successful)
            print("\n📈 Performance Metrics:")
            print(f"   Average Response: {avg_time}s")
            print(f"   Fastest: {min(r['time'] for r in successful)}s")
            print(f"   Slowest: {max(r['time'] for r in successful)}s")
            print(f"   💰 Total Revenue: ${total_revenue:.2f}")

        if failed:
            print("\n⚠️  Failed Order Details (showing first 5):")
            for f in failed[:5]:
                print(f"   Order #{f['order_num']} [{f['mode']}]: {f.get('error', 'Unknown error')}")

        await print_sales(client, admin_username)

    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


async def check_health(restaurant: Optional[str] = None) -> bool:
    """Pre-flight check: the API answers and the restaurant is open."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_BASE_URL}/health")
        except httpx.HTTPError as e:
            print(f"   ❌ API unreachable: {e}")
            return False
        if response.status_code != 200:
            print(f"   ❌ Failed: {response.text}")
            return False
        print(f"   ✅ Status: {response.json().get('status')}")

        tenant = (await client.get(f"{API_BASE_URL}/api/tenant", params={"restaurant": restaurant})).json()
        if tenant["is_suspended"]:
            print(f"   ❌ Restaurant {restaurant} is suspended or unknown")
            return False
        print(f"   🍽️ Restaurant: {tenant['business_name']}")
    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Order Traffic Simulation Script")
    parser.add_argument("--customers", action="store_true", help="Customer orders only")
    parser.add_argument("--walk-ins", action="store_true", help="Walk-in orders only")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--restaurant", default=DEFAULT_RESTAURANT, help="Restaurant id")
    parser.add_argument("--admin", default="dave", help="Admin username of that restaurant")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url.rstrip("/")

    if args.customers:
        mode = "customer"
    elif args.walk_ins:
        mode = "walk-in"
    else:
        mode = "both"

    if not asyncio.run(check_health(args.restaurant)):
        print("\n❌ Pre-flight check failed. Start the API with: python -m restodesk.main")
        sys.exit(1)

    asyncio.run(run_simulation(
        mode=mode,
        num_orders=args.orders,
        restaurant=args.restaurant,
        admin_username=args.admin,
    ))
