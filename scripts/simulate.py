"""
Concurrency Simulation Script

Drives a running server with concurrent customers placing orders across
cities, then has the seeded administrators advance the orders they can
see and reports what each of them saw.

Run from project root (server on port 3000):
    python scripts/simulate.py --orders 40

Author: Mumma Tiffin Team
Version: 1.0.0
"""

import argparse
import asyncio
import random
import sys
import time
import uuid
from datetime import date, datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_ORDERS = 40

ADMINS = {
    "super": {"email": "admin@mummatiffin.com", "password": "admin123"},
    "delhi": {"email": "manager@mummatiffin.com", "password": "manager123"},
}

FIRST_NAMES = ["Asha", "Ravi", "Meera", "Arjun", "Kavya", "Rohan", "Isha", "Dev"]
CITIES = ["Delhi", "Pune", "Mumbai", None]  # None: address without a city
LINES = ["12 MG Road", "4 FC Road", "7 Linking Road", "21 Park Street"]
STATUSES = ["preparing", "out for delivery", "delivered"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def generate_order(menu: list[dict[str, Any]]) -> dict[str, Any]:
    """Random cart from the public menu with a random delivery city."""
    picks = random.sample(menu, k=random.randint(1, min(3, len(menu))))
    items = [{"id": m["id"], "price": m["price"], "qty": random.randint(1, 2)} for m in picks]
    address: dict[str, Any] = {"name": "Home", "line": random.choice(LINES)}
    city = random.choice(CITIES)
    if city:
        address["city"] = city

    return {
        "items": items,
        "total": sum(i["price"] * i["qty"] for i in items),
        "address": address,
        "date": date.today().isoformat(),
        "time": random.choice(["08:00", "13:00", "19:30"]),
        "meal": picks[0]["meal"],
    }


async def place_order(
    client: httpx.AsyncClient,
    order_num: int,
    menu: list[dict[str, Any]],
) -> dict[str, Any]:
    """Register a fresh customer and place one order."""
    start_time = time.time()
    email = f"{random.choice(FIRST_NAMES).lower()}.{uuid.uuid4().hex[:8]}@example.com"

    try:
        response = await client.post(
            "/api/register", json={"email": email, "password": "simulate", "name": email}
        )
        response.raise_for_status()
        token = response.json()["token"]

        payload = generate_order(menu)
        response = await client.post("/api/orders", json=payload, headers=bearer(token))
        elapsed = round(time.time() - start_time, 3)

        if response.status_code == 200:
            return {
                "order_num": order_num,
                "success": True,
                "order_id": response.json().get("orderId"),
                "city": payload["address"].get("city", "All"),
                "total": payload["total"],
                "time": elapsed,
            }
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }


async def advance_visible_orders(client: httpx.AsyncClient, name: str) -> dict[str, Any]:
    """Log in as an administrator and move every visible order to a random status."""
    response = await client.post("/api/admin/login", json=ADMINS[name])
    response.raise_for_status()
    token = response.json()["token"]
    city = response.json()["admin"]["city"]

    orders = (await client.get("/api/admin/orders", headers=bearer(token))).json()["orders"]
    updates = [
        client.put(
            f"/api/admin/orders/{o['id']}",
            json={"status": random.choice(STATUSES)},
            headers=bearer(token),
        )
        for o in orders
    ]
    responses = await asyncio.gather(*updates)

    return {
        "admin": name,
        "city": city,
        "visible": len(orders),
        "updated": sum(1 for r in responses if r.status_code == 200),
    }


async def run_simulation(num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    print("=" * 70)
    print("🔥 CONCURRENCY SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        health = await client.get("/health")
        if health.status_code != 200:
            print(f"❌ Server not healthy: {health.text}")
            return {"success": False}

        menu = (await client.get("/api/menu")).json()["menu"]
        if not menu:
            print("❌ Menu is empty; nothing to order")
            return {"success": False}

        print("\n🚀 Placing orders...\n")
        results = await asyncio.gather(*[place_order(client, i + 1, menu) for i in range(num_orders)])

        print("🛠  Administrators advancing orders...\n")
        admin_reports = [await advance_visible_orders(client, name) for name in ADMINS]

        notifications = (await client.get("/api/notifications", params={"limit": 200})).json()["notifications"]

    total_time = round(time.time() - start_time, 2)
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)
    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    by_city: dict[str, int] = {}
    for r in successful:
        by_city[r["city"]] = by_city.get(r["city"], 0) + 1
    print(f"\n🏙  Orders by city: {by_city}")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"   Average Response: {avg_time}s")
        print(f"   💰 Total Value: ₹{sum(r['total'] for r in successful)}")

    print("\n👮 Administrator views:")
    for report in admin_reports:
        print(
            f"   {report['admin']:<6} ({report['city']}): "
            f"{report['visible']} visible, {report['updated']} updated"
        )

    print(f"\n🔔 Notifications in feed: {len(notifications)}")

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
        "admins": admin_reports,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrency Simulation Script")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    parser.add_argument("--url", default=API_BASE_URL, help="Server base URL")
    args = parser.parse_args()

    API_BASE_URL = args.url
    asyncio.run(run_simulation(args.orders))
