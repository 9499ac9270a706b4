import asyncio
from datetime import datetime, timedelta, timezone

from foodrescue.core.db import DONORS, PICKUP_REQUESTS, USERS, get_client, get_db
from foodrescue.core.security import hash_password
from foodrescue.repos.mongo import MongoRepo

DEMO_EMAIL = "demo-bakery@example.com"


async def main():
    db = get_db()
    repo = MongoRepo(db)

    # wipe demo rows if they exist
    old = await db[USERS].find_one({"email": DEMO_EMAIL})
    if old:
        await db[PICKUP_REQUESTS].delete_many({"donor_id": old["_id"]})
        await db[DONORS].delete_one({"_id": old["_id"]})
        await db[USERS].delete_one({"_id": old["_id"]})

    user = await repo.create_user(DEMO_EMAIL, hash_password("demo-pass-123"), "donor")
    address = {"street": "12 Baker St", "city": "Springfield", "state": "IL", "zip": "62701"}
    await repo.create_donor(user["id"], {
        "email": DEMO_EMAIL,
        "business_name": "Demo Bakery",
        "contact_name": "Pat Baker",
        "phone": "2175550100",
        "address": address,
        "business_type": "bakery",
    })

    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).replace(hour=0, minute=0, second=0, microsecond=0)
    req = await repo.create_pickup({
        "donor_id": user["id"],
        "food_description": "Day-old bread and pastries",
        "estimated_weight": 30.0,
        "pickup_address": address,
        "pickup_date": tomorrow,
        "pickup_time_window": "evening",
        "contact_on_arrival": "Ring the back door bell",
    })
    print(f"Seeded: donor {user['id']} ({DEMO_EMAIL}), pickup request {req['id']}")
    get_client().close()

if __name__ == "__main__":
    asyncio.run(main())
