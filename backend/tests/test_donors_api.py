import pytest
from httpx import AsyncClient

from conftest import DONOR_PROFILE

pytestmark = pytest.mark.anyio


async def test_complete_profile_after_signup(test_client: AsyncClient, signup):
    headers, principal_id = await signup("late@example.com")
    assert (await test_client.get("/api/donors/me", headers=headers)).status_code == 404

    r = await test_client.post("/api/donors/me", headers=headers, json=DONOR_PROFILE)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["id"] == principal_id
    assert body["businessType"] == "restaurant"
    assert body["address"]["zip"] == "62701"

    again = await test_client.post("/api/donors/me", headers=headers, json=DONOR_PROFILE)
    assert again.status_code == 409


async def test_profile_validation(test_client: AsyncClient, signup):
    headers, _ = await signup("bad@example.com")
    r = await test_client.post("/api/donors/me", headers=headers, json={**DONOR_PROFILE, "phone": "555"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid phone"

    r = await test_client.post("/api/donors/me", headers=headers, json={**DONOR_PROFILE, "businessType": "farm"})
    assert r.json()["message"] == "Invalid business type"


async def test_update_settings(test_client: AsyncClient, donor):
    r = await test_client.patch("/api/donors/me", headers=donor["headers"],
                                json={"contactName": "Alex Kim", "phone": "5559876543"})
    assert r.status_code == 200, r.text
    assert r.json()["contactName"] == "Alex Kim"
    assert r.json()["businessName"] == "Corner Bistro"

    me = (await test_client.get("/api/donors/me", headers=donor["headers"])).json()
    assert me["phone"] == "5559876543"


async def test_update_without_profile_is_not_found(test_client: AsyncClient, signup):
    headers, _ = await signup("noprofile@example.com")
    r = await test_client.patch("/api/donors/me", headers=headers, json={"contactName": "X"})
    assert r.status_code == 404


async def test_admin_lists_and_inspects_donors(test_client: AsyncClient, donor, admin_headers, pickup_payload):
    await test_client.post("/api/pickup-requests", headers=donor["headers"], json=pickup_payload(donor["id"]))

    listed = (await test_client.get("/api/donors", headers=admin_headers)).json()
    assert [d["id"] for d in listed] == [donor["id"]]

    by_email = (await test_client.get("/api/donors", headers=admin_headers,
                                      params={"email": "BISTRO@example.com"})).json()
    assert [d["id"] for d in by_email] == [donor["id"]]

    detail = (await test_client.get(f"/api/donors/{donor['id']}", headers=admin_headers)).json()
    assert detail["donor"]["businessName"] == "Corner Bistro"
    assert detail["stats"] == {"totalPounds": 0.0, "totalRescues": 0}
    assert len(detail["requests"]) == 1
    assert "actualWeight" not in detail["requests"][0]

    assert (await test_client.get("/api/donors/nobody", headers=admin_headers)).status_code == 404


async def test_donor_cannot_use_admin_views(test_client: AsyncClient, donor):
    r = await test_client.get("/api/donors", headers=donor["headers"])
    assert r.status_code == 403
    assert r.json()["message"] == "Admin access required"
    assert (await test_client.get(f"/api/donors/{donor['id']}", headers=donor["headers"])).status_code == 403


async def _donate(client, donor_headers, donor_id, admin_headers, pickup_payload, estimate, actual=None):
    r = await client.post("/api/pickup-requests", headers=donor_headers,
                          json=pickup_payload(donor_id, estimatedWeight=estimate))
    rid = r.json()["id"]
    await client.post(f"/api/pickup-requests/{rid}/confirm", headers=admin_headers)
    if actual is not None:
        await client.post(f"/api/pickup-requests/{rid}/complete", headers=admin_headers, json={"actualWeight": actual})
    return rid


async def test_admin_donor_list_totals_search_and_sort(test_client: AsyncClient, signup, admin_headers, pickup_payload):
    bistro_headers, bistro = await signup("bistro@example.com", profile=DONOR_PROFILE)
    bakery_headers, bakery = await signup("hello@apple-bakery.com", profile={
        **DONOR_PROFILE, "businessName": "apple bakery", "contactName": "Ann Lee", "businessType": "bakery"})
    _, idle = await signup("idle@example.com", profile={
        **DONOR_PROFILE, "businessName": "Zest Grocer", "contactName": "Max Ode", "businessType": "grocery"})

    await _donate(test_client, bistro_headers, bistro, admin_headers, pickup_payload, 50, actual=45)
    await _donate(test_client, bistro_headers, bistro, admin_headers, pickup_payload, 99)   # confirmed only
    await _donate(test_client, bakery_headers, bakery, admin_headers, pickup_payload, 10, actual=12)

    async def listing(**params):
        r = await test_client.get("/api/donors", headers=admin_headers, params=params)
        assert r.status_code == 200, r.text
        return r.json()

    recent = await listing()
    assert [d["id"] for d in recent] == [bakery, bistro, idle]
    by_id = {d["id"]: d for d in recent}
    assert by_id[bistro]["totalDonated"] == 45.0
    assert by_id[bakery]["totalDonated"] == 12.0
    assert by_id[bakery]["lastDonationDate"]
    assert by_id[idle]["totalDonated"] == 0.0
    assert by_id[idle]["lastDonationDate"] is None

    assert [d["id"] for d in await listing(sort="name")] == [bakery, bistro, idle]
    assert [d["id"] for d in await listing(sort="donated")] == [bistro, bakery, idle]

    assert [d["id"] for d in await listing(q="BAKERY")] == [bakery]
    assert [d["id"] for d in await listing(q="sam riv")] == [bistro]
    assert [d["id"] for d in await listing(q="idle@", sort="name")] == [idle]

    r = await test_client.get("/api/donors", headers=admin_headers, params={"sort": "oldest"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid sort"
