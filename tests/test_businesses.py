"""Tests for business, settings, staff, service and user management endpoints."""

import pytest


@pytest.mark.asyncio
async def test_super_admin_creates_and_lists_businesses(client, super_headers):
    resp = await client.post("/api/v1/businesses/", json={
        "name": "Fade Factory",
        "slug": "Fade-Factory",
        "phone": "+15551112222",
        "timezone": "Europe/London",
    }, headers=super_headers)
    assert resp.status_code == 201, resp.text
    biz = resp.json()
    assert biz["slug"] == "fade-factory"
    assert biz["is_active"] is True

    resp2 = await client.get("/api/v1/businesses/", headers=super_headers)
    assert resp2.status_code == 200
    assert [b["slug"] for b in resp2.json()] == ["fade-factory"]


@pytest.mark.asyncio
async def test_duplicate_slug_conflicts(client, super_headers, business):
    resp = await client.post("/api/v1/businesses/", json={
        "name": "Copycat", "slug": "luxe-salon", "phone": "+15551112222",
    }, headers=super_headers)
    assert resp.status_code == 409

    resp = await client.post("/api/v1/businesses/", json={
        "name": "Copycat", "slug": " Luxe-Salon ", "phone": "+15551112222",
    }, headers=super_headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_bad_timezone_and_slug_rejected(client, super_headers):
    resp = await client.post("/api/v1/businesses/", json={
        "name": "Somewhere", "slug": "somewhere", "phone": "+1555", "timezone": "Mars/Olympus",
    }, headers=super_headers)
    assert resp.status_code == 422

    resp = await client.post("/api/v1/businesses/", json={
        "name": "Somewhere", "slug": "has spaces", "phone": "+1555",
    }, headers=super_headers)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_business_admin_cannot_onboard_businesses(client, admin_headers):
    resp = await client.get("/api/v1/businesses/", headers=admin_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_super_admin_must_name_business(client, super_headers, business):
    resp = await client.get("/api/v1/businesses/me", headers=super_headers)
    assert resp.status_code == 400

    resp = await client.get(
        "/api/v1/businesses/me", params={"business_id": str(business.id)}, headers=super_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["slug"] == "luxe-salon"


@pytest.mark.asyncio
async def test_update_profile(client, admin_headers, business):
    resp = await client.patch("/api/v1/businesses/me", json={"name": "Luxe Salon & Spa"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Luxe Salon & Spa"
    assert resp.json()["slug"] == "luxe-salon"


@pytest.mark.asyncio
async def test_staff_cannot_change_settings(client, staff_headers, business):
    resp = await client.put("/api/v1/businesses/me/settings", json={}, headers=staff_headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_settings_round_trip(client, admin_headers, business):
    resp = await client.get("/api/v1/businesses/me/settings", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["hours"]["sun"] == {"open": "09:00", "close": "19:00", "closed": False}

    new_settings = {
        "hours": {"mon": {"open": "10:00", "close": "18:00"}, "tue": {"closed": True}},
        "notifications": {"sms_on_call": False},
    }
    resp = await client.put("/api/v1/businesses/me/settings", json=new_settings, headers=admin_headers)
    assert resp.status_code == 200
    saved = resp.json()
    assert saved["hours"]["mon"]["open"] == "10:00"
    assert saved["hours"]["tue"]["closed"] is True
    assert saved["hours"]["wed"]["closed"] is True
    assert saved["notifications"] == {"email_confirmation": True, "email_reminders": True, "sms_on_call": False}


@pytest.mark.asyncio
async def test_invalid_hours_rejected(client, admin_headers, business):
    resp = await client.put(
        "/api/v1/businesses/me/settings",
        json={"hours": {"mon": {"open": "18:00", "close": "09:00"}}},
        headers=admin_headers,
    )
    assert resp.status_code == 422

    resp = await client.put(
        "/api/v1/businesses/me/settings",
        json={"hours": {"mon": {"open": "9am", "close": "17:00"}}},
        headers=admin_headers,
    )
    assert resp.status_code == 422


class TestServices:
    @pytest.mark.asyncio
    async def test_crud(self, client, admin_headers, business):
        resp = await client.post("/api/v1/services/", json={
            "name": "Colour", "duration_minutes": 90, "price": 80,
        }, headers=admin_headers)
        assert resp.status_code == 201
        service_id = resp.json()["id"]

        resp = await client.patch(f"/api/v1/services/{service_id}", json={"price": 95.5}, headers=admin_headers)
        assert resp.json()["price"] == 95.5
        assert resp.json()["duration_minutes"] == 90

        resp = await client.delete(f"/api/v1/services/{service_id}", headers=admin_headers)
        assert resp.json()["is_active"] is False

        listed = await client.get("/api/v1/services/", headers=admin_headers)
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_reactivated_service_is_bookable_again(self, client, admin_headers, staff, service):
        from datetime import datetime, timedelta

        await client.delete(f"/api/v1/services/{service.id}", headers=admin_headers)
        page = await client.get("/api/v1/public/luxe-salon")
        assert page.json()["services"] == []

        resp = await client.patch(f"/api/v1/services/{service.id}", json={"is_active": True}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["is_active"] is True

        day = (datetime.utcnow() + timedelta(days=2)).date().isoformat()
        booking = await client.post("/api/v1/public/luxe-salon/appointments", json={
            "customer_name": "Sam", "customer_phone": "+15550000000",
            "service_id": str(service.id), "staff_id": str(staff.id),
            "appointment_date": day, "appointment_time": "10:00",
        })
        assert booking.status_code == 201

    @pytest.mark.asyncio
    async def test_invalid_values(self, client, admin_headers, business):
        resp = await client.post("/api/v1/services/", json={
            "name": "Free forever", "duration_minutes": 0,
        }, headers=admin_headers)
        assert resp.status_code == 422

        resp = await client.post("/api/v1/services/", json={
            "name": "Refund", "duration_minutes": 30, "price": -5,
        }, headers=admin_headers)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_null_update_rejected(self, client, admin_headers, service):
        resp = await client.patch(f"/api/v1/services/{service.id}", json={"duration_minutes": None}, headers=admin_headers)
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_staff_can_list_but_not_create(self, client, staff_headers, service):
        assert (await client.get("/api/v1/services/", headers=staff_headers)).status_code == 200
        resp = await client.post("/api/v1/services/", json={
            "name": "Shave", "duration_minutes": 15,
        }, headers=staff_headers)
        assert resp.status_code == 403


class TestStaff:
    @pytest.mark.asyncio
    async def test_create_with_services(self, client, admin_headers, service):
        resp = await client.post("/api/v1/staff/", json={
            "name": "Robin", "service_ids": [str(service.id)],
        }, headers=admin_headers)
        assert resp.status_code == 201
        staff_id = resp.json()["id"]

        services = await client.get(f"/api/v1/staff/{staff_id}/services", headers=admin_headers)
        assert [s["name"] for s in services.json()] == ["Haircut"]

    @pytest.mark.asyncio
    async def test_service_not_offered_cannot_be_booked(self, client, db, admin_headers, business, staff, service):
        from datetime import datetime, timedelta
        from app.models.service import Service

        shave = Service(business_id=business.id, name="Shave", duration_minutes=15, price=10)
        db.add(shave)
        await db.commit()

        resp = await client.put(
            f"/api/v1/staff/{staff.id}/services", json={"service_ids": [str(shave.id)]}, headers=admin_headers,
        )
        assert resp.status_code == 200
        assert [s["name"] for s in resp.json()] == ["Shave"]

        day = (datetime.utcnow() + timedelta(days=2)).date().isoformat()
        booking = await client.post("/api/v1/public/luxe-salon/appointments", json={
            "customer_name": "Sam", "customer_phone": "+15550000000",
            "service_id": str(service.id), "staff_id": str(staff.id),
            "appointment_date": day, "appointment_time": "10:00",
        })
        assert booking.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_service_in_assignment(self, client, admin_headers, staff):
        resp = await client.put(
            f"/api/v1/staff/{staff.id}/services",
            json={"service_ids": ["00000000-0000-0000-0000-000000000000"]},
            headers=admin_headers,
        )
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_deactivated_staff_hidden_from_booking_page(self, client, admin_headers, staff):
        resp = await client.delete(f"/api/v1/staff/{staff.id}", headers=admin_headers)
        assert resp.json()["is_active"] is False

        page = await client.get("/api/v1/public/luxe-salon")
        assert page.json()["staff"] == []

    @pytest.mark.asyncio
    async def test_reactivated_staff_takes_bookings_again(self, client, admin_headers, staff, service):
        from datetime import datetime, timedelta

        await client.delete(f"/api/v1/staff/{staff.id}", headers=admin_headers)
        day = (datetime.utcnow() + timedelta(days=2)).date().isoformat()
        booking = {
            "customer_name": "Sam", "customer_phone": "+15550000000",
            "service_id": str(service.id), "staff_id": str(staff.id),
            "appointment_date": day, "appointment_time": "10:00",
        }
        refused = await client.post("/api/v1/public/luxe-salon/appointments", json=booking)
        assert refused.status_code == 400

        resp = await client.patch(f"/api/v1/staff/{staff.id}", json={"is_active": True}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["is_active"] is True

        page = await client.get("/api/v1/public/luxe-salon")
        assert [s["name"] for s in page.json()["staff"]] == ["Dana"]
        accepted = await client.post("/api/v1/public/luxe-salon/appointments", json=booking)
        assert accepted.status_code == 201

    @pytest.mark.asyncio
    async def test_staff_slots_for_desk(self, client, staff_headers, staff):
        from datetime import datetime, timedelta

        day = (datetime.utcnow() + timedelta(days=2)).date().isoformat()
        resp = await client.get(f"/api/v1/staff/{staff.id}/slots", params={"date": day}, headers=staff_headers)
        assert resp.status_code == 200
        assert len(resp.json()["slots"]) == 20


class TestUsers:
    @pytest.mark.asyncio
    async def test_admin_creates_staff_login(self, client, admin_headers, business):
        resp = await client.post("/api/v1/users/", json={
            "email": "New.Stylist@luxe.example.com",
            "password": "longenough",
            "name": "Casey",
            "phone": "+15550004444",
        }, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["user"]["email"] == "new.stylist@luxe.example.com"
        assert data["user"]["role"] == "staff"
        assert data["user"]["business_id"] == str(business.id)
        assert data["staff_id"] is not None

        login = await client.post("/api/v1/auth/login", json={
            "email": "new.stylist@luxe.example.com", "password": "longenough",
        })
        assert login.status_code == 200

        staff = await client.get("/api/v1/staff/", headers=admin_headers)
        assert [s["name"] for s in staff.json()] == ["Casey"]

    @pytest.mark.asyncio
    async def test_duplicate_email(self, client, admin_headers):
        resp = await client.post("/api/v1/users/", json={
            "email": "owner@luxe.example.com", "password": "longenough", "name": "Dup",
        }, headers=admin_headers)
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_admin_cannot_create_super_admin(self, client, admin_headers):
        resp = await client.post("/api/v1/users/", json={
            "email": "sneaky@luxe.example.com", "password": "longenough", "name": "Sneaky", "role": "super_admin",
        }, headers=admin_headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_staff_cannot_manage_users(self, client, staff_headers):
        resp = await client.get("/api/v1/users/", headers=staff_headers)
        assert resp.status_code == 403

    @pytest.mark.asyncio
    async def test_super_admin_must_pick_business(self, client, super_headers, business):
        payload = {"email": "x@luxe.example.com", "password": "longenough", "name": "X"}
        resp = await client.post("/api/v1/users/", json=payload, headers=super_headers)
        assert resp.status_code == 400

        payload["business_id"] = str(business.id)
        resp = await client.post("/api/v1/users/", json=payload, headers=super_headers)
        assert resp.status_code == 201

    @pytest.mark.asyncio
    async def test_short_password_rejected(self, client, admin_headers):
        resp = await client.post("/api/v1/users/", json={
            "email": "short@luxe.example.com", "password": "short", "name": "Short",
        }, headers=admin_headers)
        assert resp.status_code == 422
