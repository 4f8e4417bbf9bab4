"""
Owner self-service integration tests
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.api.services import location_manager
from app.core.error_handling import ErrorCodes

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]


class TestLifecycle:
    async def test_edit_sends_approved_location_back_to_moderation(self, api, client, owner, admin):
        location = await api.create_location(owner, title="L1")
        assert location["status"] == "PENDING"

        response = await api.set_status(admin, location["id"], "APPROVED")
        assert response.json()["status"] == "APPROVED"
        listed = [item["id"] for item in (await client.get("/locations")).json()["items"]]
        assert location["id"] in listed

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"description": "Now with a new pier"},
            headers=owner,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"
        assert response.json()["description"] == "Now with a new pier"

        listed = [item["id"] for item in (await client.get("/locations")).json()["items"]]
        assert location["id"] not in listed

    @pytest.mark.parametrize(
        "change",
        [
            {"title": "Renamed"},
            {"lat": 10.5},
            {"contactInfo": "new contact"},
            {"photoUrls": []},
            {"seasonCodes": ["WINTER"]},
        ],
    )
    async def test_any_edit_of_approved_location_resets_status(self, api, client, owner, admin, change):
        location = await api.approved_location(owner, admin)
        response = await client.patch(f"/owner/locations/{location['id']}", json=change, headers=owner)
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"

    async def test_edit_of_rejected_location_keeps_status(self, api, client, owner, admin):
        location = await api.create_location(owner)
        await api.set_status(admin, location["id"], "REJECTED")

        response = await client.patch(
            f"/owner/locations/{location['id']}", json={"title": "Fixed"}, headers=owner
        )
        assert response.json()["status"] == "REJECTED"

    async def test_hide_and_unhide(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin)

        response = await client.post(f"/owner/locations/{location['id']}/hide", headers=owner)
        assert response.status_code == 200
        assert response.json()["status"] == "HIDDEN"
        assert (await client.get("/locations")).json()["total"] == 0

        response = await client.post(f"/owner/locations/{location['id']}/unhide", headers=owner)
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING"


class TestReplacementEdit:
    async def test_photos_are_replaced_not_merged(self, api, client, owner):
        location = await api.create_location(owner, photoUrls=["http://img/A.jpg", "http://img/B.jpg"])
        assert len(location["photos"]) == 2

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"photoUrls": ["http://img/C.jpg"]},
            headers=owner,
        )
        assert response.status_code == 200
        assert [p["url"] for p in response.json()["photos"]] == ["http://img/C.jpg"]

    async def test_empty_array_clears_relation(self, api, client, owner):
        location = await api.create_location(owner, photoUrls=["http://img/A.jpg"], fishNames=["Pike"])

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"photoUrls": [], "fishNames": []},
            headers=owner,
        )
        body = response.json()
        assert body["photos"] == []
        assert body["fish"] == []

    async def test_fish_replaced_and_absent_fields_untouched(self, api, client, owner):
        location = await api.create_location(
            owner, fishNames=["Pike", "Carp"], seasonCodes=["SUMMER"], photoUrls=["http://img/A.jpg"]
        )

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"fishNames": ["Perch", "Perch"]},
            headers=owner,
        )
        body = response.json()
        assert [f["name"] for f in body["fish"]] == ["Perch"]
        assert [s["code"] for s in body["seasons"]] == ["SUMMER"]
        assert [p["url"] for p in body["photos"]] == ["http://img/A.jpg"]
        assert body["title"] == location["title"]

    async def test_invalid_edit_changes_nothing(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin, photoUrls=["http://img/A.jpg"])

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"photoUrls": ["http://img/C.jpg"], "lat": 123},
            headers=owner,
        )
        assert response.status_code == 400

        stored = (await client.get(f"/owner/locations/{location['id']}", headers=owner)).json()
        assert stored["status"] == "APPROVED"
        assert [p["url"] for p in stored["photos"]] == ["http://img/A.jpg"]


class TestOwnership:
    async def test_foreign_location_looks_missing(self, api, client, owner):
        location = await api.create_location(owner)
        intruder = await api.headers_for("OWNER")

        path = f"/owner/locations/{location['id']}"
        assert (await client.get(path, headers=intruder)).status_code == 404
        assert (await client.patch(path, json={"title": "Mine"}, headers=intruder)).status_code == 404
        assert (await client.post(f"{path}/hide", headers=intruder)).status_code == 404
        assert (await client.patch("/owner/locations/999", json={"title": "x"}, headers=owner)).status_code == 404

    async def test_listing_is_scoped_to_caller(self, api, client, owner, admin):
        mine = await api.create_location(owner)
        await api.set_status(admin, mine["id"], "REJECTED")
        other_owner = await api.headers_for("OWNER")
        await api.create_location(other_owner)

        body = (await client.get("/owner/locations", headers=owner)).json()
        assert body["total"] == 1
        assert body["items"][0]["id"] == mine["id"]
        assert body["items"][0]["status"] == "REJECTED"
        assert body["limit"] == 20

    async def test_listing_status_filter(self, api, client, owner, admin):
        await api.approved_location(owner, admin)
        await api.create_location(owner)

        body = (await client.get("/owner/locations", params={"status": "PENDING"}, headers=owner)).json()
        assert body["total"] == 1
        assert body["items"][0]["status"] == "PENDING"

    async def test_plain_user_is_forbidden(self, client, user):
        response = await client.get("/owner/locations", headers=user)
        assert response.status_code == 403


class TestInputLimits:
    async def test_oversized_fish_name_changes_nothing(self, api, client, owner):
        location = await api.create_location(owner, fishNames=["Pike"])

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"fishNames": ["x" * 101]},
            headers=owner,
        )
        assert response.status_code == 400
        assert response.json()["field"] == "fishNames"

        stored = (await client.get(f"/owner/locations/{location['id']}", headers=owner)).json()
        assert [f["name"] for f in stored["fish"]] == ["Pike"]

    async def test_oversized_photo_url_is_rejected(self, client, owner):
        payload = {
            "title": "Quiet bay",
            "description": "Shallow bay with reeds",
            "region": "KYIV",
            "waterType": "LAKE",
            "lat": 50.45,
            "lng": 30.52,
            "photoUrls": ["http://img/" + "a" * 2048],
        }
        response = await client.post("/locations", json=payload, headers=owner)
        assert response.status_code == 400
        assert response.json()["field"] == "photoUrls"


class TestStorageFailure:
    async def test_failed_edit_rolls_back_every_change(self, api, client, owner, admin, monkeypatch):
        location = await api.approved_location(
            owner, admin, photoUrls=["http://img/A.jpg"], fishNames=["Pike"]
        )

        async def broken_fish_lookup(db, names):
            raise SQLAlchemyError("fish table unavailable")

        monkeypatch.setattr(location_manager, "get_or_create_fish", broken_fish_lookup)

        response = await client.patch(
            f"/owner/locations/{location['id']}",
            json={"title": "Renamed", "photoUrls": ["http://img/C.jpg"], "fishNames": ["Perch"]},
            headers=owner,
        )
        assert response.status_code == 500
        assert response.json()["code"] == ErrorCodes.DB_QUERY_FAILED

        monkeypatch.undo()
        stored = (await client.get(f"/owner/locations/{location['id']}", headers=owner)).json()
        assert stored["status"] == "APPROVED"
        assert stored["title"] == location["title"]
        assert [p["url"] for p in stored["photos"]] == ["http://img/A.jpg"]
        assert [f["name"] for f in stored["fish"]] == ["Pike"]


class TestOutOfRangeIds:
    async def test_huge_id_is_missing(self, client, owner):
        path = f"/owner/locations/{10**20}"
        assert (await client.get(path, headers=owner)).status_code == 404
        assert (await client.patch(path, json={"title": "x"}, headers=owner)).status_code == 404
        assert (await client.post(f"{path}/hide", headers=owner)).status_code == 404
