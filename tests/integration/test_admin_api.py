"""
Admin moderation integration tests
"""

import pytest

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]


class TestStatusChanges:
    async def test_invalid_status_leaves_location_unchanged(self, api, client, owner, admin):
        location = await api.create_location(owner)

        for status in ("PENDING", "DELETED", ""):
            response = await api.set_status(admin, location["id"], status)
            assert response.status_code == 400
            assert response.json()["allowed"] == ["APPROVED", "REJECTED", "HIDDEN"]

        stored = (await client.get(f"/admin/locations/{location['id']}", headers=admin)).json()
        assert stored["status"] == "PENDING"

    async def test_same_status_is_noop(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin)
        response = await api.set_status(admin, location["id"], "APPROVED")
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        history = (await client.get(f"/admin/locations/{location['id']}/history", headers=admin)).json()
        assert len(history["items"]) == 2

    async def test_live_location_can_be_rejected(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin)
        response = await api.set_status(admin, location["id"], "REJECTED")
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"
        assert (await client.get("/locations")).json()["total"] == 0

    async def test_hidden_location_can_be_restored(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin)
        path = f"/admin/locations/{location['id']}"
        await client.patch(f"{path}/hide", headers=admin)

        response = await client.patch(f"{path}/approve", headers=admin)
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"
        assert (await client.get("/locations")).json()["total"] == 1

        history = (await client.get(f"{path}/history", headers=admin)).json()["items"]
        assert [(c["fromStatus"], c["toStatus"]) for c in history[-2:]] == [
            ("APPROVED", "HIDDEN"),
            ("HIDDEN", "APPROVED"),
        ]

    async def test_hidden_location_can_be_rejected(self, api, owner, admin):
        location = await api.create_location(owner)
        await api.set_status(admin, location["id"], "HIDDEN")
        response = await api.set_status(admin, location["id"], "REJECTED")
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"

    async def test_out_of_range_id_is_missing(self, api, client, admin):
        huge = 10**20
        assert (await api.set_status(admin, huge, "APPROVED")).status_code == 404
        assert (await client.get(f"/admin/locations/{huge}", headers=admin)).status_code == 404
        assert (await client.delete(f"/admin/locations/{huge}", headers=admin)).status_code == 404

    async def test_shortcut_routes(self, api, client, owner, admin):
        location = await api.create_location(owner)
        path = f"/admin/locations/{location['id']}"

        assert (await client.patch(f"{path}/reject", headers=admin)).json()["status"] == "REJECTED"
        assert (await client.patch(f"{path}/approve", headers=admin)).json()["status"] == "APPROVED"
        assert (await client.patch(f"{path}/hide", headers=admin)).json()["status"] == "HIDDEN"

    async def test_missing_location(self, api, admin):
        response = await api.set_status(admin, 999, "APPROVED")
        assert response.status_code == 404

    async def test_owner_cannot_moderate(self, api, owner):
        location = await api.create_location(owner)
        response = await api.set_status(owner, location["id"], "APPROVED")
        assert response.status_code == 403
        assert response.json()["requiredRoles"] == ["ADMIN"]

    async def test_history_records_every_change(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin)
        await client.patch(f"/owner/locations/{location['id']}", json={"title": "New"}, headers=owner)

        body = (await client.get(f"/admin/locations/{location['id']}/history", headers=admin)).json()
        assert [(c["fromStatus"], c["toStatus"], c["action"]) for c in body["items"]] == [
            (None, "PENDING", "CREATE"),
            ("PENDING", "APPROVED", "ADMIN_SET_STATUS"),
            ("APPROVED", "PENDING", "OWNER_EDIT"),
        ]


class TestDeletion:
    async def test_delete_requires_hidden(self, api, client, owner, admin):
        location = await api.approved_location(owner, admin)
        path = f"/admin/locations/{location['id']}"

        response = await client.delete(path, headers=admin)
        assert response.status_code == 409
        assert response.json()["status"] == "APPROVED"
        assert (await client.get(path, headers=admin)).status_code == 200

    async def test_delete_hidden_location(self, api, client, owner, user, admin):
        location = await api.approved_location(owner, admin, photoUrls=["http://img/A.jpg"], fishNames=["Pike"])
        path = f"/admin/locations/{location['id']}"
        await client.post(
            f"/locations/{location['id']}/reviews", json={"rating": 4, "comment": "fine"}, headers=user
        )
        await client.post(f"/favorites/{location['id']}", headers=user)
        await client.patch(f"{path}/hide", headers=admin)

        response = await client.delete(path, headers=admin)
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert (await client.get(path, headers=admin)).status_code == 404
        assert (await client.get("/favorites", headers=user)).json()["total"] == 0

    async def test_delete_missing(self, client, admin):
        assert (await client.delete("/admin/locations/999", headers=admin)).status_code == 404


class TestAdminListing:
    async def test_lists_every_status_with_owner_email(self, api, client, owner, admin):
        await api.approved_location(owner, admin)
        await api.create_location(owner)

        body = (await client.get("/admin/locations", headers=admin)).json()
        assert body["total"] == 2
        assert {item["status"] for item in body["items"]} == {"APPROVED", "PENDING"}
        assert all(item["owner"]["email"] for item in body["items"])

    async def test_status_filter(self, api, client, owner, admin):
        await api.approved_location(owner, admin)
        await api.create_location(owner)

        body = (await client.get("/admin/locations", params={"status": "approved"}, headers=admin)).json()
        assert body["total"] == 1

    async def test_invalid_status_filter(self, client, admin):
        response = await client.get("/admin/locations", params={"status": "ARCHIVED"}, headers=admin)
        assert response.status_code == 400
