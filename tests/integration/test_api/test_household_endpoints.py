import uuid
import pytest


@pytest.fixture
def admin(register):
    return register(name="Admin", email="admin@example.com")


@pytest.fixture
def household_id(client, admin):
    _, headers = admin
    response = client.post(
        "/api/v1/households", json={"name": "H1", "description": "Our place"}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


@pytest.mark.integration
class TestHouseholdEndpoints:
    """HTTP tests for /api/v1/households."""

    def test_create_and_list(self, client, admin, household_id):
        admin_id, headers = admin

        listed = client.get("/api/v1/households", headers=headers).json()["data"]
        fetched = client.get(f"/api/v1/households/{household_id}", headers=headers).json()["data"]

        assert [h["id"] for h in listed] == [household_id]
        assert fetched["name"] == "H1"
        assert fetched["created_by_id"] == admin_id

    def test_get_unknown_household(self, client, admin):
        _, headers = admin

        response = client.get(f"/api/v1/households/{uuid.uuid4()}", headers=headers)

        assert response.status_code == 404

    def test_get_household_with_malformed_id(self, client, admin):
        _, headers = admin

        response = client.get("/api/v1/households/not-a-guid", headers=headers)

        assert response.status_code == 422
        assert response.json()["error"]["category"] == "Validation"

    def test_invite_accept_and_reinvite(self, client, register, admin, household_id):
        _, admin_headers = admin
        member_id, member_headers = register(name="Member", email="member@example.com")

        invited = client.post(
            f"/api/v1/households/{household_id}/members",
            json={"member_id": member_id, "role": "MEMBER"},
            headers=admin_headers,
        )
        assert invited.status_code == 201
        assert invited.json()["data"]["is_active"] is False
        assert invited.json()["data"]["status"] == "invited"

        blocked = client.get(f"/api/v1/households/{household_id}", headers=member_headers)
        assert blocked.status_code == 403
        assert blocked.json()["error"]["message"] == "Member is not an active member of the household"

        accepted = client.post(
            f"/api/v1/households/{household_id}/accept-invite", headers=member_headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["data"]["is_active"] is True
        assert accepted.json()["data"]["joined_at"] is not None

        again = client.post(
            f"/api/v1/households/{household_id}/members",
            json={"member_id": member_id, "role": "admin"},
            headers=admin_headers,
        )
        assert again.status_code == 409

        members = client.get(
            f"/api/v1/households/{household_id}/members", headers=member_headers
        ).json()["data"]
        assert {m["role"] for m in members} == {"admin", "member"}

    def test_invite_with_unknown_role(self, client, register, admin, household_id):
        _, headers = admin
        member_id, _ = register(name="Member", email="member@example.com")

        response = client.post(
            f"/api/v1/households/{household_id}/members",
            json={"member_id": member_id, "role": "owner"},
            headers=headers,
        )

        assert response.status_code == 422

    def test_member_cannot_invite(self, client, register, admin, household_id):
        _, admin_headers = admin
        member_id, member_headers = register(name="Member", email="member@example.com")
        target_id, _ = register(name="Target", email="target@example.com")
        client.post(
            f"/api/v1/households/{household_id}/members",
            json={"member_id": member_id, "role": "member"},
            headers=admin_headers,
        )
        client.post(f"/api/v1/households/{household_id}/accept-invite", headers=member_headers)

        response = client.post(
            f"/api/v1/households/{household_id}/members",
            json={"member_id": target_id, "role": "member"},
            headers=member_headers,
        )

        assert response.status_code == 403
        assert response.json()["error"]["category"] == "Authorization"

    def test_accept_without_invite(self, client, register, household_id):
        _, headers = register(name="Stranger", email="stranger@example.com")

        response = client.post(f"/api/v1/households/{household_id}/accept-invite", headers=headers)

        assert response.status_code == 403

    def test_permission_endpoints(self, client, register, admin, household_id):
        _, admin_headers = admin
        member_id, member_headers = register(name="Member", email="member@example.com")
        household_member_id = client.post(
            f"/api/v1/households/{household_id}/members",
            json={"member_id": member_id, "role": "member"},
            headers=admin_headers,
        ).json()["data"]["id"]
        client.post(f"/api/v1/households/{household_id}/accept-invite", headers=member_headers)
        tags = client.get(f"/api/v1/households/{household_id}/tags", headers=admin_headers).json()["data"]
        base = f"/api/v1/households/{household_id}/members/{household_member_id}/permissions"

        missing = client.post(f"{base}/tags", json={"tag_ids": [tags[0]["id"]]}, headers=admin_headers)
        created = client.post(base, json={"tag_ids": [tags[0]["id"]]}, headers=admin_headers)
        duplicate = client.post(base, json={"tag_ids": []}, headers=admin_headers)
        granted = client.post(
            f"{base}/tags", json={"tag_ids": [tags[0]["id"], tags[1]["id"]]}, headers=admin_headers
        )

        assert missing.status_code == 404
        assert created.status_code == 201
        assert duplicate.status_code == 409
        assert granted.status_code == 200
        assert sorted(granted.json()["data"]["tag_ids"]) == sorted([tags[0]["id"], tags[1]["id"]])

        visible = client.get(f"/api/v1/households/{household_id}/tags", headers=member_headers).json()["data"]
        assert {t["id"] for t in visible} == {tags[0]["id"], tags[1]["id"]}

        foreign = client.post(f"{base}/tags", json={"tag_ids": [str(uuid.uuid4())]}, headers=admin_headers)
        assert foreign.status_code == 422
        assert foreign.json()["error"]["category"] == "Validation"


@pytest.mark.integration
class TestTagEndpoints:
    """HTTP tests for /api/v1/households/{household_id}/tags."""

    def test_tag_crud(self, client, admin, household_id):
        _, headers = admin
        base = f"/api/v1/households/{household_id}/tags"

        created = client.post(base, json={"name": "garden", "color": "#00AA00"}, headers=headers)
        assert created.status_code == 201
        tag_id = created.json()["data"]["id"]

        duplicate = client.post(base, json={"name": "Garden", "color": "#00AA00"}, headers=headers)
        assert duplicate.status_code == 409

        updated = client.put(f"{base}/{tag_id}", json={"name": "yard", "color": "#112233"}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()["data"]["name"] == "yard"

        deleted = client.delete(f"{base}/{tag_id}", headers=headers)
        assert deleted.status_code == 200

        names = [t["name"] for t in client.get(base, headers=headers).json()["data"]]
        assert "yard" not in names
        assert len(names) == 5

    def test_invalid_color(self, client, admin, household_id):
        _, headers = admin

        response = client.post(
            f"/api/v1/households/{household_id}/tags",
            json={"name": "bad", "color": "red"},
            headers=headers,
        )

        assert response.status_code == 422


@pytest.mark.integration
class TestMemberEndpoints:
    """HTTP tests for /api/v1/members."""

    def test_get_and_update_profile(self, client, admin, register):
        admin_id, headers = admin
        other_id, _ = register(name="Other", email="other@example.com")

        profile = client.get(f"/api/v1/members/{admin_id}", headers=headers)
        updated = client.put(
            f"/api/v1/members/{admin_id}", json={"name": "Boss", "age": 40}, headers=headers
        )
        forbidden = client.put(f"/api/v1/members/{other_id}", json={"name": "Nope"}, headers=headers)

        assert profile.json()["data"]["email"] == "admin@example.com"
        assert updated.json()["data"]["name"] == "Boss"
        assert updated.json()["data"]["age"] == 40
        assert forbidden.status_code == 403
