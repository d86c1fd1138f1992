"""
tests.test_api_flows

End-to-end request pipeline through the HTTP surface: identity sync, tenant
resolution, role gating and the resource handlers behind them.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

AuthHeaders = Callable[..., dict[str, str]]


async def _create_shelter(
    client: httpx.AsyncClient, headers: dict[str, str], name: str = "Happy Paws"
) -> int:
    r = await client.post("/v1/shelters", json={"name": name, "city": "Austin"}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["id"]


async def _create_pet(
    client: httpx.AsyncClient, headers: dict[str, str], shelter_id: int
) -> httpx.Response:
    body = {"shelter_id": shelter_id, "name": "Rex", "species": "dog", "sex": "male", "size": "large"}
    return await client.post("/v1/pets", json=body, headers=headers)


async def _invite(
    client: httpx.AsyncClient, headers: dict[str, str], shelter_id: int, email: str
) -> httpx.Response:
    return await client.post(
        f"/v1/shelters/{shelter_id}/invite", json={"email": email, "role": "member"}, headers=headers
    )


@pytest.mark.asyncio
async def test_me_requires_token(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/users/me")
    assert r.status_code == 401
    assert r.json() == {
        "detail": "Missing or invalid authorization header",
        "code": "missing_token",
    }


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["code"] == "invalid_token"


@pytest.mark.asyncio
async def test_first_request_syncs_user(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    headers = auth("alice-sub", "alice@example.com", "Alice")
    r1 = await client.get("/v1/users/me", headers=headers)
    r2 = await client.get("/v1/users/me", headers=headers)
    assert r1.status_code == 200
    assert r1.json()["id"] == r2.json()["id"]
    assert r1.json()["email"] == "alice@example.com"
    assert r1.json()["name"] == "Alice"


@pytest.mark.asyncio
async def test_anonymous_gets_401_before_404(client: httpx.AsyncClient) -> None:
    for method, path in [
        ("DELETE", "/v1/pets/999"),
        ("POST", "/v1/pets/999/archive"),
        ("POST", "/v1/adoption-requests/999/process"),
        ("DELETE", "/v1/assignments/999"),
    ]:
        r = await client.request(method, path, json={"status": "approved"})
        assert r.status_code == 401, (method, path)


@pytest.mark.asyncio
async def test_authenticated_missing_pet_is_404(
    client: httpx.AsyncClient, auth: AuthHeaders
) -> None:
    r = await client.delete("/v1/pets/999", headers=auth("alice-sub"))
    assert r.status_code == 404
    assert r.json()["detail"] == "Pet not found"


@pytest.mark.asyncio
async def test_founder_becomes_admin(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com", "Alice")
    shelter_id = await _create_shelter(client, alice)

    r = await client.get("/v1/users/me/assignments", headers=alice)
    [membership] = r.json()
    assert membership["shelter_id"] == shelter_id
    assert membership["role_name"] == "admin"
    assert membership["role_id"] == 1

    r = await client.patch(f"/v1/shelters/{shelter_id}", json={"city": "Dallas"}, headers=alice)
    assert r.status_code == 200
    assert r.json()["city"] == "Dallas"
    assert r.json()["name"] == "Happy Paws"


@pytest.mark.asyncio
async def test_invite_flow(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com", "Alice")
    shelter_id = await _create_shelter(client, alice)

    r = await client.post(
        f"/v1/shelters/{shelter_id}/invite",
        json={"email": "bob@example.com", "role": "member"},
        headers=alice,
    )
    assert r.status_code == 201, r.text
    invited = r.json()
    assert invited["role_name"] == "member"
    assert invited["role_id"] == 2
    assert invited["user_email"] == "bob@example.com"

    # Same user, any role: already a member.
    r = await client.post(
        f"/v1/shelters/{shelter_id}/invite",
        json={"email": "bob@example.com", "role": "admin"},
        headers=alice,
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "User is already a member of this shelter"

    # Bob's first sign-in links to the invited placeholder.
    bob = auth("bob-sub", "bob@example.com", "Bob")
    r = await client.get("/v1/users/me", headers=bob)
    assert r.json()["id"] == invited["user_id"]
    assert r.json()["name"] == "Bob"

    r = await client.get(f"/v1/shelters/{shelter_id}/members", headers=bob)
    assert r.status_code == 200
    assert {m["user_email"]: m["role_name"] for m in r.json()} == {
        "alice@example.com": "admin",
        "bob@example.com": "member",
    }


@pytest.mark.asyncio
async def test_invite_rejects_adopter_role_and_bad_email(
    client: httpx.AsyncClient, auth: AuthHeaders
) -> None:
    alice = auth("alice-sub")
    shelter_id = await _create_shelter(client, alice)
    for body in ({"email": "x@example.com", "role": "adopter"}, {"email": "nope", "role": "member"}):
        r = await client.post(f"/v1/shelters/{shelter_id}/invite", json=body, headers=alice)
        assert r.status_code == 422


@pytest.mark.asyncio
async def test_role_enforcement(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    bob = auth("bob-sub", "bob@example.com")
    carol = auth("carol-sub", "carol@example.com")
    shelter_id = await _create_shelter(client, alice)
    await _invite(client, alice, shelter_id, "bob@example.com")

    # Member may create and edit pets.
    r = await _create_pet(client, bob, shelter_id)
    assert r.status_code == 201, r.text
    pet_id = r.json()["id"]
    r = await client.patch(f"/v1/pets/{pet_id}", json={"description": "Good boy"}, headers=bob)
    assert r.status_code == 200
    assert r.json()["description"] == "Good boy"

    # But not administer the shelter or delete pets.
    r = await client.patch(f"/v1/shelters/{shelter_id}", json={"city": "Elsewhere"}, headers=bob)
    assert r.status_code == 403
    assert r.json()["detail"] == "Insufficient permissions. Required roles: admin"
    r = await client.delete(f"/v1/pets/{pet_id}", headers=bob)
    assert r.status_code == 403

    # Outsider has no membership at all.
    r = await _create_pet(client, carol, shelter_id)
    assert r.status_code == 403
    assert r.json()["detail"] == "You do not have access to this shelter"
    r = await client.patch(f"/v1/pets/{pet_id}", json={"name": "Max"}, headers=carol)
    assert r.status_code == 403

    # Admin archives and deletes.
    r = await client.post(f"/v1/pets/{pet_id}/archive", headers=alice)
    assert r.status_code == 200
    assert r.json()["status"] == "adopted"
    r = await client.delete(f"/v1/pets/{pet_id}", headers=alice)
    assert r.status_code == 204
    r = await client.get(f"/v1/pets/{pet_id}")
    assert r.status_code == 404
    r = await client.patch(f"/v1/pets/{pet_id}", json={"name": "Max"}, headers=alice)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_assignments_require_shelter_id(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    r = await client.get("/v1/assignments", headers=auth("alice-sub"))
    assert r.status_code == 400
    assert r.json() == {"detail": "Shelter ID is required", "code": "missing_shelter_id"}


@pytest.mark.asyncio
async def test_revoked_member_loses_access(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    bob = auth("bob-sub", "bob@example.com")
    shelter_id = await _create_shelter(client, alice)
    r = await _invite(client, alice, shelter_id, "bob@example.com")
    assignment_id = r.json()["assignment_id"]
    pet_id = (await _create_pet(client, bob, shelter_id)).json()["id"]

    r = await client.get("/v1/assignments", params={"shelter_id": shelter_id}, headers=alice)
    assert r.status_code == 200
    assert len(r.json()) == 2

    # Members cannot revoke.
    r = await client.delete(f"/v1/assignments/{assignment_id}", headers=bob)
    assert r.status_code == 403

    r = await client.delete(f"/v1/assignments/{assignment_id}", headers=alice)
    assert r.status_code == 204

    r = await client.patch(f"/v1/pets/{pet_id}", json={"name": "Max"}, headers=bob)
    assert r.status_code == 403
    assert r.json()["detail"] == "You do not have access to this shelter"


@pytest.mark.asyncio
async def test_adoption_request_lifecycle(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    carol = auth("carol-sub", "carol@example.com")
    dave = auth("dave-sub", "dave@example.com")
    shelter_id = await _create_shelter(client, alice)
    pet_id = (await _create_pet(client, alice, shelter_id)).json()["id"]

    r = await client.post(
        "/v1/adoption-requests", json={"pet_id": pet_id, "answers": {"yard": True}}, headers=carol
    )
    assert r.status_code == 201, r.text
    request_id = r.json()["id"]
    assert r.json()["status"] == "pending"

    # Requester and shelter staff can read it; unrelated users cannot.
    assert (await client.get(f"/v1/adoption-requests/{request_id}", headers=carol)).status_code == 200
    assert (await client.get(f"/v1/adoption-requests/{request_id}", headers=alice)).status_code == 200
    assert (await client.get(f"/v1/adoption-requests/{request_id}", headers=dave)).status_code == 403

    r = await client.get("/v1/adoption-requests", headers=carol)
    assert [x["id"] for x in r.json()] == [request_id]
    r = await client.get("/v1/adoption-requests", params={"shelter_id": shelter_id}, headers=alice)
    assert [x["id"] for x in r.json()] == [request_id]
    r = await client.get("/v1/adoption-requests", params={"shelter_id": shelter_id}, headers=dave)
    assert r.status_code == 403

    # Only staff process; the requester cannot approve their own request.
    r = await client.post(
        f"/v1/adoption-requests/{request_id}/process", json={"status": "approved"}, headers=carol
    )
    assert r.status_code == 403

    r = await client.patch(
        f"/v1/adoption-requests/{request_id}", json={"answers": {"yard": False}}, headers=carol
    )
    assert r.status_code == 200
    assert r.json()["answers"] == {"yard": False}

    r = await client.post(
        f"/v1/adoption-requests/{request_id}/process",
        json={"status": "approved", "admin_message": "Welcome home"},
        headers=alice,
    )
    assert r.status_code == 200
    assert r.json()["status"] == "approved"
    assert r.json()["admin_message"] == "Welcome home"

    r = await client.post(
        f"/v1/adoption-requests/{request_id}/process", json={"status": "rejected"}, headers=alice
    )
    assert r.status_code == 409
    r = await client.patch(f"/v1/adoption-requests/{request_id}", json={"answers": {}}, headers=carol)
    assert r.status_code == 409

    assert (await client.delete(f"/v1/adoption-requests/{request_id}", headers=dave)).status_code == 403
    assert (await client.delete(f"/v1/adoption-requests/{request_id}", headers=carol)).status_code == 204


@pytest.mark.asyncio
async def test_care_records(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    carol = auth("carol-sub", "carol@example.com")
    shelter_id = await _create_shelter(client, alice)
    pet_id = (await _create_pet(client, alice, shelter_id)).json()["id"]

    r = await client.post("/v1/vaccines", json={"name": "Rabies"}, headers=carol)
    assert r.status_code == 201
    vaccine_id = r.json()["id"]
    assert (await client.post("/v1/vaccines", json={"name": "Rabies"}, headers=carol)).status_code == 409

    body = {"pet_id": pet_id, "vaccine_id": vaccine_id}
    assert (await client.post("/v1/vaccinations", json=body, headers=carol)).status_code == 403
    r = await client.post("/v1/vaccinations", json=body, headers=alice)
    assert r.status_code == 201
    vaccination_id = r.json()["id"]

    r = await client.get("/v1/vaccinations", params={"pet_id": pet_id})
    assert [v["id"] for v in r.json()] == [vaccination_id]
    assert (await client.delete(f"/v1/vaccinations/{vaccination_id}", headers=alice)).status_code == 204
    assert (await client.get("/v1/vaccinations", params={"pet_id": pet_id})).json() == []

    r = await client.post(
        "/v1/events",
        json={"pet_id": pet_id, "name": "Vet visit", "date_time": "2026-01-05T10:00:00"},
        headers=alice,
    )
    assert r.status_code == 201
    event_id = r.json()["id"]
    r = await client.patch(f"/v1/events/{event_id}", json={"description": "Checkup"}, headers=carol)
    assert r.status_code == 403
    r = await client.patch(f"/v1/events/{event_id}", json={"description": "Checkup"}, headers=alice)
    assert r.status_code == 200
    assert r.json()["description"] == "Checkup"
    assert r.json()["name"] == "Vet visit"
    assert (await client.delete(f"/v1/events/{event_id}", headers=alice)).status_code == 204
    assert (await client.get("/v1/events", params={"pet_id": pet_id})).json() == []


@pytest.mark.asyncio
async def test_dev_token_endpoint(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/v1/dev/token", json={"subject": "dev-1", "email": "dev1@example.com", "name": "Dev One"}
    )
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = await client.get("/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["name"] == "Dev One"


@pytest.mark.asyncio
async def test_direct_assignment_by_ids(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    bob = auth("bob-sub", "bob@example.com")
    shelter_id = await _create_shelter(client, alice)
    bob_id = (await client.get("/v1/users/me", headers=bob)).json()["id"]

    body = {"user_id": bob_id, "role_id": 2, "shelter_id": shelter_id}
    # Only admins of the target shelter may assign.
    r = await client.post("/v1/assignments", json=body, headers=bob)
    assert r.status_code == 403

    r = await client.post("/v1/assignments", json=body, headers=alice)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["role_name"] == "member"

    r = await client.get(f"/v1/assignments/{created['id']}", headers=alice)
    assert r.status_code == 200
    assert r.json() == created
    # Members can't read raw assignments.
    r = await client.get(f"/v1/assignments/{created['id']}", headers=bob)
    assert r.status_code == 403
    r = await client.get("/v1/assignments/999", headers=alice)
    assert r.status_code == 404

    r = await client.post("/v1/assignments", json=body, headers=alice)
    assert r.status_code == 409

    r = await client.post(
        "/v1/assignments", json={**body, "user_id": 999}, headers=alice
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "User not found"

    carol_id = (await client.get("/v1/users/me", headers=auth("carol-sub"))).json()["id"]
    r = await client.post(
        "/v1/assignments", json={**body, "user_id": carol_id, "role_id": 99}, headers=alice
    )
    assert r.status_code == 400
    assert r.json() == {"detail": "Unknown role id: 99", "code": "unknown_reference"}


@pytest.mark.asyncio
async def test_pets_of_deleted_shelter_are_not_found(
    client: httpx.AsyncClient, auth: AuthHeaders
) -> None:
    alice = auth("alice-sub", "alice@example.com")
    shelter_id = await _create_shelter(client, alice)
    pet_id = (await _create_pet(client, alice, shelter_id)).json()["id"]

    assert (await client.delete(f"/v1/shelters/{shelter_id}", headers=alice)).status_code == 204

    r = await client.patch(f"/v1/pets/{pet_id}", json={"name": "Max"}, headers=alice)
    assert r.status_code == 404
    assert r.json()["detail"] == "Shelter not found"
    r = await client.post(f"/v1/pets/{pet_id}/archive", headers=alice)
    assert r.status_code == 404
