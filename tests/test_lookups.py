"""
tests.test_lookups

Pet attribute reference data and its use when pets are written.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

AuthHeaders = Callable[..., dict[str, str]]


@pytest.mark.asyncio
async def test_lookup_tables_are_seeded(client: httpx.AsyncClient) -> None:
    r = await client.get("/v1/lookups/pet-species")
    assert r.status_code == 200
    assert [row["species"] for row in r.json()] == ["dog", "cat"]

    r = await client.get("/v1/lookups/sexes")
    assert [row["sex"] for row in r.json()] == ["male", "female"]

    r = await client.get("/v1/lookups/pet-statuses")
    assert [row["status"] for row in r.json()] == ["in_shelter", "in_transit", "adopted"]

    r = await client.get("/v1/lookups/pet-sizes")
    assert [row["size"] for row in r.json()] == ["small", "medium", "large"]

    r = await client.get("/v1/lookups/pet-colors")
    colors = r.json()
    assert len(colors) == 12
    assert colors[0] == {"id": colors[0]["id"], "color": "black"}


async def _shelter(client: httpx.AsyncClient, headers: dict[str, str]) -> int:
    r = await client.post("/v1/shelters", json={"name": "Happy Paws"}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["id"]


async def _color_ids(client: httpx.AsyncClient) -> dict[str, int]:
    return {row["color"]: row["id"] for row in (await client.get("/v1/lookups/pet-colors")).json()}


@pytest.mark.asyncio
async def test_pet_colors_round_through_the_api(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    shelter_id = await _shelter(client, alice)
    colors = await _color_ids(client)

    body = {
        "shelter_id": shelter_id,
        "name": "Biscuit",
        "species": "cat",
        "sex": "female",
        "size": "small",
        "color_ids": [colors["orange"], colors["white"]],
    }
    r = await client.post("/v1/pets", json=body, headers=alice)
    assert r.status_code == 201, r.text
    pet_id = r.json()["id"]
    assert {c["color"] for c in r.json()["colors"]} == {"orange", "white"}

    r = await client.get("/v1/pets", params={"color_id": colors["orange"]})
    assert [p["id"] for p in r.json()] == [pet_id]
    r = await client.get("/v1/pets", params={"color_id": colors["black"]})
    assert r.json() == []

    # PATCH replaces the whole set.
    r = await client.patch(f"/v1/pets/{pet_id}", json={"color_ids": [colors["black"]]}, headers=alice)
    assert r.status_code == 200
    assert [c["color"] for c in r.json()["colors"]] == ["black"]

    r = await client.get(f"/v1/pets/{pet_id}")
    assert [c["color"] for c in r.json()["colors"]] == ["black"]


@pytest.mark.asyncio
async def test_pet_attributes_must_be_known(client: httpx.AsyncClient, auth: AuthHeaders) -> None:
    alice = auth("alice-sub", "alice@example.com")
    shelter_id = await _shelter(client, alice)
    base = {"shelter_id": shelter_id, "name": "Rex", "species": "dog", "sex": "male", "size": "large"}

    r = await client.post("/v1/pets", json={**base, "species": "dragon"}, headers=alice)
    assert r.status_code == 400
    assert r.json() == {"detail": "Unknown species: dragon", "code": "unknown_reference"}

    r = await client.post("/v1/pets", json={**base, "color_ids": [9999]}, headers=alice)
    assert r.status_code == 400
    assert r.json()["detail"] == "Unknown color ids: 9999"

    pet_id = (await client.post("/v1/pets", json=base, headers=alice)).json()["id"]
    r = await client.patch(f"/v1/pets/{pet_id}", json={"size": "huge"}, headers=alice)
    assert r.status_code == 400
    assert r.json()["code"] == "unknown_reference"

    # Nothing from the rejected writes was stored.
    assert len((await client.get("/v1/pets")).json()) == 1
    assert (await client.get(f"/v1/pets/{pet_id}")).json()["size"] == "large"
