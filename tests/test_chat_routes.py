"""HTTP tests for chat-service conversation bootstrap."""
from __future__ import annotations

import pytest

from chat_service.main import app
from conftest import asgi_client

PAYLOAD = {
    "participant_a": "w1",
    "participant_b": "c1",
    "display_name_a": "Juan",
    "display_name_b": "Maria",
    "avatar_a": "w.png",
    "avatar_b": "c.png",
}


@pytest.fixture
async def client(chat_db):
    async with asgi_client(app) as c:
        yield c


@pytest.mark.asyncio
async def test_ensure_is_idempotent_for_the_pair(client):
    first = await client.post("/conversations/ensure", json=PAYLOAD)
    again = await client.post("/conversations/ensure", json=PAYLOAD)
    swapped = await client.post(
        "/conversations/ensure",
        json={**PAYLOAD, "participant_a": "c1", "participant_b": "w1"},
    )

    assert first.status_code == 200
    assert first.json()["created"] is True
    conversation_id = first.json()["conversation_id"]
    assert again.json() == {"conversation_id": conversation_id, "created": False}
    assert swapped.json() == {"conversation_id": conversation_id, "created": False}


@pytest.mark.asyncio
async def test_get_and_list_conversations(client):
    created = await client.post("/conversations/ensure", json=PAYLOAD)
    conversation_id = created.json()["conversation_id"]
    await client.post("/conversations/ensure", json={**PAYLOAD, "participant_b": "c2"})

    r = await client.get(f"/conversations/{conversation_id}")
    assert r.status_code == 200
    assert r.json()["display_name_b"] == "Maria"

    r = await client.get("/conversations", params={"participant": "c1"})
    assert [c["conversation_id"] for c in r.json()] == [conversation_id]

    r = await client.get("/conversations", params={"participant": "w1"})
    assert len(r.json()) == 2


@pytest.mark.asyncio
async def test_unknown_conversation(client):
    r = await client.get("/conversations/nope")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_participants_must_differ(client):
    r = await client.post("/conversations/ensure", json={**PAYLOAD, "participant_b": "w1"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_participants_are_required(client):
    r = await client.post("/conversations/ensure", json={**PAYLOAD, "participant_a": ""})
    assert r.status_code == 422
