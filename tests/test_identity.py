"""Tests for the user-service identity lookup."""
from __future__ import annotations

import httpx
import pytest

from booking_service.identity import IdentityError, IdentityNotFound, fetch_identity


def _transport(status_code: int, body: dict | None = None) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, json=body or {}))


@pytest.mark.asyncio
async def test_fetch_identity():
    transport = _transport(
        200,
        {
            "id": "w1",
            "email": "w@x.com",
            "full_name": "Juan Dela Cruz",
            "image_url": None,
            "role": "worker",
            "is_worker_approved": True,
        },
    )

    worker = await fetch_identity("w@x.com", base_url="http://user-service:8000", transport=transport)

    assert worker.id == "w1"
    assert worker.full_name == "Juan Dela Cruz"
    assert worker.image_url == ""
    assert worker.is_worker_approved is True


@pytest.mark.asyncio
async def test_unknown_user():
    with pytest.raises(IdentityNotFound):
        await fetch_identity("nobody@x.com", transport=_transport(404))


@pytest.mark.asyncio
async def test_upstream_failure():
    with pytest.raises(IdentityError):
        await fetch_identity("w@x.com", transport=_transport(500))
