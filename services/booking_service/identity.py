from dataclasses import dataclass

import httpx

from .config import USER_SERVICE_URL, HTTP_TIMEOUT


class IdentityError(Exception):
    pass


class IdentityNotFound(IdentityError):
    pass


@dataclass(frozen=True)
class WorkerIdentity:
    id: str
    email: str
    full_name: str
    image_url: str = ""
    is_worker_approved: bool = False


async def fetch_identity(
    email: str,
    base_url: str = USER_SERVICE_URL,
    request_id: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> WorkerIdentity:
    headers = {"X-Request-Id": request_id} if request_id else {}
    try:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT, transport=transport) as client:
            r = await client.get(f"{base_url.rstrip('/')}/users/{email}", headers=headers)
    except httpx.HTTPError as e:
        raise IdentityError(f"user-service unreachable: {e}") from e

    if r.status_code == 404:
        raise IdentityNotFound(f"No user profile for {email}")
    if r.status_code != 200:
        raise IdentityError(f"user-service responded {r.status_code}")

    data = r.json()
    return WorkerIdentity(
        id=str(data["id"]),
        email=data["email"],
        full_name=data.get("full_name") or "",
        image_url=data.get("image_url") or "",
        is_worker_approved=bool(data.get("is_worker_approved")),
    )
