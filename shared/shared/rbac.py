from fastapi import HTTPException, status

ROLES = {"customer", "worker", "admin"}


def require_role(payload: dict, allowed_roles: list[str]):
    allowed = {r.lower() for r in allowed_roles}
    unknown = allowed - ROLES
    if unknown:
        raise ValueError(f"Unknown roles: {sorted(unknown)}")

    token_roles = payload.get("roles")

    if not isinstance(token_roles, list) or not token_roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Roles missing in token",
        )

    roles = {str(r).lower() for r in token_roles} & ROLES

    if roles.isdisjoint(allowed):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access forbidden for this role",
        )
