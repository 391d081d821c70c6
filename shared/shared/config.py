import os

RABBIT_URL = os.getenv("RABBIT_URL")  # optional in dev, required if you want events
REDIS_URL = os.getenv("REDIS_URL")

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"

LOG_LEVEL = os.getenv("LOG_LEVEL") or "INFO"
SQL_ECHO = (os.getenv("SQL_ECHO") or "").lower() in ("1", "true", "yes")

EXCHANGE_NAME = "domain_events"


def require(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} environment variable is not set")
    return value
