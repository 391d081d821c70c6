import logging

import httpx

from shared.breaker import CircuitBreaker, CircuitBreakerOpen

from .config import CHAT_SERVICE_URL, HTTP_TIMEOUT

logger = logging.getLogger(__name__)

cb_chat = CircuitBreaker("chat-service", failure_threshold=5, reset_timeout_seconds=10)


class ConversationError(Exception):
    pass


class ConversationClient:
    """Ensure-or-create of a chat thread, served by chat-service."""

    def __init__(
        self,
        base_url: str = CHAT_SERVICE_URL,
        breaker: CircuitBreaker = cb_chat,
        timeout: float = HTTP_TIMEOUT,
        request_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.breaker = breaker
        self.timeout = timeout
        self.request_id = request_id
        self._transport = transport

    async def ensure_conversation(
        self,
        participant_a: str,
        participant_b: str,
        display_name_a: str,
        display_name_b: str,
        avatar_a: str,
        avatar_b: str,
    ) -> str:
        try:
            await self.breaker.allow_request()
        except CircuitBreakerOpen as e:
            raise ConversationError(str(e)) from e

        payload = {
            "participant_a": participant_a,
            "participant_b": participant_b,
            "display_name_a": display_name_a,
            "display_name_b": display_name_b,
            "avatar_a": avatar_a,
            "avatar_b": avatar_b,
        }
        headers = {"X-Request-Id": self.request_id} if self.request_id else {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(f"{self.base_url}/conversations/ensure", json=payload, headers=headers)
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPError as e:
            await self.breaker.record_failure()
            raise ConversationError(f"Ensuring conversation failed: {e}") from e
        except ValueError as e:
            await self.breaker.record_failure()
            raise ConversationError(f"chat-service returned a non-JSON body: {e}") from e

        conversation_id = body.get("conversation_id") if isinstance(body, dict) else None
        if not conversation_id:
            await self.breaker.record_failure()
            raise ConversationError("chat-service returned no conversation_id")

        await self.breaker.record_success()

        logger.debug("conversation %s ready for %s/%s", conversation_id, participant_a, participant_b)
        return conversation_id
