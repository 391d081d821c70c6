import logging

import aio_pika

from .config import RABBIT_URL, EXCHANGE_NAME
from .events import build_event, to_json

logger = logging.getLogger(__name__)


class RabbitPublisher:
    """
    Lazily connected topic-exchange publisher.

    Publishing is best effort: a broker outage is logged and never fails
    the request that produced the event.
    """

    def __init__(self, service_name: str, url: str | None = RABBIT_URL):
        self.service_name = service_name
        self.url = url
        self.enabled = bool(url)
        self._connection: aio_pika.abc.AbstractRobustConnection | None = None
        self._channel: aio_pika.abc.AbstractChannel | None = None
        self._exchange: aio_pika.abc.AbstractExchange | None = None

    async def connect(self):
        if not self.enabled:
            return

        if self._connection and not self._connection.is_closed:
            return

        try:
            self._connection = await aio_pika.connect_robust(self.url)
            self._channel = await self._connection.channel()
            self._exchange = await self._channel.declare_exchange(
                EXCHANGE_NAME,
                aio_pika.ExchangeType.TOPIC,
                durable=True,
            )
        except Exception as e:
            logger.warning("[%s] RabbitMQ connect failed: %s", self.service_name, e)
            self._connection = None
            self._channel = None
            self._exchange = None
            raise

    async def publish(self, routing_key: str, message_body: str):
        if not self.enabled:
            return

        try:
            await self.connect()
        except Exception:
            return

        if not self._exchange:
            return

        try:
            msg = aio_pika.Message(
                body=message_body.encode("utf-8"),
                content_type="application/json",
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            )
            await self._exchange.publish(msg, routing_key=routing_key)
        except Exception as e:
            logger.warning("[%s] RabbitMQ publish failed: %s", self.service_name, e)

    async def publish_event(self, event_type: str, data: dict):
        await self.publish(event_type, to_json(build_event(event_type, data)))

    async def close(self):
        try:
            if self._connection and not self._connection.is_closed:
                await self._connection.close()
        finally:
            self._connection = None
            self._channel = None
            self._exchange = None
