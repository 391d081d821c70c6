from shared.rabbitmq import RabbitPublisher

from .config import SERVICE_NAME

publisher = RabbitPublisher(SERVICE_NAME)
