"""
Events module for the Product Service.

Producers:
    - ProductEventProducer: publishes ``product.deleted`` notifications
      carrying ``{productId, ownerId}`` on the ``product-deleted`` topic.

Transport:
    - KafkaEventPublisher: aiokafka producer with retry on connect and a
      degraded mode that logs events when the broker is unreachable.
"""

from .base import BaseEvent, EventPublisher
from .base.kafka_client import KafkaEventPublisher
from .event_producers import ProductEventProducer

__all__ = [
    "BaseEvent",
    "EventPublisher",
    "KafkaEventPublisher",
    "ProductEventProducer",
]
