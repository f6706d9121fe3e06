"""
Product Service Event Producers
==============================

Publishes product lifecycle notifications to other microservices.
"""

from typing import Optional

from ..core.setting import get_settings
from ..utils.logging import setup_product_logging as setup_logging
from .base import BaseEvent, EventPublisher
from .schemas import PRODUCT_DELETED, ProductDeletedEventData

settings = get_settings()
logger = setup_logging("product_service.events.producers", log_level=settings.LOG_LEVEL)


class ProductEventProducer:
    """
    Product service event producer.
    Wraps payloads in ``BaseEvent`` and hands them to the publisher.
    """

    def __init__(
        self,
        publisher: EventPublisher,
        product_deleted_topic: str = "product-deleted",
        source_service: str = "product-service",
    ):
        self.publisher = publisher
        self.product_deleted_topic = product_deleted_topic
        self.source_service = source_service

    async def publish_product_deleted(
        self,
        product_id: str,
        owner_id: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Publish product deleted event"""
        try:
            event_data = ProductDeletedEventData(product_id=product_id, owner_id=owner_id)

            event = BaseEvent(
                event_type=PRODUCT_DELETED,
                source_service=self.source_service,
                data=event_data.to_dict(),
                correlation_id=correlation_id,
                key=product_id,
            )

            await self.publisher.publish(event, topic=self.product_deleted_topic)
            logger.info(
                "Published product deleted event",
                extra={
                    "product_id": product_id,
                    "owner_id": owner_id,
                    "topic": self.product_deleted_topic,
                    "correlation_id": correlation_id,
                },
            )

        except Exception as e:
            logger.error(f"Failed to publish product deleted event: {e}")
            raise
