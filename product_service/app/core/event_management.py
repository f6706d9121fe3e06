"""
Product Service Event Management
Initializes and manages Kafka event publishing for the product service.
"""

from typing import Optional

from ..events.base.kafka_client import KafkaEventPublisher
from ..events.event_producers import ProductEventProducer
from ..utils.logging import setup_product_logging as setup_logging
from .setting import get_settings

# Setup structured logging for event management
logger = setup_logging("product_service.events", log_level=get_settings().LOG_LEVEL)

# Global instances
_kafka_publisher: Optional[KafkaEventPublisher] = None
_product_event_producer: Optional[ProductEventProducer] = None


async def init_events() -> None:
    """Provision the deletion topic and start the Kafka publisher"""
    global _kafka_publisher, _product_event_producer

    settings = get_settings()

    logger.info(
        "Initializing event publishing infrastructure",
        extra={
            "operation": "init_events",
            "kafka_servers": settings.KAFKA_BOOTSTRAP_SERVERS,
            "topic": settings.KAFKA_TOPIC_PRODUCT_DELETED,
        },
    )

    publisher = KafkaEventPublisher(
        bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
        client_id=f"{settings.SERVICE_NAME}-producer",
        max_retries=5,
        retry_delay=2.0,
        enable_graceful_degradation=True,
    )

    await publisher.ensure_topic_exists(
        settings.KAFKA_TOPIC_PRODUCT_DELETED,
        num_partitions=settings.KAFKA_TOPIC_PARTITIONS,
        replication_factor=settings.KAFKA_TOPIC_REPLICATION_FACTOR,
    )
    await publisher.start(timeout=30.0)

    _kafka_publisher = publisher
    _product_event_producer = ProductEventProducer(
        publisher,
        product_deleted_topic=settings.KAFKA_TOPIC_PRODUCT_DELETED,
        source_service=settings.SERVICE_NAME,
    )

    logger.info(
        "Event publishing infrastructure initialized",
        extra={
            "operation": "init_events_complete",
            "connected": publisher.is_connected,
        },
    )


async def close_events() -> None:
    """Close event publishing infrastructure"""
    global _kafka_publisher, _product_event_producer

    try:
        if _kafka_publisher:
            await _kafka_publisher.stop()
            logger.info(
                "Event publishing infrastructure closed",
                extra={"operation": "close_events"},
            )
    finally:
        _kafka_publisher = None
        _product_event_producer = None


def get_event_producer() -> Optional[ProductEventProducer]:
    """Get the product event producer instance, ``None`` in degraded mode"""
    return _product_event_producer


async def health_check_events() -> bool:
    """Check if event publishing is healthy"""
    if _kafka_publisher:
        return await _kafka_publisher.health_check()
    return False
