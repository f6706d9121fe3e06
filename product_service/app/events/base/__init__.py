"""
Product Service event base classes and interfaces.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BaseEvent(BaseModel):
    """Base class for all domain events.

    ``data`` is the message value delivered to subscribers; the remaining
    fields are metadata carried alongside it.
    """

    event_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    event_type: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = "1.0"
    source_service: str = "product-service"
    correlation_id: Optional[str] = None
    key: Optional[str] = None
    data: Dict[str, Any] = {}

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    def headers(self) -> list[tuple[str, bytes]]:
        """Event metadata encoded as Kafka record headers."""
        metadata = {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "version": self.version,
            "source_service": self.source_service,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.correlation_id:
            metadata["correlation_id"] = self.correlation_id
        return [(name, value.encode("utf-8")) for name, value in metadata.items()]


class EventPublisher(ABC):
    """Abstract base class for event publishers"""

    @abstractmethod
    async def publish(self, event: BaseEvent, topic: str) -> None:
        """Publish an event"""
        pass
