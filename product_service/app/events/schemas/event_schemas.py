"""
Product service event schemas.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Event type constants
PRODUCT_DELETED = "product.deleted"


class ProductEventData(BaseModel):
    """Base product event payload; serialized with camelCase keys"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-ready message value"""
        return self.model_dump(mode="json", by_alias=True)


class ProductDeletedEventData(ProductEventData):
    """Payload announcing that a product was removed by its owner"""

    product_id: str
    owner_id: str
