from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import ProductServiceBaseModel


class Product(ProductServiceBaseModel):
    __tablename__ = "products"

    # id, created_at, updated_at are inherited from ProductServiceBaseModel
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2, asdecimal=True), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Set once at creation from the caller identity, never updated
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Product id={self.id!r} name={self.name!r} owner_id={self.owner_id!r}>"
