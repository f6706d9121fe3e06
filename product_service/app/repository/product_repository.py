"""Product repository for database operations"""

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.product import Product
from ..schemas.product import ProductRequest
from .specifications import Page, PageRequest, ProductQuery


class ProductRepository:
    """Repository for product database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_product(
        self, product_data: ProductRequest, owner_id: str
    ) -> Product:
        """Insert a new product owned by ``owner_id``"""
        product = Product(
            name=product_data.name,
            description=product_data.description,
            price=product_data.price,
            quantity=product_data.quantity,
            owner_id=owner_id,
        )

        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        """Get product by ID"""
        query = select(Product).where(Product.id == product_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_all(self, spec: Optional[ProductQuery] = None) -> Sequence[Product]:
        """Every product matching ``spec``, unpaged"""
        spec = spec or ProductQuery()
        query = select(Product).where(*spec.conditions()).order_by(Product.id)
        result = await self.db.execute(query)
        return result.scalars().all()

    async def find_page(
        self, spec: ProductQuery, page_request: PageRequest
    ) -> Page[Product]:
        """One sorted page of products matching ``spec`` plus the total count"""
        conditions = spec.conditions()

        count_query = select(func.count()).select_from(Product).where(*conditions)
        total = (await self.db.execute(count_query)).scalar_one()

        query = (
            select(Product)
            .where(*conditions)
            .order_by(*page_request.order_by())
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        result = await self.db.execute(query)

        return Page(
            items=result.scalars().all(),
            total=total,
            page=page_request.page,
            size=page_request.size,
        )

    async def update_product(
        self, product: Product, product_data: ProductRequest
    ) -> Product:
        """Replace every mutable field; ``owner_id`` is left untouched"""
        product.name = product_data.name
        product.description = product_data.description
        product.price = product_data.price
        product.quantity = product_data.quantity

        await self.db.commit()
        await self.db.refresh(product)
        return product

    async def delete_product(self, product: Product) -> None:
        """Physically remove the product row"""
        await self.db.delete(product)
        await self.db.commit()
