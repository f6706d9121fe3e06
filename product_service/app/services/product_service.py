"""Product service for business logic"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ProductNotFoundError, ProductPermissionError
from ..events.event_producers import ProductEventProducer
from ..models.product import Product
from ..repository.product_repository import ProductRepository
from ..repository.specifications import Page, PageRequest, ProductQuery
from ..schemas.product import PagedResponse, ProductRequest, ProductResponse
from ..utils.logging import setup_product_logging as setup_logging

# Setup structured logging for the service
logger = setup_logging("product_service")


class ProductService:
    """Product lifecycle and ownership rules.

    Reads are public. Update and delete are restricted to the caller whose
    identity was recorded as ``owner_id`` when the product was created.
    """

    def __init__(
        self, db: AsyncSession, event_producer: Optional[ProductEventProducer] = None
    ):
        self.db = db
        self.repository = ProductRepository(db)
        self.event_producer = event_producer

    def _convert_to_product_response(self, product: Product) -> ProductResponse:
        return ProductResponse(
            id=product.id,
            name=product.name,
            description=product.description,
            price=Decimal(str(product.price)),
            quantity=product.quantity,
            owner_id=product.owner_id,
        )

    def _convert_to_paged_response(
        self, page: Page[Product]
    ) -> PagedResponse[ProductResponse]:
        return PagedResponse[ProductResponse](
            content=[self._convert_to_product_response(p) for p in page.items],
            page_number=page.page,
            page_size=page.size,
            total_elements=page.total,
            total_pages=page.total_pages,
            is_last_page=page.is_last,
        )

    async def _get_owned_product(
        self, product_id: str, user_id: str, action: str
    ) -> Product:
        product = await self.repository.get_product_by_id(product_id)
        if product is None:
            logger.warning(
                f"Product {action} failed: product not found",
                extra={"product_id": product_id, "user_id": user_id},
            )
            raise ProductNotFoundError()

        if product.owner_id != user_id:
            logger.warning(
                f"Product {action} failed: caller does not own product",
                extra={
                    "product_id": product_id,
                    "user_id": user_id,
                    "owner_id": product.owner_id,
                },
            )
            raise ProductPermissionError(
                f"You do not have permission to {action} this product"
            )
        return product

    async def create_product(
        self,
        product_data: ProductRequest,
        user_id: str,
        correlation_id: Optional[str] = None,
    ) -> ProductResponse:
        """Create a product owned by ``user_id``"""
        logger.info(
            "Attempting to create product",
            extra={"user_id": user_id, "correlation_id": correlation_id},
        )

        product = await self.repository.create_product(product_data, owner_id=user_id)

        logger.info(
            "Product created successfully",
            extra={
                "product_id": product.id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return self._convert_to_product_response(product)

    async def get_product(
        self, product_id: str, correlation_id: Optional[str] = None
    ) -> ProductResponse:
        """Get product by ID"""
        product = await self.repository.get_product_by_id(product_id)
        if product is None:
            logger.warning(
                "Product not found",
                extra={"product_id": product_id, "correlation_id": correlation_id},
            )
            raise ProductNotFoundError()

        logger.info(
            "Product retrieved",
            extra={"product_id": product_id, "correlation_id": correlation_id},
        )
        return self._convert_to_product_response(product)

    async def list_products(self) -> List[ProductResponse]:
        """Every product in the catalog, unpaged"""
        products = await self.repository.find_all()
        logger.info("Retrieved products", extra={"count": len(products)})
        return [self._convert_to_product_response(p) for p in products]

    async def list_products_paged(
        self,
        page: int = 0,
        size: int = 10,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        sort_by: str = "name",
        sort_dir: str = "asc",
        correlation_id: Optional[str] = None,
    ) -> PagedResponse[ProductResponse]:
        """One page of the catalog with optional name and price filters"""
        spec = ProductQuery(search=search, min_price=min_price, max_price=max_price)
        return await self._find_page(
            spec, PageRequest(page, size, sort_by, sort_dir), correlation_id
        )

    async def list_owner_products(self, user_id: str) -> List[ProductResponse]:
        """Every product owned by ``user_id``, unpaged"""
        products = await self.repository.find_all(ProductQuery(owner_id=user_id))
        logger.info(
            "Retrieved owner products",
            extra={"user_id": user_id, "count": len(products)},
        )
        return [self._convert_to_product_response(p) for p in products]

    async def list_owner_products_paged(
        self,
        user_id: str,
        page: int = 0,
        size: int = 10,
        search: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        sort_by: str = "name",
        sort_dir: str = "asc",
        correlation_id: Optional[str] = None,
    ) -> PagedResponse[ProductResponse]:
        """Same as ``list_products_paged`` restricted to ``user_id``'s products"""
        spec = ProductQuery(
            owner_id=user_id, search=search, min_price=min_price, max_price=max_price
        )
        return await self._find_page(
            spec, PageRequest(page, size, sort_by, sort_dir), correlation_id
        )

    async def _find_page(
        self,
        spec: ProductQuery,
        page_request: PageRequest,
        correlation_id: Optional[str],
    ) -> PagedResponse[ProductResponse]:
        result = await self.repository.find_page(spec, page_request)
        logger.info(
            "Retrieved product page",
            extra={
                "owner_id": spec.owner_id,
                "search": spec.search_text,
                "min_price": spec.min_price,
                "max_price": spec.max_price,
                "page": page_request.page,
                "size": page_request.size,
                "sort_by": page_request.sort_by,
                "descending": page_request.descending,
                "returned": len(result.items),
                "total_elements": result.total,
                "correlation_id": correlation_id,
            },
        )
        return self._convert_to_paged_response(result)

    async def update_product(
        self,
        product_id: str,
        product_data: ProductRequest,
        user_id: str,
        correlation_id: Optional[str] = None,
    ) -> ProductResponse:
        """Replace a product's mutable fields; owner only"""
        logger.info(
            "Attempting to update product",
            extra={
                "product_id": product_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )

        product = await self._get_owned_product(product_id, user_id, "update")
        product = await self.repository.update_product(product, product_data)

        logger.info(
            "Product updated successfully",
            extra={
                "product_id": product_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return self._convert_to_product_response(product)

    async def delete_product(
        self, product_id: str, user_id: str, correlation_id: Optional[str] = None
    ) -> None:
        """Delete a product and announce it; owner only.

        The notification is best-effort: a publishing failure is logged and
        the deletion stands.
        """
        logger.info(
            "Attempting to delete product",
            extra={
                "product_id": product_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )

        product = await self._get_owned_product(product_id, user_id, "delete")
        await self.repository.delete_product(product)

        logger.info(
            "Product deleted successfully",
            extra={
                "product_id": product_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )

        if self.event_producer is None:
            logger.warning(
                "Event producer unavailable, product deleted event not published",
                extra={"product_id": product_id, "owner_id": user_id},
            )
            return

        try:
            await self.event_producer.publish_product_deleted(
                product_id=product_id,
                owner_id=user_id,
                correlation_id=correlation_id,
            )
        except Exception as e:
            logger.error(
                "Product deleted event lost",
                extra={
                    "product_id": product_id,
                    "owner_id": user_id,
                    "correlation_id": correlation_id,
                    "error": str(e),
                },
                exc_info=True,
            )
