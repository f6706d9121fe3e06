"""Product API endpoints"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...core.setting import get_settings
from ...middleware.auth.identity import CallerIdentity
from ...schemas.product import (
    ApiResponse,
    PagedResponse,
    ProductRequest,
    ProductResponse,
)
from ...services.product_service import ProductService
from ...utils.logging import setup_product_logging as setup_logging
from ..dependencies import CorrelationIdDep, ProductServiceDep, SellerUserDep

logger = setup_logging("products_api")
settings = get_settings()
router = APIRouter(prefix="/products")


class ListingParams:
    """Paging, filtering and sorting query parameters shared by listings"""

    def __init__(
        self,
        page: int = Query(0, ge=0),
        size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
        search: Optional[str] = Query(None),
        min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
        max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
        sort_by: str = Query("name", alias="sortBy"),
        sort_dir: str = Query("asc", alias="sortDir"),
    ):
        self.page = page
        self.size = size
        self.search = search
        self.min_price = min_price
        self.max_price = max_price
        self.sort_by = sort_by
        self.sort_dir = sort_dir


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_data: ProductRequest,
    correlation_id: Optional[str] = CorrelationIdDep,
    caller: CallerIdentity = SellerUserDep,
    service: ProductService = ProductServiceDep,
):
    """Create a product owned by the calling seller"""
    logger.info(
        "POST /api/products - create product request",
        extra={"user_id": caller.user_id, "correlation_id": correlation_id},
    )
    product = await service.create_product(
        product_data=product_data,
        user_id=caller.user_id,
        correlation_id=correlation_id,
    )
    return ApiResponse[ProductResponse](
        success=True, message="Product created successfully", data=product
    )


@router.get("", response_model=ApiResponse[PagedResponse[ProductResponse]])
async def list_products(
    params: ListingParams = Depends(ListingParams),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Public catalog listing with paging, search, price range and sort"""
    products = await service.list_products_paged(
        page=params.page,
        size=params.size,
        search=params.search,
        min_price=params.min_price,
        max_price=params.max_price,
        sort_by=params.sort_by,
        sort_dir=params.sort_dir,
        correlation_id=correlation_id,
    )
    return ApiResponse[PagedResponse[ProductResponse]](
        success=True, message="Products retrieved successfully", data=products
    )


@router.get(
    "/my-products", response_model=ApiResponse[PagedResponse[ProductResponse]]
)
async def list_my_products(
    params: ListingParams = Depends(ListingParams),
    correlation_id: Optional[str] = CorrelationIdDep,
    caller: CallerIdentity = SellerUserDep,
    service: ProductService = ProductServiceDep,
):
    """The calling seller's own products, same paging and filters as the catalog"""
    products = await service.list_owner_products_paged(
        user_id=caller.user_id,
        page=params.page,
        size=params.size,
        search=params.search,
        min_price=params.min_price,
        max_price=params.max_price,
        sort_by=params.sort_by,
        sort_dir=params.sort_dir,
        correlation_id=correlation_id,
    )
    return ApiResponse[PagedResponse[ProductResponse]](
        success=True, message="Products retrieved successfully", data=products
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(
    product_id: str,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ProductService = ProductServiceDep,
):
    """Get product details by ID"""
    product = await service.get_product(
        product_id=product_id, correlation_id=correlation_id
    )
    return ApiResponse[ProductResponse](
        success=True, message="Product retrieved successfully", data=product
    )


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: str,
    product_data: ProductRequest,
    correlation_id: Optional[str] = CorrelationIdDep,
    caller: CallerIdentity = SellerUserDep,
    service: ProductService = ProductServiceDep,
):
    """Replace a product's fields (owner only)"""
    product = await service.update_product(
        product_id=product_id,
        product_data=product_data,
        user_id=caller.user_id,
        correlation_id=correlation_id,
    )
    return ApiResponse[ProductResponse](
        success=True, message="Product updated successfully", data=product
    )


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    product_id: str,
    correlation_id: Optional[str] = CorrelationIdDep,
    caller: CallerIdentity = SellerUserDep,
    service: ProductService = ProductServiceDep,
):
    """Delete a product (owner only)"""
    await service.delete_product(
        product_id=product_id,
        user_id=caller.user_id,
        correlation_id=correlation_id,
    )
    return ApiResponse[None](
        success=True, message="Product deleted successfully", data=None
    )
