"""Product domain exceptions.

Raised by the service layer when a business rule is violated. The error
handling middleware translates them into envelope responses using the
``status_code`` each class carries.
"""


class ProductServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 400
    error_type: str = "product_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProductNotFoundError(ProductServiceError):
    """The referenced product id does not exist."""

    status_code = 404
    error_type = "not_found"

    def __init__(self, message: str = "Product not found") -> None:
        super().__init__(message)


class ProductPermissionError(ProductServiceError):
    """The caller is not the owner of the product."""

    status_code = 403
    error_type = "forbidden"


class ProductValidationError(ProductServiceError):
    """Malformed listing parameters or request data."""

    status_code = 400
    error_type = "validation_error"
