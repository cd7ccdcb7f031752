from .models import Product, Sale, User, SalesMetrics
from .errors import (
    ApiError,
    AppError,
    AuthenticationError,
    NotFoundError,
    SelectionError,
    ValidationError,
)

__all__ = [
    "Product",
    "Sale",
    "User",
    "SalesMetrics",
    "AppError",
    "ApiError",
    "AuthenticationError",
    "NotFoundError",
    "SelectionError",
    "ValidationError",
]
