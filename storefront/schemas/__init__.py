"""
Schemas package for API request/response validation.
These models define the structure of data sent to and from the API endpoints.
"""

# User and auth schemas
from .user import (
    SignupRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    UpdateUserRequest,
    SanitizedUserResponse,
    UserResponse,
    PublicUserResponse
)

# Catalog schemas
from .catalog import (
    CreateBrandRequest,
    CreateCategoryRequest,
    BrandResponse,
    CategoryResponse
)

# Product schemas
from .product import (
    CreateProductRequest,
    UpdateProductRequest,
    ProductResponse
)

# Order schemas
from .order import (
    ORDER_STATUSES,
    PAYMENT_MODES,
    OrderItemRequest,
    CreateOrderRequest,
    UpdateOrderStatusRequest,
    OrderItemResponse,
    OrderAddressResponse,
    OrderResponse
)

# Cart and wishlist schemas
from .cart import (
    AddToCartRequest,
    UpdateCartItemRequest,
    CartItemResponse,
    AddToWishlistRequest,
    UpdateWishlistItemRequest,
    WishlistItemResponse
)

# Address schemas
from .address import (
    CreateAddressRequest,
    UpdateAddressRequest,
    AddressResponse
)

# Review schemas
from .review import (
    CreateReviewRequest,
    UpdateReviewRequest,
    ReviewResponse
)

# Common schemas
from .common import (
    HealthCheckResponse,
    RootResponse,
    MessageResponse,
    ValidationErrorDetail,
    ValidationErrorResponse
)

__all__ = [
    # User and auth schemas
    "SignupRequest",
    "LoginRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "UpdateUserRequest",
    "SanitizedUserResponse",
    "UserResponse",
    "PublicUserResponse",

    # Catalog schemas
    "CreateBrandRequest",
    "CreateCategoryRequest",
    "BrandResponse",
    "CategoryResponse",

    # Product schemas
    "CreateProductRequest",
    "UpdateProductRequest",
    "ProductResponse",

    # Order schemas
    "ORDER_STATUSES",
    "PAYMENT_MODES",
    "OrderItemRequest",
    "CreateOrderRequest",
    "UpdateOrderStatusRequest",
    "OrderItemResponse",
    "OrderAddressResponse",
    "OrderResponse",

    # Cart and wishlist schemas
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartItemResponse",
    "AddToWishlistRequest",
    "UpdateWishlistItemRequest",
    "WishlistItemResponse",

    # Address schemas
    "CreateAddressRequest",
    "UpdateAddressRequest",
    "AddressResponse",

    # Review schemas
    "CreateReviewRequest",
    "UpdateReviewRequest",
    "ReviewResponse",

    # Common schemas
    "HealthCheckResponse",
    "RootResponse",
    "MessageResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse"
]
