from .auth import router as auth_router
from .users import router as users_router
from .products import router as products_router
from .orders import router as orders_router
from .cart import router as cart_router
from .catalog import brands_router, categories_router
from .addresses import router as addresses_router
from .reviews import router as reviews_router
from .wishlist import router as wishlist_router

routers = [
    auth_router,
    users_router,
    products_router,
    orders_router,
    cart_router,
    brands_router,
    categories_router,
    addresses_router,
    reviews_router,
    wishlist_router,
]

__all__ = ["routers"]
