# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - categories.py: Category browsing and admin management
# - products.py: Catalog, product management, category links, reviews list
# - cart.py: The current user's shopping cart
# - orders.py: Checkout and order tracking
# - shipments.py: Shipment updates
# - reviews.py: Posting and moderating reviews
# - users.py: User and seller administration
#
# Each router is mounted in main.py with a URL prefix. Handlers that reach
# storage are plain `def` so FastAPI runs them in its threadpool.
# =============================================================================

from . import health
from . import categories
from . import products
from . import cart
from . import orders
from . import shipments
from . import reviews
from . import users

__all__ = [
    "health",
    "categories",
    "products",
    "cart",
    "orders",
    "shipments",
    "reviews",
    "users",
]
