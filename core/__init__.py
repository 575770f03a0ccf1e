# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the storefront's business logic:
# - models/: Pydantic schemas for data validation
# - services/: accounts, catalog, cart, checkout/orders and reviews
#
# Services talk to lib.storage only, never to a database driver directly.
# =============================================================================
