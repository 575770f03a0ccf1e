# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Storefront API:
# - test_models.py: Pydantic model validation
# - test_config.py: Settings parsing and computed properties
# - test_storage.py: storage contract, run on memory and SQLite
# - test_storage_select.py: backend selection and fallbacks
# - test_auth.py ... test_admin.py: API endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
