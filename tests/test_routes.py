# =============================================================================
# tests/test_routes.py - Route Wiring Tests
# =============================================================================
# Storage calls are synchronous, so every endpoint and auth dependency that
# reaches storage must be a plain function FastAPI runs in its threadpool.
#
# Run with: pytest tests/test_routes.py -v
# =============================================================================

import inspect

from fastapi.routing import APIRoute

from app.auth import get_current_user, require_roles
from app.dependencies import get_storage
from app.main import app
from core.models import UserRole


def uses_storage(dependant):
    return any(dep.call is get_storage or uses_storage(dep) for dep in dependant.dependencies)


def storage_routes():
    return [
        route
        for route in app.routes
        if isinstance(route, APIRoute) and uses_storage(route.dependant)
    ]


class TestSyncHandlers:
    """Tests that blocking storage work stays off the event loop."""

    def test_storage_routes_are_found(self):
        paths = {route.path for route in storage_routes()}

        assert "/api/products" in paths
        assert "/api/users/{user_id}" in paths
        assert "/api/health/live" not in paths

    def test_storage_endpoints_are_not_coroutines(self):
        async_routes = [
            f"{sorted(route.methods)} {route.path}"
            for route in storage_routes()
            if inspect.iscoroutinefunction(route.endpoint)
        ]

        assert async_routes == []

    def test_auth_dependencies_are_not_coroutines(self):
        assert not inspect.iscoroutinefunction(get_current_user)
        assert not inspect.iscoroutinefunction(require_roles(UserRole.ADMIN))
