"""Tests for the application wiring in main.py."""

from fastapi.middleware.cors import CORSMiddleware

from main import app


class TestAppWiring:
    def test_only_cors_middleware(self) -> None:
        assert [m.cls for m in app.user_middleware] == [CORSMiddleware]

    def test_memory_routes_registered(self) -> None:
        paths = {route.path for route in app.routes}

        assert {"/health", "/health/memory", "/hooks/{event_name}", "/tools", "/tools/{tool_name}"} <= paths
