"""Smoke test for application startup."""


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from binderkeep.main import app

    assert app.title == "BinderKeep"


def test_routes_registered() -> None:
    """Every router is mounted."""
    from binderkeep.main import app

    paths = set(app.openapi()["paths"])

    assert {"/auth", "/auth/me", "/sets", "/sets/{set_id}", "/cards", "/cards/{card_id}"} <= paths
    assert {"/catalog/sets", "/catalog/sets/{set_api_id}/cards", "/health", "/ready"} <= paths
