import importlib
import pytest

@pytest.mark.parametrize("module", [
    "app.main",
    "app.core.verifier",
    "app.store.link_repo",
    "app.api.admin_routes",
])
def test_import_graph_smoke(module):
    """Importing never needs a live Redis (clients connect lazily)."""
    try:
        importlib.import_module(module)
    except ImportError as e:
        pytest.fail(f"Import failed for {module}: {e}")

def test_uvicorn_importable():
    """
    Simulate uvicorn import string loading.
    """
    from app.main import app
    paths = app.openapi()["paths"]
    assert "/api/verify-secure-link" in paths
    assert "/admin/metrics" in paths
