import pytest

from lookup_manager.manager import configure_lookup_manager
from lookup_manager.metrics import reset_lookup_metrics_backend_for_tests


@pytest.fixture(autouse=True)
def _reset_lookup_singletons():
    """Start every test with a fresh manager and metrics backend."""
    configure_lookup_manager(None)
    reset_lookup_metrics_backend_for_tests()
    yield
    configure_lookup_manager(None)
    reset_lookup_metrics_backend_for_tests()
