"""Fixtures specific to integration tests."""

import pytest


@pytest.fixture(autouse=True)
def _mark_as_integration(request):
    """Automatically mark all tests in integration/ as integration tests."""
    request.node.add_marker(pytest.mark.integration)


@pytest.fixture
def live_mode():
    """Run the worker and the firewall pass with DRY_RUN disabled."""
    from unittest.mock import patch

    with patch("gcp_lb_cleanup.tasks.worker.DRY_RUN", False), patch(
        "gcp_lb_cleanup.firewall.reconciler.DRY_RUN", False
    ):
        yield
