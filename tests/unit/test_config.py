"""Unit tests for environment configuration."""

from __future__ import annotations
import importlib
import os
import pytest
from unittest.mock import patch

from gcp_lb_cleanup.models import config


@pytest.fixture
def reload_config():
    """Reload the config module under a patched environment, restoring it after."""

    def _reload(env):
        with patch.dict(os.environ, env, clear=True):
            return importlib.reload(config)

    yield _reload
    importlib.reload(config)


class TestConfig:
    def test_defaults(self, reload_config):
        module = reload_config({})

        assert module.DRY_RUN is True
        assert module.FORWARDING_RULE_PREFIX == "k8s-fw"
        assert module.TARGET_PROXY_PREFIX == "k8s-tp"
        assert module.FIREWALL_TAG_PREFIX == "gke-"
        assert module.GRACE_PERIOD_MINUTES == 60
        assert module.TASK_EXPIRY_MINUTES == 15
        assert module.FIREWALL_CLEANUP_ENABLED is True

    def test_overrides(self, reload_config):
        module = reload_config(
            {
                "GOOGLE_CLOUD_PROJECT": "fallback-project",
                "DRY_RUN": "false",
                "GRACE_PERIOD_MINUTES": "120",
                "FIREWALL_CLEANUP_ENABLED": "FALSE",
                "LOG_LEVEL": "debug",
            }
        )

        assert module.GCP_PROJECT_ID == "fallback-project"
        assert module.DRY_RUN is False
        assert module.GRACE_PERIOD_MINUTES == 120
        assert module.FIREWALL_CLEANUP_ENABLED is False
        assert module.LOG_LEVEL == "DEBUG"

    def test_config_bundle_reads_module_values(self, reload_config):
        module = reload_config({"GCP_PROJECT_ID": "p", "QUEUE_NAME": "lb-cleanup"})

        bundle = module.Config()

        assert bundle.project_id == "p"
        assert bundle.queue_name == "lb-cleanup"
