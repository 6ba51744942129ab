"""Configuration from environment variables."""

import os

# Project and execution mode
GCP_PROJECT_ID = os.environ.get("GCP_PROJECT_ID") or os.environ.get(
    "GOOGLE_CLOUD_PROJECT", ""
)
DRY_RUN = os.environ.get("DRY_RUN", "true").lower() == "true"

# Cloud Tasks queue that carries deletion tasks
QUEUE_NAME = os.environ.get("QUEUE_NAME", "default")
QUEUE_LOCATION = os.environ.get("QUEUE_LOCATION", "us-central1")
TASK_HANDLER_URL = os.environ.get("TASK_HANDLER_URL", "")
TASK_SERVICE_ACCOUNT = os.environ.get("TASK_SERVICE_ACCOUNT", "")

# Names generated by the GKE ingress controller
FORWARDING_RULE_PREFIX = os.environ.get("FORWARDING_RULE_PREFIX", "k8s-fw")
TARGET_PROXY_PREFIX = os.environ.get("TARGET_PROXY_PREFIX", "k8s-tp")
FIREWALL_TAG_PREFIX = os.environ.get("FIREWALL_TAG_PREFIX", "gke-")

# Resources younger than this are still initializing and never deleted
GRACE_PERIOD_MINUTES = int(os.environ.get("GRACE_PERIOD_MINUTES", "60"))

# Deletion tasks delivered after this window are discarded
TASK_EXPIRY_MINUTES = int(os.environ.get("TASK_EXPIRY_MINUTES", "15"))

FIREWALL_CLEANUP_ENABLED = (
    os.environ.get("FIREWALL_CLEANUP_ENABLED", "true").lower() == "true"
)

API_TIMEOUT_SECONDS = float(os.environ.get("API_TIMEOUT_SECONDS", "30"))

# Logging configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


class Config:
    """Configuration bundle passed to the handlers."""

    def __init__(self):
        self.project_id = GCP_PROJECT_ID
        self.dry_run = DRY_RUN
        self.queue_name = QUEUE_NAME
        self.queue_location = QUEUE_LOCATION
        self.task_handler_url = TASK_HANDLER_URL
        self.task_service_account = TASK_SERVICE_ACCOUNT
        self.forwarding_rule_prefix = FORWARDING_RULE_PREFIX
        self.target_proxy_prefix = TARGET_PROXY_PREFIX
        self.firewall_tag_prefix = FIREWALL_TAG_PREFIX
        self.grace_period_minutes = GRACE_PERIOD_MINUTES
        self.task_expiry_minutes = TASK_EXPIRY_MINUTES
        self.firewall_cleanup_enabled = FIREWALL_CLEANUP_ENABLED
        self.api_timeout_seconds = API_TIMEOUT_SECONDS
