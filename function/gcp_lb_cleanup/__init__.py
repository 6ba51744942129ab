"""GCP orphaned load balancer and firewall rule cleanup."""

__version__ = "1.0.0"
