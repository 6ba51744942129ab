"""Dangling firewall rule cleanup."""

from .reconciler import find_dangling_firewalls, map_tags_to_firewalls, reconcile_firewalls

__all__ = [
    "find_dangling_firewalls",
    "map_tags_to_firewalls",
    "reconcile_firewalls",
]
