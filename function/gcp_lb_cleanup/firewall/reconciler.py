"""Dangling firewall rule reconciliation.

GKE creates firewall rules scoped to node-pool network tags. When a cluster
is torn down without cleanup those rules outlive every instance carrying the
tag. This pass is synchronous and all-or-nothing per run: any API error
aborts it, and the next scheduled run starts over.
"""

from __future__ import annotations

from google.api_core.exceptions import NotFound

from ..client import ComputeClient
from ..models import FirewallRule, ResourceKind
from ..models.config import DRY_RUN, FIREWALL_TAG_PREFIX
from ..utils import get_logger

logger = get_logger()


def map_tags_to_firewalls(
    client: ComputeClient, tag_prefix: str = FIREWALL_TAG_PREFIX
) -> dict[str, list[FirewallRule]]:
    """Map each node-pool tag to the firewall rules targeting it."""
    tags_to_rules: dict[str, list[FirewallRule]] = {}
    for firewall in client.list_firewalls():
        rule = FirewallRule(name=firewall.name, target_tags=list(firewall.target_tags))
        for tag in rule.target_tags:
            if tag.startswith(tag_prefix):
                tags_to_rules.setdefault(tag, []).append(rule)
    return tags_to_rules


def find_dangling_firewalls(
    client: ComputeClient, tag_prefix: str = FIREWALL_TAG_PREFIX
) -> list[FirewallRule]:
    """
    Return firewall rules keyed by a tag that no instance in any zone carries.

    Raises:
        google.api_core.exceptions.GoogleAPIError: if listing firewalls,
            zones or instances fails
    """
    tags_to_rules = map_tags_to_firewalls(client, tag_prefix)
    logger.info(
        "Loaded tagged firewall rules",
        extra={"tags": len(tags_to_rules)},
    )

    zones_scanned = 0
    for zone in client.list_zones():
        # Every tag has been seen on a live instance
        if not tags_to_rules:
            break

        zones_scanned += 1
        for instance in client.list_instances(zone.name):
            for tag in instance.tags.items:
                tags_to_rules.pop(tag, None)

    dangling: dict[str, FirewallRule] = {}
    for rules in tags_to_rules.values():
        for rule in rules:
            dangling.setdefault(rule.name, rule)

    logger.info(
        "Dangling firewall scan complete",
        extra={
            "zones_scanned": zones_scanned,
            "dangling_tags": sorted(tags_to_rules),
            "dangling_firewalls": list(dangling),
        },
    )
    return list(dangling.values())


def reconcile_firewalls(
    client: ComputeClient, tag_prefix: str = FIREWALL_TAG_PREFIX
) -> list[str]:
    """
    Delete every dangling firewall rule.

    Returns:
        Names of the rules deleted (or that would be deleted in DRY_RUN)

    Raises:
        google.api_core.exceptions.GoogleAPIError: on the first failure; the
            remaining rules are left for the next run
    """
    deleted = []
    for rule in find_dangling_firewalls(client, tag_prefix):
        if DRY_RUN:
            logger.info(
                f"[DRY-RUN] Would DELETE firewall {rule.name}",
                extra={"dry_run": True, "firewall": rule.name, "target_tags": rule.target_tags},
            )
            deleted.append(rule.name)
            continue

        try:
            client.delete(ResourceKind.FIREWALL, rule.name)
        except NotFound:
            logger.info("Firewall rule already deleted", extra={"firewall": rule.name})
            continue

        logger.info(
            f"DELETE firewall {rule.name}",
            extra={"firewall": rule.name, "target_tags": rule.target_tags},
        )
        deleted.append(rule.name)

    return deleted
