"""Load balancer resource graph resolution.

Everything here reads from the live API; nothing is cached between passes.
"""

from __future__ import annotations
from typing import Any

from google.api_core.exceptions import GoogleAPIError

from ..client import ComputeClient
from ..models import (
    BackendService,
    ForwardingRule,
    InstanceGroup,
    ResolvedChain,
    TargetKind,
    TargetPool,
    TargetProxy,
    TargetRef,
    UrlMap,
)
from ..models.config import FORWARDING_RULE_PREFIX, TARGET_PROXY_PREFIX
from ..utils import SelfLinkParseError, get_logger, parse_self_link, parse_timestamp

logger = get_logger()


def parse_target_link(link: str) -> TargetRef:
    """Parse a forwarding rule target into a TargetRef.

    Raises:
        SelfLinkParseError: if the link names no supported target collection
    """
    for kind in TargetKind:
        if f"/{kind.value}/" in link:
            name, scope = parse_self_link(link, kind.value)
            return TargetRef(kind=kind, name=name, scope=scope)
    raise SelfLinkParseError(
        f"failed to find keywords targetHttpProxies, targetHttpsProxies or targetPools in {link!r}"
    )


def list_candidate_forwarding_rules(
    client: ComputeClient, prefix: str = FORWARDING_RULE_PREFIX
) -> dict[TargetKind, list[ForwardingRule]]:
    """List controller-generated forwarding rules, grouped by target kind."""
    candidates: dict[TargetKind, list[ForwardingRule]] = {kind: [] for kind in TargetKind}

    for rule in client.list_forwarding_rules():
        if not rule.name.startswith(prefix):
            continue

        try:
            target = parse_target_link(rule.target)
            _, scope = parse_self_link(rule.self_link, "forwardingRules")
        except SelfLinkParseError as e:
            logger.debug(
                "Skipping forwarding rule with unsupported target",
                extra={"forwarding_rule": rule.name, "error": str(e)},
            )
            continue

        candidates[target.kind].append(
            ForwardingRule(
                name=rule.name,
                scope=scope,
                target=target,
                created_at=parse_timestamp(rule.creation_timestamp),
            )
        )

    logger.info(
        "Loaded candidate forwarding rules",
        extra={"counts": {kind.name: len(rules) for kind, rules in candidates.items()}},
    )
    return candidates


def list_orphan_proxies(
    client: ComputeClient,
    seen_http: set[str],
    seen_https: set[str],
    prefix: str = TARGET_PROXY_PREFIX,
) -> list[TargetRef]:
    """
    List controller-generated proxies that no forwarding rule references.

    These are left behind when provisioning stopped after the proxy was
    created but before the forwarding rule was. A listing failure for one
    protocol is logged and yields no orphans for that protocol.
    """
    orphans: list[TargetRef] = []

    for https, seen in ((False, seen_http), (True, seen_https)):
        kind = TargetKind.HTTPS_PROXY if https else TargetKind.HTTP_PROXY
        try:
            proxies = list(client.list_target_proxies(https))
        except GoogleAPIError as e:
            logger.error(
                "Failed to list target proxies",
                extra={"https": https, "error": str(e)},
            )
            continue

        for proxy in proxies:
            if proxy.name.startswith(prefix) and proxy.name not in seen:
                orphans.append(TargetRef(kind=kind, name=proxy.name, scope="global"))

    if orphans:
        logger.info(
            "Found target proxies without forwarding rules",
            extra={"proxies": [orphan.name for orphan in orphans]},
        )
    return orphans


def _service_links(url_map: Any) -> list[str]:
    """Backend service links of a url map in first-seen order, without duplicates."""
    links: list[str] = []

    def add(link: str) -> None:
        if link and link not in links:
            links.append(link)

    add(url_map.default_service)
    for matcher in url_map.path_matchers:
        add(matcher.default_service)
        for rule in matcher.path_rules:
            add(rule.service)
    return links


def list_group_instances(client: ComputeClient, group_link: str) -> InstanceGroup:
    """
    Load the members of the instance group behind ``group_link``.

    Membership lookups are best-effort: an API failure counts as an empty
    group instead of aborting the evaluation.

    Raises:
        SelfLinkParseError: if the group is not zonal
    """
    name, zone = parse_self_link(group_link, "instanceGroups")
    if f"/zones/{zone}/instanceGroups/" not in group_link:
        raise SelfLinkParseError(f"unsupported non-zonal instance group {group_link!r}")
    try:
        instances = client.list_instance_group_instances(name, zone)
    except GoogleAPIError as e:
        logger.warning(
            "Failed to list instance group members, counting as empty",
            extra={"instance_group": name, "zone": zone, "error": str(e)},
        )
        instances = []
    return InstanceGroup(name=name, zone=zone, instances=instances)


def resolve_backend_service(client: ComputeClient, link: str) -> BackendService:
    name, scope = parse_self_link(link, "backendServices")
    service = client.get_backend_service(name, scope)
    return BackendService(
        name=service.name,
        scope=scope,
        health_checks=list(service.health_checks),
        instance_groups=[
            list_group_instances(client, backend.group) for backend in service.backends
        ],
    )


def resolve_chain(
    client: ComputeClient,
    target: TargetRef,
    forwarding_rule: ForwardingRule | None = None,
) -> ResolvedChain:
    """
    Materialize proxy -> url map -> backend services -> instance groups.

    Raises:
        google.api_core.exceptions.NotFound: if the proxy, url map or a
            backend service no longer exists
        SelfLinkParseError: if a reference cannot be parsed
    """
    proxy = client.get_target_proxy(target.name, target.https, target.scope)
    resolved_proxy = TargetProxy(
        name=proxy.name,
        https=target.https,
        url_map=proxy.url_map,
        scope=target.scope,
        ssl_certificates=list(proxy.ssl_certificates) if target.https else [],
        created_at=parse_timestamp(proxy.creation_timestamp),
    )

    url_map_name, url_map_scope = parse_self_link(proxy.url_map, "urlMaps")
    url_map = client.get_url_map(url_map_name, url_map_scope)
    resolved_url_map = UrlMap(
        name=url_map.name,
        scope=url_map_scope,
        service_links=_service_links(url_map),
    )

    services = [
        resolve_backend_service(client, link) for link in resolved_url_map.service_links
    ]

    return ResolvedChain(
        proxy=resolved_proxy,
        url_map=resolved_url_map,
        backend_services=services,
        forwarding_rule=forwarding_rule,
    )


def resolve_target_pool(client: ComputeClient, target: TargetRef) -> TargetPool:
    """Load a target pool and its instance membership."""
    pool = client.get_target_pool(target.name, target.scope)
    return TargetPool(
        name=pool.name,
        region=target.scope,
        instances=list(pool.instances),
        created_at=parse_timestamp(pool.creation_timestamp),
    )
