"""Cascading deletion plans for dead load balancers.

Plans are built without side effects; every task of one plan shares the
same expiry so that a late redelivery never touches a resource that was
recreated after the pass that planned it.
"""

from __future__ import annotations
import datetime

from ..models import DeletionTask, ForwardingRule, ResolvedChain, ResourceKind, TargetPool
from ..models.config import TASK_EXPIRY_MINUTES
from ..utils import SelfLinkParseError, get_logger, parse_self_link

logger = get_logger()

TASK_EXPIRY = datetime.timedelta(minutes=TASK_EXPIRY_MINUTES)


def health_check_task(link: str, expires: datetime.datetime) -> DeletionTask | None:
    """Build the deletion task for a health check link (modern or legacy)."""
    if "/httpHealthChecks/" in link:
        kind, keyword = ResourceKind.HTTP_HEALTH_CHECK, "httpHealthChecks"
    else:
        kind, keyword = ResourceKind.HEALTH_CHECK, "healthChecks"

    try:
        name, scope = parse_self_link(link, keyword)
    except SelfLinkParseError as e:
        logger.warning(f"Skipping unparseable health check link: {e}")
        return None
    return DeletionTask(kind=kind, name=name, scope=scope, expires=expires)


def plan_deletion(
    chain: ResolvedChain,
    now: datetime.datetime,
    ttl: datetime.timedelta = TASK_EXPIRY,
) -> list[DeletionTask]:
    """
    Build the ordered deletion plan for a dead tree.

    Order:
      1. the target proxy (severs the tree from new traffic)
      2. its SSL certificates, then each backend service and its health checks
      3. the url map
      4. the forwarding rule, when there is one
    """
    expires = now + ttl
    proxy = chain.proxy
    proxy_kind = ResourceKind.TARGET_HTTPS_PROXY if proxy.https else ResourceKind.TARGET_HTTP_PROXY

    tasks = [DeletionTask(kind=proxy_kind, name=proxy.name, scope=proxy.scope, expires=expires)]

    if proxy.https:
        for link in proxy.ssl_certificates:
            try:
                name, scope = parse_self_link(link, "sslCertificates")
            except SelfLinkParseError as e:
                logger.warning(f"Skipping unparseable certificate link: {e}")
                continue
            tasks.append(
                DeletionTask(
                    kind=ResourceKind.SSL_CERTIFICATE, name=name, scope=scope, expires=expires
                )
            )

    for service in chain.backend_services:
        tasks.append(
            DeletionTask(
                kind=ResourceKind.BACKEND_SERVICE,
                name=service.name,
                scope=service.scope,
                expires=expires,
            )
        )
        for link in service.health_checks:
            task = health_check_task(link, expires)
            if task:
                tasks.append(task)

    tasks.append(
        DeletionTask(
            kind=ResourceKind.URL_MAP,
            name=chain.url_map.name,
            scope=chain.url_map.scope,
            expires=expires,
        )
    )

    if chain.forwarding_rule:
        tasks.append(
            DeletionTask(
                kind=ResourceKind.FORWARDING_RULE,
                name=chain.forwarding_rule.name,
                scope=chain.forwarding_rule.scope,
                expires=expires,
            )
        )

    return tasks


def plan_target_pool_deletion(
    forwarding_rule: ForwardingRule,
    pool: TargetPool,
    now: datetime.datetime,
    ttl: datetime.timedelta = TASK_EXPIRY,
) -> list[DeletionTask]:
    """Forwarding rule first (it references the pool), then the pool."""
    expires = now + ttl
    return [
        DeletionTask(
            kind=ResourceKind.FORWARDING_RULE,
            name=forwarding_rule.name,
            scope=forwarding_rule.scope,
            expires=expires,
        ),
        DeletionTask(
            kind=ResourceKind.TARGET_POOL,
            name=pool.name,
            scope=pool.region,
            expires=expires,
        ),
    ]
