"""Load balancer check pass.

Every candidate is evaluated independently: a candidate that vanished or
failed to resolve is skipped without affecting its siblings. Dead trees are
turned into deletion plans and handed to the work queue; nothing is deleted
here.
"""

from __future__ import annotations
import datetime
from typing import Any, Callable

from google.api_core.exceptions import NotFound

from ..client import ComputeClient
from ..models import DeletionTask, ForwardingRule, TargetKind, TargetRef
from ..tasks import WorkQueue, dispatch_plan
from ..utils import get_logger, utc_now
from .classifier import Liveness, classify, classify_target_pool
from .planner import plan_deletion, plan_target_pool_deletion
from .resolver import (
    list_candidate_forwarding_rules,
    list_orphan_proxies,
    resolve_chain,
    resolve_target_pool,
)

logger = get_logger()


def evaluate_proxy(
    client: ComputeClient,
    target: TargetRef,
    now: datetime.datetime,
    forwarding_rule: ForwardingRule | None = None,
) -> list[DeletionTask]:
    """Resolve and classify one proxy tree; return its plan if dead, else []."""
    chain = resolve_chain(client, target, forwarding_rule)
    liveness = classify(chain, chain.proxy.created_at, now)

    logger.info(
        "Classified target proxy",
        extra={
            "target_proxy": chain.proxy.name,
            "forwarding_rule": forwarding_rule.name if forwarding_rule else None,
            "url_map": chain.url_map.name,
            "backend_services": [service.name for service in chain.backend_services],
            "instance_count": chain.instance_count,
            "liveness": liveness.value,
        },
    )

    if liveness is not Liveness.DEAD:
        return []
    return plan_deletion(chain, now)


def evaluate_target_pool(
    client: ComputeClient, forwarding_rule: ForwardingRule, now: datetime.datetime
) -> list[DeletionTask]:
    """Resolve and classify the target pool behind a network load balancer."""
    pool = resolve_target_pool(client, forwarding_rule.target)
    liveness = classify_target_pool(pool, now)

    logger.info(
        "Classified target pool",
        extra={
            "target_pool": pool.name,
            "region": pool.region,
            "forwarding_rule": forwarding_rule.name,
            "instance_count": len(pool.instances),
            "liveness": liveness.value,
        },
    )

    if liveness is not Liveness.DEAD:
        return []
    return plan_target_pool_deletion(forwarding_rule, pool, now)


def _evaluate_and_dispatch(
    name: str,
    evaluate: Callable[[], list[DeletionTask]],
    queue: WorkQueue,
    stats: dict[str, int],
) -> None:
    """Run one candidate evaluation, isolating its failures from the pass."""
    stats["evaluated"] += 1
    try:
        tasks = evaluate()
        if tasks:
            dispatch_plan(queue, tasks)
            stats["dead"] += 1
            stats["tasks"] += len(tasks)
    except NotFound as e:
        # Vanished between listing and dereferencing, nothing left to plan
        stats["vanished"] += 1
        logger.info(
            "Resource disappeared during evaluation, skipping",
            extra={"candidate": name, "error": str(e)},
        )
    except Exception as e:
        stats["errors"] += 1
        logger.error(
            "Failed to evaluate candidate",
            extra={"candidate": name, "error": str(e), "error_type": type(e).__name__},
        )


def check_load_balancers(
    client: ComputeClient,
    queue: WorkQueue,
    now: datetime.datetime | None = None,
) -> dict[str, Any]:
    """
    Evaluate every controller-generated load balancer once.

    Forwarding rules are evaluated first; proxies they reference are then
    excluded from the orphan scan. Target-pool forwarding rules follow.

    Returns:
        Pass statistics (evaluated, dead, vanished, errors, tasks)
    """
    now = now or utc_now()
    stats = {"evaluated": 0, "dead": 0, "vanished": 0, "errors": 0, "tasks": 0}

    candidates = list_candidate_forwarding_rules(client)

    seen: dict[TargetKind, set[str]] = {
        TargetKind.HTTP_PROXY: set(),
        TargetKind.HTTPS_PROXY: set(),
    }
    for kind in (TargetKind.HTTP_PROXY, TargetKind.HTTPS_PROXY):
        for rule in candidates[kind]:
            seen[kind].add(rule.target.name)
            logger.debug(
                "Checking forwarding rule",
                extra={"forwarding_rule": rule.name, "target_proxy": rule.target.name},
            )
            _evaluate_and_dispatch(
                rule.name,
                lambda rule=rule: evaluate_proxy(client, rule.target, now, rule),
                queue,
                stats,
            )

    orphans = list_orphan_proxies(
        client, seen[TargetKind.HTTP_PROXY], seen[TargetKind.HTTPS_PROXY]
    )
    for orphan in orphans:
        _evaluate_and_dispatch(
            orphan.name,
            lambda orphan=orphan: evaluate_proxy(client, orphan, now),
            queue,
            stats,
        )

    for rule in candidates[TargetKind.TARGET_POOL]:
        _evaluate_and_dispatch(
            rule.name,
            lambda rule=rule: evaluate_target_pool(client, rule, now),
            queue,
            stats,
        )

    logger.info("Load balancer check complete", extra={"statistics": stats})
    return stats
