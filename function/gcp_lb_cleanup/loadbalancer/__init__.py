"""Load balancer resolution, classification and deletion planning."""

from .classifier import Liveness, classify, classify_target_pool
from .orchestrator import check_load_balancers, evaluate_proxy, evaluate_target_pool
from .planner import plan_deletion, plan_target_pool_deletion
from .resolver import (
    list_candidate_forwarding_rules,
    list_orphan_proxies,
    parse_target_link,
    resolve_chain,
    resolve_target_pool,
)

__all__ = [
    "Liveness",
    "classify",
    "classify_target_pool",
    "check_load_balancers",
    "evaluate_proxy",
    "evaluate_target_pool",
    "plan_deletion",
    "plan_target_pool_deletion",
    "list_candidate_forwarding_rules",
    "list_orphan_proxies",
    "parse_target_link",
    "resolve_chain",
    "resolve_target_pool",
]
