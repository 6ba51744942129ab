"""Dead/alive classification of resolved load balancer trees."""

from __future__ import annotations
import datetime
from enum import Enum

from ..models import ResolvedChain, TargetPool
from ..models.config import GRACE_PERIOD_MINUTES

GRACE_PERIOD = datetime.timedelta(minutes=GRACE_PERIOD_MINUTES)


class Liveness(str, Enum):
    ALIVE = "alive"
    DEAD = "dead"


def within_grace_period(
    created_at: datetime.datetime | None,
    now: datetime.datetime,
    grace: datetime.timedelta = GRACE_PERIOD,
) -> bool:
    """True if the resource may still be initializing.

    A resource without a usable creation time is treated as new.
    """
    if created_at is None:
        return True
    return now - created_at < grace


def classify(
    chain: ResolvedChain,
    created_at: datetime.datetime | None,
    now: datetime.datetime,
    grace: datetime.timedelta = GRACE_PERIOD,
) -> Liveness:
    """
    Classify a resolved tree.

    Dead iff the resource is older than the grace window and no instance
    group of any backend service has a member, in any lifecycle state.
    """
    if within_grace_period(created_at, now, grace):
        return Liveness.ALIVE
    return Liveness.DEAD if chain.instance_count == 0 else Liveness.ALIVE


def classify_target_pool(
    pool: TargetPool,
    now: datetime.datetime,
    grace: datetime.timedelta = GRACE_PERIOD,
) -> Liveness:
    if within_grace_period(pool.created_at, now, grace):
        return Liveness.ALIVE
    return Liveness.DEAD if not pool.instances else Liveness.ALIVE
