"""Deletion worker: executes one delivered DeletionTask."""

from __future__ import annotations
import datetime
from enum import Enum

from google.api_core.exceptions import NotFound

from ..client import ComputeClient
from ..models import DeletionTask
from ..models.config import DRY_RUN
from ..utils import format_timestamp, get_logger, utc_now

logger = get_logger()


class TaskOutcome(str, Enum):
    """Acknowledged results of a delivery. Failures raise instead."""

    DELETED = "deleted"
    ALREADY_GONE = "already_gone"
    EXPIRED = "expired"
    DRY_RUN = "dry_run"


def execute_task(
    client: ComputeClient, task: DeletionTask, now: datetime.datetime | None = None
) -> TaskOutcome:
    """
    Execute a single deletion task.

    A task delivered after its expiry is discarded without any API call, so
    a late redelivery cannot delete a same-named resource recreated since.
    NotFound means an earlier delivery (or someone else) already deleted it.

    Raises:
        google.api_core.exceptions.GoogleAPIError: on any failure other than
            NotFound; the queue redelivers the task
    """
    now = now or utc_now()
    resource = {"kind": task.kind.value, "name": task.name, "scope": task.scope}

    if task.is_expired(now):
        logger.info(
            "Discarding expired deletion task",
            extra={**resource, "expires": format_timestamp(task.expires)},
        )
        return TaskOutcome.EXPIRED

    if DRY_RUN:
        logger.info(
            f"[DRY-RUN] Would DELETE {task.kind.value} {task.name}",
            extra={**resource, "dry_run": True},
        )
        return TaskOutcome.DRY_RUN

    try:
        client.delete(task.kind, task.name, task.scope)
    except NotFound:
        logger.info("Resource already deleted", extra=resource)
        return TaskOutcome.ALREADY_GONE

    logger.info(f"DELETE {task.kind.value} {task.name}", extra=resource)
    return TaskOutcome.DELETED
