"""Hands deletion plans to the work queue."""

from __future__ import annotations

from ..models import DeletionTask
from ..models.config import QUEUE_NAME
from ..utils import get_logger
from .queue import WorkQueue

logger = get_logger()

DELETE_ENDPOINT = "/tasks/delete"


def dispatch_plan(
    queue: WorkQueue,
    tasks: list[DeletionTask],
    queue_name: str = QUEUE_NAME,
    endpoint: str = DELETE_ENDPOINT,
) -> int:
    """Enqueue every task of a plan in emission order.

    The queue may still deliver them out of order; each task is
    independently idempotent.
    """
    for task in tasks:
        queue.enqueue(endpoint, task.to_params(), queue_name)

    logger.info(
        "Dispatched deletion plan",
        extra={
            "queue": queue_name,
            "tasks": [f"{task.kind.value}/{task.name}" for task in tasks],
        },
    )
    return len(tasks)
