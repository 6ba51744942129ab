"""Deletion task dispatch and execution."""

from .dispatcher import DELETE_ENDPOINT, dispatch_plan
from .queue import CloudTasksQueue, WorkQueue
from .worker import TaskOutcome, execute_task

__all__ = [
    "DELETE_ENDPOINT",
    "dispatch_plan",
    "CloudTasksQueue",
    "WorkQueue",
    "TaskOutcome",
    "execute_task",
]
