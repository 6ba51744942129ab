"""Entry points for the scheduled check and the task worker."""

from __future__ import annotations
import json
import time
from typing import Any, Mapping
from urllib.parse import parse_qsl

from .client import ComputeClient
from .firewall import reconcile_firewalls
from .loadbalancer import check_load_balancers
from .models import DeletionTask, InvalidTaskError
from .models.config import Config
from .tasks import CloudTasksQueue, WorkQueue, execute_task
from .utils import bind_correlation_id, get_logger

logger = get_logger()


def run_load_balancer_check(client: ComputeClient, queue: WorkQueue) -> dict[str, Any]:
    """Run the load balancer pass; a listing failure is reported, not raised."""
    try:
        stats = check_load_balancers(client, queue)
    except Exception as e:
        logger.error(
            "Load balancer check aborted, will retry on next schedule",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        return {"ok": False, "error": str(e)}

    return {"ok": True, **stats}


def run_firewall_check(client: ComputeClient, config: Config) -> dict[str, Any]:
    """Run the firewall pass; a failure aborts it and is reported, not raised."""
    if not config.firewall_cleanup_enabled:
        logger.info("Firewall cleanup disabled")
        return {"enabled": False}

    try:
        deleted = reconcile_firewalls(client, config.firewall_tag_prefix)
    except Exception as e:
        logger.error(
            "Firewall reconciliation aborted, will retry on next schedule",
            extra={"error": str(e), "error_type": type(e).__name__},
        )
        return {"enabled": True, "ok": False, "error": str(e)}

    return {"enabled": True, "ok": True, "deleted": deleted}


def check_handler(
    event: Mapping[str, Any] | None = None,
    context: Any = None,
    client: ComputeClient | None = None,
    queue: WorkQueue | None = None,
) -> dict[str, Any]:
    """Scheduled pass: load balancer check, then firewall reconciliation."""
    start_time = time.time()
    config = Config()
    pass_id = bind_correlation_id()
    logger.info(
        "Starting GCP load balancer cleanup",
        extra={
            "project_id": config.project_id,
            "dry_run": config.dry_run,
            "queue": config.queue_name,
        },
    )

    client = client or ComputeClient(config.project_id, timeout=config.api_timeout_seconds)
    queue = queue or CloudTasksQueue(
        config.project_id,
        location=config.queue_location,
        base_url=config.task_handler_url,
        service_account=config.task_service_account,
    )

    lb_stats = run_load_balancer_check(client, queue)
    firewall_result = run_firewall_check(client, config)

    duration = time.time() - start_time
    logger.info(
        "Cleanup pass complete",
        extra={
            "duration_seconds": round(duration, 2),
            "load_balancers": lb_stats,
            "firewalls": firewall_result,
        },
    )

    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "pass_id": pass_id,
                "dry_run": config.dry_run,
                "load_balancers": lb_stats,
                "firewalls": firewall_result,
            }
        ),
    }


def _task_params(event: Mapping[str, Any]) -> Mapping[str, Any]:
    """Accept either the decoded params or a form-encoded request body."""
    body = event.get("body")
    if isinstance(body, bytes):
        body = body.decode()
    if isinstance(body, str):
        return dict(parse_qsl(body))
    return event


def task_handler(
    event: Mapping[str, Any],
    context: Any = None,
    client: ComputeClient | None = None,
) -> dict[str, Any]:
    """
    Execute one delivered deletion task.

    Returns 204 to acknowledge (deleted, already gone, expired, dry-run or
    undecodable) and 500 to have the queue redeliver.
    """
    headers = event.get("headers") or {}
    bind_correlation_id(headers.get("X-CloudTasks-TaskName"))

    try:
        task = DeletionTask.from_params(_task_params(event))
    except InvalidTaskError as e:
        # Redelivering the same payload cannot succeed
        logger.error("Dropping undecodable deletion task", extra={"error": str(e)})
        return {"statusCode": 204}

    try:
        if client is None:
            config = Config()
            client = ComputeClient(config.project_id, timeout=config.api_timeout_seconds)
        outcome = execute_task(client, task)
    except Exception as e:
        logger.error(
            "Deletion task failed, requesting redelivery",
            extra={
                "kind": task.kind.value,
                "name": task.name,
                "scope": task.scope,
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        return {"statusCode": 500, "body": str(e)}

    return {"statusCode": 204, "outcome": outcome.value}
