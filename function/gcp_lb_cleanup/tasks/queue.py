"""Work queue used to deliver deletion tasks."""

from __future__ import annotations
from typing import Mapping, Protocol
from urllib.parse import urlencode

from google.cloud import tasks_v2

from ..models.config import QUEUE_LOCATION, TASK_HANDLER_URL, TASK_SERVICE_ACCOUNT
from ..utils import get_logger

logger = get_logger()


class WorkQueue(Protocol):
    """At-least-once queue: redelivers until the endpoint acknowledges."""

    def enqueue(self, endpoint: str, params: Mapping[str, str], queue_name: str) -> None:
        ...


class CloudTasksQueue:
    """WorkQueue backed by Cloud Tasks HTTP targets.

    Each task is a form-encoded POST to ``base_url + endpoint``. Cloud Tasks
    retries any non-2xx response and stops on 2xx.
    """

    def __init__(
        self,
        project_id: str,
        location: str = QUEUE_LOCATION,
        base_url: str = TASK_HANDLER_URL,
        service_account: str = TASK_SERVICE_ACCOUNT,
        client: tasks_v2.CloudTasksClient | None = None,
    ):
        if not base_url:
            raise ValueError("TASK_HANDLER_URL must be set to enqueue tasks")
        self.project_id = project_id
        self.location = location
        self.base_url = base_url.rstrip("/")
        self.service_account = service_account
        self._client = client or tasks_v2.CloudTasksClient()

    def enqueue(self, endpoint: str, params: Mapping[str, str], queue_name: str) -> None:
        parent = self._client.queue_path(self.project_id, self.location, queue_name)
        http_request = tasks_v2.HttpRequest(
            http_method=tasks_v2.HttpMethod.POST,
            url=f"{self.base_url}{endpoint}",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            body=urlencode(params).encode(),
        )
        if self.service_account:
            http_request.oidc_token = tasks_v2.OidcToken(
                service_account_email=self.service_account
            )

        task = self._client.create_task(
            request=tasks_v2.CreateTaskRequest(
                parent=parent, task=tasks_v2.Task(http_request=http_request)
            )
        )
        logger.debug(
            "Enqueued task",
            extra={"queue": queue_name, "endpoint": endpoint, "task": task.name},
        )
