"""Structured logging for the check pass and the task worker."""

from __future__ import annotations
import os
import uuid

from aws_lambda_powertools import Logger

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logger = Logger(service="gcp-lb-cleanup", level=LOG_LEVEL)


def get_logger():
    return logger


def bind_correlation_id(value: str | None = None) -> str:
    """Tag every following record with ``correlation_id``.

    The check pass binds a fresh id per run; the worker binds the Cloud Tasks
    task name so all deliveries of one task share it.
    """
    correlation_id = value or uuid.uuid4().hex
    logger.set_correlation_id(correlation_id)
    return correlation_id
