"""Data models and configuration."""

from .deletion_task import DeletionTask, InvalidTaskError, ResourceKind
from .resources import (
    BackendService,
    FirewallRule,
    ForwardingRule,
    InstanceGroup,
    ResolvedChain,
    TargetKind,
    TargetPool,
    TargetProxy,
    TargetRef,
    UrlMap,
)

__all__ = [
    "BackendService",
    "DeletionTask",
    "FirewallRule",
    "ForwardingRule",
    "InstanceGroup",
    "InvalidTaskError",
    "ResolvedChain",
    "ResourceKind",
    "TargetKind",
    "TargetPool",
    "TargetProxy",
    "TargetRef",
    "UrlMap",
]
