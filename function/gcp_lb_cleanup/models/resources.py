"""Load balancer resource graph data classes."""

from __future__ import annotations
import datetime
from dataclasses import dataclass, field
from enum import Enum


class TargetKind(str, Enum):
    """What a forwarding rule points at."""

    HTTP_PROXY = "targetHttpProxies"
    HTTPS_PROXY = "targetHttpsProxies"
    TARGET_POOL = "targetPools"


@dataclass(frozen=True)
class TargetRef:
    """Parsed forwarding rule target link."""

    kind: TargetKind
    name: str
    scope: str

    @property
    def is_proxy(self) -> bool:
        return self.kind in (TargetKind.HTTP_PROXY, TargetKind.HTTPS_PROXY)

    @property
    def https(self) -> bool:
        return self.kind == TargetKind.HTTPS_PROXY


@dataclass
class ForwardingRule:
    """Entry point of a load balancer."""

    name: str
    scope: str
    target: TargetRef
    created_at: datetime.datetime | None = None


@dataclass
class TargetProxy:
    """HTTP(S) target proxy, the root of a dead/alive determination."""

    name: str
    https: bool
    url_map: str
    scope: str = "global"
    ssl_certificates: list[str] = field(default_factory=list)
    created_at: datetime.datetime | None = None


@dataclass
class UrlMap:
    name: str
    scope: str
    service_links: list[str] = field(default_factory=list)


@dataclass
class InstanceGroup:
    """Zonal instance group and its members in any lifecycle state."""

    name: str
    zone: str
    instances: list[str] = field(default_factory=list)


@dataclass
class BackendService:
    name: str
    scope: str
    health_checks: list[str] = field(default_factory=list)
    instance_groups: list[InstanceGroup] = field(default_factory=list)

    @property
    def instance_count(self) -> int:
        return sum(len(group.instances) for group in self.instance_groups)


@dataclass
class ResolvedChain:
    """Fully materialized proxy -> url map -> backend services tree.

    ``forwarding_rule`` is None for proxies found by the orphan scan.
    """

    proxy: TargetProxy
    url_map: UrlMap
    backend_services: list[BackendService] = field(default_factory=list)
    forwarding_rule: ForwardingRule | None = None

    @property
    def instance_count(self) -> int:
        return sum(service.instance_count for service in self.backend_services)


@dataclass
class TargetPool:
    """Network load balancer pool."""

    name: str
    region: str
    instances: list[str] = field(default_factory=list)
    created_at: datetime.datetime | None = None


@dataclass
class FirewallRule:
    name: str
    target_tags: list[str] = field(default_factory=list)
