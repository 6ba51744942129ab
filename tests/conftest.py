"""Pytest configuration and shared fixtures for GCP load balancer cleanup tests."""

from __future__ import annotations
import datetime
import pytest
from typing import Any

from google.api_core.exceptions import NotFound
from google.cloud import compute_v1

PROJECT = "test-project"
BASE = f"https://www.googleapis.com/compute/v1/projects/{PROJECT}"
ZONE = "us-central1-a"


def self_link(scope_path: str, collection: str, name: str) -> str:
    """Build a self link, e.g. self_link("global", "urlMaps", "um")."""
    return f"{BASE}/{scope_path}/{collection}/{name}"


class FakeComputeClient:
    """In-memory stand-in for ComputeClient.

    Lookups of unknown resources raise NotFound like the real API. Every
    call is recorded in ``calls`` and every successful delete in ``deleted``.
    """

    def __init__(self):
        self.project_id = PROJECT
        self.forwarding_rules: list[compute_v1.ForwardingRule] = []
        self.http_proxies: dict[str, compute_v1.TargetHttpProxy] = {}
        self.https_proxies: dict[str, compute_v1.TargetHttpsProxy] = {}
        self.url_maps: dict[str, compute_v1.UrlMap] = {}
        self.backend_services: dict[str, compute_v1.BackendService] = {}
        self.group_instances: dict[tuple[str, str], Any] = {}
        self.target_pools: dict[str, compute_v1.TargetPool] = {}
        self.firewalls: list[compute_v1.Firewall] = []
        self.zones: dict[str, list[compute_v1.Instance]] = {}
        self.errors: dict[str, Exception] = {}
        self.deleted: list[tuple[Any, str, str]] = []
        self.calls: list[str] = []

    def _record(self, call: str, key: str = "") -> None:
        self.calls.append(call)
        error = self.errors.get(f"{call}:{key}") or self.errors.get(call)
        if error:
            raise error

    def list_forwarding_rules(self):
        self._record("list_forwarding_rules")
        return iter(self.forwarding_rules)

    def list_target_proxies(self, https):
        self._record("list_target_proxies", "https" if https else "http")
        return iter((self.https_proxies if https else self.http_proxies).values())

    def get_target_proxy(self, name, https, scope="global"):
        self._record("get_target_proxy", name)
        proxies = self.https_proxies if https else self.http_proxies
        if name not in proxies:
            raise NotFound(f"target proxy {name} not found")
        return proxies[name]

    def get_url_map(self, name, scope="global"):
        self._record("get_url_map", name)
        if name not in self.url_maps:
            raise NotFound(f"url map {name} not found")
        return self.url_maps[name]

    def get_backend_service(self, name, scope="global"):
        self._record("get_backend_service", name)
        if name not in self.backend_services:
            raise NotFound(f"backend service {name} not found")
        return self.backend_services[name]

    def list_instance_group_instances(self, name, zone):
        self._record("list_instance_group_instances", name)
        return list(self.group_instances.get((name, zone), []))

    def get_target_pool(self, name, region):
        self._record("get_target_pool", name)
        if name not in self.target_pools:
            raise NotFound(f"target pool {name} not found")
        return self.target_pools[name]

    def list_firewalls(self):
        self._record("list_firewalls")
        return iter(self.firewalls)

    def list_zones(self):
        self._record("list_zones")
        return iter(compute_v1.Zone(name=zone) for zone in self.zones)

    def list_instances(self, zone):
        self._record("list_instances", zone)
        return iter(self.zones.get(zone, []))

    def delete(self, kind, name, scope="global"):
        self._record("delete", name)
        self.deleted.append((kind, name, scope))

    @property
    def api_calls(self) -> int:
        return len(self.calls)


class RecordingQueue:
    """WorkQueue that keeps enqueued tasks in memory."""

    def __init__(self):
        self.enqueued: list[tuple[str, dict[str, str], str]] = []

    def enqueue(self, endpoint, params, queue_name):
        self.enqueued.append((endpoint, dict(params), queue_name))


class LoadBalancerBuilder:
    """Builder for a GKE ingress load balancer inside a FakeComputeClient.

    Builds forwarding rule -> proxy -> url map -> backend services ->
    instance groups, named the way the GKE ingress controller names them.
    """

    def __init__(self, client: FakeComputeClient, now: datetime.datetime):
        self._client = client
        self._now = now
        self._name = "default-app"
        self._https = False
        self._age = datetime.timedelta(hours=3)
        self._certificates: list[str] = []
        self._services: list[tuple[str, list[int], list[str]]] = []
        self._with_forwarding_rule = True

    def with_name(self, name: str) -> LoadBalancerBuilder:
        self._name = name
        return self

    def with_https(self, *certificates: str) -> LoadBalancerBuilder:
        """Use an HTTPS proxy with the given certificate names."""
        self._https = True
        self._certificates = list(certificates) or [f"k8s-ssl-{self._name}"]
        return self

    def with_age(self, age: datetime.timedelta) -> LoadBalancerBuilder:
        self._age = age
        return self

    def with_backend_service(
        self,
        name: str,
        instance_counts: tuple[int, ...] = (0,),
        health_checks: tuple[str, ...] | None = None,
    ) -> LoadBalancerBuilder:
        """Add a backend service with one instance group per count."""
        checks = list(health_checks) if health_checks is not None else [name]
        self._services.append((name, list(instance_counts), checks))
        return self

    def without_forwarding_rule(self) -> LoadBalancerBuilder:
        self._with_forwarding_rule = False
        return self

    @property
    def forwarding_rule_name(self) -> str:
        return f"k8s-fw-{self._name}"

    @property
    def proxy_name(self) -> str:
        return f"k8s-tps-{self._name}" if self._https else f"k8s-tp-{self._name}"

    @property
    def url_map_name(self) -> str:
        return f"k8s-um-{self._name}"

    def build(self) -> LoadBalancerBuilder:
        created = (self._now - self._age).isoformat()
        if not self._services:
            self.with_backend_service(f"k8s-be-{self._name}")

        backend_links = []
        for service_name, counts, checks in self._services:
            backends = []
            for index, count in enumerate(counts):
                group = f"k8s-ig-{service_name}-{index}"
                backends.append(
                    compute_v1.Backend(group=self_link(f"zones/{ZONE}", "instanceGroups", group))
                )
                self._client.group_instances[(group, ZONE)] = [
                    self_link(f"zones/{ZONE}", "instances", f"{group}-node-{n}")
                    for n in range(count)
                ]
            link = self_link("global", "backendServices", service_name)
            self._client.backend_services[service_name] = compute_v1.BackendService(
                name=service_name,
                self_link=link,
                backends=backends,
                health_checks=[self_link("global", "healthChecks", check) for check in checks],
            )
            backend_links.append(link)

        self._client.url_maps[self.url_map_name] = compute_v1.UrlMap(
            name=self.url_map_name,
            default_service=backend_links[0],
            path_matchers=[
                compute_v1.PathMatcher(
                    name="host1",
                    default_service=backend_links[0],
                    path_rules=[
                        compute_v1.PathRule(paths=[f"/{index}/*"], service=link)
                        for index, link in enumerate(backend_links)
                    ],
                )
            ],
        )

        url_map_link = self_link("global", "urlMaps", self.url_map_name)
        if self._https:
            collection = "targetHttpsProxies"
            self._client.https_proxies[self.proxy_name] = compute_v1.TargetHttpsProxy(
                name=self.proxy_name,
                url_map=url_map_link,
                ssl_certificates=[
                    self_link("global", "sslCertificates", cert) for cert in self._certificates
                ],
                creation_timestamp=created,
            )
        else:
            collection = "targetHttpProxies"
            self._client.http_proxies[self.proxy_name] = compute_v1.TargetHttpProxy(
                name=self.proxy_name,
                url_map=url_map_link,
                creation_timestamp=created,
            )

        if self._with_forwarding_rule:
            self._client.forwarding_rules.append(
                compute_v1.ForwardingRule(
                    name=self.forwarding_rule_name,
                    target=self_link("global", collection, self.proxy_name),
                    self_link=self_link("global", "forwardingRules", self.forwarding_rule_name),
                    creation_timestamp=created,
                )
            )
        return self


# Shared fixtures


@pytest.fixture
def now():
    """Fixed evaluation time."""
    return datetime.datetime(2026, 1, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def fake_client():
    return FakeComputeClient()


@pytest.fixture
def recording_queue():
    return RecordingQueue()


@pytest.fixture
def lb_builder(fake_client, now):
    """Factory for LoadBalancerBuilder instances sharing one fake client."""

    def _create():
        return LoadBalancerBuilder(fake_client, now)

    return _create


@pytest.fixture
def make_instance():
    """Factory for compute_v1.Instance with network tags."""

    def _create(name: str = "gke-node-1", tags: tuple[str, ...] = ()):
        return compute_v1.Instance(name=name, tags=compute_v1.Tags(items=list(tags)))

    return _create


@pytest.fixture
def make_firewall():
    """Factory for compute_v1.Firewall with target tags."""

    def _create(name: str, *target_tags: str):
        return compute_v1.Firewall(name=name, target_tags=list(target_tags))

    return _create


@pytest.fixture
def make_link():
    """Factory for resource self links in the test project."""
    return self_link
