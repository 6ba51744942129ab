"""Compute Engine API access for one project.

A ComputeClient is constructed once per handler invocation and passed into
every operation. It wraps the ``google.cloud.compute_v1`` service clients and
returns their message objects unchanged; translation into the resource graph
happens in the callers.
"""

from __future__ import annotations
from typing import Any, Iterator

from google.cloud import compute_v1

from .models import ResourceKind
from .models.config import API_TIMEOUT_SECONDS
from .utils import get_logger

logger = get_logger()

GLOBAL_SCOPE = "global"

# kind -> (global variant, regional variant) as
# (client class, request class, resource field) names in compute_v1
_DELETE_CALLS: dict[ResourceKind, tuple[tuple[str, str, str], tuple[str, str, str] | None]] = {
    ResourceKind.FORWARDING_RULE: (
        ("GlobalForwardingRulesClient", "DeleteGlobalForwardingRuleRequest", "forwarding_rule"),
        ("ForwardingRulesClient", "DeleteForwardingRuleRequest", "forwarding_rule"),
    ),
    ResourceKind.TARGET_HTTP_PROXY: (
        ("TargetHttpProxiesClient", "DeleteTargetHttpProxyRequest", "target_http_proxy"),
        ("RegionTargetHttpProxiesClient", "DeleteRegionTargetHttpProxyRequest", "target_http_proxy"),
    ),
    ResourceKind.TARGET_HTTPS_PROXY: (
        ("TargetHttpsProxiesClient", "DeleteTargetHttpsProxyRequest", "target_https_proxy"),
        ("RegionTargetHttpsProxiesClient", "DeleteRegionTargetHttpsProxyRequest", "target_https_proxy"),
    ),
    ResourceKind.SSL_CERTIFICATE: (
        ("SslCertificatesClient", "DeleteSslCertificateRequest", "ssl_certificate"),
        ("RegionSslCertificatesClient", "DeleteRegionSslCertificateRequest", "ssl_certificate"),
    ),
    ResourceKind.BACKEND_SERVICE: (
        ("BackendServicesClient", "DeleteBackendServiceRequest", "backend_service"),
        ("RegionBackendServicesClient", "DeleteRegionBackendServiceRequest", "backend_service"),
    ),
    ResourceKind.HEALTH_CHECK: (
        ("HealthChecksClient", "DeleteHealthCheckRequest", "health_check"),
        ("RegionHealthChecksClient", "DeleteRegionHealthCheckRequest", "health_check"),
    ),
    ResourceKind.HTTP_HEALTH_CHECK: (
        ("HttpHealthChecksClient", "DeleteHttpHealthCheckRequest", "http_health_check"),
        None,
    ),
    ResourceKind.URL_MAP: (
        ("UrlMapsClient", "DeleteUrlMapRequest", "url_map"),
        ("RegionUrlMapsClient", "DeleteRegionUrlMapRequest", "url_map"),
    ),
    ResourceKind.TARGET_POOL: (
        None,
        ("TargetPoolsClient", "DeleteTargetPoolRequest", "target_pool"),
    ),
    ResourceKind.FIREWALL: (
        ("FirewallsClient", "DeleteFirewallRequest", "firewall"),
        None,
    ),
}


class ComputeClient:
    """Client for the Compute Engine resources this tool inspects and deletes."""

    def __init__(
        self,
        project_id: str,
        timeout: float = API_TIMEOUT_SECONDS,
        credentials: Any = None,
    ):
        """Initialize the client.

        Args:
            project_id: The GCP project ID
            timeout: Per-call timeout in seconds
            credentials: Explicit credentials (optional, defaults to ADC)
        """
        if not project_id:
            raise ValueError("A GCP project ID is required")
        self.project_id = project_id
        self.timeout = timeout
        self._credentials = credentials
        self._services: dict[str, Any] = {}

    def _service(self, name: str) -> Any:
        """Return the compute_v1 service client ``name``, created on first use."""
        if name not in self._services:
            service_cls = getattr(compute_v1, name)
            self._services[name] = service_cls(credentials=self._credentials)
        return self._services[name]

    # Listing

    def list_forwarding_rules(self) -> Iterator[compute_v1.ForwardingRule]:
        """Yield forwarding rules from every scope (global and regional)."""
        request = compute_v1.AggregatedListForwardingRulesRequest(project=self.project_id)
        pager = self._service("ForwardingRulesClient").aggregated_list(
            request=request, timeout=self.timeout
        )
        for _scope, scoped_list in pager:
            yield from scoped_list.forwarding_rules

    def list_target_proxies(self, https: bool) -> Iterator[Any]:
        """Yield global target HTTP or HTTPS proxies."""
        if https:
            request = compute_v1.ListTargetHttpsProxiesRequest(project=self.project_id)
            service = self._service("TargetHttpsProxiesClient")
        else:
            request = compute_v1.ListTargetHttpProxiesRequest(project=self.project_id)
            service = self._service("TargetHttpProxiesClient")
        yield from service.list(request=request, timeout=self.timeout)

    def list_firewalls(self) -> Iterator[compute_v1.Firewall]:
        request = compute_v1.ListFirewallsRequest(project=self.project_id)
        yield from self._service("FirewallsClient").list(request=request, timeout=self.timeout)

    def list_zones(self) -> Iterator[compute_v1.Zone]:
        request = compute_v1.ListZonesRequest(project=self.project_id)
        yield from self._service("ZonesClient").list(request=request, timeout=self.timeout)

    def list_instances(self, zone: str) -> Iterator[compute_v1.Instance]:
        request = compute_v1.ListInstancesRequest(project=self.project_id, zone=zone)
        yield from self._service("InstancesClient").list(request=request, timeout=self.timeout)

    def list_instance_group_instances(self, name: str, zone: str) -> list[str]:
        """Return the instance links of a zonal instance group, in any state."""
        request = compute_v1.ListInstancesInstanceGroupsRequest(
            project=self.project_id,
            zone=zone,
            instance_group=name,
            instance_groups_list_instances_request_resource=compute_v1.InstanceGroupsListInstancesRequest(
                instance_state="ALL"
            ),
        )
        pager = self._service("InstanceGroupsClient").list_instances(
            request=request, timeout=self.timeout
        )
        return [item.instance for item in pager]

    # Lookups

    def get_target_proxy(self, name: str, https: bool, scope: str = GLOBAL_SCOPE) -> Any:
        if scope == GLOBAL_SCOPE:
            if https:
                request = compute_v1.GetTargetHttpsProxyRequest(
                    project=self.project_id, target_https_proxy=name
                )
                service = self._service("TargetHttpsProxiesClient")
            else:
                request = compute_v1.GetTargetHttpProxyRequest(
                    project=self.project_id, target_http_proxy=name
                )
                service = self._service("TargetHttpProxiesClient")
        elif https:
            request = compute_v1.GetRegionTargetHttpsProxyRequest(
                project=self.project_id, region=scope, target_https_proxy=name
            )
            service = self._service("RegionTargetHttpsProxiesClient")
        else:
            request = compute_v1.GetRegionTargetHttpProxyRequest(
                project=self.project_id, region=scope, target_http_proxy=name
            )
            service = self._service("RegionTargetHttpProxiesClient")
        return service.get(request=request, timeout=self.timeout)

    def get_url_map(self, name: str, scope: str = GLOBAL_SCOPE) -> compute_v1.UrlMap:
        if scope == GLOBAL_SCOPE:
            request = compute_v1.GetUrlMapRequest(project=self.project_id, url_map=name)
            service = self._service("UrlMapsClient")
        else:
            request = compute_v1.GetRegionUrlMapRequest(
                project=self.project_id, region=scope, url_map=name
            )
            service = self._service("RegionUrlMapsClient")
        return service.get(request=request, timeout=self.timeout)

    def get_backend_service(
        self, name: str, scope: str = GLOBAL_SCOPE
    ) -> compute_v1.BackendService:
        if scope == GLOBAL_SCOPE:
            request = compute_v1.GetBackendServiceRequest(
                project=self.project_id, backend_service=name
            )
            service = self._service("BackendServicesClient")
        else:
            request = compute_v1.GetRegionBackendServiceRequest(
                project=self.project_id, region=scope, backend_service=name
            )
            service = self._service("RegionBackendServicesClient")
        return service.get(request=request, timeout=self.timeout)

    def get_target_pool(self, name: str, region: str) -> compute_v1.TargetPool:
        request = compute_v1.GetTargetPoolRequest(
            project=self.project_id, region=region, target_pool=name
        )
        return self._service("TargetPoolsClient").get(request=request, timeout=self.timeout)

    # Deletion

    def delete(self, kind: ResourceKind, name: str, scope: str = GLOBAL_SCOPE) -> None:
        """Delete one resource and wait for the operation to finish.

        Raises:
            google.api_core.exceptions.NotFound: if the resource does not exist
            google.api_core.exceptions.GoogleAPIError: on any other API failure
            ValueError: if ``kind`` has no variant for ``scope``
        """
        global_call, regional_call = _DELETE_CALLS[kind]
        call = global_call if scope == GLOBAL_SCOPE else regional_call
        if call is None:
            raise ValueError(f"{kind.value} cannot be deleted in scope {scope!r}")

        service_name, request_name, field = call
        kwargs = {"project": self.project_id, field: name}
        if scope != GLOBAL_SCOPE:
            kwargs["region"] = scope
        request = getattr(compute_v1, request_name)(**kwargs)

        operation = self._service(service_name).delete(request=request, timeout=self.timeout)
        operation.result(timeout=self.timeout)
        logger.debug(
            "Delete operation finished",
            extra={"kind": kind.value, "name": name, "scope": scope},
        )
