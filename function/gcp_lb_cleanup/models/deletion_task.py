"""DeletionTask data class and the closed set of deletable resource kinds."""

from __future__ import annotations
import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from ..utils.gcp_helpers import format_timestamp, parse_timestamp


class InvalidTaskError(ValueError):
    """Raised when a delivered task payload cannot be decoded."""


class ResourceKind(str, Enum):
    """Resource kinds a deletion task can target."""

    FORWARDING_RULE = "forwarding-rule"
    TARGET_HTTP_PROXY = "target-http-proxy"
    TARGET_HTTPS_PROXY = "target-https-proxy"
    SSL_CERTIFICATE = "ssl-certificate"
    BACKEND_SERVICE = "backend-service"
    HEALTH_CHECK = "health-check"
    HTTP_HEALTH_CHECK = "http-health-check"
    URL_MAP = "url-map"
    TARGET_POOL = "target-pool"
    FIREWALL = "firewall"


@dataclass(frozen=True)
class DeletionTask:
    """A single resource deletion, valid until ``expires``."""

    kind: ResourceKind
    name: str
    scope: str
    expires: datetime.datetime

    def is_expired(self, now: datetime.datetime) -> bool:
        return now > self.expires

    def to_params(self) -> dict[str, str]:
        """Flat string map carried by the work queue."""
        return {
            "kind": self.kind.value,
            "name": self.name,
            "scope": self.scope,
            "expires": format_timestamp(self.expires),
        }

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> DeletionTask:
        """Decode a task delivered by the work queue.

        Raises:
            InvalidTaskError: if a field is missing or malformed
        """
        try:
            kind = ResourceKind(params["kind"])
            name = params["name"]
            scope = params.get("scope") or "global"
            expires_raw = params["expires"]
        except (KeyError, ValueError) as e:
            raise InvalidTaskError(f"Malformed deletion task {dict(params)}: {e}") from e

        if not name:
            raise InvalidTaskError(f"Deletion task without a name: {dict(params)}")

        expires = parse_timestamp(expires_raw)
        if expires is None:
            raise InvalidTaskError(f"Invalid expiry {expires_raw!r} in deletion task")

        return cls(kind=kind, name=name, scope=scope, expires=expires)
