"""GCP helper functions."""

from __future__ import annotations
import datetime

from .logging_config import get_logger

logger = get_logger()

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class SelfLinkParseError(ValueError):
    """Raised when a resource self link does not have the expected shape."""


def parse_self_link(link: str, keyword: str) -> tuple[str, str]:
    """
    Split a resource self link into (name, scope).

    The scope is the path segment right before ``/<keyword>`` (a region, a
    zone or the literal "global") and the name is the last path segment:

        .../projects/p/global/urlMaps/k8s-um-default-app  -> ("k8s-um-default-app", "global")
        .../regions/us-east1/backendServices/bs1          -> ("bs1", "us-east1")

    Raises:
        SelfLinkParseError: if the keyword, the scope or the name is missing
    """
    marker = f"/{keyword}"
    pos = link.find(marker)
    if pos < 0:
        raise SelfLinkParseError(f"failed to find keyword {keyword} in {link!r}")

    head = link[:pos]
    slash = head.rfind("/")
    if slash < 0 or not head[slash + 1 :]:
        raise SelfLinkParseError(f"failed to find scope in {link!r}")
    scope = head[slash + 1 :]

    rest = link[pos + len(marker) :]
    if not rest.startswith("/"):
        raise SelfLinkParseError(f"failed to find name in {link!r}")
    name = rest.rsplit("/", 1)[-1]
    if not name:
        raise SelfLinkParseError(f"failed to find name in {link!r}")

    return name, scope


def parse_timestamp(value: str | None) -> datetime.datetime | None:
    """Parse an RFC3339 timestamp as returned by the Compute API.

    Returns None for empty or malformed values.
    """
    if not value:
        return None
    try:
        parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def format_timestamp(value: datetime.datetime) -> str:
    """Format a timestamp as RFC3339 UTC with second precision."""
    return value.astimezone(datetime.timezone.utc).strftime(TIMESTAMP_FORMAT)


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)
