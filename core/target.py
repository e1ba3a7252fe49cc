"""Target URL construction for backend requests."""

from core.exceptions import InvalidTargetError


def strip_mount_prefix(target: str, mount_prefix: str) -> str:
    """Remove the mount prefix from the front of ``target``."""
    if not target.startswith(mount_prefix):
        raise InvalidTargetError(
            f"Path {target!r} is not under {mount_prefix!r}",
            target=target,
            mount_prefix=mount_prefix,
        )
    return target[len(mount_prefix):]


def split_query(path: str) -> tuple[str, str]:
    """Split on the first ``?`` into (path, raw query)."""
    path, _, query = path.partition("?")
    return path, query


def build_target_url(base_url: str, mount_prefix: str, target: str) -> str:
    """Compose the backend URL without re-encoding anything.

    Returns ``base_url + path`` with ``?query`` appended only when the
    inbound target carried a non-empty query string.
    """
    if not base_url:
        raise InvalidTargetError(
            "Backend base URL is not configured",
            target=target,
            mount_prefix=mount_prefix,
        )
    path, query = split_query(strip_mount_prefix(target, mount_prefix))
    if query:
        return f"{base_url}{path}?{query}"
    return f"{base_url}{path}"
