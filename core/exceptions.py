"""Custom exception hierarchy for the backend API proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class InvalidTargetError(ProxyError):
    """Raised when an inbound target cannot be mapped to a backend URL.

    Attributes:
        target: Raw inbound path (with query, if any)
        mount_prefix: Prefix the target was expected to start with
    """

    def __init__(self, message: str, target: str, mount_prefix: str) -> None:
        super().__init__(message)
        self.target = target
        self.mount_prefix = mount_prefix
