"""
Error taxonomy for the composition layer.

Each error carries an HTTP ``status_code`` so host applications can render
it as an RFC 7807 problem without a lookup table.
"""


class PlatformServiceError(Exception):
    """
    Base class for composition layer errors.

    Attributes:
        detail: Human-readable message
        platform_index: Index of the adapter involved, if any
    """

    status_code: int = 500
    title: str = "Platform service error"

    def __init__(self, detail: str, platform_index: int | None = None):
        self.detail = detail
        self.platform_index = platform_index
        super().__init__(detail)


class ConfigurationError(PlatformServiceError):
    """A required configuration field is missing or empty."""

    title = "Configuration error"

    def __init__(self, platform: str, missing: list[str]):
        self.platform = platform
        self.missing = missing
        super().__init__(
            f"Missing required configuration for {platform}: {', '.join(missing)}"
        )


class NotInitializedError(PlatformServiceError):
    """No initialized backend is available for the operation."""

    status_code = 503
    title = "Service not initialized"


class PlatformOperationError(PlatformServiceError):
    """A single adapter call failed."""

    status_code = 502
    title = "Platform operation failed"

    def __init__(
        self,
        operation: str,
        platform_index: int | None = None,
        cause: Exception | None = None,
    ):
        self.operation = operation
        self.cause = cause
        where = f"platform {platform_index}" if platform_index is not None else "platform"
        message = f"{operation} failed on {where}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, platform_index=platform_index)


class UnsupportedOperationError(PlatformServiceError):
    """The owning adapter, or every adapter, lacks the requested capability."""

    status_code = 501
    title = "Operation not supported"

    def __init__(self, operation: str, platform_index: int | None = None):
        self.operation = operation
        where = (
            f"platform {platform_index}" if platform_index is not None else "no platform"
        )
        super().__init__(
            f"{operation} is not supported ({where})", platform_index=platform_index
        )


class EntityNotFoundError(PlatformServiceError):
    """A write targeted an id that no adapter owns."""

    status_code = 404
    title = "Entity not found"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"No platform owns entity '{entity_id}'")
