from __future__ import annotations


class ServiceError(Exception):
    """Base class that carries a default HTTP status code for API mapping."""

    default_status = 400

    def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code if status_code is not None else self.default_status


class AssetNotFoundError(ServiceError):
    default_status = 404


class AssetValidationError(ServiceError):
    default_status = 400


class SelectionRangeError(ServiceError):
    default_status = 400


class PathOutsideRootError(ServiceError):
    default_status = 400


class FilesystemError(ServiceError):
    default_status = 500


class ApiKeyMissingError(ServiceError):
    default_status = 401


class ApiKeyEmptyError(ServiceError):
    default_status = 401


class ApiKeyInvalidError(ServiceError):
    default_status = 400


class ConfigError(Exception):
    """Raised when lavender.toml is missing or malformed; aborts startup."""
