"""Custom exceptions for the Redis service adapter."""

from typing import Optional

OPERATOR_CONTACT_MESSAGE = "Contact your operator, service configuration issue occurred"


class AdapterError(Exception):
    """Base exception for all adapter errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class InvalidParameterError(AdapterError):
    """Request carried parameters this plan does not accept."""
    pass


class InvalidPayloadError(AdapterError):
    """A CLI argument could not be decoded into the expected shape."""
    pass


class ConfigurationError(AdapterError):
    """Operator configuration is incomplete.

    The caller only ever sees the generic operator-contact message; the
    actual cause is kept on ``detail`` for server-side logging.
    """

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(OPERATOR_CONTACT_MESSAGE, code)
        self.detail = detail


class UpgradeError(AdapterError):
    """Requested release change is not a supported upgrade."""
    pass


class ReleaseJobError(AdapterError):
    """Job is provided by no release, or by more than one."""
    pass


class VersionParseError(AdapterError):
    """Release version string does not follow the BOSH release grammar."""
    pass


class BindingError(AdapterError):
    """Binding-related errors."""
    pass


class TopologyError(BindingError):
    """Deployment topology has an unexpected shape."""
    pass


class SecretReferenceError(BindingError):
    """Manifest secret is not a ((name)) reference."""
    pass


class SecretResolutionError(BindingError):
    """A required secret was not passed to bind."""
    pass


class InternalError(AdapterError):
    """Unexpected internal failure."""
    pass


class PasswordGenerationError(InternalError):
    """Entropy source failed while generating a password."""
    pass


class ManifestPropertyError(InternalError):
    """Stored manifest properties are missing or have the wrong type."""
    pass
