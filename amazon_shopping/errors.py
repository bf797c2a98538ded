"""
Custom domain exceptions for the product search client.
Every error has a name, not chaos.
"""


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class NetworkError(Exception):
    """Base class for network-related failures."""
    pass


class ExternalServiceError(Exception):
    """Raised when the Product Advertising API fails."""
    pass


class InputValidationError(ValueError):
    """Raised when caller-supplied search arguments are invalid."""
    pass


class TransportFailure(NetworkError):
    """Raised when the HTTP exchange itself could not complete."""
    pass


class ProviderRejected(ExternalServiceError):
    """Raised when Amazon returns an error list or a non-success status."""
    pass


class MalformedResponse(ExternalServiceError):
    """Raised when the Amazon reply body is not a JSON object."""
    pass
