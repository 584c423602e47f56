"""Custom exceptions."""


class CitationLensError(Exception):
    """Base class for errors raised by gateways and configuration."""


class ConfigError(CitationLensError):
    """Raised when configuration loading fails or a required key is missing."""


class GatewayError(CitationLensError):
    """Raised when an upstream HTTP service fails."""
