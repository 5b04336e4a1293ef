class GumError(Exception):
    """Base class for errors raised by gum."""


class ConfigurationError(GumError):
    """Raised when a handler or the server is configured with invalid values.

    These are the only errors that abort startup; everything discovered while
    scanning or watching is logged and contained.
    """
