from __future__ import annotations


class SettingsError(Exception):
    """Base class for every error raised by the settings services."""


class InvalidArgument(SettingsError, ValueError):
    """A required identifier was missing (None) or not a string."""


class UnsupportedRequestShape(SettingsError, TypeError):
    """A request payload did not have the shape the operation requires (usually: not an object)."""


class ConversionError(SettingsError, ValueError):
    """A stored document could not be materialized as the requested type (or vice versa)."""


class ApiActionNotFound(SettingsError, LookupError):
    """The API adapter was asked for an action it does not expose."""


class AreaNotFound(SettingsError, LookupError):
    pass


class AreaAlreadyExists(SettingsError):
    pass
