"""Domain-specific errors for iotcmd."""


class IotcmdError(Exception):
    """Base error for iotcmd."""


class CatalogLoadError(IotcmdError):
    """Raised when the command catalog document cannot be read."""


class CatalogValidationError(IotcmdError):
    """Raised when the command catalog does not conform to schema or semantics."""


class CommandNotFoundError(IotcmdError):
    """Raised when a command id is not part of the catalog."""


class ParameterResolutionError(IotcmdError):
    """Raised when a parameter name is not declared by the bound command."""


class ReadOnlyParameterError(ParameterResolutionError):
    """Raised when editing a parameter pinned to the active device id."""


class ParameterCoercionError(IotcmdError):
    """Raised when a string-encoded value does not fit its declared type."""


class InvalidRecordStateError(IotcmdError):
    """Raised when completing a record that is unknown or already completed."""


class SettingsError(IotcmdError):
    """Raised when the settings file is unreadable or invalid."""


class DispatchError(IotcmdError):
    """Raised by dispatchers when the remote call cannot be performed."""
