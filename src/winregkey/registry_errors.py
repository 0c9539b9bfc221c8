from typing import Optional, Type
import logging

logger = logging.getLogger(__name__)

# Define custom exceptions
class RegistryError(Exception):
    """Base exception for all registry errors in this module."""
    def __init__(self, message: str, status: Optional[int] = None, description: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.description = description

    def __str__(self) -> str:
        """Return the primary message associated with this error."""
        return self.args[0] if self.args else self.__class__.__name__


class RegistryKeyNotFoundError(RegistryError, LookupError):
    """Raised when a specified registry key path does not exist."""
    pass


class RegistryValueNotFoundError(RegistryError, LookupError):
    """Raised when a specified registry value name does not exist within a key."""
    pass


class RegistryOperationFailedError(RegistryError):
    """Raised when the registry provider reports a non-zero status for an operation."""
    pass


class RegistryInvalidTypeError(RegistryError, ValueError):
    """Raised when a value type code or name is outside the supported set."""
    pass


# Descriptions for the status codes the providers commonly return.
# Not exhaustive; unknown codes are reported by number only.
_STATUS_DESCRIPTIONS = {
    1: "The value does not exist",                         # StdRegProv quirk for missing values
    2: "The system cannot find the file specified",        # ERROR_FILE_NOT_FOUND
    5: "Access is denied",                                 # ERROR_ACCESS_DENIED
    87: "The parameter is incorrect",                      # ERROR_INVALID_PARAMETER
    0x80041005: "Type mismatch",                           # WBEM_E_TYPE_MISMATCH
}


def describe_status(status: int) -> Optional[str]:
    """Return a human readable description for a provider status code, if known."""
    return _STATUS_DESCRIPTIONS.get(status)


def _raise_for_status(
        status: int,
        operation: str,
        path: str,
        name: Optional[str] = None,
        error_type: Type[RegistryError] = RegistryOperationFailedError,
    ):
    """Translate a non-zero provider status into a custom RegistryError.

    Args:
        status (int): The status code returned by the provider.
        operation (str): Short description of the attempted operation (e.g. "delete key").
        path (str): The registry key path involved.
        name (Optional[str]): The registry value name, if applicable.
        error_type (Type[RegistryError]): The exception class to raise.

    Raises:
        RegistryError or subclass: Always.
    """
    description = describe_status(status)

    message = f"Failed to {operation} on key '{path}'"
    if name is not None:
        message += f", value '{name}'"
    if description:
        message += f" (status {status}: {description})"
    else:
        message += f" (status {status})"

    logger.debug(
        "Mapping provider status %s (%r) for key '%s'%s → %s",
        status,
        description,
        path,
        (f", value '{name}'" if name is not None else ""),
        error_type.__name__
    )
    raise error_type(message, status=status, description=description)
