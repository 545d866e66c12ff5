"""Exceptions raised by registries and tokens.

Disposal failures are not represented here: a disposer that raises is
logged and abandoned, never propagated to the caller.
"""


class CustodianError(Exception):
    """Base exception for custodian errors."""


class UnsupportedResourceKindError(CustodianError, TypeError):
    """Raised when a resource cannot be disposed by any known operation.

    Parameters
    ----------
    message : str
        Human-readable error description.
    resource_type : str
        Name of the offending resource's type.
    """

    def __init__(self, message: str, resource_type: str) -> None:
        super().__init__(message)
        self.resource_type = resource_type


class RegistryLockedError(CustodianError, RuntimeError):
    """Raised when cleanup is attempted on a registry holding a lock key."""


class InvalidUnlockKeyError(CustodianError, ValueError):
    """Raised when unlock is called with a key that does not match."""
