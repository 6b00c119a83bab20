"""Exception and warning types raised by the cBioPortal client."""


class CBioPortalError(Exception):
    """Base class for all client errors."""


class ConfigurationError(CBioPortalError, ValueError):
    """A required argument is missing or invalid."""


class IntegrityError(CBioPortalError):
    """The API descriptor does not match the expected checksum."""


class UnknownOperationError(CBioPortalError, KeyError):
    """The operation name is not present in the API registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class TransportError(CBioPortalError):
    """Network or server failure reported by the transport."""


class UnavailableError(TransportError):
    """The API descriptor could not be downloaded."""


class RemoteEmptyResult(CBioPortalError, UserWarning):
    """A remote call returned no rows or an error payload.

    Emitted through ``warnings.warn`` rather than raised, so that sibling
    profiles in the same request still return data.
    """
