"""Exception hierarchy shared by the store, HTTP layer, and client."""
from __future__ import annotations


class ContractTrackerError(Exception):
    """Base class for all errors raised by the package."""


class InvalidRequestError(ContractTrackerError):
    """A request was malformed before it reached the backing table."""


class StoreError(ContractTrackerError):
    """The record store could not complete an operation."""


class StoreUnavailableError(StoreError):
    """The spreadsheet or worksheet backing the store could not be opened."""


class SchemaMismatchError(StoreError):
    """A required column is missing from the live header row."""


class ContractNotFoundError(StoreError):
    """No row matches the requested identifying key."""

    def __init__(self, key: str, message: str | None = None) -> None:
        super().__init__(message or f"Contract with CUI {key} not found.")
        self.key = key


class DuplicateKeyError(StoreError):
    """A row with the same identifying key already exists."""


class LockTimeoutError(StoreError):
    """The store-wide write lock was not acquired in time."""


class ClientError(ContractTrackerError):
    """A client-side call to the contracts API failed."""


class TransportError(ClientError):
    """The request never produced a readable response."""


class RemoteError(ClientError):
    """The API answered with an error payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
