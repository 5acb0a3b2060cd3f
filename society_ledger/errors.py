"""Exception types raised by the ledger engine."""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for all ledger failures."""


class ValidationError(LedgerError):
    """A record or draft failed a required-field or identity check."""


class NotFoundError(LedgerError):
    """An update or delete referenced an identity that does not exist."""


class SchemaError(LedgerError):
    """The database was opened with an incompatible schema version."""


class RestoreError(LedgerError):
    """A backup payload was malformed or could not be fully re-inserted."""
