"""
Exceptions shared by write-once ledger records.
"""


class ImmutableRecordError(Exception):
    """Raised when a write-once record is updated or deleted."""
    pass
