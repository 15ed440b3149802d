"""
Exception types raised by the FreshPOS services.

    FreshPOSError (base)
    |
    +-- ValidationError   rejected input, raised before any mutation
    +-- StoreError        the data store failed; the operation can be retried

Missing referenced entities (a deleted product on an old order, an unknown
order id on a status change) are not errors. Services skip them and report
them as ReferenceGap records instead.
"""


class FreshPOSError(Exception):
    """Base class for all FreshPOS errors"""

    code: str = "FRESHPOS_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(FreshPOSError, ValueError):
    """Input rejected: blank required field, non-positive quantity, etc."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class StoreError(FreshPOSError):
    """The persistence layer failed while reading or writing"""

    code = "STORE_ERROR"
