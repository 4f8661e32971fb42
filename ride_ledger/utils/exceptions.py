class LedgerError(Exception):
    """Base class for errors raised by the ledger"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Invalid input, detected before anything is written"""


class PersistenceError(LedgerError):
    """The store failed or rejected a write; the transaction was rolled back"""


class NotFoundError(LedgerError):
    """Unknown resource or route"""
