class LedgerError(RuntimeError):
    """Base class for failures talking to the appointment ledger."""
    pass


class LedgerUpstreamError(LedgerError):
    """Raised when the ledger cannot be reached or answers with a server error."""
    pass


class LedgerContractError(LedgerError):
    """Raised when a ledger response does not have the expected shape."""
    pass


class LedgerRejectedError(LedgerError):
    """Raised when the ledger refuses a mutation (conflict, unknown barber, already canceled)."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409
