class LedgerError(RuntimeError):
    """Raised when the reservation ledger fails for a reason other than a slot conflict."""
    pass


class SlotConflictError(RuntimeError):
    """Raised when a write would give two active appointments the same date and time."""
    pass


class PartialFailureError(RuntimeError):
    """Raised when a dependent write failed after its parent write succeeded."""

    def __init__(self, message: str, *, compensated: bool) -> None:
        super().__init__(message)
        self.compensated = compensated


class AppointmentNotFoundError(LookupError):
    """Raised when an appointment id does not exist in the ledger."""
    pass


class InvalidStatusError(ValueError):
    """Raised when a status value is not one of the known appointment statuses."""
    pass


class RulesLookupError(RuntimeError):
    """Raised when calendar rules cannot be read from the store."""
    pass


class NotificationDeliveryError(RuntimeError):
    """Raised when the notification sink rejects or cannot receive an event."""
    pass
