"""Errors raised by the slot inventory ledger."""


class LedgerError(Exception):
    """Base class for expected, recoverable ledger failures."""


class LotNotFound(LedgerError):
    def __init__(self, lot_id):
        self.lot_id = lot_id
        super().__init__(f"Parking lot with id {lot_id} not found")


class LotFull(LedgerError):
    def __init__(self, lot_id):
        self.lot_id = lot_id
        super().__init__(f"No available slots at parking lot {lot_id}")


class ReservationNotFound(LedgerError):
    def __init__(self, reservation_id):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation with id {reservation_id} not found")


class InvalidTransition(LedgerError):
    def __init__(self, current, requested, reason=None):
        self.current = current
        self.requested = requested
        message = reason or f"Cannot move reservation from '{current}' to '{requested}'"
        super().__init__(message)


class InvalidCapacity(LedgerError):
    def __init__(self, total_capacity, available_capacity):
        self.total_capacity = total_capacity
        self.available_capacity = available_capacity
        super().__init__(
            f"available_capacity must be between 0 and total_capacity "
            f"(got {available_capacity} of {total_capacity})"
        )


class NotReservationOwner(LedgerError):
    def __init__(self, reservation_id):
        self.reservation_id = reservation_id
        super().__init__("Reservation belongs to another user")


class UserNotFound(LedgerError):
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} no longer exists")
