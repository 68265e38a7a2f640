import enum


class RejectionReason(enum.StrEnum):
    USE_RSVP = "use_rsvp"
    USE_CHECKOUT = "use_checkout"
    SOLD_OUT = "sold_out"
    INSUFFICIENT_REMAINING = "insufficient_remaining"
    CONTACT_CAP_REACHED = "contact_cap_reached"
    CONTACT_CAP_EXCEEDED = "contact_cap_exceeded"


class ReservationRejectedError(Exception):
    """Raised when a reservation request is refused by a business rule."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class InventoryConflictError(Exception):
    """Raised when a sold-count adjustment would leave the tier out of bounds."""

    def __init__(self, tier_id: object, delta: int) -> None:
        super().__init__(f"Cannot adjust quantity_sold of tier {tier_id} by {delta}.")
        self.tier_id = tier_id
        self.delta = delta
