from iskochat.domain.exceptions import ConstraintViolation, FeatureDisabledError

__all__ = [
    "ConstraintViolation",
    "ConversationNotFoundError",
    "FeatureDisabledError",
    "MeetupTransitionError",
    "NotificationDeliveryError",
]


class ConversationNotFoundError(LookupError):
    """Raised when the store has no conversation with the requested id."""
    pass


class NotificationDeliveryError(RuntimeError):
    """Raised when the push provider rejects or fails a delivery."""
    pass


class MeetupTransitionError(ValueError):
    """Raised when a meetup action does not apply to the transaction's current state."""
    pass
