"""Error taxonomy for the draft lifecycle.

Every error carries a ``user_message`` that is safe to show to a citizen, while
``str(exc)`` keeps the technical detail for logs.
"""


class FormflowError(Exception):
    """Base class for all lifecycle errors."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, detail: str, *, user_message: str | None = None) -> None:
        super().__init__(detail)
        if user_message is not None:
            self.user_message = user_message


class DraftNotFound(FormflowError):
    """Referenced draft id has no record in either storage tier."""

    user_message = "We could not find this form draft."


class FormNotFound(FormflowError):
    """Referenced form id is not in the catalog."""

    user_message = "This form is not available."


class SubmissionNotFound(FormflowError):
    """Referenced submission id has no record."""

    user_message = "We could not find this submission."


class InvalidState(FormflowError):
    """Mutation attempted on a submitted draft, or duplicate submission."""

    user_message = "This form was already submitted and can no longer be edited."


class InvalidTransition(FormflowError):
    """Illegal submission status change."""

    user_message = "This submission cannot move to the requested status."


class ValidationError(FormflowError):
    """Malformed notification input."""

    user_message = "The notification details are invalid."


class PersistenceError(FormflowError):
    """Storage unavailable for an operation that requires durability."""

    user_message = "We could not save your changes. Please try again."


class NotificationDeliveryError(FormflowError):
    """Notification endpoint unreachable or returned an error."""

    user_message = "We could not send the notification. Please try again later."
