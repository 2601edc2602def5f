class PetEatsError(Exception):
    code = "error"
    default_message = "Something went wrong."

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(PetEatsError):
    """Bad input. Always raised before any remote call is made."""

    code = "validation_error"
    default_message = "Invalid input."


class InvalidTransitionError(ValidationError):
    """A moderation transition out of a terminal state, or a write that lost a race."""

    code = "invalid_transition"
    default_message = "This item has already been moderated."


class AuthorizationError(PetEatsError):
    code = "authorization_error"
    default_message = "You do not have permission to perform this action."


class NotFoundError(PetEatsError):
    code = "not_found"
    default_message = "The requested item was not found."


class RemoteWriteError(PetEatsError):
    """
    A persistence or storage write failed.

    Multi-step flows (upload, then write) are not compensated, so the caller
    may see this after an earlier step already succeeded.
    """

    code = "remote_write_error"
    default_message = "Could not save your changes. Please try again."
