class ServiceError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Required input is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(ServiceError):
    """A referenced record does not exist."""

    status_code = 404
    default_message = "Not found"


class RelayError(ServiceError):
    """The messaging system rejected or failed to deliver a request."""

    status_code = 502
    default_message = "Message delivery failed"


class StoreError(ServiceError):
    """The backing document could not be written."""

    status_code = 500
    default_message = "Storage failure"
