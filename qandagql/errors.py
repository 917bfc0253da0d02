class QandaError(Exception):
    """Base for errors the gateway turns into an HTTP response."""
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: str = None, status_code: int = None):
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(QandaError):
    """Missing or malformed request input."""
    status_code = 400
    message = "Bad Request"

    def __init__(self, message: str = None, fields=None):
        super().__init__(message)
        self.fields = fields


class RoutingError(QandaError):
    status_code = 405
    message = "Method Not Allowed"


class UpstreamError(QandaError):
    """The identity provider or the GraphQL API failed us.

    The message is for the logs; callers only ever see the generic body.
    """
    status_code = 500


class StoreError(Exception):
    """Storage layer failure."""


class StoreUnavailableError(StoreError):
    """DynamoDB could not be reached or refused the call. Safe to retry."""
    retryable = True


class QuestionExistsError(StoreError):
    """A question row with the same key is already stored."""
