"""Application error hierarchy.

Every error knows the HTTP status it maps to and how to render itself as the
JSON body the API returns: ``{"error": {"code", "name", "message"}}``.
"""


class ApplicationError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    @property
    def name(self):
        return type(self).__name__

    def to_json(self):
        return {
            "error": {
                "code": self.status_code,
                "name": self.name,
                "message": self.message,
            }
        }


class ConfigurationError(ApplicationError):
    pass


# Server errors:
class ServerError(ApplicationError):
    status_code = 500


class DatabaseError(ServerError):
    pass


class WriteResultNotAcknowledgedError(DatabaseError):
    def __init__(self, message="Write result was not acknowledged"):
        super().__init__(message)


# Client errors:
class UserCausedError(ApplicationError):
    status_code = 400


class AggregateError(UserCausedError):
    """Several validation failures reported together."""

    def __init__(self, errors):
        super().__init__("Request validation failed")
        self.errors = errors

    def to_json(self):
        body = super().to_json()
        body["error"]["errors"] = [
            {"field": field, "message": message} for field, message in self.errors
        ]
        return body


class ResourceNotFoundError(UserCausedError):
    status_code = 404


class AuthenticationError(UserCausedError):
    status_code = 401

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause

    def to_json(self):
        body = super().to_json()
        if self.cause:
            body["error"]["cause"] = self.cause
        return body


class PermissionDeniedError(UserCausedError):
    status_code = 403


class DuplicateError(UserCausedError):
    status_code = 409


class LimitError(UserCausedError):
    status_code = 413
