"""
Errors raised by the services.

Each error carries the HTTP status code it is reported with; main.py turns
them into ``{"error": message}`` responses.
"""


class ShopError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShopError):
    status_code = 400


class Conflict(ShopError):
    status_code = 400


class InvalidCredentials(ShopError):
    status_code = 400

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class Unauthorized(ShopError):
    status_code = 401


class Forbidden(ShopError):
    status_code = 403


class NotFound(ShopError):
    status_code = 404


class InternalError(ShopError):
    status_code = 500
