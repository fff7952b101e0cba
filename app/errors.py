"""Domain errors raised by services and mapped to HTTP responses in app.main."""


class RememoryError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RememoryError):
    """Bad input such as a blank title or a non-positive reward cost."""

    status_code = 400


class NotFoundError(RememoryError):
    """Missing row, a row owned by another user, or an unprovisioned profile."""

    status_code = 404


class InsufficientFundsError(RememoryError):
    """Debit larger than the current Brain Bucks balance."""

    status_code = 409

    def __init__(self, balance: int, required: int):
        super().__init__("Not enough Brain Bucks!")
        self.balance = balance
        self.required = required


class PersistenceError(RememoryError):
    """The store rejected a write; nothing was committed."""

    status_code = 503


class AuthenticationError(RememoryError):
    """Credentials or tokens were rejected."""

    status_code = 401

    def __init__(self, message: str, clear_refresh_cookie: bool = False):
        super().__init__(message)
        self.clear_refresh_cookie = clear_refresh_cookie
