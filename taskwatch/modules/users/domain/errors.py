"""
User Administration Errors
"""


class UserFacingError(Exception):
    """Base class for errors whose message is safe to show the caller"""
    pass


class AuthorizationError(UserFacingError):
    """Raised when the caller lacks the admin capability"""

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class ValidationError(UserFacingError):
    """Raised when user-supplied input breaks a rule"""
    pass


class StorageError(Exception):
    """Raised when the database cannot complete an operation"""
    pass
